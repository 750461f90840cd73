from __future__ import annotations

import calendar
from datetime import date


def somar_meses(data: date, meses: int) -> date:
    """Soma meses de calendario; o dia e limitado ao ultimo dia do mes destino."""
    indice = data.month - 1 + meses
    ano = data.year + indice // 12
    mes = indice % 12 + 1
    dia = min(data.day, calendar.monthrange(ano, mes)[1])
    return date(ano, mes, dia)
