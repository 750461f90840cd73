"""Normalizacao de valores brutos para score em [0, 1]. Funcao pura, zero IO.

ADR: valor ausente ou nao numerico devolve None (indicador fora da agregacao),
nunca 0. Um 0 aqui seria indistinguivel de um desempenho realmente nulo.
"""

from __future__ import annotations

import math
from decimal import Decimal

from api.domain.diagnostico.errors import ConfiguracaoIndicadorError
from api.domain.diagnostico.politicas import SCORES_FAIXAS
from api.domain.indicador.entities import Indicador
from api.domain.indicador.enums import Direcao, Normalizacao


def normalizar(indicador: Indicador, valor_bruto: object) -> float | None:
    """Score em [0, 1] ou None se o valor nao for pontuavel.

    Raises:
        ConfiguracaoIndicadorError: referencias do catalogo inconsistentes
            para a estrategia declarada (nunca devolve NaN).
    """
    validar_configuracao(indicador)

    valor = _como_numero(valor_bruto)
    if valor is None:
        return None

    if indicador.normalizacao == Normalizacao.BINARY:
        return 1.0 if valor > 0 else 0.0

    # validar_configuracao garante min_ref < max_ref para MIN_MAX/BANDS
    minimo = float(indicador.min_ref)  # type: ignore[arg-type]
    maximo = float(indicador.max_ref)  # type: ignore[arg-type]

    if indicador.normalizacao == Normalizacao.BANDS:
        return _faixas(valor, minimo, maximo, indicador.direcao)
    return _min_max(valor, minimo, maximo, indicador.direcao)


def validar_configuracao(indicador: Indicador) -> None:
    """Levanta ConfiguracaoIndicadorError se o catalogo nao permite normalizar."""
    if indicador.peso < 0:
        raise ConfiguracaoIndicadorError(indicador.codigo, f"peso negativo ({indicador.peso})")

    if indicador.normalizacao == Normalizacao.BINARY:
        return

    if indicador.min_ref is None or indicador.max_ref is None:
        raise ConfiguracaoIndicadorError(
            indicador.codigo,
            f"{indicador.normalizacao.value} exige min_ref e max_ref",
        )
    if indicador.max_ref == indicador.min_ref:
        raise ConfiguracaoIndicadorError(
            indicador.codigo,
            f"min_ref == max_ref ({indicador.min_ref}): normalizacao indefinida",
        )
    if indicador.max_ref < indicador.min_ref:
        raise ConfiguracaoIndicadorError(
            indicador.codigo,
            f"min_ref ({indicador.min_ref}) maior que max_ref ({indicador.max_ref})",
        )


def _como_numero(valor_bruto: object) -> float | None:
    if valor_bruto is None or isinstance(valor_bruto, str):
        return None
    if isinstance(valor_bruto, bool):
        return 1.0 if valor_bruto else 0.0
    if isinstance(valor_bruto, (int, float, Decimal)):
        valor = float(valor_bruto)
        return None if math.isnan(valor) else valor
    return None


def _clamp(score: float) -> float:
    return max(0.0, min(1.0, score))


def _min_max(valor: float, minimo: float, maximo: float, direcao: Direcao) -> float:
    amplitude = maximo - minimo
    if direcao == Direcao.LOW_IS_BETTER:
        return _clamp((maximo - valor) / amplitude)
    return _clamp((valor - minimo) / amplitude)


def _faixas(valor: float, minimo: float, maximo: float, direcao: Direcao) -> float:
    """Tercos iguais de [min, max]; fora do intervalo cai na faixa mais proxima."""
    inferior, medio, superior = SCORES_FAIXAS
    terco = (maximo - minimo) / 3

    if direcao == Direcao.LOW_IS_BETTER:
        # Espelho: a distancia e medida a partir de max_ref.
        if valor > maximo - terco:
            return inferior
        if valor > maximo - 2 * terco:
            return medio
        return superior

    if valor < minimo + terco:
        return inferior
    if valor < minimo + 2 * terco:
        return medio
    return superior
