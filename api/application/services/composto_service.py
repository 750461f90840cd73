"""Indicadores compostos (ex.: I_SEMT) a partir dos scores dos componentes.
Funcao pura, zero IO."""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence

from api.domain.indicador.entities import Indicador, RegraComposta, ScoreIndicador
from api.domain.indicador.enums import Transformacao


def calcular_compostos(
    regras: Sequence[RegraComposta],
    catalogo: Mapping[str, Indicador],
    scores: Mapping[str, ScoreIndicador],
    avaliacao_id: str,
) -> tuple[list[ScoreIndicador], list[str]]:
    """Media ponderada dos componentes transformados.

    Returns:
        (scores compostos calculados, codigos compostos indefinidos). Um
        composto e indefinido quando nenhum componente tem score ou a soma
        dos pesos e zero. Compostos fora do catalogo sao ignorados.
    """
    por_composto: dict[str, list[RegraComposta]] = {}
    for regra in regras:
        por_composto.setdefault(regra.codigo_composto, []).append(regra)

    calculados: list[ScoreIndicador] = []
    indefinidos: list[str] = []

    for codigo, componentes in por_composto.items():
        indicador = catalogo.get(codigo)
        if indicador is None:
            continue

        pares = [
            (transformar(scores[r.codigo_componente].score, r.transformacao), r.peso)
            for r in componentes
            if r.codigo_componente in scores
        ]
        peso_total = sum(p for _, p in pares)
        if not pares or peso_total == 0:
            indefinidos.append(codigo)
            continue

        score = sum(s * p for s, p in pares) / peso_total
        calculados.append(ScoreIndicador(
            codigo_indicador=codigo,
            avaliacao_id=avaliacao_id,
            pilar=indicador.pilar,
            score=max(0.0, min(1.0, score)),
            peso_usado=indicador.peso,
            min_ref_usado=0.0,
            max_ref_usado=1.0,
        ))

    return calculados, indefinidos


def transformar(score: float, transformacao: Transformacao) -> float:
    if transformacao == Transformacao.INVERT:
        return 1.0 - score
    if transformacao == Transformacao.LOG:
        return math.log1p(score) / math.log1p(1.0)
    if transformacao == Transformacao.SQRT:
        return math.sqrt(score)
    return score
