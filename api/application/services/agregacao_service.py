"""Agregacao de scores de indicador em score de pilar. Funcao pura, zero IO."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from api.domain.diagnostico.entities import ScorePilar
from api.domain.indicador.entities import ScoreIndicador
from api.domain.indicador.enums import Pilar


def agregar_pilar(pilar: Pilar, scores: Iterable[ScoreIndicador]) -> ScorePilar | None:
    """Media ponderada Σ(score·peso)/Σ(peso) dos indicadores do pilar.

    Indicadores de outros pilares sao ignorados. Sem indicadores pontuados ou
    com soma de pesos zero o pilar e indefinido (None), nunca 0 nem 1.
    """
    do_pilar = [s for s in scores if s.pilar == pilar]
    if not do_pilar:
        return None

    peso_total = sum(s.peso_usado for s in do_pilar)
    if peso_total == 0:
        return None

    media = sum(s.score * s.peso_usado for s in do_pilar) / peso_total
    return ScorePilar(
        avaliacao_id=do_pilar[0].avaliacao_id,
        pilar=pilar,
        score=max(0.0, min(1.0, media)),
    )


def agregar_pilares(scores: Sequence[ScoreIndicador]) -> dict[Pilar, ScorePilar]:
    """Um ScorePilar por pilar definido. Pilares indefinidos ficam ausentes."""
    resultado: dict[Pilar, ScorePilar] = {}
    for pilar in Pilar:
        score = agregar_pilar(pilar, scores)
        if score is not None:
            resultado[pilar] = score
    return resultado
