"""Deteccao de gargalos (issues) por tema dentro de cada pilar.
Funcao pura, zero IO."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from api.domain.diagnostico.entities import EvidenciaIndicador, Gargalo, ScorePilar
from api.domain.diagnostico.enums import Severidade
from api.domain.diagnostico.politicas import (
    LIMIAR_BOM,
    NOMES_PILAR,
    PRECEDENCIA_INTERPRETACAO,
    ROTULOS_INTERPRETACAO,
    ROTULOS_SEVERIDADE,
    classificar_severidade,
    descrever_tema,
    inferir_interpretacao,
)
from api.domain.indicador.entities import Indicador, ScoreIndicador
from api.domain.indicador.enums import Interpretacao, Pilar


def detectar_gargalos(
    scores_pilar: Mapping[Pilar, ScorePilar],
    scores_indicador: Sequence[ScoreIndicador],
    catalogo: Mapping[str, Indicador],
) -> list[Gargalo]:
    """Um gargalo por (pilar, tema) com ao menos um indicador abaixo de 0.67.

    Pilares sem score (indefinidos) nao geram gargalos: desconhecido nao e
    critico. A evidencia lista apenas os indicadores abaixo do limiar.
    """
    gargalos: list[Gargalo] = []

    for pilar in Pilar:
        score_pilar = scores_pilar.get(pilar)
        if score_pilar is None:
            continue

        por_tema: dict[str, list[EvidenciaIndicador]] = {}
        for s in scores_indicador:
            indicador = catalogo.get(s.codigo_indicador)
            if indicador is None or indicador.pilar != pilar or s.score >= LIMIAR_BOM:
                continue
            por_tema.setdefault(indicador.tema, []).append(_evidencia(indicador, s))

        for tema, evidencia in por_tema.items():
            severidade = classificar_severidade(min(e.score for e in evidencia))
            interpretacao = interpretacao_majoritaria(evidencia)
            gargalos.append(Gargalo(
                avaliacao_id=score_pilar.avaliacao_id,
                pilar=pilar,
                tema=tema,
                severidade=severidade,
                interpretacao=interpretacao,
                titulo=gerar_titulo(pilar, tema, severidade, interpretacao),
                evidencia=tuple(evidencia),
            ))

    return gargalos


def interpretacao_majoritaria(evidencia: Sequence[EvidenciaIndicador]) -> Interpretacao | None:
    """Interpretacao com maior peso somado; empate segue ESTRUTURAL > GESTAO > ENTREGA."""
    if not evidencia:
        return None
    pesos: dict[Interpretacao, float] = {}
    for e in evidencia:
        pesos[e.interpretacao] = pesos.get(e.interpretacao, 0.0) + e.peso

    maior = max(pesos.values())
    for interpretacao in PRECEDENCIA_INTERPRETACAO:
        if interpretacao in pesos and pesos[interpretacao] == maior:
            return interpretacao
    return None


def gerar_titulo(
    pilar: Pilar,
    tema: str,
    severidade: Severidade,
    interpretacao: Interpretacao | None,
) -> str:
    titulo = f"{descrever_tema(tema)} em nivel {ROTULOS_SEVERIDADE[severidade]} ({NOMES_PILAR[pilar]})"
    if interpretacao is None:
        return titulo
    return f"{titulo} - Interpretacao: {ROTULOS_INTERPRETACAO[interpretacao]}"


def _evidencia(indicador: Indicador, score: ScoreIndicador) -> EvidenciaIndicador:
    interpretacao = indicador.interpretacao or inferir_interpretacao(
        indicador.pilar, indicador.tema, score.score
    )
    return EvidenciaIndicador(
        codigo=indicador.codigo,
        nome=indicador.nome,
        score=score.score,
        peso=score.peso_usado,
        interpretacao=interpretacao,
        setor_externo=indicador.setor_externo,
    )
