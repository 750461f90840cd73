"""Geracao de prescricoes e planos de acao a partir dos gargalos.
Funcao pura, zero IO.

ADR: prescricao para acao bloqueada pelo motor de regras continua sendo
gerada, marcada bloqueada=True. O gate adia, nunca apaga a recomendacao.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import date

from api.domain.diagnostico.entities import FlagsIGMA, Gargalo, PlanoDeAcao, Prescricao, ScorePilar
from api.domain.diagnostico.enums import Acao, AgenteAlvo, Severidade
from api.domain.diagnostico.politicas import (
    DESCRICOES_AGENTE,
    MESES_PRAZO_PLANO,
    NOMES_PILAR,
    ORDEM_PILAR,
    ORDEM_SEVERIDADE,
    POLITICA_AGENTES,
    ROTULOS_INTERPRETACAO,
    ROTULOS_SEVERIDADE,
    TEMAS_MARKETING,
    descrever_tema,
)
from api.domain.indicador.enums import Interpretacao, Pilar

from .calendario import somar_meses

_ACAO_POR_PILAR: Mapping[Pilar, Acao] = {
    Pilar.RA: Acao.EDU_RA,
    Pilar.AO: Acao.EDU_AO,
    Pilar.OE: Acao.EDU_OE,
}


def gerar_prescricoes(
    gargalos: Sequence[Gargalo],
    flags: FlagsIGMA,
    scores_pilar: Mapping[Pilar, ScorePilar],
    numero_ciclo: int,
    politica: Mapping[Interpretacao, tuple[AgenteAlvo, ...]] = POLITICA_AGENTES,
) -> list[Prescricao]:
    """Uma prescricao por gargalo, ordenada e numerada por prioridade.

    Prioridade: severidade (CRITICO antes), pilar (RA > AO > OE), evidencia
    mais ampla primeiro, tema como desempate estavel.
    """
    ordenados = sorted(gargalos, key=_chave_prioridade)

    prescricoes: list[Prescricao] = []
    for prioridade, gargalo in enumerate(ordenados, start=1):
        acao = acao_do_gargalo(gargalo)
        bloqueada = flags.bloqueada(acao)
        agente_alvo, *apoio = politica[gargalo.interpretacao or Interpretacao.GESTAO]

        justificativa = _justificativa(gargalo, scores_pilar.get(gargalo.pilar))
        if bloqueada:
            justificativa += (
                f" Prescricao adiada: a acao {acao.value} esta bloqueada pelas regras "
                "de governanca do ciclo atual."
            )

        prescricoes.append(Prescricao(
            avaliacao_id=gargalo.avaliacao_id,
            gargalo_id=gargalo.id,
            pilar=gargalo.pilar,
            tema=gargalo.tema,
            status=gargalo.severidade,
            interpretacao=gargalo.interpretacao,
            justificativa=justificativa,
            agente_alvo=agente_alvo,
            agentes_apoio=tuple(apoio),
            prioridade=prioridade,
            numero_ciclo=numero_ciclo,
            score=gargalo.score_medio,
            acao=acao,
            bloqueada=bloqueada,
        ))
    return prescricoes


def acao_do_gargalo(gargalo: Gargalo) -> Acao:
    tema = gargalo.tema.lower()
    if any(t in tema for t in TEMAS_MARKETING):
        return Acao.MARKETING
    return _ACAO_POR_PILAR[gargalo.pilar]


def gerar_planos_de_acao(
    gargalos: Sequence[Gargalo],
    prescricoes: Sequence[Prescricao],
    referencia: date,
) -> list[PlanoDeAcao]:
    """Um plano por gargalo CRITICO/MODERADO, prazo de 3 ou 6 meses."""
    prescricao_por_gargalo = {p.gargalo_id: p for p in prescricoes}

    planos: list[PlanoDeAcao] = []
    for gargalo in sorted(gargalos, key=_chave_prioridade):
        meses = MESES_PRAZO_PLANO.get(gargalo.severidade)
        if meses is None:
            continue
        prescricao = prescricao_por_gargalo.get(gargalo.id)
        agentes = ", ".join(
            DESCRICOES_AGENTE[a] for a in _agentes(prescricao)
        ) if prescricao else "a definir"
        planos.append(PlanoDeAcao(
            avaliacao_id=gargalo.avaliacao_id,
            titulo=f"Plano de Acao: {descrever_tema(gargalo.tema)} ({NOMES_PILAR[gargalo.pilar]})",
            descricao=f"{gargalo.titulo}. Responsaveis: {agentes}.",
            pilar=gargalo.pilar,
            prioridade=1 if gargalo.severidade == Severidade.CRITICO else 2,
            gargalo_id=gargalo.id,
            prescricao_id=prescricao.id if prescricao else None,
            prazo=somar_meses(referencia, meses),
        ))
    return planos


def _chave_prioridade(gargalo: Gargalo) -> tuple[int, int, int, str]:
    return (
        ORDEM_SEVERIDADE[gargalo.severidade],
        ORDEM_PILAR[gargalo.pilar],
        -len(gargalo.evidencia),
        gargalo.tema,
    )


def _agentes(prescricao: Prescricao) -> tuple[AgenteAlvo, ...]:
    return (prescricao.agente_alvo, *prescricao.agentes_apoio)


def _justificativa(gargalo: Gargalo, score_pilar: ScorePilar | None) -> str:
    score = score_pilar.score if score_pilar is not None else gargalo.score_medio
    interpretacao = (
        ROTULOS_INTERPRETACAO[gargalo.interpretacao]
        if gargalo.interpretacao is not None else "nao classificada"
    )
    return (
        f"Esta capacitacao foi prescrita porque o indicador de {descrever_tema(gargalo.tema)} "
        f"esta em nivel {ROTULOS_SEVERIDADE[gargalo.severidade]}, classificado no pilar "
        f"{NOMES_PILAR[gargalo.pilar]} (score {score:.2f}), com interpretacao territorial "
        f"{interpretacao}."
    )
