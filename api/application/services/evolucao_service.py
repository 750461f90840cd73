"""Evolucao entre ciclos consecutivos e contadores de regressao.
Funcao pura, zero IO.

ADR: o contador de AlertaRegressao e o unico estado entre ciclos. Quem chama
persiste o retorno e o devolve na rodada seguinte via CicloAnterior.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Protocol

from api.domain.diagnostico.entities import Prescricao, ScorePilar
from api.domain.diagnostico.politicas import CICLOS_ALERTA_REGRESSAO, EPSILON_ESTAGNACAO
from api.domain.evolucao.entities import AlertaRegressao, CicloAnterior, RegistroEvolucao
from api.domain.evolucao.enums import EstadoEvolucao
from api.domain.indicador.enums import Pilar

CASAS_DELTA = 9


class Pontuado(Protocol):
    @property
    def avaliacao_id(self) -> str: ...

    @property
    def score(self) -> float: ...

    @property
    def chave_evolucao(self) -> str: ...


@dataclass(frozen=True)
class ResultadoEvolucao:
    pilares: tuple[RegistroEvolucao, ...]
    prescricoes: tuple[RegistroEvolucao, ...]
    alertas: tuple[AlertaRegressao, ...]


def rastrear_evolucao(
    atual: Pontuado,
    anterior: Pontuado | None,
    epsilon: float = EPSILON_ESTAGNACAO,
) -> RegistroEvolucao:
    """Classifica o delta com banda morta epsilon. Sem anterior = sem veredito."""
    if anterior is None:
        return RegistroEvolucao(
            chave=atual.chave_evolucao,
            avaliacao_id=atual.avaliacao_id,
            avaliacao_anterior_id=None,
            score_atual=atual.score,
            score_anterior=None,
            estado=None,
        )

    # Arredondado para que um delta igual a epsilon caia na banda morta.
    delta = round(atual.score - anterior.score, CASAS_DELTA)
    if delta > epsilon:
        estado = EstadoEvolucao.EVOLUTION
    elif delta < -epsilon:
        estado = EstadoEvolucao.REGRESSION
    else:
        estado = EstadoEvolucao.STAGNATION

    return RegistroEvolucao(
        chave=atual.chave_evolucao,
        avaliacao_id=atual.avaliacao_id,
        avaliacao_anterior_id=anterior.avaliacao_id,
        score_atual=atual.score,
        score_anterior=anterior.score,
        estado=estado,
    )


def atualizar_alerta_regressao(
    anterior: AlertaRegressao | None,
    registro: RegistroEvolucao | None,
    destino_id: str,
    pilar: Pilar,
    avaliacao_id: str,
) -> AlertaRegressao:
    """REGRESSION soma 1; EVOLUTION/STAGNATION zeram; sem veredito mantem.

    Um alerta que volta a crescer a partir de 2 reabre como nao lido.
    Zerar o contador limpa tambem o dispensado.
    """
    contador = anterior.ciclos_consecutivos if anterior else 0
    lido = anterior.lido if anterior else False
    dispensado = anterior.dispensado if anterior else False

    estado = registro.estado if registro is not None else None
    if estado == EstadoEvolucao.REGRESSION:
        contador += 1
        if contador >= CICLOS_ALERTA_REGRESSAO:
            lido = False
    elif estado is not None:
        contador = 0
        lido = False
        dispensado = False

    return AlertaRegressao(
        destino_id=destino_id,
        pilar=pilar,
        ciclos_consecutivos=contador,
        avaliacao_id=avaliacao_id,
        lido=lido,
        dispensado=dispensado,
    )


def rastrear_ciclo(
    avaliacao_id: str,
    destino_id: str,
    scores_pilar: Mapping[Pilar, ScorePilar],
    prescricoes: Sequence[Prescricao],
    ciclo_anterior: CicloAnterior | None,
    epsilon: float = EPSILON_ESTAGNACAO,
) -> ResultadoEvolucao:
    """Evolucao de pilares e prescricoes + contadores para os tres pilares."""
    anteriores_pilar = {s.pilar: s for s in ciclo_anterior.scores_pilar} if ciclo_anterior else {}
    anteriores_prescricao = (
        {p.chave_evolucao: p for p in ciclo_anterior.prescricoes} if ciclo_anterior else {}
    )
    alertas_anteriores = (
        {a.pilar: a for a in ciclo_anterior.alertas_regressao} if ciclo_anterior else {}
    )

    registros_pilar: dict[Pilar, RegistroEvolucao] = {
        pilar: rastrear_evolucao(score, anteriores_pilar.get(pilar), epsilon)
        for pilar, score in scores_pilar.items()
    }
    registros_prescricao = tuple(
        rastrear_evolucao(p, anteriores_prescricao.get(p.chave_evolucao), epsilon)
        for p in prescricoes
    )
    alertas = tuple(
        atualizar_alerta_regressao(
            alertas_anteriores.get(pilar),
            registros_pilar.get(pilar),
            destino_id,
            pilar,
            avaliacao_id,
        )
        for pilar in Pilar
    )

    return ResultadoEvolucao(
        pilares=tuple(registros_pilar[p] for p in Pilar if p in registros_pilar),
        prescricoes=registros_prescricao,
        alertas=alertas,
    )
