# api/domain/evolucao/entities.py
from __future__ import annotations

from dataclasses import dataclass

from api.domain.diagnostico.entities import Prescricao, ScorePilar
from api.domain.diagnostico.enums import TipoMensagem
from api.domain.diagnostico.politicas import (
    CICLOS_ALERTA_CRITICO,
    CICLOS_ALERTA_REGRESSAO,
    NOMES_PILAR,
)
from api.domain.indicador.enums import Pilar

from .enums import EstadoEvolucao


@dataclass(frozen=True)
class RegistroEvolucao:
    """Compara um pilar (ou prescricao) entre dois ciclos consecutivos.

    estado None = primeiro ciclo, sem veredito.
    """

    chave: str
    avaliacao_id: str
    avaliacao_anterior_id: str | None
    score_atual: float
    score_anterior: float | None
    estado: EstadoEvolucao | None

    @property
    def delta(self) -> float | None:
        if self.score_anterior is None:
            return None
        return self.score_atual - self.score_anterior


@dataclass(frozen=True)
class AlertaRegressao:
    """Contador de regressoes consecutivas por (destino, pilar).

    Unico estado que atravessa ciclos: o chamador persiste e devolve na
    proxima rodada. lido/dispensado sao os unicos campos alterados por humanos.
    """

    destino_id: str
    pilar: Pilar
    ciclos_consecutivos: int
    avaliacao_id: str
    lido: bool = False
    dispensado: bool = False

    def __post_init__(self) -> None:
        if self.ciclos_consecutivos < 0:
            raise ValueError("ciclos_consecutivos nao pode ser negativo")

    @property
    def ativo(self) -> bool:
        return self.ciclos_consecutivos >= CICLOS_ALERTA_REGRESSAO

    @property
    def severidade(self) -> TipoMensagem | None:
        if not self.ativo:
            return None
        if self.ciclos_consecutivos >= CICLOS_ALERTA_CRITICO:
            return TipoMensagem.CRITICAL
        return TipoMensagem.WARNING

    @property
    def mensagem(self) -> str:
        return (
            f"O pilar {NOMES_PILAR[self.pilar]} ({self.pilar.value}) apresentou regressao "
            f"em {self.ciclos_consecutivos} ciclos consecutivos. "
            "Acao corretiva urgente e recomendada."
        )


@dataclass(frozen=True)
class CicloAnterior:
    """Snapshot do ciclo imediatamente anterior do mesmo territorio."""

    avaliacao_id: str
    scores_pilar: tuple[ScorePilar, ...] = ()
    prescricoes: tuple[Prescricao, ...] = ()
    alertas_regressao: tuple[AlertaRegressao, ...] = ()
