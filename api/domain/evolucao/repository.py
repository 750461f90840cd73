from __future__ import annotations

from typing import Protocol

from api.domain.avaliacao.entities import Avaliacao

from .entities import AlertaRegressao, CicloAnterior


class CicloAnteriorRepository(Protocol):
    def carregar(self, avaliacao: Avaliacao) -> CicloAnterior | None: ...


class AlertaRegressaoRepository(Protocol):
    def listar_ativos_por_destino(self, destino_id: str) -> list[AlertaRegressao]: ...
