from __future__ import annotations

from typing import Protocol

from .entities import Avaliacao


class AvaliacaoRepository(Protocol):
    def buscar(self, avaliacao_id: str) -> Avaliacao | None: ...
    def listar_por_destino(self, destino_id: str) -> list[Avaliacao]: ...
