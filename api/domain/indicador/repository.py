from __future__ import annotations

from typing import Protocol

from .entities import Indicador, RegraComposta, ValorIndicador


class CatalogoRepository(Protocol):
    def listar_indicadores(self) -> list[Indicador]: ...
    def listar_regras_compostas(self) -> list[RegraComposta]: ...


class ValorRepository(Protocol):
    def listar_por_avaliacao(self, avaliacao_id: str) -> list[ValorIndicador]: ...
