# api/infrastructure/repositories/duckdb_avaliacao_repo.py
from __future__ import annotations

import duckdb

from api.domain.avaliacao.entities import Avaliacao
from api.domain.avaliacao.enums import StatusAvaliacao
from api.domain.indicador.enums import Porte

_COLUNAS = "avaliacao_id, destino_id, numero_ciclo, porte, status, data_referencia"


class DuckDBAvaliacaoRepo:
    def __init__(self, conn: duckdb.DuckDBPyConnection) -> None:
        self._conn = conn

    def buscar(self, avaliacao_id: str) -> Avaliacao | None:
        row = self._conn.execute(
            f"SELECT {_COLUNAS} FROM dim_avaliacao WHERE avaliacao_id = ?",  # noqa: S608
            [avaliacao_id],
        ).fetchone()
        if row is None:
            return None
        return self._to_avaliacao(row)

    def listar_por_destino(self, destino_id: str) -> list[Avaliacao]:
        """Ordenado por numero_ciclo ASC."""
        rows = self._conn.execute(
            f"SELECT {_COLUNAS} FROM dim_avaliacao "  # noqa: S608
            "WHERE destino_id = ? ORDER BY numero_ciclo",
            [destino_id],
        ).fetchall()
        return [self._to_avaliacao(r) for r in rows]

    def _to_avaliacao(self, row: tuple) -> Avaliacao:  # type: ignore[type-arg]
        return Avaliacao(
            id=str(row[0]),
            destino_id=str(row[1]),
            numero_ciclo=int(row[2]),
            porte=Porte(row[3]) if row[3] else Porte.COMPLETE,
            status=StatusAvaliacao(row[4]) if row[4] else StatusAvaliacao.DATA_READY,
            data_referencia=row[5],
        )
