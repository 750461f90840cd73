# api/infrastructure/repositories/duckdb_valor_repo.py
from __future__ import annotations

import duckdb

from api.domain.indicador.entities import ValorIndicador


class DuckDBValorRepo:
    def __init__(self, conn: duckdb.DuckDBPyConnection) -> None:
        self._conn = conn

    def listar_por_avaliacao(self, avaliacao_id: str) -> list[ValorIndicador]:
        rows = self._conn.execute(
            """
            SELECT codigo_indicador, avaliacao_id, valor_bruto, valor_texto,
                   fonte, data_referencia
            FROM fato_valor_indicador
            WHERE avaliacao_id = ?
            ORDER BY codigo_indicador
        """,
            [avaliacao_id],
        ).fetchall()
        return [
            ValorIndicador(
                codigo_indicador=str(r[0]),
                avaliacao_id=str(r[1]),
                valor_bruto=float(r[2]) if r[2] is not None else None,
                valor_texto=str(r[3]) if r[3] is not None else None,
                fonte=str(r[4]) if r[4] else "",
                data_referencia=r[5],
            )
            for r in rows
        ]
