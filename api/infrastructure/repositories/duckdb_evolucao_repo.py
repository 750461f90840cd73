# api/infrastructure/repositories/duckdb_evolucao_repo.py
from __future__ import annotations

import duckdb


class DuckDBEvolucaoRepo:
    def __init__(self, conn: duckdb.DuckDBPyConnection) -> None:
        self._conn = conn

    def listar_serie_pilares(self, destino_id: str) -> list[dict[str, object]]:
        """Uma linha por (avaliacao, pilar) ORDER BY numero_ciclo, pilar."""
        rows = self._conn.execute(
            """
            SELECT da.avaliacao_id, da.numero_ciclo, da.data_referencia,
                   fsp.pilar, fsp.score, fsp.severidade,
                   fe.estado, fe.score_anterior
            FROM dim_avaliacao da
            JOIN fato_score_pilar fsp ON fsp.avaliacao_id = da.avaliacao_id
            LEFT JOIN fato_evolucao fe
                ON fe.avaliacao_id = da.avaliacao_id
               AND fe.tipo = 'PILAR'
               AND fe.chave = fsp.pilar
            WHERE da.destino_id = ?
            ORDER BY da.numero_ciclo, fsp.pilar
        """,
            [destino_id],
        ).fetchall()
        return [self._to_dict(r) for r in rows]

    def _to_dict(self, row: tuple) -> dict[str, object]:  # type: ignore[type-arg]
        score = float(row[4])
        anterior = float(row[7]) if row[7] is not None else None
        return {
            "avaliacao_id": str(row[0]),
            "numero_ciclo": int(row[1]),
            "data_referencia": row[2].isoformat() if row[2] else None,
            "pilar": str(row[3]),
            "score": score,
            "severidade": str(row[5]),
            "estado": str(row[6]) if row[6] else None,
            "delta": round(score - anterior, 4) if anterior is not None else None,
        }
