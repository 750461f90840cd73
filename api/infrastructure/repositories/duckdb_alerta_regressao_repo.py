# api/infrastructure/repositories/duckdb_alerta_regressao_repo.py
from __future__ import annotations

import duckdb

from api.domain.diagnostico.politicas import CICLOS_ALERTA_REGRESSAO
from api.domain.evolucao.entities import AlertaRegressao
from api.domain.indicador.enums import Pilar


class DuckDBAlertaRegressaoRepo:
    def __init__(self, conn: duckdb.DuckDBPyConnection) -> None:
        self._conn = conn

    def listar_ativos_por_destino(self, destino_id: str) -> list[AlertaRegressao]:
        """Estado mais recente do contador por pilar, so os ativos e nao dispensados."""
        rows = self._conn.execute(
            """
            WITH ultimo AS (
                SELECT far.avaliacao_id, far.destino_id, far.pilar,
                       far.ciclos_consecutivos, far.lido, far.dispensado,
                       ROW_NUMBER() OVER (
                           PARTITION BY far.pilar ORDER BY da.numero_ciclo DESC
                       ) AS rn
                FROM fato_alerta_regressao far
                JOIN dim_avaliacao da ON far.avaliacao_id = da.avaliacao_id
                WHERE far.destino_id = ?
            )
            SELECT avaliacao_id, destino_id, pilar, ciclos_consecutivos, lido, dispensado
            FROM ultimo
            WHERE rn = 1 AND ciclos_consecutivos >= ? AND NOT dispensado
            ORDER BY ciclos_consecutivos DESC, pilar
        """,
            [destino_id, CICLOS_ALERTA_REGRESSAO],
        ).fetchall()
        return [
            AlertaRegressao(
                destino_id=str(r[1]),
                pilar=Pilar(r[2]),
                ciclos_consecutivos=int(r[3]),
                avaliacao_id=str(r[0]),
                lido=bool(r[4]),
                dispensado=bool(r[5]),
            )
            for r in rows
        ]
