# api/infrastructure/repositories/duckdb_ciclo_repo.py
from __future__ import annotations

import duckdb

from api.domain.avaliacao.entities import Avaliacao
from api.domain.avaliacao.enums import StatusAvaliacao
from api.domain.diagnostico.entities import Prescricao, ScorePilar
from api.domain.diagnostico.enums import Acao, AgenteAlvo, Severidade
from api.domain.evolucao.entities import AlertaRegressao, CicloAnterior
from api.domain.indicador.enums import Interpretacao, Pilar


class DuckDBCicloRepo:
    """Resultados persistidos do ciclo calculavel imediatamente anterior do mesmo destino.

    Rascunhos sao pulados sem quebrar a cadeia, como no pipeline.
    """

    def __init__(self, conn: duckdb.DuckDBPyConnection) -> None:
        self._conn = conn

    def carregar(self, avaliacao: Avaliacao) -> CicloAnterior | None:
        row = self._conn.execute(
            """
            SELECT avaliacao_id
            FROM dim_avaliacao
            WHERE destino_id = ? AND numero_ciclo < ? AND status <> ?
            ORDER BY numero_ciclo DESC
            LIMIT 1
        """,
            [avaliacao.destino_id, avaliacao.numero_ciclo, StatusAvaliacao.DRAFT.value],
        ).fetchone()
        if row is None:
            return None

        anterior_id = str(row[0])
        return CicloAnterior(
            avaliacao_id=anterior_id,
            scores_pilar=tuple(self._scores_pilar(anterior_id)),
            prescricoes=tuple(self._prescricoes(anterior_id)),
            alertas_regressao=tuple(self._alertas(anterior_id)),
        )

    def _scores_pilar(self, avaliacao_id: str) -> list[ScorePilar]:
        rows = self._conn.execute(
            "SELECT pilar, score FROM fato_score_pilar WHERE avaliacao_id = ? ORDER BY pilar",
            [avaliacao_id],
        ).fetchall()
        return [ScorePilar(avaliacao_id, Pilar(r[0]), float(r[1])) for r in rows]

    def _prescricoes(self, avaliacao_id: str) -> list[Prescricao]:
        rows = self._conn.execute(
            """
            SELECT gargalo_id, pilar, tema, status, interpretacao, justificativa,
                   agente_alvo, agentes_apoio, prioridade, numero_ciclo, score,
                   acao, bloqueada
            FROM fato_prescricao
            WHERE avaliacao_id = ?
            ORDER BY prioridade
        """,
            [avaliacao_id],
        ).fetchall()
        return [
            Prescricao(
                avaliacao_id=avaliacao_id,
                gargalo_id=str(r[0]) if r[0] else None,
                pilar=Pilar(r[1]),
                tema=str(r[2]),
                status=Severidade(r[3]),
                interpretacao=Interpretacao(r[4]) if r[4] else None,
                justificativa=str(r[5]),
                agente_alvo=AgenteAlvo(r[6]),
                agentes_apoio=tuple(AgenteAlvo(a) for a in str(r[7]).split(",") if a),
                prioridade=int(r[8]),
                numero_ciclo=int(r[9]),
                score=float(r[10]),
                acao=Acao(r[11]),
                bloqueada=bool(r[12]),
            )
            for r in rows
        ]

    def _alertas(self, avaliacao_id: str) -> list[AlertaRegressao]:
        rows = self._conn.execute(
            """
            SELECT destino_id, pilar, ciclos_consecutivos, lido, dispensado
            FROM fato_alerta_regressao
            WHERE avaliacao_id = ?
            ORDER BY pilar
        """,
            [avaliacao_id],
        ).fetchall()
        return [
            AlertaRegressao(
                destino_id=str(r[0]),
                pilar=Pilar(r[1]),
                ciclos_consecutivos=int(r[2]),
                avaliacao_id=avaliacao_id,
                lido=bool(r[3]),
                dispensado=bool(r[4]),
            )
            for r in rows
        ]
