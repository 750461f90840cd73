# api/infrastructure/repositories/duckdb_catalogo_repo.py
from __future__ import annotations

import duckdb

from api.domain.indicador.entities import Indicador, RegraComposta
from api.domain.indicador.enums import (
    Direcao,
    Interpretacao,
    Normalizacao,
    Pilar,
    Porte,
    SetorExterno,
    Transformacao,
)


class DuckDBCatalogoRepo:
    def __init__(self, conn: duckdb.DuckDBPyConnection) -> None:
        self._conn = conn

    def listar_indicadores(self) -> list[Indicador]:
        rows = self._conn.execute(
            """
            SELECT codigo, nome, pilar, tema, direcao, normalizacao,
                   min_ref, max_ref, peso, interpretacao, setor_externo, porte_minimo
            FROM dim_indicador
            ORDER BY codigo
        """
        ).fetchall()
        return [self._to_indicador(r) for r in rows]

    def listar_regras_compostas(self) -> list[RegraComposta]:
        rows = self._conn.execute(
            """
            SELECT codigo_composto, codigo_componente, peso, transformacao
            FROM regra_composta
            ORDER BY codigo_composto, codigo_componente
        """
        ).fetchall()
        return [
            RegraComposta(
                codigo_composto=str(r[0]),
                codigo_componente=str(r[1]),
                peso=float(r[2]),
                transformacao=Transformacao(r[3]) if r[3] else Transformacao.NENHUMA,
            )
            for r in rows
        ]

    def _to_indicador(self, row: tuple) -> Indicador:  # type: ignore[type-arg]
        return Indicador(
            codigo=str(row[0]),
            nome=str(row[1]),
            pilar=Pilar(row[2]),
            tema=str(row[3]),
            direcao=Direcao(row[4]),
            normalizacao=Normalizacao(row[5]),
            min_ref=float(row[6]) if row[6] is not None else None,
            max_ref=float(row[7]) if row[7] is not None else None,
            peso=float(row[8]),
            interpretacao=Interpretacao(row[9]) if row[9] else None,
            setor_externo=SetorExterno(row[10]) if row[10] else None,
            porte_minimo=Porte(row[11]) if row[11] else Porte.COMPLETE,
        )
