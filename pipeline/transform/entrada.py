# pipeline/transform/entrada.py
#
# Convert validated staging frames into the engine's domain entities.
#
# Design decisions:
#   - Input frames are expected to have passed pipeline/staging/validate.py,
#     so enum values are known and key columns are non-null. Constructors may
#     still raise ValueError on structurally invalid rows; that is a bug in
#     validation, not something to swallow here.
#   - Row iteration (iter_rows(named=True)) is acceptable: catalogs hold
#     hundreds of indicators and values are grouped per assessment once.
#
# ADR: the pipeline imports the pure engine from api/application/services.
#   The engine modules import only api/domain (frozen dataclasses, enums) and
#   the standard library: no FastAPI, no pydantic. Duplicating six rules and
#   the normalization strategies in Polars would create two sources of truth
#   for the same diagnostic, and the API computes on the fly with the engine.
from __future__ import annotations

from collections import defaultdict

import polars as pl

from api.domain.avaliacao.entities import Avaliacao
from api.domain.avaliacao.enums import StatusAvaliacao
from api.domain.indicador.entities import Indicador, RegraComposta, ValorIndicador
from api.domain.indicador.enums import (
    Direcao,
    Interpretacao,
    Normalizacao,
    Pilar,
    Porte,
    SetorExterno,
    Transformacao,
)


def indicadores_from_df(df: pl.DataFrame) -> list[Indicador]:
    return [
        Indicador(
            codigo=r["codigo"],
            nome=r["nome"],
            pilar=Pilar(r["pilar"]),
            tema=r["tema"],
            direcao=Direcao(r["direcao"]),
            normalizacao=Normalizacao(r["normalizacao"]),
            min_ref=r["min_ref"],
            max_ref=r["max_ref"],
            peso=r["peso"],
            interpretacao=Interpretacao(r["interpretacao"]) if r["interpretacao"] else None,
            setor_externo=SetorExterno(r["setor_externo"]) if r["setor_externo"] else None,
            porte_minimo=Porte(r["porte_minimo"]),
        )
        for r in df.iter_rows(named=True)
    ]


def avaliacoes_from_df(df: pl.DataFrame) -> list[Avaliacao]:
    return [
        Avaliacao(
            id=r["avaliacao_id"],
            destino_id=r["destino_id"],
            numero_ciclo=int(r["numero_ciclo"]),
            porte=Porte(r["porte"]),
            status=StatusAvaliacao(r["status"]),
            data_referencia=r["data_referencia"],
        )
        for r in df.iter_rows(named=True)
    ]


def valores_por_avaliacao(df: pl.DataFrame) -> dict[str, list[ValorIndicador]]:
    """Group raw values by avaliacao_id."""
    grouped: dict[str, list[ValorIndicador]] = defaultdict(list)
    for r in df.iter_rows(named=True):
        grouped[r["avaliacao_id"]].append(
            ValorIndicador(
                codigo_indicador=r["codigo_indicador"],
                avaliacao_id=r["avaliacao_id"],
                valor_bruto=r["valor_bruto"],
                valor_texto=r["valor_texto"],
                fonte=r["fonte"] or "",
                data_referencia=r["data_referencia"],
            )
        )
    return dict(grouped)


def regras_from_df(df: pl.DataFrame | None) -> list[RegraComposta]:
    if df is None:
        return []
    return [
        RegraComposta(
            codigo_composto=r["codigo_composto"],
            codigo_componente=r["codigo_componente"],
            peso=r["peso"],
            transformacao=Transformacao(r["transformacao"]),
        )
        for r in df.iter_rows(named=True)
    ]
