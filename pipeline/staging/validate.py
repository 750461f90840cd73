# pipeline/staging/validate.py
#
# Validate and clean the staging inputs (catalog, assessments, raw values,
# composite rules, territories) before they are turned into domain entities.
#
# Design decisions:
#   - Each input has an explicit column schema. Optional columns missing from
#     the file are added as nulls and every column is cast to its declared
#     type, so downstream code never branches on column presence.
#   - Rows without their key columns are dropped: without a code or an
#     assessment id the row cannot be joined to anything.
#   - Enum-like text columns are upper-cased and stripped. Rows whose enum
#     value is not recognised are dropped here, not deep inside the engine,
#     so one bad catalog row never aborts the batch.
#   - Catalog reference inconsistencies (min_ref >= max_ref, missing bounds)
#     are NOT filtered here: the engine reports them per indicator as
#     CONFIGURACAO_INVALIDA, which keeps the evidence in fato_ocorrencia.
#   - Values for unknown assessments are dropped (semi-join) because
#     fato_valor_indicador has a foreign key to dim_avaliacao.
#
# Invariants:
#   - Output key columns are non-null and non-empty.
#   - Output frames have exactly the columns of their *_SCHEMA, in order.
from __future__ import annotations

import polars as pl

from api.domain.avaliacao.enums import StatusAvaliacao
from api.domain.indicador.enums import (
    Direcao,
    Interpretacao,
    Normalizacao,
    Pilar,
    Porte,
    SetorExterno,
    Transformacao,
)

INDICADORES_SCHEMA: dict[str, pl.DataType] = {
    "codigo": pl.Utf8(),
    "nome": pl.Utf8(),
    "pilar": pl.Utf8(),
    "tema": pl.Utf8(),
    "direcao": pl.Utf8(),
    "normalizacao": pl.Utf8(),
    "min_ref": pl.Float64(),
    "max_ref": pl.Float64(),
    "peso": pl.Float64(),
    "interpretacao": pl.Utf8(),
    "setor_externo": pl.Utf8(),
    "porte_minimo": pl.Utf8(),
}

AVALIACOES_SCHEMA: dict[str, pl.DataType] = {
    "avaliacao_id": pl.Utf8(),
    "destino_id": pl.Utf8(),
    "numero_ciclo": pl.Int64(),
    "porte": pl.Utf8(),
    "status": pl.Utf8(),
    "data_referencia": pl.Date(),
}

VALORES_SCHEMA: dict[str, pl.DataType] = {
    "avaliacao_id": pl.Utf8(),
    "codigo_indicador": pl.Utf8(),
    "valor_bruto": pl.Float64(),
    "valor_texto": pl.Utf8(),
    "fonte": pl.Utf8(),
    "data_referencia": pl.Date(),
}

REGRAS_COMPOSTAS_SCHEMA: dict[str, pl.DataType] = {
    "codigo_composto": pl.Utf8(),
    "codigo_componente": pl.Utf8(),
    "peso": pl.Float64(),
    "transformacao": pl.Utf8(),
}

DESTINOS_SCHEMA: dict[str, pl.DataType] = {
    "destino_id": pl.Utf8(),
    "nome": pl.Utf8(),
    "uf": pl.Utf8(),
}


def conform(df: pl.DataFrame, schema: dict[str, pl.DataType]) -> pl.DataFrame:
    """Add missing columns as nulls and cast every column to the schema."""
    missing = [
        pl.lit(None, dtype=dtype).alias(name)
        for name, dtype in schema.items()
        if name not in df.columns
    ]
    if missing:
        df = df.with_columns(missing)
    return df.select([pl.col(name).cast(dtype, strict=False) for name, dtype in schema.items()])


def validate_indicadores(df: pl.DataFrame) -> pl.DataFrame:
    """Clean the indicator catalog.

    Steps applied:
        1. Conform to INDICADORES_SCHEMA.
        2. Strip codes; drop rows without codigo, pilar or tema.
        3. Upper-case enum columns; drop unknown pilar/direcao/normalizacao.
        4. Default peso to 1.0 and porte_minimo to COMPLETE.
        5. Deduplicate by codigo, keeping the first row.
    """
    df = conform(df, INDICADORES_SCHEMA)
    df = df.with_columns(
        pl.col("codigo").str.strip_chars(),
        pl.col("tema").str.strip_chars(),
        *[
            _enum_col(c)
            for c in ("pilar", "direcao", "normalizacao", "interpretacao", "setor_externo", "porte_minimo")
        ],
    )
    df = df.filter(_non_empty("codigo") & pl.col("pilar").is_not_null() & _non_empty("tema"))
    df = df.filter(
        pl.col("pilar").is_in([p.value for p in Pilar])
        & pl.col("direcao").is_in([d.value for d in Direcao])
        & pl.col("normalizacao").is_in([n.value for n in Normalizacao])
    )
    df = df.with_columns(
        pl.col("nome").fill_null(pl.col("codigo")),
        pl.col("peso").fill_null(1.0),
        pl.col("porte_minimo").fill_null(Porte.COMPLETE.value),
    )
    df = df.filter(pl.col("porte_minimo").is_in([p.value for p in Porte]))
    # Unknown tags become null; the engine then infers the interpretation.
    df = df.with_columns(
        _known_or_null("interpretacao", [i.value for i in Interpretacao]),
        _known_or_null("setor_externo", [s.value for s in SetorExterno]),
    )
    return df.unique(subset=["codigo"], keep="first", maintain_order=True)


def validate_avaliacoes(df: pl.DataFrame) -> pl.DataFrame:
    """Clean the assessment list.

    Drops rows without ids or with numero_ciclo < 1, defaults porte/status,
    deduplicates by avaliacao_id.
    """
    df = conform(df, AVALIACOES_SCHEMA)
    df = df.with_columns(
        pl.col("avaliacao_id").str.strip_chars(),
        pl.col("destino_id").str.strip_chars(),
        _enum_col("porte"),
        _enum_col("status"),
    )
    df = df.filter(
        _non_empty("avaliacao_id")
        & _non_empty("destino_id")
        & pl.col("numero_ciclo").is_not_null()
        & (pl.col("numero_ciclo") >= 1)
    )
    df = df.with_columns(
        pl.col("porte").fill_null(Porte.COMPLETE.value),
        pl.col("status").fill_null(StatusAvaliacao.DATA_READY.value),
    )
    df = df.filter(
        pl.col("porte").is_in([p.value for p in Porte])
        & pl.col("status").is_in([s.value for s in StatusAvaliacao])
    )
    return df.unique(subset=["avaliacao_id"], keep="first", maintain_order=True)


def validate_valores(df: pl.DataFrame, avaliacoes: pl.DataFrame) -> pl.DataFrame:
    """Clean raw values and keep only those of known assessments.

    A later row for the same (avaliacao_id, codigo_indicador) replaces an
    earlier one: re-collected measurements win.
    """
    df = conform(df, VALORES_SCHEMA)
    df = df.with_columns(
        pl.col("avaliacao_id").str.strip_chars(),
        pl.col("codigo_indicador").str.strip_chars(),
    )
    df = df.filter(_non_empty("avaliacao_id") & _non_empty("codigo_indicador"))
    df = df.join(avaliacoes.select("avaliacao_id"), on="avaliacao_id", how="semi")
    return df.unique(subset=["avaliacao_id", "codigo_indicador"], keep="last", maintain_order=True)


def validate_regras_compostas(df: pl.DataFrame) -> pl.DataFrame:
    """Clean composite rules: keys required, peso >= 0, known transformation."""
    df = conform(df, REGRAS_COMPOSTAS_SCHEMA)
    df = df.with_columns(
        pl.col("codigo_composto").str.strip_chars(),
        pl.col("codigo_componente").str.strip_chars(),
        _enum_col("transformacao"),
    )
    df = df.filter(
        _non_empty("codigo_composto")
        & _non_empty("codigo_componente")
        & pl.col("peso").is_not_null()
        & (pl.col("peso") >= 0)
    )
    df = df.with_columns(pl.col("transformacao").fill_null(Transformacao.NENHUMA.value))
    df = df.filter(pl.col("transformacao").is_in([t.value for t in Transformacao]))
    return df.unique(subset=["codigo_composto", "codigo_componente"], keep="first", maintain_order=True)


def validate_destinos(df: pl.DataFrame) -> pl.DataFrame:
    df = conform(df, DESTINOS_SCHEMA)
    df = df.with_columns(pl.col("destino_id").str.strip_chars())
    df = df.filter(_non_empty("destino_id"))
    df = df.with_columns(pl.col("nome").fill_null(pl.col("destino_id")))
    return df.unique(subset=["destino_id"], keep="first", maintain_order=True)


def _enum_col(name: str) -> pl.Expr:
    """Strip + upper-case; empty strings become null."""
    cleaned = pl.col(name).str.strip_chars().str.to_uppercase()
    return pl.when(cleaned == "").then(None).otherwise(cleaned).alias(name)


def _non_empty(name: str) -> pl.Expr:
    return pl.col(name).is_not_null() & (pl.col(name) != "")


def _known_or_null(name: str, valid: list[str]) -> pl.Expr:
    return pl.when(pl.col(name).is_in(valid)).then(pl.col(name)).otherwise(None).alias(name)
