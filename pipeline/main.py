# pipeline/main.py
#
# Pipeline orchestrator: validates the collected staging inputs, computes every
# assessment with the IGMA engine and builds the final DuckDB database.
#
# Design decisions:
#   - run_pipeline is the single entry point. It accepts a PipelineConfig and
#     the reference date used when an assessment has no data_referencia of its
#     own (next review and action plan due dates). Tests pass a fixed date.
#   - The orchestration follows a strict dependency order:
#       1. Validate completude of the required staging inputs
#       2. Clean inputs (pipeline/staging/validate.py) and write them back
#       3. Compute all assessments (territories in parallel, cycles chained)
#       4. Write result frames to staging
#       5. Build DuckDB atomically
#   - Collection of raw indicator values is upstream of this pipeline: the
#     staging inputs are its contract.
#   - Each step logs progress to stdout; data problems go to stderr via warn().
#
# Invariant: the DuckDB file is never replaced unless completude passed and
# every assessment was computed.
from __future__ import annotations

from collections.abc import Callable
from datetime import date
from pathlib import Path

import polars as pl

from pipeline.config import PipelineConfig, load_config
from pipeline.log import log, warn
from pipeline.output.build_duckdb import build_duckdb
from pipeline.output.completude import validar_completude
from pipeline.staging.parquet_writer import read_optional_parquet, read_parquet, write_parquet
from pipeline.staging.validate import (
    validate_avaliacoes,
    validate_destinos,
    validate_indicadores,
    validate_regras_compostas,
    validate_valores,
)
from pipeline.transform.diagnostico import calcular_lote
from pipeline.transform.entrada import (
    avaliacoes_from_df,
    indicadores_from_df,
    regras_from_df,
    valores_por_avaliacao,
)
from pipeline.transform.resultados import montar_frames


def run_pipeline(config: PipelineConfig, *, referencia: date | None = None) -> Path:
    """Execute the full pipeline and produce the DuckDB database.

    Args:
        config: Pipeline configuration with paths, workers and deadband.
        referencia: fallback reference date; defaults to today.

    Returns:
        Path to the final DuckDB database file.

    Raises:
        pipeline.output.completude.CompletudeError: if a required staging
            input is missing or empty.
    """
    staging_dir = config.staging_dir
    referencia = referencia or date.today()

    log("Validating completude...")
    validar_completude(staging_dir)

    # ---- Read + clean staging inputs ----
    log("Reading staging parquets...")
    indicadores_df = _clean(
        staging_dir, "indicadores", read_parquet(staging_dir / "indicadores.parquet"), validate_indicadores,
    )
    avaliacoes_df = _clean(
        staging_dir, "avaliacoes", read_parquet(staging_dir / "avaliacoes.parquet"), validate_avaliacoes,
    )
    valores_df = _clean(
        staging_dir, "valores",
        read_parquet(staging_dir / "valores.parquet"),
        lambda df: validate_valores(df, avaliacoes_df),
    )
    regras_raw = read_optional_parquet(staging_dir / "regras_compostas.parquet")
    regras_df = (
        _clean(staging_dir, "regras_compostas", regras_raw, validate_regras_compostas)
        if regras_raw is not None else None
    )
    destinos_raw = read_optional_parquet(staging_dir / "destinos.parquet")
    if destinos_raw is not None:
        _clean(staging_dir, "destinos", destinos_raw, validate_destinos)

    # ---- Compute ----
    log("Computing assessments...")
    resultados = calcular_lote(
        avaliacoes_from_df(avaliacoes_df),
        indicadores_from_df(indicadores_df),
        valores_por_avaliacao(valores_df),
        regras_from_df(regras_df),
        referencia,
        epsilon=config.epsilon_estagnacao,
        max_workers=config.max_workers,
    )

    for name, df in montar_frames(resultados).items():
        write_parquet(df, staging_dir / f"{name}.parquet")
        log(f"  {name}: {len(df):,} rows")

    # ---- Build DuckDB ----
    log("Building DuckDB...")
    output_path = build_duckdb(staging_dir, config.duckdb_output_path)
    log(f"Done. DuckDB written to: {output_path}")
    return output_path


def _clean(
    staging_dir: Path,
    name: str,
    df: pl.DataFrame,
    validate: Callable[[pl.DataFrame], pl.DataFrame],
) -> pl.DataFrame:
    """Run a validator, report dropped rows and write the clean frame back."""
    cleaned = validate(df)
    dropped = len(df) - len(cleaned)
    if dropped:
        warn(f"{name}: {dropped:,} invalid or duplicate rows dropped")
    write_parquet(cleaned, staging_dir / f"{name}.parquet")
    log(f"  {name}: {len(cleaned):,} rows")
    return cleaned


if __name__ == "__main__":
    cfg = load_config()
    run_pipeline(cfg)
