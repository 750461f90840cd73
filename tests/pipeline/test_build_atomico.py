# tests/pipeline/test_build_atomico.py
#
# Tests for the atomic DuckDB build process.
#
# Strategy: create minimal staging Parquet files whose column sets satisfy the
# DuckDB FK chain dim_avaliacao -> fato_*, run build_duckdb, then assert on the
# resulting database. Tests use tmp_path for full filesystem isolation.
#
# The staging fixtures match the schema in pipeline/output/schema.sql:
#   dim_indicador    <- indicadores.parquet
#   dim_avaliacao    <- avaliacoes.parquet
#   fato_score_pilar <- score_pilar.parquet  (references dim_avaliacao)
from __future__ import annotations

from pathlib import Path

import duckdb
import polars as pl
import pytest

from pipeline.output.build_duckdb import STAGING_TO_TABLE, build_duckdb, contar_linhas

# ---------------------------------------------------------------------------
# Minimal staging fixtures
# ---------------------------------------------------------------------------


def _write_parquet(directory: Path, name: str, df: pl.DataFrame) -> None:
    directory.mkdir(parents=True, exist_ok=True)
    df.write_parquet(directory / f"{name}.parquet")


def _indicadores_df() -> pl.DataFrame:
    return pl.DataFrame(
        {
            "codigo": ["RA_1"],
            "nome": ["Cobertura vegetal"],
            "pilar": ["RA"],
            "tema": ["ambiental"],
            "direcao": ["HIGH_IS_BETTER"],
            "normalizacao": ["MIN_MAX"],
            "min_ref": [0.0],
            "max_ref": [100.0],
            "peso": [1.0],
            "porte_minimo": ["SMALL"],
            "coluna_extra": ["ignorada"],
        }
    )


def _avaliacoes_df() -> pl.DataFrame:
    return pl.DataFrame(
        {
            "avaliacao_id": ["AV1"],
            "destino_id": ["D1"],
            "numero_ciclo": [1],
            "porte": ["COMPLETE"],
            "status": ["DATA_READY"],
        }
    )


def _score_pilar_df(avaliacao_id: str = "AV1") -> pl.DataFrame:
    return pl.DataFrame(
        {
            "avaliacao_id": [avaliacao_id],
            "pilar": ["RA"],
            "score": [0.42],
            "severidade": ["MODERADO"],
        }
    )


def _create_minimal_staging(staging_dir: Path) -> None:
    """Catalog, one assessment and one pillar score.

    All other tables are left empty (no parquet file): build_duckdb skips
    missing files; completude.py is responsible for enforcing presence.
    """
    _write_parquet(staging_dir, "indicadores", _indicadores_df())
    _write_parquet(staging_dir, "avaliacoes", _avaliacoes_df())
    _write_parquet(staging_dir, "score_pilar", _score_pilar_df())


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------


def test_build_creates_final_duckdb(tmp_path: Path) -> None:
    staging = tmp_path / "staging"
    _create_minimal_staging(staging)
    output = tmp_path / "output" / "test.duckdb"

    result = build_duckdb(staging, output)

    assert result == output
    assert output.exists()


def test_build_output_contains_every_mapped_table(tmp_path: Path) -> None:
    staging = tmp_path / "staging"
    _create_minimal_staging(staging)
    output = tmp_path / "output" / "test.duckdb"

    build_duckdb(staging, output)

    conn = duckdb.connect(str(output), read_only=True)
    try:
        tables = {row[0] for row in conn.execute("SHOW TABLES").fetchall()}
    finally:
        conn.close()

    assert set(STAGING_TO_TABLE.values()).issubset(tables)


def test_build_loads_shared_columns_only(tmp_path: Path) -> None:
    """Extra staging columns are ignored; missing ones take the table default."""
    staging = tmp_path / "staging"
    _create_minimal_staging(staging)
    output = tmp_path / "output" / "test.duckdb"

    build_duckdb(staging, output)

    conn = duckdb.connect(str(output), read_only=True)
    try:
        row = conn.execute(
            "SELECT codigo, porte_minimo, interpretacao FROM dim_indicador"
        ).fetchone()
        data_ref = conn.execute("SELECT data_referencia FROM dim_avaliacao").fetchone()
    finally:
        conn.close()

    assert row == ("RA_1", "SMALL", None)
    assert data_ref == (None,)


def test_contar_linhas(tmp_path: Path) -> None:
    staging = tmp_path / "staging"
    _create_minimal_staging(staging)
    output = tmp_path / "output" / "test.duckdb"
    build_duckdb(staging, output)

    contagem = contar_linhas(output)

    assert contagem["dim_indicador"] == 1
    assert contagem["dim_avaliacao"] == 1
    assert contagem["fato_score_pilar"] == 1
    assert contagem["fato_prescricao"] == 0


def test_build_removes_tmp_on_failure(tmp_path: Path) -> None:
    """A fact row pointing at an unknown assessment fails and cleans up."""
    staging = tmp_path / "staging"
    output = tmp_path / "output" / "test.duckdb"
    tmp_expected = output.with_suffix(".tmp.duckdb")

    _write_parquet(staging, "avaliacoes", _avaliacoes_df())
    _write_parquet(staging, "score_pilar", _score_pilar_df(avaliacao_id="NAO_EXISTE"))

    with pytest.raises(duckdb.ConstraintException):
        build_duckdb(staging, output)

    assert not tmp_expected.exists()


def test_build_does_not_overwrite_existing_output_on_failure(tmp_path: Path) -> None:
    staging = tmp_path / "staging"
    output = tmp_path / "output" / "test.duckdb"

    _create_minimal_staging(staging)
    build_duckdb(staging, output)
    mtime_before = output.stat().st_mtime

    staging2 = tmp_path / "staging2"
    _write_parquet(staging2, "score_pilar", _score_pilar_df(avaliacao_id="NAO_EXISTE"))

    with pytest.raises(duckdb.ConstraintException):
        build_duckdb(staging2, output)

    assert output.exists()
    assert output.stat().st_mtime == pytest.approx(mtime_before, abs=1e-3)

    conn = duckdb.connect(str(output), read_only=True)
    try:
        row = conn.execute("SELECT COUNT(*) FROM fato_score_pilar").fetchone()
    finally:
        conn.close()
    assert row == (1,)


def test_build_replaces_stale_tmp_file(tmp_path: Path) -> None:
    """A leftover .tmp.duckdb from a crashed run does not break the next build."""
    staging = tmp_path / "staging"
    _create_minimal_staging(staging)
    output = tmp_path / "output" / "test.duckdb"
    output.parent.mkdir(parents=True)
    output.with_suffix(".tmp.duckdb").write_bytes(b"lixo")

    build_duckdb(staging, output)

    assert output.exists()
    assert not output.with_suffix(".tmp.duckdb").exists()
