# pipeline/output/build_duckdb.py
#
# Atomic DuckDB build: staging Parquet files → final .duckdb artifact.
#
# Design decisions:
#   - Atomicity is guaranteed by writing to a .tmp.duckdb first and only
#     renaming to the final path when the build succeeds. If anything fails,
#     the tmp file is deleted and the previous (or nonexistent) output file is
#     untouched. The API never serves a partially-built database.
#   - Schema is read from schema.sql at build time (not imported as a module)
#     so the SQL file remains the single source of truth for table structure.
#     The integration tests build their in-memory database from the same file.
#   - Staging files are loaded via DuckDB's native read_parquet(), which avoids
#     materialising the frames in Python again.
#   - The mapping from staging file names to DuckDB table names is explicit.
#     It does not derive from file names automatically, which would silently
#     skip a new result frame that has no table.
#   - Both the validated inputs (catalog, assessments, values) and the engine
#     results live in staging_dir under the names listed in STAGING_TO_TABLE.
#
# ADR: Why INSERT INTO ... SELECT FROM read_parquet(...)?
#   It is the most direct path, and it respects the foreign keys declared in
#   schema.sql: a fact row pointing at an unknown assessment fails the build
#   instead of producing an orphan.
from __future__ import annotations

from pathlib import Path

import duckdb

from pipeline.log import log

SCHEMA_PATH = Path(__file__).parent / "schema.sql"

# ---------------------------------------------------------------------------
# Mapping: staging parquet file stem → DuckDB table name.
#
# Order matters: dim_avaliacao must be loaded before every fact table, since
# they all reference it.
# ---------------------------------------------------------------------------
STAGING_TO_TABLE: dict[str, str] = {
    # Dimensions and catalog
    "destinos": "dim_destino",
    "indicadores": "dim_indicador",
    "regras_compostas": "regra_composta",
    "avaliacoes": "dim_avaliacao",
    # Raw measurements
    "valores": "fato_valor_indicador",
    # Engine results
    "score_indicador": "fato_score_indicador",
    "score_pilar": "fato_score_pilar",
    "gargalos": "fato_gargalo",
    "flags": "fato_flags_igma",
    "mensagens": "fato_mensagem_ui",
    "prescricoes": "fato_prescricao",
    "planos": "fato_plano_acao",
    "evolucao": "fato_evolucao",
    "alertas_regressao": "fato_alerta_regressao",
    "ocorrencias": "fato_ocorrencia",
}


def build_duckdb(staging_dir: Path, output_path: Path) -> Path:
    """Build the IGMA database atomically from staging Parquet files.

    Schema first, then every mapped Parquet present in staging_dir, then an
    atomic rename onto output_path. On any failure the tmp file is removed
    and output_path keeps its previous content.

    Returns:
        output_path.

    Raises:
        duckdb.Error: schema or load failure (e.g. foreign key violation),
            propagated after cleanup.
    """
    tmp_path = output_path.with_suffix(".tmp.duckdb")
    output_path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path.unlink(missing_ok=True)  # stale leftover of a crashed run

    try:
        conn = duckdb.connect(str(tmp_path))
        try:
            conn.execute(SCHEMA_PATH.read_text(encoding="utf-8"))
            loaded = sum(
                _load_table(conn, staging_dir / f"{stem}.parquet", table)
                for stem, table in STAGING_TO_TABLE.items()
            )
        finally:
            conn.close()

        log(f"  DuckDB: {loaded} tables loaded")
        tmp_path.replace(output_path)
        return output_path

    except Exception:
        tmp_path.unlink(missing_ok=True)
        raise


def _load_table(conn: duckdb.DuckDBPyConnection, parquet_path: Path, table: str) -> int:
    """INSERT the columns shared by the Parquet file and the table.

    Returns:
        1 if the file was loaded, 0 if it is absent or shares no column.
        Absent files are allowed here; completude.py decides which inputs
        are mandatory.
    """
    if not parquet_path.exists():
        return 0

    # S608 noqa: table comes from STAGING_TO_TABLE and the path is local,
    # neither is user input.
    posix_path = parquet_path.as_posix()
    table_cols = [
        r[0]
        for r in conn.execute(
            "SELECT column_name FROM information_schema.columns "
            "WHERE table_name = ? ORDER BY ordinal_position",
            [table],
        ).fetchall()
    ]
    parquet_cols = {
        r[0] for r in conn.execute(
            f"SELECT name FROM parquet_schema('{posix_path}')"  # noqa: S608
        ).fetchall()
    }
    shared = [c for c in table_cols if c in parquet_cols]
    if not shared:
        return 0

    cols_sql = ", ".join(shared)
    log(f"  Loading {parquet_path.stem} -> {table}...")
    conn.execute(
        f"INSERT INTO {table} ({cols_sql}) "  # noqa: S608
        f"SELECT {cols_sql} FROM read_parquet('{posix_path}')"
    )
    return 1


def contar_linhas(output_path: Path) -> dict[str, int]:
    """Row count per table of a finished database (read-only)."""
    conn = duckdb.connect(str(output_path), read_only=True)
    try:
        return {
            table: int(conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0])  # type: ignore[index]  # noqa: S608
            for table in STAGING_TO_TABLE.values()
        }
    finally:
        conn.close()
