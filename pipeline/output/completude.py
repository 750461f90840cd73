# pipeline/output/completude.py
#
# Completude validation: asserts that all required staging inputs are present
# and non-empty before any assessment is computed.
#
# Design decisions:
#   - This is a pure guard function: it reads files but does not write or
#     modify anything. Raised exceptions and warnings are the only side effects.
#   - REQUIRED_SOURCES is a module-level tuple so it can be imported by tests
#     and the orchestrator without instantiating anything.
#   - A file with 0 rows is treated as missing. An empty catalog would yield
#     a database where every pillar is undefined, which looks like a result
#     but is not one.
#   - The error message always includes the offending source name.
#
# ADR: regras_compostas and destinos are optional. Without composite rules the
# composite codes are scored from their direct values (or reported as missing
# data); without destinos dim_destino stays empty and nothing joins on it.
from __future__ import annotations

from pathlib import Path

import polars as pl

from pipeline.log import warn

REQUIRED_SOURCES: tuple[str, ...] = (
    "indicadores",
    "avaliacoes",
    "valores",
)

OPTIONAL_SOURCES: tuple[str, ...] = (
    "regras_compostas",
    "destinos",
)


class CompletudeError(Exception):
    """Raised when one or more required staging files are missing or empty.

    The message always identifies the offending source file.
    """


def validar_completude(staging_dir: Path) -> None:
    """Assert that all required staging Parquet files exist and have rows.

    Raises:
        CompletudeError: if any required file is absent or contains zero rows.
    """
    for source in REQUIRED_SOURCES:
        path = staging_dir / f"{source}.parquet"

        if not path.exists():
            raise CompletudeError(f"Missing staging file: {source}.parquet (expected at {path})")

        if _row_count(path) == 0:
            raise CompletudeError(
                f"Empty staging file: {source}.parquet (0 rows). Re-run the collection step."
            )

    for source in OPTIONAL_SOURCES:
        path = staging_dir / f"{source}.parquet"
        if not path.exists():
            warn(f"optional source '{source}' missing, skipping")
        elif _row_count(path) == 0:
            warn(f"optional source '{source}' has 0 rows, skipping")


def _row_count(path: Path) -> int:
    return int(pl.scan_parquet(path).select(pl.len()).collect().item())
