# pipeline/staging/parquet_writer.py
#
# Parquet read/write for staging inputs and computed result frames.
#
# Design decisions:
#   - Thin wrappers around Polars I/O so the rest of the pipeline never calls
#     polars directly for file I/O.
#   - write_parquet creates parent directories automatically.
#   - Optional inputs (composite rules, territory names) are read through
#     read_optional_parquet, which returns None instead of raising. Whether a
#     missing optional file deserves a warning is decided by completude.py.
from __future__ import annotations

from pathlib import Path

import polars as pl


def write_parquet(df: pl.DataFrame, path: Path) -> Path:
    """Write a DataFrame to Parquet, creating parent directories as needed.

    Returns:
        ``path``, for call-chain convenience.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    df.write_parquet(path)
    return path


def read_parquet(path: Path) -> pl.DataFrame:
    """Read a required Parquet file.

    Raises:
        FileNotFoundError: if ``path`` does not exist (raised by Polars).
    """
    return pl.read_parquet(path)


def read_optional_parquet(path: Path) -> pl.DataFrame | None:
    """Read a Parquet file, or None when it does not exist."""
    if not path.exists():
        return None
    return pl.read_parquet(path)
