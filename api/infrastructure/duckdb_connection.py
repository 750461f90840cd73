# api/infrastructure/duckdb_connection.py
from __future__ import annotations

import duckdb

from .config import get_settings

_connection: duckdb.DuckDBPyConnection | None = None


def get_connection() -> duckdb.DuckDBPyConnection:
    """Conexao unica do processo. Arquivo gerado pelo pipeline abre read-only."""
    global _connection  # noqa: PLW0603
    if _connection is None:
        path = get_settings().duckdb_path
        _connection = duckdb.connect(path, read_only=path != ":memory:")
    return _connection


def set_connection(conn: duckdb.DuckDBPyConnection | None) -> None:
    """Injeta (ou limpa, com None) a conexao. Usado em testes com DuckDB in-memory."""
    global _connection  # noqa: PLW0603
    _connection = conn
