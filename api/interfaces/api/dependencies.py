# api/interfaces/api/dependencies.py
from api.application.services.diagnostico_service import DiagnosticoService
from api.infrastructure.config import get_settings
from api.infrastructure.duckdb_connection import get_connection
from api.infrastructure.repositories.duckdb_alerta_regressao_repo import DuckDBAlertaRegressaoRepo
from api.infrastructure.repositories.duckdb_avaliacao_repo import DuckDBAvaliacaoRepo
from api.infrastructure.repositories.duckdb_catalogo_repo import DuckDBCatalogoRepo
from api.infrastructure.repositories.duckdb_ciclo_repo import DuckDBCicloRepo
from api.infrastructure.repositories.duckdb_evolucao_repo import DuckDBEvolucaoRepo
from api.infrastructure.repositories.duckdb_valor_repo import DuckDBValorRepo


def get_diagnostico_service() -> DiagnosticoService:
    conn = get_connection()
    return DiagnosticoService(
        avaliacao_repo=DuckDBAvaliacaoRepo(conn),
        catalogo_repo=DuckDBCatalogoRepo(conn),
        valor_repo=DuckDBValorRepo(conn),
        ciclo_repo=DuckDBCicloRepo(conn),
        alerta_repo=DuckDBAlertaRegressaoRepo(conn),
        epsilon=get_settings().epsilon_estagnacao,
    )


def get_evolucao_repo() -> DuckDBEvolucaoRepo:
    return DuckDBEvolucaoRepo(get_connection())


def get_avaliacao_repo() -> DuckDBAvaliacaoRepo:
    return DuckDBAvaliacaoRepo(get_connection())
