# api/interfaces/api/routes/destino_routes.py
from fastapi import APIRouter, Depends, HTTPException

from api.application.dtos.evolucao_dto import AlertaRegressaoDTO, EvolucaoDestinoDTO
from api.application.services.diagnostico_service import DiagnosticoService
from api.infrastructure.repositories.duckdb_avaliacao_repo import DuckDBAvaliacaoRepo
from api.infrastructure.repositories.duckdb_evolucao_repo import DuckDBEvolucaoRepo
from api.interfaces.api.dependencies import (
    get_avaliacao_repo,
    get_diagnostico_service,
    get_evolucao_repo,
)

router = APIRouter()


@router.get("/destinos/{destino_id}/evolucao", response_model=EvolucaoDestinoDTO)
def get_evolucao(
    destino_id: str,
    avaliacao_repo: DuckDBAvaliacaoRepo = Depends(get_avaliacao_repo),  # noqa: B008
    evolucao_repo: DuckDBEvolucaoRepo = Depends(get_evolucao_repo),  # noqa: B008
) -> EvolucaoDestinoDTO:
    if not avaliacao_repo.listar_por_destino(destino_id):
        raise HTTPException(status_code=404, detail="Destino sem avaliacoes")
    rows = evolucao_repo.listar_serie_pilares(destino_id)
    return EvolucaoDestinoDTO.from_rows(destino_id, rows)


@router.get("/destinos/{destino_id}/alertas", response_model=list[AlertaRegressaoDTO])
def get_alertas_regressao(
    destino_id: str,
    service: DiagnosticoService = Depends(get_diagnostico_service),  # noqa: B008
) -> list[AlertaRegressaoDTO]:
    alertas = service.listar_alertas(destino_id)
    if alertas is None:
        raise HTTPException(status_code=404, detail="Destino sem avaliacoes")
    return alertas
