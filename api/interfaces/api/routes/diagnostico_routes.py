# api/interfaces/api/routes/diagnostico_routes.py
from fastapi import APIRouter, Depends, HTTPException

from api.application.dtos.diagnostico_dto import DiagnosticoDTO
from api.application.services.diagnostico_service import DiagnosticoService
from api.domain.diagnostico.errors import AvaliacaoNaoCalculavelError
from api.interfaces.api.dependencies import get_diagnostico_service

router = APIRouter()


@router.get("/avaliacoes/{avaliacao_id}/diagnostico", response_model=DiagnosticoDTO)
def get_diagnostico(
    avaliacao_id: str,
    service: DiagnosticoService = Depends(get_diagnostico_service),  # noqa: B008
) -> DiagnosticoDTO:
    try:
        diagnostico = service.obter_diagnostico(avaliacao_id)
    except AvaliacaoNaoCalculavelError as err:
        raise HTTPException(status_code=422, detail=err.motivo) from err

    if diagnostico is None:
        raise HTTPException(status_code=404, detail="Avaliacao nao encontrada")
    return diagnostico
