# api/application/services/diagnostico_service.py
from __future__ import annotations

from datetime import date

from api.domain.avaliacao.repository import AvaliacaoRepository
from api.domain.diagnostico.errors import AvaliacaoNaoCalculavelError
from api.domain.diagnostico.politicas import EPSILON_ESTAGNACAO
from api.domain.evolucao.repository import AlertaRegressaoRepository, CicloAnteriorRepository
from api.domain.indicador.repository import CatalogoRepository, ValorRepository

from ..dtos.diagnostico_dto import DiagnosticoDTO
from ..dtos.evolucao_dto import AlertaRegressaoDTO
from .motor_service import calcular_diagnostico


class DiagnosticoService:
    """Imperative Shell: le catalogo, valores e ciclo anterior; chama o motor puro."""

    def __init__(
        self,
        avaliacao_repo: AvaliacaoRepository,
        catalogo_repo: CatalogoRepository,
        valor_repo: ValorRepository,
        ciclo_repo: CicloAnteriorRepository,
        alerta_repo: AlertaRegressaoRepository | None = None,
        epsilon: float = EPSILON_ESTAGNACAO,
    ) -> None:
        self._avaliacao_repo = avaliacao_repo
        self._catalogo_repo = catalogo_repo
        self._valor_repo = valor_repo
        self._ciclo_repo = ciclo_repo
        self._alerta_repo = alerta_repo
        self._epsilon = epsilon

    def obter_diagnostico(self, avaliacao_id: str) -> DiagnosticoDTO | None:
        """None se a avaliacao nao existe.

        Raises:
            AvaliacaoNaoCalculavelError: avaliacao em DRAFT ou sem nenhum valor.
        """
        avaliacao = self._avaliacao_repo.buscar(avaliacao_id)
        if avaliacao is None:
            return None
        if not avaliacao.calculavel:
            raise AvaliacaoNaoCalculavelError(avaliacao_id, "avaliacao em rascunho")

        # IO: imperative shell
        valores = self._valor_repo.listar_por_avaliacao(avaliacao_id)
        if not valores:
            raise AvaliacaoNaoCalculavelError(avaliacao_id, "nenhum valor de indicador coletado")
        catalogo = self._catalogo_repo.listar_indicadores()
        regras = self._catalogo_repo.listar_regras_compostas()
        ciclo_anterior = self._ciclo_repo.carregar(avaliacao)

        referencia = avaliacao.data_referencia or date.today()

        # Pure core
        resultado = calcular_diagnostico(
            avaliacao,
            catalogo,
            valores,
            ciclo_anterior,
            referencia,
            regras_compostas=regras,
            epsilon=self._epsilon,
        )
        return DiagnosticoDTO.from_domain(resultado)

    def listar_alertas(self, destino_id: str) -> list[AlertaRegressaoDTO] | None:
        """None se o destino nao tem avaliacoes."""
        if not self._avaliacao_repo.listar_por_destino(destino_id):
            return None
        if self._alerta_repo is None:
            return []
        return [
            AlertaRegressaoDTO.from_domain(a)
            for a in self._alerta_repo.listar_ativos_por_destino(destino_id)
        ]
