from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from api.domain.indicador.enums import Porte

from .enums import StatusAvaliacao


@dataclass(frozen=True)
class Avaliacao:
    """Uma rodada de diagnostico de um territorio (destino) em um ciclo."""

    id: str
    destino_id: str
    numero_ciclo: int
    porte: Porte = Porte.COMPLETE
    status: StatusAvaliacao = StatusAvaliacao.DATA_READY
    data_referencia: date | None = None

    def __post_init__(self) -> None:
        if not self.id.strip():
            raise ValueError("Avaliacao exige id nao-vazio")
        if self.numero_ciclo < 1:
            raise ValueError("numero_ciclo comeca em 1")

    @property
    def calculavel(self) -> bool:
        """DRAFT ainda nao tem dados prontos para o motor."""
        return self.status != StatusAvaliacao.DRAFT
