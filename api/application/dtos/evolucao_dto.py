# api/application/dtos/evolucao_dto.py
from __future__ import annotations

from pydantic import BaseModel

from api.domain.diagnostico.politicas import NOMES_PILAR
from api.domain.evolucao.entities import AlertaRegressao, RegistroEvolucao


class RegistroEvolucaoDTO(BaseModel):
    chave: str
    avaliacao_anterior_id: str | None
    score_atual: float
    score_anterior: float | None
    delta: float | None
    estado: str | None

    @classmethod
    def from_domain(cls, r: RegistroEvolucao) -> RegistroEvolucaoDTO:
        return cls(
            chave=r.chave,
            avaliacao_anterior_id=r.avaliacao_anterior_id,
            score_atual=round(r.score_atual, 4),
            score_anterior=round(r.score_anterior, 4) if r.score_anterior is not None else None,
            delta=round(r.delta, 4) if r.delta is not None else None,
            estado=r.estado.value if r.estado else None,
        )


class AlertaRegressaoDTO(BaseModel):
    pilar: str
    nome_pilar: str
    ciclos_consecutivos: int
    ativo: bool
    severidade: str | None
    mensagem: str
    avaliacao_id: str
    lido: bool

    @classmethod
    def from_domain(cls, a: AlertaRegressao) -> AlertaRegressaoDTO:
        return cls(
            pilar=a.pilar.value,
            nome_pilar=NOMES_PILAR[a.pilar],
            ciclos_consecutivos=a.ciclos_consecutivos,
            ativo=a.ativo,
            severidade=a.severidade.value if a.severidade else None,
            mensagem=a.mensagem,
            avaliacao_id=a.avaliacao_id,
            lido=a.lido,
        )


class PilarSerieDTO(BaseModel):
    pilar: str
    score: float
    severidade: str
    estado: str | None
    delta: float | None


class CicloEvolucaoDTO(BaseModel):
    avaliacao_id: str
    numero_ciclo: int
    data_referencia: str | None
    pilares: list[PilarSerieDTO]


class EvolucaoDestinoDTO(BaseModel):
    destino_id: str
    ciclos: list[CicloEvolucaoDTO]

    @classmethod
    def from_rows(cls, destino_id: str, rows: list[dict[str, object]]) -> EvolucaoDestinoDTO:
        ciclos: dict[str, CicloEvolucaoDTO] = {}
        for r in rows:
            avaliacao_id = str(r["avaliacao_id"])
            if avaliacao_id not in ciclos:
                ciclos[avaliacao_id] = CicloEvolucaoDTO(
                    avaliacao_id=avaliacao_id,
                    numero_ciclo=r["numero_ciclo"],  # type: ignore[arg-type]
                    data_referencia=r["data_referencia"],  # type: ignore[arg-type]
                    pilares=[],
                )
            ciclos[avaliacao_id].pilares.append(PilarSerieDTO(
                pilar=r["pilar"],  # type: ignore[arg-type]
                score=r["score"],  # type: ignore[arg-type]
                severidade=r["severidade"],  # type: ignore[arg-type]
                estado=r["estado"],  # type: ignore[arg-type]
                delta=r["delta"],  # type: ignore[arg-type]
            ))
        return cls(destino_id=destino_id, ciclos=list(ciclos.values()))
