# api/application/dtos/diagnostico_dto.py
from __future__ import annotations

from pydantic import BaseModel

from api.application.services.motor_service import ResultadoDiagnostico
from api.domain.diagnostico.entities import FlagsIGMA, Gargalo, Prescricao
from api.domain.diagnostico.politicas import NOMES_PILAR
from api.domain.indicador.enums import Pilar

from .evolucao_dto import AlertaRegressaoDTO, RegistroEvolucaoDTO


class ScoreIndicadorDTO(BaseModel):
    codigo: str
    pilar: str
    score: float
    peso: float


class ScorePilarDTO(BaseModel):
    pilar: str
    nome: str
    score: float
    severidade: str


class EvidenciaDTO(BaseModel):
    codigo: str
    nome: str
    score: float
    interpretacao: str
    setor_externo: str | None


class GargaloDTO(BaseModel):
    id: str
    pilar: str
    tema: str
    severidade: str
    interpretacao: str | None
    titulo: str
    evidencia: list[EvidenciaDTO]

    @classmethod
    def from_domain(cls, gargalo: Gargalo) -> GargaloDTO:
        return cls(
            id=gargalo.id,
            pilar=gargalo.pilar.value,
            tema=gargalo.tema,
            severidade=gargalo.severidade.value,
            interpretacao=gargalo.interpretacao.value if gargalo.interpretacao else None,
            titulo=gargalo.titulo,
            evidencia=[
                EvidenciaDTO(
                    codigo=e.codigo,
                    nome=e.nome,
                    score=round(e.score, 4),
                    interpretacao=e.interpretacao.value,
                    setor_externo=e.setor_externo.value if e.setor_externo else None,
                )
                for e in gargalo.evidencia
            ],
        )


class MensagemUIDTO(BaseModel):
    tipo: str
    flag: str
    titulo: str
    mensagem: str


class FlagsDTO(BaseModel):
    ra_limitation: bool
    externality_warning: bool
    governance_block: bool
    marketing_blocked: bool
    intersectoral_dependency: bool
    acoes_bloqueadas: list[str]
    acoes_permitidas: list[str]
    proxima_revisao: str | None
    tipo_interpretacao: str
    pilar_critico: str | None
    indeterminadas: list[str]
    mensagens: list[MensagemUIDTO]

    @classmethod
    def from_domain(cls, flags: FlagsIGMA) -> FlagsDTO:
        return cls(
            ra_limitation=flags.ra_limitation,
            externality_warning=flags.externality_warning,
            governance_block=flags.governance_block,
            marketing_blocked=flags.marketing_blocked,
            intersectoral_dependency=flags.intersectoral_dependency,
            acoes_bloqueadas=[a.value for a in flags.acoes_bloqueadas],
            acoes_permitidas=[a.value for a in flags.acoes_permitidas],
            proxima_revisao=flags.proxima_revisao.isoformat() if flags.proxima_revisao else None,
            tipo_interpretacao=flags.tipo_interpretacao.value,
            pilar_critico=flags.pilar_critico.value if flags.pilar_critico else None,
            indeterminadas=[f.value for f in flags.indeterminadas],
            mensagens=[
                MensagemUIDTO(tipo=m.tipo.value, flag=m.flag.value, titulo=m.titulo, mensagem=m.mensagem)
                for m in flags.mensagens
            ],
        )


class PrescricaoDTO(BaseModel):
    id: str
    gargalo_id: str | None
    pilar: str
    tema: str
    status: str
    interpretacao: str | None
    justificativa: str
    agente_alvo: str
    agentes_apoio: list[str]
    prioridade: int
    numero_ciclo: int
    acao: str
    bloqueada: bool

    @classmethod
    def from_domain(cls, p: Prescricao) -> PrescricaoDTO:
        return cls(
            id=p.id,
            gargalo_id=p.gargalo_id,
            pilar=p.pilar.value,
            tema=p.tema,
            status=p.status.value,
            interpretacao=p.interpretacao.value if p.interpretacao else None,
            justificativa=p.justificativa,
            agente_alvo=p.agente_alvo.value,
            agentes_apoio=[a.value for a in p.agentes_apoio],
            prioridade=p.prioridade,
            numero_ciclo=p.numero_ciclo,
            acao=p.acao.value,
            bloqueada=p.bloqueada,
        )


class PlanoDeAcaoDTO(BaseModel):
    titulo: str
    descricao: str
    pilar: str
    prioridade: int
    gargalo_id: str
    prescricao_id: str | None
    prazo: str


class OcorrenciaDTO(BaseModel):
    tipo: str
    referencia: str
    detalhe: str


class DiagnosticoDTO(BaseModel):
    avaliacao_id: str
    destino_id: str
    numero_ciclo: int
    porte: str
    scores_indicador: list[ScoreIndicadorDTO]
    scores_pilar: list[ScorePilarDTO]
    gargalos: list[GargaloDTO]
    flags: FlagsDTO
    prescricoes: list[PrescricaoDTO]
    planos_de_acao: list[PlanoDeAcaoDTO]
    evolucao: list[RegistroEvolucaoDTO]
    alertas_regressao: list[AlertaRegressaoDTO]
    ocorrencias: list[OcorrenciaDTO]

    @classmethod
    def from_domain(cls, resultado: ResultadoDiagnostico) -> DiagnosticoDTO:
        avaliacao = resultado.avaliacao
        return cls(
            avaliacao_id=avaliacao.id,
            destino_id=avaliacao.destino_id,
            numero_ciclo=avaliacao.numero_ciclo,
            porte=avaliacao.porte.value,
            scores_indicador=[
                ScoreIndicadorDTO(
                    codigo=s.codigo_indicador,
                    pilar=s.pilar.value,
                    score=round(s.score, 4),
                    peso=s.peso_usado,
                )
                for s in resultado.scores_indicador
            ],
            scores_pilar=[
                ScorePilarDTO(
                    pilar=sp.pilar.value,
                    nome=NOMES_PILAR[sp.pilar],
                    score=round(sp.score, 4),
                    severidade=sp.severidade.value,
                )
                for p in Pilar
                if (sp := resultado.scores_pilar.get(p)) is not None
            ],
            gargalos=[GargaloDTO.from_domain(g) for g in resultado.gargalos],
            flags=FlagsDTO.from_domain(resultado.flags),
            prescricoes=[PrescricaoDTO.from_domain(p) for p in resultado.prescricoes],
            planos_de_acao=[
                PlanoDeAcaoDTO(
                    titulo=plano.titulo,
                    descricao=plano.descricao,
                    pilar=plano.pilar.value,
                    prioridade=plano.prioridade,
                    gargalo_id=plano.gargalo_id,
                    prescricao_id=plano.prescricao_id,
                    prazo=plano.prazo.isoformat(),
                )
                for plano in resultado.planos
            ],
            evolucao=[
                RegistroEvolucaoDTO.from_domain(r)
                for r in (*resultado.evolucao_pilares, *resultado.evolucao_prescricoes)
            ],
            alertas_regressao=[AlertaRegressaoDTO.from_domain(a) for a in resultado.alertas_regressao],
            ocorrencias=[
                OcorrenciaDTO(tipo=o.tipo.value, referencia=o.referencia, detalhe=o.detalhe)
                for o in resultado.ocorrencias
            ],
        )
