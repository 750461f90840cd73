# api/domain/diagnostico/entities.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from api.domain.indicador.enums import Interpretacao, Pilar, SetorExterno

from .enums import Acao, AgenteAlvo, FlagIGMA, Severidade, TipoMensagem, TipoOcorrencia
from .politicas import classificar_severidade


@dataclass(frozen=True)
class ScorePilar:
    """Media ponderada de um pilar. Severidade e derivada, nunca armazenada."""

    avaliacao_id: str
    pilar: Pilar
    score: float

    def __post_init__(self) -> None:
        if not 0.0 <= self.score <= 1.0:
            raise ValueError(f"Score de pilar fora de [0, 1]: {self.score}")

    @property
    def severidade(self) -> Severidade:
        return classificar_severidade(self.score)

    @property
    def chave_evolucao(self) -> str:
        return self.pilar.value


@dataclass(frozen=True)
class EvidenciaIndicador:
    codigo: str
    nome: str
    score: float
    peso: float
    interpretacao: Interpretacao
    setor_externo: SetorExterno | None = None


@dataclass(frozen=True)
class Gargalo:
    """Issue: um tema de um pilar com indicadores abaixo de Adequado."""

    avaliacao_id: str
    pilar: Pilar
    tema: str
    severidade: Severidade
    interpretacao: Interpretacao | None
    titulo: str
    evidencia: tuple[EvidenciaIndicador, ...]

    def __post_init__(self) -> None:
        if not self.evidencia:
            raise ValueError("Gargalo exige ao menos um indicador de evidencia")

    @property
    def id(self) -> str:
        return f"{self.avaliacao_id}:{self.pilar.value}:{self.tema}"

    @property
    def score_medio(self) -> float:
        return sum(e.score for e in self.evidencia) / len(self.evidencia)

    @property
    def setores_externos(self) -> tuple[SetorExterno, ...]:
        vistos: list[SetorExterno] = []
        for e in self.evidencia:
            if e.setor_externo is not None and e.setor_externo not in vistos:
                vistos.append(e.setor_externo)
        return tuple(vistos)


@dataclass(frozen=True)
class MensagemUI:
    tipo: TipoMensagem
    flag: FlagIGMA
    titulo: str
    mensagem: str


@dataclass(frozen=True)
class FlagsIGMA:
    """Estado de governanca de uma avaliacao. Sempre recalculado por inteiro."""

    ra_limitation: bool
    externality_warning: bool
    governance_block: bool
    marketing_blocked: bool
    intersectoral_dependency: bool
    acoes_bloqueadas: tuple[Acao, ...]
    mensagens: tuple[MensagemUI, ...]
    proxima_revisao: date | None
    tipo_interpretacao: Interpretacao
    pilar_critico: Pilar | None
    indeterminadas: tuple[FlagIGMA, ...] = ()

    @property
    def acoes_permitidas(self) -> tuple[Acao, ...]:
        return tuple(a for a in Acao if a not in self.acoes_bloqueadas)

    def bloqueada(self, acao: Acao) -> bool:
        return acao in self.acoes_bloqueadas

    def ativas(self) -> tuple[FlagIGMA, ...]:
        estado = {
            FlagIGMA.RA_LIMITATION: self.ra_limitation,
            FlagIGMA.EXTERNALITY_WARNING: self.externality_warning,
            FlagIGMA.GOVERNANCE_BLOCK: self.governance_block,
            FlagIGMA.MARKETING_BLOCKED: self.marketing_blocked,
            FlagIGMA.INTERSECTORAL_DEPENDENCY: self.intersectoral_dependency,
        }
        return tuple(f for f, ativo in estado.items() if ativo)


@dataclass(frozen=True)
class Prescricao:
    """Capacitacao recomendada para um gargalo. Bloqueada = adiada, nunca omitida."""

    avaliacao_id: str
    gargalo_id: str | None
    pilar: Pilar
    tema: str
    status: Severidade
    interpretacao: Interpretacao | None
    justificativa: str
    agente_alvo: AgenteAlvo
    agentes_apoio: tuple[AgenteAlvo, ...]
    prioridade: int
    numero_ciclo: int
    score: float
    acao: Acao
    bloqueada: bool = False

    def __post_init__(self) -> None:
        if self.prioridade < 1:
            raise ValueError("Prioridade comeca em 1 (mais urgente)")

    @property
    def id(self) -> str:
        return f"{self.avaliacao_id}:{self.pilar.value}:{self.tema}:P"

    @property
    def chave_evolucao(self) -> str:
        return f"{self.pilar.value}:{self.tema}"


@dataclass(frozen=True)
class PlanoDeAcao:
    avaliacao_id: str
    titulo: str
    descricao: str
    pilar: Pilar
    prioridade: int
    gargalo_id: str
    prescricao_id: str | None
    prazo: date


@dataclass(frozen=True)
class Ocorrencia:
    """Erro leve ou diagnostico do calculo. Nunca exibido cru ao usuario final."""

    tipo: TipoOcorrencia
    referencia: str  # codigo do indicador, pilar ou flag
    detalhe: str
