# api/domain/indicador/entities.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from .enums import Direcao, Interpretacao, Normalizacao, Pilar, Porte, SetorExterno, Transformacao

# Porte da avaliacao -> portes minimos de indicador aceitos.
PORTES_ACEITOS: dict[Porte, frozenset[Porte]] = {
    Porte.SMALL: frozenset({Porte.SMALL}),
    Porte.MEDIUM: frozenset({Porte.SMALL, Porte.MEDIUM}),
    Porte.COMPLETE: frozenset({Porte.SMALL, Porte.MEDIUM, Porte.COMPLETE}),
}


@dataclass(frozen=True)
class Indicador:
    """Definicao de catalogo. Somente leitura durante um calculo.

    Inconsistencias de referencia (min/max, peso negativo) NAO sao validadas
    aqui: elas afetam so este indicador e sao tratadas pela normalizacao.
    """

    codigo: str
    nome: str
    pilar: Pilar
    tema: str
    direcao: Direcao
    normalizacao: Normalizacao
    min_ref: float | None = None
    max_ref: float | None = None
    peso: float = 1.0
    interpretacao: Interpretacao | None = None  # None = inferida por pilar/tema
    setor_externo: SetorExterno | None = None
    porte_minimo: Porte = Porte.COMPLETE

    def __post_init__(self) -> None:
        codigo = self.codigo.strip()
        if not codigo:
            raise ValueError("Indicador exige codigo nao-vazio")
        object.__setattr__(self, "codigo", codigo)

    @property
    def intersetorial(self) -> bool:
        return self.setor_externo is not None

    def aceito_no_porte(self, porte: Porte) -> bool:
        return self.porte_minimo in PORTES_ACEITOS[porte]


@dataclass(frozen=True)
class ValorIndicador:
    """Medicao bruta. Produzida pela coleta externa, nunca alterada pelo motor."""

    codigo_indicador: str
    avaliacao_id: str
    valor_bruto: float | None = None
    valor_texto: str | None = None  # nao pontuavel
    fonte: str = ""
    data_referencia: date | None = None


@dataclass(frozen=True)
class ScoreIndicador:
    """Saida da normalizacao. Score sempre em [0, 1]."""

    codigo_indicador: str
    avaliacao_id: str
    pilar: Pilar
    score: float
    peso_usado: float
    min_ref_usado: float | None = None
    max_ref_usado: float | None = None

    def __post_init__(self) -> None:
        if not 0.0 <= self.score <= 1.0:
            raise ValueError(f"Score fora de [0, 1]: {self.score}")
        if self.peso_usado < 0:
            raise ValueError("Peso usado nao pode ser negativo")


@dataclass(frozen=True)
class RegraComposta:
    """Um componente de um indicador composto (ex.: I_SEMT)."""

    codigo_composto: str
    codigo_componente: str
    peso: float
    transformacao: Transformacao = Transformacao.NENHUMA

    def __post_init__(self) -> None:
        if self.peso < 0:
            raise ValueError("Peso de componente nao pode ser negativo")
