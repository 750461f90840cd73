# api/domain/diagnostico/politicas.py
"""Tabelas declarativas de politica do IGMA.

ADR: mapeamentos (agente, rotulos, temas, limiares) sao constantes de modulo,
nunca condicionais espalhadas. Mudar politica nao exige tocar na avaliacao.
"""
from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from api.domain.indicador.enums import Interpretacao, Pilar

from .enums import AgenteAlvo, FlagIGMA, Severidade

# Limiares de severidade: score >= 0.67 -> BOM; 0.34 <= score < 0.67 -> MODERADO.
LIMIAR_BOM = 0.67
LIMIAR_MODERADO = 0.34

# Scores fixos das tres faixas da normalizacao BANDS (terco inferior, medio, superior).
SCORES_FAIXAS: tuple[float, float, float] = (0.17, 0.50, 0.83)

# Banda morta da evolucao: |delta| <= epsilon e estagnacao.
EPSILON_ESTAGNACAO = 0.02

# Ciclos consecutivos de regressao para abrir alerta e para escalar a critico.
CICLOS_ALERTA_REGRESSAO = 2
CICLOS_ALERTA_CRITICO = 3

# Regra 2: meses ate a proxima revisao.
MESES_REVISAO: Mapping[Severidade, int] = MappingProxyType({
    Severidade.CRITICO: 6,
    Severidade.MODERADO: 12,
    Severidade.BOM: 18,
})

# Prazo de planos de acao por severidade do gargalo.
MESES_PRAZO_PLANO: Mapping[Severidade, int] = MappingProxyType({
    Severidade.CRITICO: 3,
    Severidade.MODERADO: 6,
})

# Menor = mais urgente.
ORDEM_SEVERIDADE: Mapping[Severidade, int] = MappingProxyType({
    Severidade.CRITICO: 0,
    Severidade.MODERADO: 1,
    Severidade.BOM: 2,
})

# Fundacao ambiental primeiro: RA > AO > OE.
ORDEM_PILAR: Mapping[Pilar, int] = MappingProxyType({
    Pilar.RA: 0,
    Pilar.AO: 1,
    Pilar.OE: 2,
})

# Desempate da interpretacao: assume a causa mais profunda quando ambiguo.
PRECEDENCIA_INTERPRETACAO: tuple[Interpretacao, ...] = (
    Interpretacao.ESTRUTURAL,
    Interpretacao.GESTAO,
    Interpretacao.ENTREGA,
)

# Interpretacao -> (agente principal, agentes de apoio...).
POLITICA_AGENTES: Mapping[Interpretacao, tuple[AgenteAlvo, ...]] = MappingProxyType({
    Interpretacao.ESTRUTURAL: (AgenteAlvo.GESTORES,),
    Interpretacao.GESTAO: (AgenteAlvo.GESTORES, AgenteAlvo.TECNICOS),
    Interpretacao.ENTREGA: (AgenteAlvo.TRADE, AgenteAlvo.TECNICOS),
})

NOMES_PILAR: Mapping[Pilar, str] = MappingProxyType({
    Pilar.RA: "Relacoes Ambientais",
    Pilar.OE: "Organizacao Estrutural",
    Pilar.AO: "Acoes Operacionais",
})

ROTULOS_SEVERIDADE: Mapping[Severidade, str] = MappingProxyType({
    Severidade.CRITICO: "Critico",
    Severidade.MODERADO: "Atencao",
    Severidade.BOM: "Adequado",
})

ROTULOS_INTERPRETACAO: Mapping[Interpretacao, str] = MappingProxyType({
    Interpretacao.ESTRUTURAL: "Estrutural",
    Interpretacao.GESTAO: "Gestao",
    Interpretacao.ENTREGA: "Entrega",
})

DESCRICOES_AGENTE: Mapping[AgenteAlvo, str] = MappingProxyType({
    AgenteAlvo.GESTORES: "Gestores publicos (decisoes estrategicas)",
    AgenteAlvo.TECNICOS: "Tecnicos (melhorias de processo e planejamento)",
    AgenteAlvo.TRADE: "Trade turistico (execucao e entrega de servicos)",
})

DESCRICOES_TEMA: Mapping[str, str] = MappingProxyType({
    "ambiental": "Sustentabilidade ambiental",
    "governanca": "Governanca e gestao publica",
    "infraestrutura": "Infraestrutura turistica",
    "marketing": "Marketing e promocao",
    "desempenho": "Desempenho de mercado",
    "oferta": "Oferta turistica",
    "social": "Aspectos socioculturais",
    "economico": "Desenvolvimento economico",
})

# Temas cuja acao corretiva e promocional, nao capacitacao de pilar.
TEMAS_MARKETING: tuple[str, ...] = ("marketing", "promocao")


def classificar_severidade(score: float) -> Severidade:
    """Funcao pura do score. Limiar inferior inclusivo em cada faixa."""
    if score >= LIMIAR_BOM:
        return Severidade.BOM
    if score >= LIMIAR_MODERADO:
        return Severidade.MODERADO
    return Severidade.CRITICO


def inferir_interpretacao(pilar: Pilar, tema: str, score: float) -> Interpretacao:
    """Interpretacao territorial para indicadores sem marcacao no catalogo."""
    tema_lower = tema.lower()
    critico = score < LIMIAR_MODERADO

    if pilar == Pilar.RA:
        if any(t in tema_lower for t in ("social", "economico", "gini")):
            return Interpretacao.ESTRUTURAL
        if any(t in tema_lower for t in ("ambiental", "cultural")):
            return Interpretacao.ESTRUTURAL if critico else Interpretacao.GESTAO
        return Interpretacao.ESTRUTURAL

    if pilar == Pilar.OE:
        if any(t in tema_lower for t in ("infraestrutura", "superestrutura")):
            return Interpretacao.ESTRUTURAL if critico else Interpretacao.GESTAO
        return Interpretacao.GESTAO

    if any(t in tema_lower for t in ("oferta", "demanda")):
        return Interpretacao.GESTAO if critico else Interpretacao.ENTREGA
    return Interpretacao.ENTREGA


def descrever_tema(tema: str) -> str:
    return DESCRICOES_TEMA.get(tema.lower(), tema)

# Textos automaticos das regras sistemicas (titulo, mensagem).
TEXTOS_REGRAS: Mapping[FlagIGMA, tuple[str, str]] = MappingProxyType({
    FlagIGMA.RA_LIMITATION: (
        "Limitacao Estrutural do Territorio",
        "O territorio apresenta limitacoes estruturais que comprometem a sustentabilidade "
        "do turismo, independentemente de acoes de mercado ou gestao isoladas. "
        "Priorize capacitacoes em Relacoes Ambientais (RA).",
    ),
    FlagIGMA.EXTERNALITY_WARNING: (
        "Alerta de Externalidades Negativas",
        "O crescimento da oferta turistica esta ocorrendo sem a correspondente "
        "sustentabilidade territorial, gerando riscos de externalidades negativas. "
        "Recomenda-se equilibrar o desenvolvimento.",
    ),
    FlagIGMA.GOVERNANCE_BLOCK: (
        "Fragilidade de Governanca",
        "Fragilidades de governanca comprometem a efetividade de acoes de mercado e "
        "investimento no turismo. Priorize capacitacoes em Acoes Operacionais (AO) antes de OE.",
    ),
    FlagIGMA.MARKETING_BLOCKED: (
        "Marketing Temporariamente Bloqueado",
        "A promocao turistica deve ser precedida pela consolidacao territorial e "
        "institucional. Resolva primeiro os gargalos de RA e/ou AO.",
    ),
    FlagIGMA.INTERSECTORAL_DEPENDENCY: (
        "Dependencia Intersetorial",
        "{qtd} indicador(es) dependem de articulacao intersetorial alem da politica "
        "de turismo ({setores}).",
    ),
})
