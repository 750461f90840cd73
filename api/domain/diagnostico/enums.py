from enum import StrEnum


class Severidade(StrEnum):
    CRITICO = "CRITICO"
    MODERADO = "MODERADO"  # exibido como "Atencao"
    BOM = "BOM"            # exibido como "Adequado"


class AgenteAlvo(StrEnum):
    GESTORES = "GESTORES"
    TECNICOS = "TECNICOS"
    TRADE = "TRADE"


class Acao(StrEnum):
    """Universo fixo de acoes controladas pelas regras sistemicas."""

    EDU_RA = "EDU_RA"
    EDU_AO = "EDU_AO"
    EDU_OE = "EDU_OE"
    MARKETING = "MARKETING"


class FlagIGMA(StrEnum):
    RA_LIMITATION = "RA_LIMITATION"
    EXTERNALITY_WARNING = "EXTERNALITY_WARNING"
    GOVERNANCE_BLOCK = "GOVERNANCE_BLOCK"
    MARKETING_BLOCKED = "MARKETING_BLOCKED"
    INTERSECTORAL_DEPENDENCY = "INTERSECTORAL_DEPENDENCY"
    CONTINUOUS_PLANNING = "CONTINUOUS_PLANNING"  # regra 2, nao gera flag booleana


class TipoMensagem(StrEnum):
    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"


class TipoOcorrencia(StrEnum):
    CONFIGURACAO_INVALIDA = "CONFIGURACAO_INVALIDA"
    DADO_AUSENTE = "DADO_AUSENTE"
    AGREGACAO_INDEFINIDA = "AGREGACAO_INDEFINIDA"
    REGRA_INDETERMINADA = "REGRA_INDETERMINADA"
    FORA_DO_PORTE = "FORA_DO_PORTE"
