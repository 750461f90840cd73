from enum import StrEnum


class Pilar(StrEnum):
    RA = "RA"  # Relacoes Ambientais
    OE = "OE"  # Organizacao Estrutural
    AO = "AO"  # Acoes Operacionais


class Direcao(StrEnum):
    HIGH_IS_BETTER = "HIGH_IS_BETTER"
    LOW_IS_BETTER = "LOW_IS_BETTER"


class Normalizacao(StrEnum):
    MIN_MAX = "MIN_MAX"
    BANDS = "BANDS"
    BINARY = "BINARY"


class Interpretacao(StrEnum):
    ESTRUTURAL = "ESTRUTURAL"  # restricao socioeconomica/territorial de longo prazo
    GESTAO = "GESTAO"          # falha de coordenacao/planejamento institucional
    ENTREGA = "ENTREGA"        # falha de execucao do servico


class SetorExterno(StrEnum):
    """Setores fora da politica de turismo dos quais um indicador depende."""

    SAUDE = "SAUDE"
    EDUCACAO = "EDUCACAO"
    SANEAMENTO = "SANEAMENTO"
    SEGURANCA = "SEGURANCA"


class Porte(StrEnum):
    SMALL = "SMALL"
    MEDIUM = "MEDIUM"
    COMPLETE = "COMPLETE"


class Transformacao(StrEnum):
    """Transformacao aplicada ao score de um componente de indicador composto."""

    NENHUMA = "NENHUMA"
    INVERT = "INVERT"
    LOG = "LOG"
    SQRT = "SQRT"
