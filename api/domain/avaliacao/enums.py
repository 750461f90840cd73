from enum import StrEnum


class StatusAvaliacao(StrEnum):
    DRAFT = "DRAFT"
    DATA_READY = "DATA_READY"
    CALCULATED = "CALCULATED"
