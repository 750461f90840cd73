from enum import StrEnum


class EstadoEvolucao(StrEnum):
    EVOLUTION = "EVOLUTION"
    STAGNATION = "STAGNATION"
    REGRESSION = "REGRESSION"
