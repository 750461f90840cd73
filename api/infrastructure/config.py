from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

from api.domain.diagnostico.politicas import EPSILON_ESTAGNACAO

load_dotenv()


@dataclass(frozen=True)
class Settings:
    duckdb_path: str
    epsilon_estagnacao: float
    debug: bool
    cors_origins: tuple[str, ...] = ("http://localhost:5173",)

    def __post_init__(self) -> None:
        if self.epsilon_estagnacao < 0:
            raise ValueError(f"IGMA_EPSILON_ESTAGNACAO negativo: {self.epsilon_estagnacao}")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    origens = os.environ.get("API_CORS_ORIGINS", "http://localhost:5173")
    return Settings(
        duckdb_path=os.environ.get("DUCKDB_PATH", ":memory:"),
        epsilon_estagnacao=float(os.environ.get("IGMA_EPSILON_ESTAGNACAO", str(EPSILON_ESTAGNACAO))),
        debug=os.environ.get("API_DEBUG", "false").lower() == "true",
        cors_origins=tuple(o.strip() for o in origens.split(",") if o.strip()),
    )
