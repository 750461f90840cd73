# pipeline/config.py
#
# Pipeline configuration loaded from environment variables.
#
# Design decisions:
#   - Uses a frozen dataclass (not pydantic Settings) because the pipeline is a
#     standalone offline process and pydantic is reserved for the API layer.
#   - Paths default to pipeline/data relative to this file's directory so the
#     pipeline works out of the box after a fresh checkout.
#   - Invalid numeric settings fail at load time, before any file is read.
#     A batch that runs for minutes and then dies on a bad worker count is
#     worse than refusing to start.
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from api.domain.diagnostico.politicas import EPSILON_ESTAGNACAO

load_dotenv()

_PIPELINE_DIR = Path(__file__).parent


@dataclass(frozen=True)
class PipelineConfig:
    """Immutable pipeline configuration.

    Invariants:
      - max_workers is a positive integer.
      - epsilon_estagnacao is >= 0.
    """

    data_dir: Path
    duckdb_output_path: Path
    max_workers: int = 4
    epsilon_estagnacao: float = EPSILON_ESTAGNACAO

    @property
    def staging_dir(self) -> Path:
        """Directory for staging Parquet inputs and computed result frames."""
        return self.data_dir / "staging"

    @property
    def output_dir(self) -> Path:
        """Directory for the final DuckDB output."""
        return self.data_dir / "output"


def load_config() -> PipelineConfig:
    """Build PipelineConfig from environment variables.

    Raises:
        ValueError: if PIPELINE_MAX_WORKERS is not a positive integer or
            IGMA_EPSILON_ESTAGNACAO is negative or not a number.
    """
    data_dir = Path(
        os.environ.get("PIPELINE_DATA_DIR", str(_PIPELINE_DIR / "data"))
    )
    duckdb_output_path = Path(
        os.environ.get(
            "DUCKDB_OUTPUT_PATH",
            str(data_dir / "output" / "igma.duckdb"),
        )
    )

    max_workers = int(os.environ.get("PIPELINE_MAX_WORKERS", "4"))
    if max_workers < 1:
        raise ValueError(f"PIPELINE_MAX_WORKERS must be positive, got {max_workers}")

    epsilon = float(os.environ.get("IGMA_EPSILON_ESTAGNACAO", str(EPSILON_ESTAGNACAO)))
    if epsilon < 0:
        raise ValueError(f"IGMA_EPSILON_ESTAGNACAO must be >= 0, got {epsilon}")

    return PipelineConfig(
        data_dir=data_dir,
        duckdb_output_path=duckdb_output_path,
        max_workers=max_workers,
        epsilon_estagnacao=epsilon,
    )
