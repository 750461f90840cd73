# tests/integration/conftest.py
from __future__ import annotations

from collections.abc import Generator
from pathlib import Path

import duckdb
import pytest
from fastapi.testclient import TestClient

SCHEMA_PATH = Path(__file__).parent.parent.parent / "pipeline" / "output" / "schema.sql"


@pytest.fixture(scope="session")
def test_db() -> Generator[duckdb.DuckDBPyConnection, None, None]:
    """Cria DuckDB in-memory com schema e dados deterministicos.

    D1: tres ciclos. AV1 e AV2 ja calculados pelo pipeline; AV3 so tem
        valores brutos, o diagnostico e calculado na requisicao.
    D2: uma avaliacao em rascunho.
    D3: avaliacao pronta mas sem nenhum valor coletado.
    D4: historico de alertas de regressao (um ativo, um dispensado).
    D5: rascunho entre dois ciclos; AV5_3 encadeia com AV5_1.
    """
    conn = duckdb.connect(":memory:")
    conn.execute(SCHEMA_PATH.read_text(encoding="utf-8"))

    # --- Destinos ---
    conn.execute("""
        INSERT INTO dim_destino (destino_id, nome, uf) VALUES
        ('D1', 'Bonito', 'MS'),
        ('D2', 'Lencois', 'BA'),
        ('D3', 'Paraty', 'RJ'),
        ('D4', 'Jericoacoara', 'CE'),
        ('D5', 'Alter do Chao', 'PA')
    """)

    # --- Catalogo ---
    conn.execute("""
        INSERT INTO dim_indicador
            (codigo, nome, pilar, tema, direcao, normalizacao, min_ref, max_ref,
             peso, interpretacao, setor_externo, porte_minimo)
        VALUES
        ('RA_1', 'Cobertura vegetal nativa', 'RA', 'ambiental', 'HIGH_IS_BETTER',
         'MIN_MAX', 0, 100, 1.0, NULL, NULL, 'SMALL'),
        ('AO_1', 'Conselho municipal de turismo ativo', 'AO', 'governanca', 'HIGH_IS_BETTER',
         'MIN_MAX', 0, 100, 1.0, 'GESTAO', NULL, 'SMALL'),
        ('OE_1', 'Leitos de hospedagem', 'OE', 'infraestrutura', 'HIGH_IS_BETTER',
         'MIN_MAX', 0, 1000, 1.0, NULL, NULL, 'SMALL')
    """)

    # --- Avaliacoes ---
    conn.execute("""
        INSERT INTO dim_avaliacao
            (avaliacao_id, destino_id, numero_ciclo, porte, status, data_referencia)
        VALUES
        ('AV1', 'D1', 1, 'MEDIUM', 'CALCULATED', '2025-01-31'),
        ('AV2', 'D1', 2, 'MEDIUM', 'CALCULATED', '2025-07-31'),
        ('AV3', 'D1', 3, 'MEDIUM', 'DATA_READY', '2026-01-31'),
        ('AV_RASCUNHO', 'D2', 1, 'SMALL', 'DRAFT', NULL),
        ('AV_VAZIA', 'D3', 1, 'SMALL', 'DATA_READY', NULL),
        ('AV4_1', 'D4', 1, 'COMPLETE', 'CALCULATED', '2025-01-31'),
        ('AV4_2', 'D4', 2, 'COMPLETE', 'CALCULATED', '2025-07-31'),
        ('AV5_1', 'D5', 1, 'MEDIUM', 'CALCULATED', '2025-01-31'),
        ('AV5_2', 'D5', 2, 'MEDIUM', 'DRAFT', NULL),
        ('AV5_3', 'D5', 3, 'MEDIUM', 'DATA_READY', '2026-01-31')
    """)

    # --- Valores brutos do ciclo corrente ---
    conn.execute("""
        INSERT INTO fato_valor_indicador
            (avaliacao_id, codigo_indicador, valor_bruto, valor_texto, fonte, data_referencia)
        VALUES
        ('AV3', 'RA_1', 20, NULL, 'IBGE', '2025-12-31'),
        ('AV3', 'AO_1', 80, NULL, 'Prefeitura', '2025-12-31'),
        ('AV3', 'OE_1', 500, NULL, 'CADASTUR', '2025-12-31'),
        ('AV5_3', 'RA_1', 20, NULL, 'IBGE', '2025-12-31'),
        ('AV5_3', 'AO_1', 80, NULL, 'Prefeitura', '2025-12-31'),
        ('AV5_3', 'OE_1', 500, NULL, 'CADASTUR', '2025-12-31')
    """)

    # --- Resultados persistidos dos ciclos anteriores ---
    conn.execute("""
        INSERT INTO fato_score_pilar (avaliacao_id, pilar, score, severidade) VALUES
        ('AV1', 'RA', 0.60, 'MODERADO'),
        ('AV1', 'AO', 0.80, 'BOM'),
        ('AV1', 'OE', 0.50, 'MODERADO'),
        ('AV2', 'RA', 0.55, 'MODERADO'),
        ('AV2', 'AO', 0.80, 'BOM'),
        ('AV2', 'OE', 0.50, 'MODERADO'),
        ('AV5_1', 'RA', 0.60, 'MODERADO'),
        ('AV5_1', 'AO', 0.80, 'BOM'),
        ('AV5_1', 'OE', 0.50, 'MODERADO')
    """)

    conn.execute("""
        INSERT INTO fato_evolucao
            (avaliacao_id, avaliacao_anterior_id, tipo, chave, score_atual, score_anterior, estado)
        VALUES
        ('AV1', NULL, 'PILAR', 'RA', 0.60, NULL, NULL),
        ('AV1', NULL, 'PILAR', 'AO', 0.80, NULL, NULL),
        ('AV1', NULL, 'PILAR', 'OE', 0.50, NULL, NULL),
        ('AV2', 'AV1', 'PILAR', 'RA', 0.55, 0.60, 'REGRESSION'),
        ('AV2', 'AV1', 'PILAR', 'AO', 0.80, 0.80, 'STAGNATION'),
        ('AV2', 'AV1', 'PILAR', 'OE', 0.50, 0.50, 'STAGNATION')
    """)

    conn.execute("""
        INSERT INTO fato_prescricao
            (prescricao_id, avaliacao_id, gargalo_id, pilar, tema, status, interpretacao,
             justificativa, agente_alvo, agentes_apoio, prioridade, numero_ciclo, score,
             acao, bloqueada)
        VALUES
        ('AV2:RA:ambiental:P', 'AV2', 'AV2:RA:ambiental', 'RA', 'ambiental', 'MODERADO',
         'GESTAO', 'Prescrita no ciclo 2.', 'GESTORES', 'TECNICOS', 1, 2, 0.55,
         'EDU_RA', FALSE)
    """)

    conn.execute("""
        INSERT INTO fato_alerta_regressao
            (avaliacao_id, destino_id, pilar, ciclos_consecutivos, lido, dispensado)
        VALUES
        ('AV1', 'D1', 'RA', 0, FALSE, FALSE),
        ('AV1', 'D1', 'AO', 0, FALSE, FALSE),
        ('AV1', 'D1', 'OE', 0, FALSE, FALSE),
        ('AV2', 'D1', 'RA', 1, FALSE, FALSE),
        ('AV2', 'D1', 'AO', 0, FALSE, FALSE),
        ('AV2', 'D1', 'OE', 0, FALSE, FALSE),
        ('AV4_1', 'D4', 'RA', 2, FALSE, FALSE),
        ('AV4_1', 'D4', 'AO', 1, FALSE, FALSE),
        ('AV4_1', 'D4', 'OE', 2, TRUE, FALSE),
        ('AV4_2', 'D4', 'RA', 3, TRUE, FALSE),
        ('AV4_2', 'D4', 'AO', 2, FALSE, TRUE),
        ('AV4_2', 'D4', 'OE', 0, FALSE, FALSE),
        ('AV5_1', 'D5', 'RA', 1, FALSE, FALSE),
        ('AV5_1', 'D5', 'AO', 0, FALSE, FALSE),
        ('AV5_1', 'D5', 'OE', 0, FALSE, FALSE)
    """)

    yield conn
    conn.close()


@pytest.fixture(scope="session")
def client(test_db: duckdb.DuckDBPyConnection) -> Generator[TestClient, None, None]:
    """TestClient do FastAPI com DuckDB in-memory injetado."""
    from api.infrastructure import duckdb_connection
    duckdb_connection.set_connection(test_db)

    from api.infrastructure.config import get_settings
    get_settings.cache_clear()

    from api.interfaces.api.main import app
    with TestClient(app) as c:
        yield c
