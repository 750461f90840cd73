# tests/integration/test_api_diagnostico.py
from fastapi.testclient import TestClient


def _diagnostico(client: TestClient) -> dict:
    response = client.get("/api/avaliacoes/AV3/diagnostico")
    assert response.status_code == 200
    return response.json()


def test_diagnostico_retorna_200(client: TestClient) -> None:
    data = _diagnostico(client)
    assert data["avaliacao_id"] == "AV3"
    assert data["destino_id"] == "D1"
    assert data["numero_ciclo"] == 3
    assert data["porte"] == "MEDIUM"


def test_scores_de_pilar(client: TestClient) -> None:
    data = _diagnostico(client)
    pilares = {p["pilar"]: p for p in data["scores_pilar"]}
    assert pilares["RA"]["score"] == 0.2
    assert pilares["RA"]["severidade"] == "CRITICO"
    assert pilares["RA"]["nome"] == "Relacoes Ambientais"
    assert pilares["AO"]["severidade"] == "BOM"
    assert pilares["OE"]["severidade"] == "MODERADO"


def test_flags_e_acoes(client: TestClient) -> None:
    flags = _diagnostico(client)["flags"]
    assert flags["ra_limitation"] is True
    assert flags["marketing_blocked"] is True
    assert flags["governance_block"] is False
    assert flags["externality_warning"] is False
    assert flags["acoes_bloqueadas"] == ["EDU_OE", "MARKETING"]
    assert flags["acoes_permitidas"] == ["EDU_RA", "EDU_AO"]
    assert flags["proxima_revisao"] == "2026-07-31"
    assert flags["pilar_critico"] == "RA"
    assert [m["flag"] for m in flags["mensagens"]] == ["RA_LIMITATION", "MARKETING_BLOCKED"]
    assert flags["mensagens"][0]["tipo"] == "critical"


def test_prescricoes_ordenadas_e_bloqueio(client: TestClient) -> None:
    prescricoes = _diagnostico(client)["prescricoes"]
    assert [(p["pilar"], p["prioridade"]) for p in prescricoes] == [("RA", 1), ("OE", 2)]
    assert prescricoes[0]["bloqueada"] is False
    assert prescricoes[0]["agente_alvo"] == "GESTORES"
    assert prescricoes[1]["bloqueada"] is True
    assert prescricoes[1]["acao"] == "EDU_OE"


def test_planos_de_acao_com_prazo(client: TestClient) -> None:
    planos = _diagnostico(client)["planos_de_acao"]
    assert [(p["pilar"], p["prazo"]) for p in planos] == [
        ("RA", "2026-04-30"),
        ("OE", "2026-07-31"),
    ]


def test_evolucao_contra_ciclo_anterior(client: TestClient) -> None:
    evolucao = {e["chave"]: e for e in _diagnostico(client)["evolucao"]}
    assert evolucao["RA"]["estado"] == "REGRESSION"
    assert evolucao["RA"]["avaliacao_anterior_id"] == "AV2"
    assert evolucao["RA"]["delta"] == -0.35
    assert evolucao["AO"]["estado"] == "STAGNATION"
    assert evolucao["RA:ambiental"]["estado"] == "REGRESSION"
    assert evolucao["OE:infraestrutura"]["estado"] is None


def test_alerta_de_regressao_abre_no_segundo_ciclo(client: TestClient) -> None:
    alertas = {a["pilar"]: a for a in _diagnostico(client)["alertas_regressao"]}
    assert alertas["RA"]["ciclos_consecutivos"] == 2
    assert alertas["RA"]["ativo"] is True
    assert alertas["RA"]["severidade"] == "warning"
    assert alertas["AO"]["ativo"] is False


def test_diagnostico_nao_persiste_resultado(client: TestClient, test_db) -> None:
    _diagnostico(client)
    row = test_db.execute(
        "SELECT COUNT(*) FROM fato_score_pilar WHERE avaliacao_id = 'AV3'"
    ).fetchone()
    assert row == (0,)


def test_avaliacao_inexistente_retorna_404(client: TestClient) -> None:
    response = client.get("/api/avaliacoes/NAO_EXISTE/diagnostico")
    assert response.status_code == 404
    assert "detail" in response.json()


def test_avaliacao_em_rascunho_retorna_422(client: TestClient) -> None:
    response = client.get("/api/avaliacoes/AV_RASCUNHO/diagnostico")
    assert response.status_code == 422
    assert "rascunho" in response.json()["detail"]


def test_avaliacao_sem_valores_retorna_422(client: TestClient) -> None:
    response = client.get("/api/avaliacoes/AV_VAZIA/diagnostico")
    assert response.status_code == 422


def test_headers_seguranca_presentes(client: TestClient) -> None:
    response = client.get("/api/avaliacoes/AV3/diagnostico")
    assert response.headers.get("X-Content-Type-Options") == "nosniff"
    assert response.headers.get("X-Frame-Options") == "DENY"
    assert response.headers.get("Referrer-Policy") == "strict-origin-when-cross-origin"


def test_ciclo_anterior_pula_rascunho(test_db) -> None:
    from api.domain.avaliacao.entities import Avaliacao
    from api.infrastructure.repositories.duckdb_ciclo_repo import DuckDBCicloRepo

    anterior = DuckDBCicloRepo(test_db).carregar(Avaliacao("AV5_3", "D5", 3))
    assert anterior is not None
    assert anterior.avaliacao_id == "AV5_1"
    assert len(anterior.scores_pilar) == 3
    contadores = {a.pilar.value: a.ciclos_consecutivos for a in anterior.alertas_regressao}
    assert contadores["RA"] == 1


def test_diagnostico_apos_rascunho_mantem_contador(client: TestClient) -> None:
    response = client.get("/api/avaliacoes/AV5_3/diagnostico")
    assert response.status_code == 200
    data = response.json()

    evolucao = {e["chave"]: e for e in data["evolucao"]}
    assert evolucao["RA"]["estado"] == "REGRESSION"
    assert evolucao["RA"]["avaliacao_anterior_id"] == "AV5_1"
    assert evolucao["RA"]["delta"] == -0.4

    alertas = {a["pilar"]: a for a in data["alertas_regressao"]}
    assert alertas["RA"]["ciclos_consecutivos"] == 2
    assert alertas["RA"]["ativo"] is True
