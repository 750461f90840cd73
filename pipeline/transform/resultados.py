# pipeline/transform/resultados.py
#
# Flatten engine results into the fact-table frames of schema.sql.
#
# Design decisions:
#   - Every frame is built with an explicit schema, so an empty batch still
#     produces a typed Parquet file and build_duckdb never guesses types from
#     an all-null column.
#   - One function per fact table keeps each column mapping reviewable next
#     to its CREATE TABLE.
#   - List-valued fields are stored as comma-joined strings (acoes_bloqueadas,
#     agentes_apoio, indeterminadas); gargalo evidence is a JSON array, because
#     it is a list of records rather than of codes.
#
# Invariants:
#   - Column names and order match the corresponding table in schema.sql.
#   - Pure functions over ResultadoDiagnostico: no I/O.
from __future__ import annotations

import json
from collections.abc import Sequence

import polars as pl

from api.application.services.motor_service import ResultadoDiagnostico
from api.domain.indicador.enums import Pilar

SCORE_INDICADOR_SCHEMA: dict[str, pl.DataType] = {
    "avaliacao_id": pl.Utf8(),
    "codigo_indicador": pl.Utf8(),
    "pilar": pl.Utf8(),
    "score": pl.Float64(),
    "peso_usado": pl.Float64(),
    "min_ref_usado": pl.Float64(),
    "max_ref_usado": pl.Float64(),
}

SCORE_PILAR_SCHEMA: dict[str, pl.DataType] = {
    "avaliacao_id": pl.Utf8(),
    "pilar": pl.Utf8(),
    "score": pl.Float64(),
    "severidade": pl.Utf8(),
}

GARGALO_SCHEMA: dict[str, pl.DataType] = {
    "gargalo_id": pl.Utf8(),
    "avaliacao_id": pl.Utf8(),
    "pilar": pl.Utf8(),
    "tema": pl.Utf8(),
    "severidade": pl.Utf8(),
    "interpretacao": pl.Utf8(),
    "titulo": pl.Utf8(),
    "evidencia": pl.Utf8(),
}

FLAGS_SCHEMA: dict[str, pl.DataType] = {
    "avaliacao_id": pl.Utf8(),
    "ra_limitation": pl.Boolean(),
    "externality_warning": pl.Boolean(),
    "governance_block": pl.Boolean(),
    "marketing_blocked": pl.Boolean(),
    "intersectoral_dependency": pl.Boolean(),
    "acoes_bloqueadas": pl.Utf8(),
    "proxima_revisao": pl.Date(),
    "tipo_interpretacao": pl.Utf8(),
    "pilar_critico": pl.Utf8(),
    "indeterminadas": pl.Utf8(),
}

MENSAGEM_SCHEMA: dict[str, pl.DataType] = {
    "avaliacao_id": pl.Utf8(),
    "ordem": pl.Int32(),
    "tipo": pl.Utf8(),
    "flag": pl.Utf8(),
    "titulo": pl.Utf8(),
    "mensagem": pl.Utf8(),
}

PRESCRICAO_SCHEMA: dict[str, pl.DataType] = {
    "prescricao_id": pl.Utf8(),
    "avaliacao_id": pl.Utf8(),
    "gargalo_id": pl.Utf8(),
    "pilar": pl.Utf8(),
    "tema": pl.Utf8(),
    "status": pl.Utf8(),
    "interpretacao": pl.Utf8(),
    "justificativa": pl.Utf8(),
    "agente_alvo": pl.Utf8(),
    "agentes_apoio": pl.Utf8(),
    "prioridade": pl.Int32(),
    "numero_ciclo": pl.Int32(),
    "score": pl.Float64(),
    "acao": pl.Utf8(),
    "bloqueada": pl.Boolean(),
}

PLANO_SCHEMA: dict[str, pl.DataType] = {
    "avaliacao_id": pl.Utf8(),
    "titulo": pl.Utf8(),
    "descricao": pl.Utf8(),
    "pilar": pl.Utf8(),
    "prioridade": pl.Int32(),
    "gargalo_id": pl.Utf8(),
    "prescricao_id": pl.Utf8(),
    "prazo": pl.Date(),
}

EVOLUCAO_SCHEMA: dict[str, pl.DataType] = {
    "avaliacao_id": pl.Utf8(),
    "avaliacao_anterior_id": pl.Utf8(),
    "tipo": pl.Utf8(),
    "chave": pl.Utf8(),
    "score_atual": pl.Float64(),
    "score_anterior": pl.Float64(),
    "estado": pl.Utf8(),
}

ALERTA_SCHEMA: dict[str, pl.DataType] = {
    "avaliacao_id": pl.Utf8(),
    "destino_id": pl.Utf8(),
    "pilar": pl.Utf8(),
    "ciclos_consecutivos": pl.Int32(),
    "lido": pl.Boolean(),
    "dispensado": pl.Boolean(),
}

OCORRENCIA_SCHEMA: dict[str, pl.DataType] = {
    "avaliacao_id": pl.Utf8(),
    "tipo": pl.Utf8(),
    "referencia": pl.Utf8(),
    "detalhe": pl.Utf8(),
}


def montar_frames(resultados: Sequence[ResultadoDiagnostico]) -> dict[str, pl.DataFrame]:
    """All result frames keyed by their staging file stem."""
    return {
        "score_indicador": score_indicador_df(resultados),
        "score_pilar": score_pilar_df(resultados),
        "gargalos": gargalos_df(resultados),
        "flags": flags_df(resultados),
        "mensagens": mensagens_df(resultados),
        "prescricoes": prescricoes_df(resultados),
        "planos": planos_df(resultados),
        "evolucao": evolucao_df(resultados),
        "alertas_regressao": alertas_df(resultados),
        "ocorrencias": ocorrencias_df(resultados),
    }


def score_indicador_df(resultados: Sequence[ResultadoDiagnostico]) -> pl.DataFrame:
    rows = [
        {
            "avaliacao_id": s.avaliacao_id,
            "codigo_indicador": s.codigo_indicador,
            "pilar": s.pilar.value,
            "score": s.score,
            "peso_usado": s.peso_usado,
            "min_ref_usado": s.min_ref_usado,
            "max_ref_usado": s.max_ref_usado,
        }
        for r in resultados
        for s in r.scores_indicador
    ]
    return pl.DataFrame(rows, schema=SCORE_INDICADOR_SCHEMA)


def score_pilar_df(resultados: Sequence[ResultadoDiagnostico]) -> pl.DataFrame:
    rows = [
        {
            "avaliacao_id": sp.avaliacao_id,
            "pilar": sp.pilar.value,
            "score": sp.score,
            "severidade": sp.severidade.value,
        }
        for r in resultados
        for p in Pilar
        if (sp := r.scores_pilar.get(p)) is not None
    ]
    return pl.DataFrame(rows, schema=SCORE_PILAR_SCHEMA)


def gargalos_df(resultados: Sequence[ResultadoDiagnostico]) -> pl.DataFrame:
    rows = [
        {
            "gargalo_id": g.id,
            "avaliacao_id": g.avaliacao_id,
            "pilar": g.pilar.value,
            "tema": g.tema,
            "severidade": g.severidade.value,
            "interpretacao": g.interpretacao.value if g.interpretacao else None,
            "titulo": g.titulo,
            "evidencia": json.dumps(
                [
                    {
                        "codigo": e.codigo,
                        "nome": e.nome,
                        "score": round(e.score, 4),
                        "interpretacao": e.interpretacao.value,
                        "setor_externo": e.setor_externo.value if e.setor_externo else None,
                    }
                    for e in g.evidencia
                ],
                ensure_ascii=False,
            ),
        }
        for r in resultados
        for g in r.gargalos
    ]
    return pl.DataFrame(rows, schema=GARGALO_SCHEMA)


def flags_df(resultados: Sequence[ResultadoDiagnostico]) -> pl.DataFrame:
    rows = []
    for r in resultados:
        f = r.flags
        rows.append({
            "avaliacao_id": r.avaliacao.id,
            "ra_limitation": f.ra_limitation,
            "externality_warning": f.externality_warning,
            "governance_block": f.governance_block,
            "marketing_blocked": f.marketing_blocked,
            "intersectoral_dependency": f.intersectoral_dependency,
            "acoes_bloqueadas": ",".join(a.value for a in f.acoes_bloqueadas),
            "proxima_revisao": f.proxima_revisao,
            "tipo_interpretacao": f.tipo_interpretacao.value,
            "pilar_critico": f.pilar_critico.value if f.pilar_critico else None,
            "indeterminadas": ",".join(i.value for i in f.indeterminadas),
        })
    return pl.DataFrame(rows, schema=FLAGS_SCHEMA)


def mensagens_df(resultados: Sequence[ResultadoDiagnostico]) -> pl.DataFrame:
    rows = [
        {
            "avaliacao_id": r.avaliacao.id,
            "ordem": ordem,
            "tipo": m.tipo.value,
            "flag": m.flag.value,
            "titulo": m.titulo,
            "mensagem": m.mensagem,
        }
        for r in resultados
        for ordem, m in enumerate(r.flags.mensagens, start=1)
    ]
    return pl.DataFrame(rows, schema=MENSAGEM_SCHEMA)


def prescricoes_df(resultados: Sequence[ResultadoDiagnostico]) -> pl.DataFrame:
    rows = [
        {
            "prescricao_id": p.id,
            "avaliacao_id": p.avaliacao_id,
            "gargalo_id": p.gargalo_id,
            "pilar": p.pilar.value,
            "tema": p.tema,
            "status": p.status.value,
            "interpretacao": p.interpretacao.value if p.interpretacao else None,
            "justificativa": p.justificativa,
            "agente_alvo": p.agente_alvo.value,
            "agentes_apoio": ",".join(a.value for a in p.agentes_apoio),
            "prioridade": p.prioridade,
            "numero_ciclo": p.numero_ciclo,
            "score": p.score,
            "acao": p.acao.value,
            "bloqueada": p.bloqueada,
        }
        for r in resultados
        for p in r.prescricoes
    ]
    return pl.DataFrame(rows, schema=PRESCRICAO_SCHEMA)


def planos_df(resultados: Sequence[ResultadoDiagnostico]) -> pl.DataFrame:
    rows = [
        {
            "avaliacao_id": plano.avaliacao_id,
            "titulo": plano.titulo,
            "descricao": plano.descricao,
            "pilar": plano.pilar.value,
            "prioridade": plano.prioridade,
            "gargalo_id": plano.gargalo_id,
            "prescricao_id": plano.prescricao_id,
            "prazo": plano.prazo,
        }
        for r in resultados
        for plano in r.planos
    ]
    return pl.DataFrame(rows, schema=PLANO_SCHEMA)


def evolucao_df(resultados: Sequence[ResultadoDiagnostico]) -> pl.DataFrame:
    rows = [
        {
            "avaliacao_id": reg.avaliacao_id,
            "avaliacao_anterior_id": reg.avaliacao_anterior_id,
            "tipo": tipo,
            "chave": reg.chave,
            "score_atual": reg.score_atual,
            "score_anterior": reg.score_anterior,
            "estado": reg.estado.value if reg.estado else None,
        }
        for r in resultados
        for tipo, registros in (("PILAR", r.evolucao_pilares), ("PRESCRICAO", r.evolucao_prescricoes))
        for reg in registros
    ]
    return pl.DataFrame(rows, schema=EVOLUCAO_SCHEMA)


def alertas_df(resultados: Sequence[ResultadoDiagnostico]) -> pl.DataFrame:
    rows = [
        {
            "avaliacao_id": a.avaliacao_id,
            "destino_id": a.destino_id,
            "pilar": a.pilar.value,
            "ciclos_consecutivos": a.ciclos_consecutivos,
            "lido": a.lido,
            "dispensado": a.dispensado,
        }
        for r in resultados
        for a in r.alertas_regressao
    ]
    return pl.DataFrame(rows, schema=ALERTA_SCHEMA)


def ocorrencias_df(resultados: Sequence[ResultadoDiagnostico]) -> pl.DataFrame:
    rows = [
        {
            "avaliacao_id": r.avaliacao.id,
            "tipo": o.tipo.value,
            "referencia": o.referencia,
            "detalhe": o.detalhe,
        }
        for r in resultados
        for o in r.ocorrencias
    ]
    return pl.DataFrame(rows, schema=OCORRENCIA_SCHEMA)
