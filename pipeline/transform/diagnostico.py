# pipeline/transform/diagnostico.py
#
# Batch computation of every assessment with the IGMA engine.
#
# Design decisions:
#   - Cycles of one territory are computed sequentially in numero_ciclo order:
#     cycle N needs cycle N-1's pillar scores, prescriptions and regression
#     counters. The result of each cycle is threaded into the next via
#     ResultadoDiagnostico.ciclo.
#   - Territories are independent (they never share mutable state), so they
#     run in a ThreadPoolExecutor. Futures are collected in territory order,
#     which keeps the output deterministic regardless of scheduling.
#   - DRAFT assessments are skipped and do NOT break the chain: the next
#     computable cycle compares against the last computed one.
#   - An assessment without any raw value is still computed. Every pillar is
#     then undefined and the ocorrencias say why, which is more useful in the
#     database than a silent gap in the cycle sequence.
#
# Invariants:
#   - calcular_lote performs no I/O beyond logging.
#   - Output order: territories sorted by destino_id, cycles ascending.
from __future__ import annotations

from collections import defaultdict
from collections.abc import Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor
from datetime import date

from api.application.services.motor_service import ResultadoDiagnostico, calcular_diagnostico
from api.domain.avaliacao.entities import Avaliacao
from api.domain.diagnostico.enums import TipoOcorrencia
from api.domain.diagnostico.politicas import EPSILON_ESTAGNACAO
from api.domain.evolucao.entities import CicloAnterior
from api.domain.indicador.entities import Indicador, RegraComposta, ValorIndicador
from pipeline.log import log, warn


def calcular_destino(
    avaliacoes: Sequence[Avaliacao],
    catalogo: Sequence[Indicador],
    valores: Mapping[str, Sequence[ValorIndicador]],
    regras: Sequence[RegraComposta],
    referencia: date,
    epsilon: float = EPSILON_ESTAGNACAO,
) -> list[ResultadoDiagnostico]:
    """Compute all cycles of one territory, oldest first."""
    resultados: list[ResultadoDiagnostico] = []
    anterior: CicloAnterior | None = None

    for avaliacao in sorted(avaliacoes, key=lambda a: a.numero_ciclo):
        if not avaliacao.calculavel:
            log(f"  {avaliacao.id}: DRAFT, skipped")
            continue

        resultado = calcular_diagnostico(
            avaliacao,
            catalogo,
            valores.get(avaliacao.id, ()),
            anterior,
            avaliacao.data_referencia or referencia,
            regras_compostas=regras,
            epsilon=epsilon,
        )
        _report(resultado)
        resultados.append(resultado)
        anterior = resultado.ciclo

    return resultados


def calcular_lote(
    avaliacoes: Sequence[Avaliacao],
    catalogo: Sequence[Indicador],
    valores: Mapping[str, Sequence[ValorIndicador]],
    regras: Sequence[RegraComposta],
    referencia: date,
    *,
    epsilon: float = EPSILON_ESTAGNACAO,
    max_workers: int = 4,
) -> list[ResultadoDiagnostico]:
    """Compute every assessment, territories in parallel."""
    por_destino: dict[str, list[Avaliacao]] = defaultdict(list)
    for avaliacao in avaliacoes:
        por_destino[avaliacao.destino_id].append(avaliacao)

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        futures = [
            pool.submit(
                calcular_destino,
                por_destino[destino_id],
                catalogo,
                valores,
                regras,
                referencia,
                epsilon,
            )
            for destino_id in sorted(por_destino)
        ]
        resultados = [r for future in futures for r in future.result()]

    log(f"  Computed {len(resultados):,} assessments across {len(por_destino):,} territories")
    return resultados


def _report(resultado: ResultadoDiagnostico) -> None:
    """Configuration problems and undefined pillars deserve operator attention."""
    avaliacao_id = resultado.avaliacao.id
    for o in resultado.ocorrencias_do_tipo(TipoOcorrencia.CONFIGURACAO_INVALIDA):
        warn(f"{avaliacao_id}: indicator {o.referencia} misconfigured ({o.detalhe})")
    indefinidos = resultado.ocorrencias_do_tipo(TipoOcorrencia.AGREGACAO_INDEFINIDA)
    if indefinidos:
        pilares = ", ".join(o.referencia for o in indefinidos)
        warn(f"{avaliacao_id}: undefined pillar score(s): {pilares}")
    for alerta in resultado.alertas_regressao:
        if alerta.ativo:
            log(f"  {avaliacao_id}: regression alert {alerta.pilar.value} x{alerta.ciclos_consecutivos}")
