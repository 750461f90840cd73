"""Calculo completo de uma avaliacao IGMA. Funcao pura, zero IO.

Encadeia normalizacao -> compostos -> agregacao -> {gargalos, regras} ->
prescricoes/planos -> evolucao. Mesma entrada = mesma saida.

ADR: este modulo nao importa pydantic nem infraestrutura. O pipeline batch
o usa diretamente, a API passa pelo DiagnosticoService.

ADR: falhas leves viram Ocorrencia e o calculo segue. Um indicador mal
configurado ou sem dado nunca derruba o diagnostico inteiro.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import date

from api.domain.avaliacao.entities import Avaliacao
from api.domain.diagnostico.entities import (
    FlagsIGMA,
    Gargalo,
    Ocorrencia,
    PlanoDeAcao,
    Prescricao,
    ScorePilar,
)
from api.domain.diagnostico.enums import AgenteAlvo, TipoOcorrencia
from api.domain.diagnostico.errors import ConfiguracaoIndicadorError
from api.domain.diagnostico.politicas import EPSILON_ESTAGNACAO, POLITICA_AGENTES
from api.domain.evolucao.entities import AlertaRegressao, CicloAnterior, RegistroEvolucao
from api.domain.indicador.entities import Indicador, RegraComposta, ScoreIndicador, ValorIndicador
from api.domain.indicador.enums import Interpretacao, Pilar

from .agregacao_service import agregar_pilares
from .composto_service import calcular_compostos
from .evolucao_service import rastrear_ciclo
from .gargalo_service import detectar_gargalos
from .normalizacao_service import normalizar, validar_configuracao
from .prescricao_service import gerar_planos_de_acao, gerar_prescricoes
from .regras_service import avaliar_regras


@dataclass(frozen=True)
class ResultadoDiagnostico:
    avaliacao: Avaliacao
    scores_indicador: tuple[ScoreIndicador, ...]
    scores_pilar: Mapping[Pilar, ScorePilar]
    gargalos: tuple[Gargalo, ...]
    flags: FlagsIGMA
    prescricoes: tuple[Prescricao, ...]
    planos: tuple[PlanoDeAcao, ...]
    evolucao_pilares: tuple[RegistroEvolucao, ...]
    evolucao_prescricoes: tuple[RegistroEvolucao, ...]
    alertas_regressao: tuple[AlertaRegressao, ...]
    ocorrencias: tuple[Ocorrencia, ...]

    @property
    def ciclo(self) -> CicloAnterior:
        """Snapshot a ser passado como ciclo anterior na proxima rodada."""
        return CicloAnterior(
            avaliacao_id=self.avaliacao.id,
            scores_pilar=tuple(self.scores_pilar[p] for p in Pilar if p in self.scores_pilar),
            prescricoes=self.prescricoes,
            alertas_regressao=self.alertas_regressao,
        )

    def ocorrencias_do_tipo(self, tipo: TipoOcorrencia) -> tuple[Ocorrencia, ...]:
        return tuple(o for o in self.ocorrencias if o.tipo == tipo)


def calcular_diagnostico(
    avaliacao: Avaliacao,
    catalogo: Iterable[Indicador],
    valores: Iterable[ValorIndicador],
    ciclo_anterior: CicloAnterior | None,
    referencia: date,
    regras_compostas: Sequence[RegraComposta] = (),
    politica_agentes: Mapping[Interpretacao, tuple[AgenteAlvo, ...]] = POLITICA_AGENTES,
    epsilon: float = EPSILON_ESTAGNACAO,
) -> ResultadoDiagnostico:
    """Diagnostico completo de uma avaliacao.

    Args:
        ciclo_anterior: resultado do ciclo imediatamente anterior do mesmo
            destino (scores, prescricoes e contadores de regressao), ou None
            no primeiro ciclo.
        referencia: data base para proxima revisao e prazos de planos.
    """
    ocorrencias: list[Ocorrencia] = []

    # 1. Filtro de porte
    elegiveis: dict[str, Indicador] = {}
    for indicador in catalogo:
        if indicador.aceito_no_porte(avaliacao.porte):
            elegiveis[indicador.codigo] = indicador
        else:
            ocorrencias.append(Ocorrencia(
                TipoOcorrencia.FORA_DO_PORTE,
                indicador.codigo,
                f"porte minimo {indicador.porte_minimo.value} acima de {avaliacao.porte.value}",
            ))

    codigos_compostos = {
        r.codigo_composto for r in regras_compostas if r.codigo_composto in elegiveis
    }
    por_codigo = {
        v.codigo_indicador: v for v in valores if v.avaliacao_id == avaliacao.id
    }

    # 2. Normalizacao direta
    diretos: dict[str, ScoreIndicador] = {}
    validos: dict[str, Indicador] = {}
    for codigo, indicador in elegiveis.items():
        try:
            if codigo in codigos_compostos and codigo not in por_codigo:
                _validar_peso(indicador)
            else:
                validar_configuracao(indicador)
        except ConfiguracaoIndicadorError as exc:
            ocorrencias.append(Ocorrencia(TipoOcorrencia.CONFIGURACAO_INVALIDA, codigo, exc.motivo))
            continue
        validos[codigo] = indicador

        valor = por_codigo.get(codigo)
        score = normalizar(indicador, valor.valor_bruto) if valor is not None else None
        if score is None:
            continue
        diretos[codigo] = ScoreIndicador(
            codigo_indicador=codigo,
            avaliacao_id=avaliacao.id,
            pilar=indicador.pilar,
            score=score,
            peso_usado=indicador.peso,
            min_ref_usado=indicador.min_ref,
            max_ref_usado=indicador.max_ref,
        )

    # 3. Compostos substituem o valor direto do mesmo codigo
    compostos, indefinidos = calcular_compostos(regras_compostas, validos, diretos, avaliacao.id)
    scores = dict(diretos)
    scores.update({s.codigo_indicador: s for s in compostos})

    for codigo in validos:
        if codigo not in scores:
            ocorrencias.append(Ocorrencia(
                TipoOcorrencia.DADO_AUSENTE,
                codigo,
                _motivo_ausencia(por_codigo.get(codigo), codigo in indefinidos),
            ))

    scores_indicador = tuple(scores[c] for c in validos if c in scores)

    # 4. Pilares
    scores_pilar = agregar_pilares(scores_indicador)
    for pilar in Pilar:
        if pilar not in scores_pilar:
            ocorrencias.append(Ocorrencia(
                TipoOcorrencia.AGREGACAO_INDEFINIDA,
                pilar.value,
                "nenhum indicador pontuado ou soma de pesos zero",
            ))

    # 5. Gargalos e regras
    gargalos = detectar_gargalos(scores_pilar, scores_indicador, validos)
    anteriores = ciclo_anterior.scores_pilar if ciclo_anterior is not None else None
    flags = avaliar_regras(scores_pilar, anteriores, gargalos, referencia)
    for flag in flags.indeterminadas:
        ocorrencias.append(Ocorrencia(
            TipoOcorrencia.REGRA_INDETERMINADA,
            flag.value,
            "pilar necessario ausente no ciclo atual ou anterior",
        ))

    # 6. Prescricoes e planos
    prescricoes = gerar_prescricoes(
        gargalos, flags, scores_pilar, avaliacao.numero_ciclo, politica_agentes,
    )
    planos = gerar_planos_de_acao(gargalos, prescricoes, referencia)

    # 7. Evolucao
    evolucao = rastrear_ciclo(
        avaliacao.id,
        avaliacao.destino_id,
        scores_pilar,
        prescricoes,
        ciclo_anterior,
        epsilon,
    )

    return ResultadoDiagnostico(
        avaliacao=avaliacao,
        scores_indicador=scores_indicador,
        scores_pilar=scores_pilar,
        gargalos=tuple(gargalos),
        flags=flags,
        prescricoes=tuple(prescricoes),
        planos=tuple(planos),
        evolucao_pilares=evolucao.pilares,
        evolucao_prescricoes=evolucao.prescricoes,
        alertas_regressao=evolucao.alertas,
        ocorrencias=tuple(ocorrencias),
    )


def _validar_peso(indicador: Indicador) -> None:
    # Composto sem medicao direta nao usa min/max; so o peso importa.
    if indicador.peso < 0:
        raise ConfiguracaoIndicadorError(indicador.codigo, f"peso negativo ({indicador.peso})")


def _motivo_ausencia(valor: ValorIndicador | None, composto_indefinido: bool) -> str:
    if composto_indefinido:
        return "composto sem componentes pontuados ou soma de pesos zero"
    if valor is None:
        return "sem valor para a avaliacao"
    return "valor nao numerico"
