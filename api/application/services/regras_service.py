"""Motor de regras sistemicas IGMA (seis regras entre pilares). Funcao pura, zero IO.

ADR: cada regra e um predicado independente sobre os mesmos insumos e devolve
seu proprio ResultadoRegra. A combinacao nao depende da ordem de avaliacao e
cada regra e testavel isoladamente. Nao ha caminho de atualizacao parcial:
avaliar_regras recalcula tudo a cada chamada.

ADR: pilar ausente nunca vira "nao critico". A regra que depende dele fica
falsa E marcada como indeterminada, para nao parecer uma aprovacao limpa.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import date

from api.domain.diagnostico.entities import FlagsIGMA, Gargalo, MensagemUI, ScorePilar
from api.domain.diagnostico.enums import Acao, FlagIGMA, Severidade, TipoMensagem
from api.domain.diagnostico.politicas import MESES_REVISAO, TEXTOS_REGRAS
from api.domain.indicador.enums import Interpretacao, Pilar

from .calendario import somar_meses


@dataclass(frozen=True)
class ResultadoRegra:
    flag: FlagIGMA
    ativo: bool
    indeterminada: bool = False
    bloqueia: tuple[Acao, ...] = ()
    mensagem: MensagemUI | None = None


def avaliar_regras(
    scores_pilar: Iterable[ScorePilar] | Mapping[Pilar, ScorePilar],
    scores_anteriores: Iterable[ScorePilar] | Mapping[Pilar, ScorePilar] | None = None,
    gargalos: Sequence[Gargalo] = (),
    referencia: date | None = None,
) -> FlagsIGMA:
    """Avalia as seis regras e combina flags, acoes bloqueadas e mensagens.

    referencia e a data base da regra 2 (proxima revisao). Sem ela, a
    proxima revisao fica None.
    """
    atuais = _por_pilar(scores_pilar)
    anteriores = _por_pilar(scores_anteriores) if scores_anteriores is not None else {}

    resultados = (
        regra_limitacao_estrutural(atuais),
        regra_externalidade(atuais, anteriores),
        regra_bloqueio_governanca(atuais),
        regra_marketing(atuais),
        regra_intersetorial(gargalos),
    )
    por_flag = {r.flag: r for r in resultados}

    bloqueadas = {a for r in resultados for a in r.bloqueia}
    indeterminadas = [r.flag for r in resultados if r.indeterminada]

    proxima, revisao_indeterminada = proxima_revisao(atuais, referencia)
    if revisao_indeterminada:
        indeterminadas.append(FlagIGMA.CONTINUOUS_PLANNING)

    return FlagsIGMA(
        ra_limitation=por_flag[FlagIGMA.RA_LIMITATION].ativo,
        externality_warning=por_flag[FlagIGMA.EXTERNALITY_WARNING].ativo,
        governance_block=por_flag[FlagIGMA.GOVERNANCE_BLOCK].ativo,
        marketing_blocked=por_flag[FlagIGMA.MARKETING_BLOCKED].ativo,
        intersectoral_dependency=por_flag[FlagIGMA.INTERSECTORAL_DEPENDENCY].ativo,
        acoes_bloqueadas=tuple(a for a in Acao if a in bloqueadas),
        mensagens=tuple(r.mensagem for r in resultados if r.mensagem is not None),
        proxima_revisao=proxima,
        tipo_interpretacao=tipo_interpretacao(atuais),
        pilar_critico=pilar_critico(atuais),
        indeterminadas=tuple(indeterminadas),
    )


# ---------------------------------------------------------------------------
# Regras
# ---------------------------------------------------------------------------


def regra_limitacao_estrutural(atuais: Mapping[Pilar, ScorePilar]) -> ResultadoRegra:
    """Regra 1: RA critico bloqueia EDU_OE (fundacao antes da mobilia)."""
    ra = atuais.get(Pilar.RA)
    if ra is None:
        return ResultadoRegra(FlagIGMA.RA_LIMITATION, ativo=False, indeterminada=True)
    if ra.severidade != Severidade.CRITICO:
        return ResultadoRegra(FlagIGMA.RA_LIMITATION, ativo=False)
    return ResultadoRegra(
        FlagIGMA.RA_LIMITATION,
        ativo=True,
        bloqueia=(Acao.EDU_OE,),
        mensagem=_mensagem(FlagIGMA.RA_LIMITATION, ra),
    )


def regra_externalidade(
    atuais: Mapping[Pilar, ScorePilar],
    anteriores: Mapping[Pilar, ScorePilar],
) -> ResultadoRegra:
    """Regra 3: OE sobe enquanto RA desce em relacao ao ciclo anterior."""
    ra, oe = atuais.get(Pilar.RA), atuais.get(Pilar.OE)
    ra_ant, oe_ant = anteriores.get(Pilar.RA), anteriores.get(Pilar.OE)
    if ra is None or oe is None or ra_ant is None or oe_ant is None:
        return ResultadoRegra(FlagIGMA.EXTERNALITY_WARNING, ativo=False, indeterminada=True)

    if not (oe.score > oe_ant.score and ra.score < ra_ant.score):
        return ResultadoRegra(FlagIGMA.EXTERNALITY_WARNING, ativo=False)
    return ResultadoRegra(
        FlagIGMA.EXTERNALITY_WARNING,
        ativo=True,
        mensagem=_mensagem(FlagIGMA.EXTERNALITY_WARNING, ra),
    )


def regra_bloqueio_governanca(atuais: Mapping[Pilar, ScorePilar]) -> ResultadoRegra:
    """Regra 4: AO critico bloqueia expansao EDU_OE."""
    ao = atuais.get(Pilar.AO)
    if ao is None:
        return ResultadoRegra(FlagIGMA.GOVERNANCE_BLOCK, ativo=False, indeterminada=True)
    if ao.severidade != Severidade.CRITICO:
        return ResultadoRegra(FlagIGMA.GOVERNANCE_BLOCK, ativo=False)
    return ResultadoRegra(
        FlagIGMA.GOVERNANCE_BLOCK,
        ativo=True,
        bloqueia=(Acao.EDU_OE,),
        mensagem=_mensagem(FlagIGMA.GOVERNANCE_BLOCK, ao),
    )


def regra_marketing(atuais: Mapping[Pilar, ScorePilar]) -> ResultadoRegra:
    """Regra 5: marketing so e liberado com RA e AO nao criticos."""
    criticos = [
        s for p in (Pilar.RA, Pilar.AO)
        if (s := atuais.get(p)) is not None and s.severidade == Severidade.CRITICO
    ]
    if criticos:
        return ResultadoRegra(
            FlagIGMA.MARKETING_BLOCKED,
            ativo=True,
            bloqueia=(Acao.MARKETING,),
            mensagem=_mensagem(FlagIGMA.MARKETING_BLOCKED, criticos[0]),
        )
    # Liberar exige confirmar os dois pilares.
    if Pilar.RA not in atuais or Pilar.AO not in atuais:
        return ResultadoRegra(FlagIGMA.MARKETING_BLOCKED, ativo=False, indeterminada=True)
    return ResultadoRegra(FlagIGMA.MARKETING_BLOCKED, ativo=False)


def regra_intersetorial(gargalos: Sequence[Gargalo]) -> ResultadoRegra:
    """Regra 6: gargalo CRITICO/MODERADO com indicador de outro setor. Informativa."""
    dependentes = [
        e
        for g in gargalos
        if g.severidade in (Severidade.CRITICO, Severidade.MODERADO)
        for e in g.evidencia
        if e.setor_externo is not None
    ]
    if not dependentes:
        return ResultadoRegra(FlagIGMA.INTERSECTORAL_DEPENDENCY, ativo=False)

    codigos = {e.codigo for e in dependentes}
    setores: list[str] = []
    for e in dependentes:
        if e.setor_externo is not None and e.setor_externo.value not in setores:
            setores.append(e.setor_externo.value)

    titulo, modelo = TEXTOS_REGRAS[FlagIGMA.INTERSECTORAL_DEPENDENCY]
    return ResultadoRegra(
        FlagIGMA.INTERSECTORAL_DEPENDENCY,
        ativo=True,
        mensagem=MensagemUI(
            tipo=TipoMensagem.INFO,
            flag=FlagIGMA.INTERSECTORAL_DEPENDENCY,
            titulo=titulo,
            mensagem=modelo.format(qtd=len(codigos), setores=", ".join(setores).lower()),
        ),
    )


def proxima_revisao(
    atuais: Mapping[Pilar, ScorePilar],
    referencia: date | None,
) -> tuple[date | None, bool]:
    """Regra 2: revisao em 6/12/18 meses conforme o pior pilar.

    Returns:
        (data recomendada, indeterminada). 18 meses exige os tres pilares
        BOM; com pilar ausente e nenhum problema visivel o prazo fica em 12.
    """
    if not atuais:
        return None, True

    severidades = {s.severidade for s in atuais.values()}
    indeterminada = len(atuais) < len(Pilar)
    if Severidade.CRITICO in severidades:
        meses = MESES_REVISAO[Severidade.CRITICO]
    elif Severidade.MODERADO in severidades or indeterminada:
        meses = MESES_REVISAO[Severidade.MODERADO]
    else:
        meses = MESES_REVISAO[Severidade.BOM]

    if referencia is None:
        return None, indeterminada
    return somar_meses(referencia, meses), indeterminada


def tipo_interpretacao(atuais: Mapping[Pilar, ScorePilar]) -> Interpretacao:
    """Leitura dominante do territorio: RA > AO > OE critico, senao GESTAO."""
    prioridade = (
        (Pilar.RA, Interpretacao.ESTRUTURAL),
        (Pilar.AO, Interpretacao.GESTAO),
        (Pilar.OE, Interpretacao.ENTREGA),
    )
    for pilar, interpretacao in prioridade:
        score = atuais.get(pilar)
        if score is not None and score.severidade == Severidade.CRITICO:
            return interpretacao
    return Interpretacao.GESTAO


def pilar_critico(atuais: Mapping[Pilar, ScorePilar]) -> Pilar | None:
    if not atuais:
        return None
    return min(atuais.values(), key=lambda s: s.score).pilar


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _por_pilar(scores: Iterable[ScorePilar] | Mapping[Pilar, ScorePilar]) -> dict[Pilar, ScorePilar]:
    valores = scores.values() if isinstance(scores, Mapping) else scores
    return {s.pilar: s for s in valores}


def _mensagem(flag: FlagIGMA, gatilho: ScorePilar) -> MensagemUI:
    """Critical quando o pilar que dispara esta CRITICO, warning caso contrario."""
    titulo, texto = TEXTOS_REGRAS[flag]
    tipo = TipoMensagem.CRITICAL if gatilho.severidade == Severidade.CRITICO else TipoMensagem.WARNING
    return MensagemUI(tipo=tipo, flag=flag, titulo=titulo, mensagem=texto)
