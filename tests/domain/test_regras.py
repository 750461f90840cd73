# tests/domain/test_regras.py
from datetime import date

from api.application.services.regras_service import (
    avaliar_regras,
    proxima_revisao,
    regra_bloqueio_governanca,
    regra_externalidade,
    regra_intersetorial,
    regra_limitacao_estrutural,
    regra_marketing,
)
from api.domain.diagnostico.entities import EvidenciaIndicador, Gargalo, ScorePilar
from api.domain.diagnostico.enums import Acao, FlagIGMA, Severidade, TipoMensagem
from api.domain.indicador.enums import Interpretacao, Pilar, SetorExterno

REFERENCIA = date(2026, 1, 31)


def _pilares(avaliacao_id: str = "AV2", **scores: float) -> dict[Pilar, ScorePilar]:
    return {Pilar(p): ScorePilar(avaliacao_id, Pilar(p), s) for p, s in scores.items()}


def _gargalo(severidade: Severidade, setor: SetorExterno | None, codigo: str = "S1") -> Gargalo:
    return Gargalo(
        avaliacao_id="AV2",
        pilar=Pilar.RA,
        tema="social",
        severidade=severidade,
        interpretacao=Interpretacao.ESTRUTURAL,
        titulo="t",
        evidencia=(EvidenciaIndicador(codigo, codigo, 0.2, 1.0, Interpretacao.ESTRUTURAL, setor),),
    )


# ---------- Regra 1: limitacao estrutural ----------


def test_ra_critico_bloqueia_edu_oe_e_marketing():
    flags = avaliar_regras(_pilares(RA=0.2, AO=0.8, OE=0.8), referencia=REFERENCIA)
    assert flags.ra_limitation is True
    assert Acao.EDU_OE in flags.acoes_bloqueadas
    assert flags.marketing_blocked is True
    assert Acao.MARKETING in flags.acoes_bloqueadas
    assert flags.governance_block is False


def test_ra_moderado_nao_limita():
    resultado = regra_limitacao_estrutural(_pilares(RA=0.5))
    assert resultado.ativo is False
    assert resultado.indeterminada is False


def test_ra_ausente_e_indeterminada():
    resultado = regra_limitacao_estrutural(_pilares(AO=0.9))
    assert resultado.ativo is False
    assert resultado.indeterminada is True


def test_mensagem_critical_quando_pilar_critico():
    resultado = regra_limitacao_estrutural(_pilares(RA=0.1))
    assert resultado.mensagem is not None
    assert resultado.mensagem.tipo == TipoMensagem.CRITICAL
    assert resultado.mensagem.flag == FlagIGMA.RA_LIMITATION


# ---------- Regra 3: externalidade ----------


def test_oe_sobe_enquanto_ra_desce_gera_alerta():
    atuais = _pilares(RA=0.60, OE=0.65, AO=0.8)
    anteriores = _pilares("AV1", RA=0.70, OE=0.50, AO=0.8)
    flags = avaliar_regras(atuais, anteriores, referencia=REFERENCIA)
    assert flags.externality_warning is True
    mensagem = next(m for m in flags.mensagens if m.flag == FlagIGMA.EXTERNALITY_WARNING)
    assert mensagem.tipo == TipoMensagem.WARNING


def test_externalidade_nao_bloqueia_acoes():
    resultado = regra_externalidade(_pilares(RA=0.60, OE=0.65), _pilares("AV1", RA=0.70, OE=0.50))
    assert resultado.ativo is True
    assert resultado.bloqueia == ()


def test_ambos_subindo_nao_e_externalidade():
    resultado = regra_externalidade(_pilares(RA=0.75, OE=0.65), _pilares("AV1", RA=0.70, OE=0.50))
    assert resultado.ativo is False


def test_sem_ciclo_anterior_externalidade_indeterminada():
    flags = avaliar_regras(_pilares(RA=0.6, OE=0.6, AO=0.6), referencia=REFERENCIA)
    assert flags.externality_warning is False
    assert FlagIGMA.EXTERNALITY_WARNING in flags.indeterminadas


# ---------- Regra 4: governanca ----------


def test_ao_critico_bloqueia_edu_oe():
    resultado = regra_bloqueio_governanca(_pilares(AO=0.1))
    assert resultado.ativo is True
    assert resultado.bloqueia == (Acao.EDU_OE,)


def test_ra_e_ao_criticos_edu_oe_bloqueado_uma_vez():
    flags = avaliar_regras(_pilares(RA=0.1, AO=0.1, OE=0.9), referencia=REFERENCIA)
    assert flags.acoes_bloqueadas == (Acao.EDU_OE, Acao.MARKETING)
    assert flags.acoes_permitidas == (Acao.EDU_RA, Acao.EDU_AO)


# ---------- Regra 5: marketing ----------


def test_marketing_liberado_com_ra_e_ao_nao_criticos():
    resultado = regra_marketing(_pilares(RA=0.5, AO=0.5))
    assert resultado.ativo is False
    assert resultado.indeterminada is False


def test_marketing_bloqueado_por_ao_critico():
    assert regra_marketing(_pilares(RA=0.9, AO=0.2)).ativo is True


def test_marketing_bloqueado_mesmo_com_ra_ausente_se_ao_critico():
    resultado = regra_marketing(_pilares(AO=0.2))
    assert resultado.ativo is True
    assert resultado.indeterminada is False


def test_marketing_indeterminado_sem_ra():
    resultado = regra_marketing(_pilares(AO=0.9))
    assert resultado.ativo is False
    assert resultado.indeterminada is True


# ---------- Regra 6: intersetorial ----------


def test_dependencia_intersetorial_informativa():
    flags = avaliar_regras(
        _pilares(RA=0.5, AO=0.5, OE=0.5),
        gargalos=[_gargalo(Severidade.MODERADO, SetorExterno.SAUDE)],
        referencia=REFERENCIA,
    )
    assert flags.intersectoral_dependency is True
    assert flags.acoes_bloqueadas == ()
    mensagem = next(m for m in flags.mensagens if m.flag == FlagIGMA.INTERSECTORAL_DEPENDENCY)
    assert mensagem.tipo == TipoMensagem.INFO
    assert "1 indicador(es)" in mensagem.mensagem
    assert "saude" in mensagem.mensagem


def test_gargalo_sem_setor_externo_nao_e_intersetorial():
    assert regra_intersetorial([_gargalo(Severidade.CRITICO, None)]).ativo is False


def test_gargalo_bom_nao_conta_como_intersetorial():
    assert regra_intersetorial([_gargalo(Severidade.BOM, SetorExterno.EDUCACAO)]).ativo is False


# ---------- Regra 2: proxima revisao ----------


def test_revisao_em_6_meses_com_pilar_critico():
    data, indeterminada = proxima_revisao(_pilares(RA=0.1, AO=0.9, OE=0.9), REFERENCIA)
    assert data == date(2026, 7, 31)
    assert indeterminada is False


def test_revisao_em_12_meses_com_pilar_moderado():
    data, _ = proxima_revisao(_pilares(RA=0.5, AO=0.9, OE=0.9), REFERENCIA)
    assert data == date(2027, 1, 31)


def test_revisao_em_18_meses_com_todos_bons():
    data, _ = proxima_revisao(_pilares(RA=0.9, AO=0.9, OE=0.9), REFERENCIA)
    assert data == date(2027, 7, 31)


def test_revisao_com_pilar_ausente_nao_chega_a_18_meses():
    data, indeterminada = proxima_revisao(_pilares(RA=0.9, AO=0.9), REFERENCIA)
    assert data == date(2027, 1, 31)
    assert indeterminada is True


def test_revisao_limita_dia_ao_fim_do_mes():
    data, _ = proxima_revisao(_pilares(RA=0.1), date(2025, 8, 31))
    assert data == date(2026, 2, 28)


def test_sem_pilares_nao_ha_revisao():
    flags = avaliar_regras({}, referencia=REFERENCIA)
    assert flags.proxima_revisao is None
    assert flags.pilar_critico is None
    assert FlagIGMA.CONTINUOUS_PLANNING in flags.indeterminadas
    assert flags.ativas() == ()


# ---------- Combinacao ----------


def test_mensagens_seguem_ordem_das_regras():
    atuais = _pilares(RA=0.2, OE=0.6, AO=0.2)
    anteriores = _pilares("AV1", RA=0.5, OE=0.4, AO=0.5)
    flags = avaliar_regras(
        atuais,
        anteriores,
        gargalos=[_gargalo(Severidade.CRITICO, SetorExterno.SANEAMENTO)],
        referencia=REFERENCIA,
    )
    assert [m.flag for m in flags.mensagens] == [
        FlagIGMA.RA_LIMITATION,
        FlagIGMA.EXTERNALITY_WARNING,
        FlagIGMA.GOVERNANCE_BLOCK,
        FlagIGMA.MARKETING_BLOCKED,
        FlagIGMA.INTERSECTORAL_DEPENDENCY,
    ]
    assert flags.indeterminadas == ()


def test_avaliacao_e_deterministica():
    atuais = _pilares(RA=0.3, OE=0.5, AO=0.7)
    assert avaliar_regras(atuais, referencia=REFERENCIA) == avaliar_regras(
        list(atuais.values()), referencia=REFERENCIA
    )


def test_tipo_interpretacao_e_pilar_critico():
    flags = avaliar_regras(_pilares(RA=0.5, OE=0.2, AO=0.1), referencia=REFERENCIA)
    assert flags.tipo_interpretacao == Interpretacao.GESTAO  # AO critico antes de OE
    assert flags.pilar_critico == Pilar.AO

    flags = avaliar_regras(_pilares(RA=0.8, OE=0.2, AO=0.8), referencia=REFERENCIA)
    assert flags.tipo_interpretacao == Interpretacao.ENTREGA

    flags = avaliar_regras(_pilares(RA=0.8, OE=0.8, AO=0.8), referencia=REFERENCIA)
    assert flags.tipo_interpretacao == Interpretacao.GESTAO
