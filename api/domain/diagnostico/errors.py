from __future__ import annotations


class ConfiguracaoIndicadorError(ValueError):
    """Inconsistencia de catalogo que impede normalizar um indicador.

    Fatal apenas para o indicador afetado: o motor registra a ocorrencia e
    segue com os demais.
    """

    def __init__(self, codigo: str, motivo: str) -> None:
        super().__init__(f"Indicador {codigo}: {motivo}")
        self.codigo = codigo
        self.motivo = motivo


class AvaliacaoNaoCalculavelError(ValueError):
    """Avaliacao existe mas nao tem dados para o motor (DRAFT ou sem valores)."""

    def __init__(self, avaliacao_id: str, motivo: str) -> None:
        super().__init__(f"Avaliacao {avaliacao_id}: {motivo}")
        self.avaliacao_id = avaliacao_id
        self.motivo = motivo
