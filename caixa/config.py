# caixa/config.py
"""
Configurações globais e valores padrão do caixa.
"""

import os
from dataclasses import dataclass


# Caminho padrão do banco de dados SQLite (pode ser sobrescrito por CAIXA_DB_PATH)
DB_PATH = os.environ.get("CAIXA_DB_PATH") or os.path.join(os.getcwd(), "caixa.db")


@dataclass
class DefaultConfig:
    """Valores padrão para parâmetros do sistema."""
    top_n: int = 10                  # tamanho do ranking de produtos
    moeda: str = "$"                 # símbolo usado na exibição
    forma_pagamento: str = "cash"    # forma de pagamento sugerida no PDV


# Instância global dos valores padrão
DEFAULTS = DefaultConfig()
