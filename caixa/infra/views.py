# caixa/infra/views.py
"""
Criação de views auxiliares para consultas frequentes.

Views criadas:
- vw_venda_resumo: uma linha por venda com a quantidade de unidades vendidas
  e a ordem de gravação (seq), usada pelo histórico de vendas.

Obs.:
- A view assume que as migrações V1→V2 já foram aplicadas.
- Índices por data também são criados, caso não existam.
"""

from __future__ import annotations

from .db import connect


def create_views(db_path: str) -> None:
    with connect(db_path) as c:
        c.executescript(
            """
            DROP VIEW IF EXISTS vw_venda_resumo;
            CREATE VIEW vw_venda_resumo AS
            SELECT
                v.rowid AS seq,
                v.id,
                v.data,
                v.total,
                v.forma_pagamento,
                v.cliente,
                COALESCE(SUM(i.quantidade), 0) AS qtd_itens,
                COUNT(i.posicao)               AS qtd_linhas
            FROM venda v
            LEFT JOIN venda_item i ON i.venda_id = v.id
            GROUP BY v.rowid, v.id, v.data, v.total, v.forma_pagamento, v.cliente;
            """
        )

        c.executescript(
            """
            CREATE INDEX IF NOT EXISTS idx_venda_data      ON venda(data);
            CREATE INDEX IF NOT EXISTS idx_venda_item_prod ON venda_item(produto_id);
            CREATE INDEX IF NOT EXISTS idx_despesa_data    ON despesa(data);
            """
        )
