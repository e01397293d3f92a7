# caixa/infra/repositories.py
"""
Repositórios (DAO) para acesso e manipulação de dados no SQLite.

Classes:
- ParamsRepo
- ProdutoRepo
- VendaRepo
- DespesaRepo

Os repositórios são o colaborador de persistência: recebem e devolvem
objetos do domínio (ou registros planos equivalentes) e não aplicam regras
de negócio. Ids desconhecidos em update/delete levantam ``RepositoryError``.
"""

from __future__ import annotations

import uuid
from dataclasses import replace
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from .db import connect
from caixa.config import DEFAULTS
from caixa.domain.models import CartLine, Expense, Params, Product, Sale, to_date


class RepositoryError(RuntimeError):
    """Falha de persistência que não é erro do SQLite (ex.: id inexistente)."""


def _new_id() -> str:
    return uuid.uuid4().hex


def _rows_as_dicts(cur) -> List[Dict[str, Any]]:
    cols = [d[0] for d in cur.description]
    return [dict(zip(cols, row)) for row in cur.fetchall()]


# -------------------------
# Params
# -------------------------

class ParamsRepo:
    def __init__(self, db_path: str):
        self.db_path = db_path

    def set_many(self, items: Iterable[Tuple[str, str]]) -> None:
        with connect(self.db_path) as c:
            c.executemany(
                """
                INSERT INTO params (chave, valor)
                VALUES (?, ?)
                ON CONFLICT(chave) DO UPDATE SET valor=excluded.valor
                """,
                list(items),
            )

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        with connect(self.db_path) as c:
            row = c.execute("SELECT valor FROM params WHERE chave = ?", (key,)).fetchone()
            return row[0] if row else default

    def get_int(self, key: str, default: int) -> int:
        v = self.get(key, None)
        if v is None:
            return default
        try:
            return int(float(v))
        except ValueError:
            return default

    def load(self, defaults: Params | None = None) -> Params:
        """Parâmetros efetivos: valor gravado ou o padrão de ``caixa.config``."""
        d = defaults or Params(
            top_n=DEFAULTS.top_n,
            moeda=DEFAULTS.moeda,
            forma_pagamento=DEFAULTS.forma_pagamento,
        )
        return Params(
            top_n=self.get_int("top_n", d.top_n),
            moeda=self.get("moeda", d.moeda),
            forma_pagamento=self.get("forma_pagamento", d.forma_pagamento),
        )


# -------------------------
# Produto
# -------------------------

class ProdutoRepo:
    def __init__(self, db_path: str):
        self.db_path = db_path

    @staticmethod
    def _from_row(r: Dict[str, Any]) -> Product:
        return Product(
            id=r["id"],
            name=r["nome"],
            price=float(r["preco"]),
            category=r["categoria"],
            stock=r["estoque"],
        )

    def list_products(self) -> List[Product]:
        with connect(self.db_path) as c:
            cur = c.execute(
                "SELECT id, nome, preco, categoria, estoque FROM produto ORDER BY rowid"
            )
            return [self._from_row(r) for r in _rows_as_dicts(cur)]

    def get(self, product_id: str) -> Optional[Product]:
        with connect(self.db_path) as c:
            cur = c.execute(
                "SELECT id, nome, preco, categoria, estoque FROM produto WHERE id = ?",
                (str(product_id),),
            )
            rows = _rows_as_dicts(cur)
        return self._from_row(rows[0]) if rows else None

    def create(self, product: Product) -> Product:
        """Insere o produto; gera id quando vier vazio."""
        if not product.id:
            product = replace(product, id=_new_id())
        with connect(self.db_path) as c:
            c.execute(
                """
                INSERT INTO produto (id, nome, preco, categoria, estoque)
                VALUES (:id, :name, :price, :category, :stock)
                """,
                {
                    "id": product.id,
                    "name": product.name,
                    "price": product.price,
                    "category": product.category,
                    "stock": product.stock,
                },
            )
        return product

    def update(self, product_id: str, product: Product) -> Product:
        product = replace(product, id=str(product_id))
        with connect(self.db_path) as c:
            cur = c.execute(
                """
                UPDATE produto
                   SET nome=:name, preco=:price, categoria=:category, estoque=:stock
                 WHERE id=:id
                """,
                {
                    "id": product.id,
                    "name": product.name,
                    "price": product.price,
                    "category": product.category,
                    "stock": product.stock,
                },
            )
            if cur.rowcount == 0:
                raise RepositoryError(f"produto não encontrado: {product_id}")
        return product

    def delete(self, product_id: str) -> None:
        with connect(self.db_path) as c:
            cur = c.execute("DELETE FROM produto WHERE id = ?", (str(product_id),))
            if cur.rowcount == 0:
                raise RepositoryError(f"produto não encontrado: {product_id}")


# -------------------------
# Venda
# -------------------------

class VendaRepo:
    def __init__(self, db_path: str, id_factory: Callable[[], str] = _new_id):
        self.db_path = db_path
        self.id_factory = id_factory

    def _load(self, c, where: str = "", params: Tuple = ()) -> List[Sale]:
        cur = c.execute(
            f"""
            SELECT id, data, total, forma_pagamento, cliente
            FROM venda {where}
            ORDER BY rowid
            """,
            params,
        )
        heads = _rows_as_dicts(cur)
        if not heads:
            return []

        # só os itens das vendas selecionadas
        cur = c.execute(
            f"""
            SELECT venda_id, produto_id, nome, preco_unitario, quantidade
            FROM venda_item
            WHERE venda_id IN (SELECT id FROM venda {where})
            ORDER BY venda_id, posicao
            """,
            params,
        )
        items: Dict[str, List[CartLine]] = {}
        for r in _rows_as_dicts(cur):
            items.setdefault(r["venda_id"], []).append(
                CartLine(
                    product_id=r["produto_id"],
                    name=r["nome"],
                    unit_price=float(r["preco_unitario"]),
                    quantity=int(r["quantidade"]),
                )
            )

        return [
            Sale(
                id=h["id"],
                date=to_date(h["data"]),
                items=tuple(items.get(h["id"], [])),
                total=float(h["total"]),
                payment_method=h["forma_pagamento"],
                customer_name=h["cliente"],
            )
            for h in heads
        ]

    def list_sales(self) -> List[Sale]:
        with connect(self.db_path) as c:
            return self._load(c)

    def get(self, sale_id: str) -> Optional[Sale]:
        with connect(self.db_path) as c:
            found = self._load(c, "WHERE id = ?", (str(sale_id),))
        return found[0] if found else None

    def list_resumo(self) -> List[Dict[str, Any]]:
        """Uma linha por venda (sem itens), na ordem de gravação."""
        with connect(self.db_path) as c:
            cur = c.execute(
                """
                SELECT id, data, total, forma_pagamento, cliente, qtd_itens
                FROM vw_venda_resumo
                ORDER BY seq
                """
            )
            rows = _rows_as_dicts(cur)
        return [
            {
                "id": r["id"],
                "date": r["data"],
                "total": float(r["total"]),
                "paymentMethod": r["forma_pagamento"],
                "customerName": r["cliente"],
                "itemsCount": int(r["qtd_itens"]),
            }
            for r in rows
        ]

    def create(self, sale: Sale) -> Sale:
        """Grava cabeçalho e itens numa única transação; gera id se faltar."""
        if not sale.id:
            sale = replace(sale, id=self.id_factory())
        with connect(self.db_path) as c:
            c.execute(
                """
                INSERT INTO venda (id, data, total, forma_pagamento, cliente)
                VALUES (?, ?, ?, ?, ?)
                """,
                (sale.id, sale.date.isoformat(), sale.total, sale.payment_method, sale.customer_name),
            )
            c.executemany(
                """
                INSERT INTO venda_item
                    (venda_id, posicao, produto_id, nome, preco_unitario, quantidade)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                [
                    (sale.id, pos, it.product_id, it.name, it.unit_price, it.quantity)
                    for pos, it in enumerate(sale.items)
                ],
            )
        return sale

    def delete(self, sale_id: str) -> None:
        with connect(self.db_path) as c:
            cur = c.execute("DELETE FROM venda WHERE id = ?", (str(sale_id),))
            if cur.rowcount == 0:
                raise RepositoryError(f"venda não encontrada: {sale_id}")


# -------------------------
# Despesa
# -------------------------

class DespesaRepo:
    def __init__(self, db_path: str):
        self.db_path = db_path

    @staticmethod
    def _from_row(r: Dict[str, Any]) -> Expense:
        return Expense(
            id=r["id"],
            description=r["descricao"],
            amount=float(r["valor"]),
            category=r["categoria"],
            date=to_date(r["data"]),
        )

    @staticmethod
    def _payload(expense: Expense) -> Dict[str, Any]:
        return {
            "id": expense.id,
            "description": expense.description,
            "amount": expense.amount,
            "category": expense.category,
            "date": expense.date.isoformat(),
        }

    def list_expenses(self) -> List[Expense]:
        with connect(self.db_path) as c:
            cur = c.execute(
                "SELECT id, descricao, valor, categoria, data FROM despesa ORDER BY rowid"
            )
            return [self._from_row(r) for r in _rows_as_dicts(cur)]

    def get(self, expense_id: str) -> Optional[Expense]:
        with connect(self.db_path) as c:
            cur = c.execute(
                "SELECT id, descricao, valor, categoria, data FROM despesa WHERE id = ?",
                (str(expense_id),),
            )
            rows = _rows_as_dicts(cur)
        return self._from_row(rows[0]) if rows else None

    def create(self, expense: Expense) -> Expense:
        if not expense.id:
            expense = replace(expense, id=_new_id())
        with connect(self.db_path) as c:
            c.execute(
                """
                INSERT INTO despesa (id, descricao, valor, categoria, data)
                VALUES (:id, :description, :amount, :category, :date)
                """,
                self._payload(expense),
            )
        return expense

    def update(self, expense_id: str, expense: Expense) -> Expense:
        """Substituição completa do registro."""
        expense = replace(expense, id=str(expense_id))
        with connect(self.db_path) as c:
            cur = c.execute(
                """
                UPDATE despesa
                   SET descricao=:description, valor=:amount, categoria=:category, data=:date
                 WHERE id=:id
                """,
                self._payload(expense),
            )
            if cur.rowcount == 0:
                raise RepositoryError(f"despesa não encontrada: {expense_id}")
        return expense

    def delete(self, expense_id: str) -> None:
        with connect(self.db_path) as c:
            cur = c.execute("DELETE FROM despesa WHERE id = ?", (str(expense_id),))
            if cur.rowcount == 0:
                raise RepositoryError(f"despesa não encontrada: {expense_id}")
