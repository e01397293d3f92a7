# caixa/domain/models.py
"""
Modelos (dataclasses) do domínio.

Observação importante:
- Os repositórios trocam dicionários "planos" com o armazenamento, usando
  exatamente os nomes de campo do modelo de dados (``productId``,
  ``unitPrice``, ``paymentMethod``, ``customerName``...). As dataclasses
  oferecem ``to_record()`` / ``from_record()`` para essa conversão.
- Campos opcionais são ``None`` em Python e omitidos no registro plano.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Optional, Tuple


# Formas de pagamento aceitas
PAYMENT_METHODS: Tuple[str, ...] = ("cash", "transfer", "card", "other")

# Categorias fixas de despesa
EXPENSE_CATEGORIES: Tuple[str, ...] = (
    "rent",
    "utilities",
    "salaries",
    "suppliers",
    "marketing",
    "maintenance",
    "taxes",
    "other",
)

class ValidationError(ValueError):
    """Registro rejeitado na fronteira (campo ausente ou inválido)."""


_DATE_RE = re.compile(r"^\s*(\d{4})-(\d{1,2})-(\d{1,2})")


def date_components(value: Any) -> Tuple[int, int, int]:
    """Decompõe uma data em (ano, mês, dia) sem passar por fuso horário.

    Aceita ``datetime.date`` (e ``datetime``) ou strings que comecem com
    ``YYYY-MM-DD`` (inclusive timestamps ISO como ``2026-01-31T23:30:00Z``).
    O dia de calendário escrito na string é preservado.
    """
    if isinstance(value, date):
        return value.year, value.month, value.day
    if value is None:
        raise ValueError("data ausente")
    m = _DATE_RE.match(str(value))
    if not m:
        raise ValueError(f"data inválida: {value!r}")
    return int(m.group(1)), int(m.group(2)), int(m.group(3))


def to_date(value: Any) -> date:
    """Converte para ``datetime.date`` via decomposição por componentes."""
    if isinstance(value, date):
        return date(value.year, value.month, value.day)
    y, m, d = date_components(value)
    return date(y, m, d)


def _compact(rec: Dict[str, Any]) -> Dict[str, Any]:
    # opcionais ausentes são omitidos (nunca null)
    return {k: v for k, v in rec.items() if v is not None}


@dataclass(frozen=True)
class Product:
    """Cadastro de produto (somente leitura para o núcleo)."""
    id: str
    name: str
    price: float
    category: Optional[str] = None
    stock: Optional[int] = None

    def to_record(self) -> Dict[str, Any]:
        return _compact({
            "id": self.id,
            "name": self.name,
            "price": self.price,
            "category": self.category,
            "stock": self.stock,
        })

    @classmethod
    def from_record(cls, rec: Dict[str, Any]) -> "Product":
        stock = rec.get("stock")
        return cls(
            id=str(rec["id"]),
            name=rec["name"],
            price=float(rec["price"]),
            category=rec.get("category"),
            stock=int(stock) if stock is not None else None,
        )


@dataclass(frozen=True)
class CartLine:
    """Item de linha do carrinho; também é o snapshot gravado na venda."""
    product_id: str
    name: str
    unit_price: float
    quantity: int

    @property
    def line_total(self) -> float:
        return self.unit_price * self.quantity

    def to_record(self) -> Dict[str, Any]:
        return {
            "productId": self.product_id,
            "name": self.name,
            "unitPrice": self.unit_price,
            "quantity": self.quantity,
        }

    @classmethod
    def from_record(cls, rec: Dict[str, Any]) -> "CartLine":
        # registros antigos usavam "price" no lugar de "unitPrice"
        price = rec.get("unitPrice", rec.get("price"))
        return cls(
            product_id=str(rec["productId"]),
            name=rec["name"],
            unit_price=float(price),
            quantity=int(rec["quantity"]),
        )


@dataclass(frozen=True)
class Sale:
    """Venda finalizada. Imutável; removida apenas como registro inteiro."""
    id: Optional[str]
    date: date
    items: Tuple[CartLine, ...]
    total: float
    payment_method: str
    customer_name: Optional[str] = None

    @property
    def items_count(self) -> int:
        return sum(it.quantity for it in self.items)

    def to_record(self) -> Dict[str, Any]:
        return _compact({
            "id": self.id,
            "date": self.date.isoformat(),
            "items": [it.to_record() for it in self.items],
            "total": self.total,
            "paymentMethod": self.payment_method,
            "customerName": self.customer_name,
        })

    @classmethod
    def from_record(cls, rec: Dict[str, Any]) -> "Sale":
        rid = rec.get("id")
        method = rec.get("paymentMethod")
        if not method:
            raise ValidationError("forma de pagamento é obrigatória")
        return cls(
            id=str(rid) if rid is not None else None,
            date=to_date(rec["date"]),
            items=tuple(CartLine.from_record(it) for it in rec["items"]),
            total=float(rec["total"]),
            payment_method=method,
            customer_name=rec.get("customerName") or None,
        )


@dataclass(frozen=True)
class Expense:
    """Despesa. Edição = substituição completa por id."""
    id: Optional[str]
    description: str
    amount: float
    category: str
    date: date

    def to_record(self) -> Dict[str, Any]:
        return _compact({
            "id": self.id,
            "description": self.description,
            "amount": self.amount,
            "category": self.category,
            "date": self.date.isoformat(),
        })

    @classmethod
    def from_record(cls, rec: Dict[str, Any]) -> "Expense":
        rid = rec.get("id")
        return cls(
            id=str(rid) if rid is not None else None,
            description=rec["description"],
            amount=float(rec["amount"]),
            category=rec["category"],
            date=to_date(rec["date"]),
        )


@dataclass(frozen=True)
class AvailableAmount:
    """Valor monetário marcado como disponível ou não.

    ``available=False`` significa "fonte de dados inacessível", distinto de
    um zero real. ``partial=True`` indica que o valor foi calculado sem todas
    as parcelas (ex.: lucro sem despesas).
    """
    available: bool
    value: float = 0.0
    partial: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {"available": self.available, "value": self.value, "partial": self.partial}


@dataclass
class Params:
    """Parâmetros globais (armazenados na tabela `params` como chave/valor)."""
    top_n: int = 10
    moeda: str = "$"
    forma_pagamento: str = "cash"
