"""
Políticas de validação na fronteira do núcleo.

Este módulo contém as regras que um registro precisa cumprir antes de
chegar ao estado do núcleo (carrinho, vendas, relatórios). As funções
recebem dicionários "planos" vindos da CLI, de planilhas ou do banco e
devolvem dicionários normalizados; qualquer violação levanta
``ValidationError``. Os tipos do núcleo assumem entrada já validada.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional

from caixa.domain.models import (
    EXPENSE_CATEGORIES,
    PAYMENT_METHODS,
    ValidationError,
    date_components,
)


def _blank(val: Any) -> bool:
    return val is None or (isinstance(val, str) and not val.strip())


def _optional_str(val: Any) -> Optional[str]:
    # "não informado" vira None; string vazia não é um valor
    if _blank(val):
        return None
    return str(val).strip()


def _number(val: Any, campo: str) -> float:
    if _blank(val):
        raise ValidationError(f"{campo} é obrigatório")
    try:
        num = float(str(val).replace(",", ".")) if isinstance(val, str) else float(val)
    except (TypeError, ValueError):
        raise ValidationError(f"{campo} inválido: {val!r}")
    if num != num:  # NaN
        raise ValidationError(f"{campo} inválido: {val!r}")
    if num < 0:
        raise ValidationError(f"{campo} não pode ser negativo")
    return num


def _iso_date(val: Any, campo: str) -> str:
    if _blank(val):
        raise ValidationError(f"{campo} é obrigatória")
    try:
        y, m, d = date_components(val)
    except ValueError:
        raise ValidationError(f"{campo} inválida: {val!r}")
    try:
        return date(y, m, d).isoformat()
    except ValueError:
        raise ValidationError(f"{campo} inválida: {val!r}")


def validate_payment_method(method: Any) -> str:
    """Normaliza e valida a forma de pagamento (cash/transfer/card/other)."""
    if _blank(method):
        raise ValidationError("forma de pagamento é obrigatória")
    m = str(method).strip().lower()
    if m not in PAYMENT_METHODS:
        raise ValidationError(
            f"forma de pagamento inválida: {method!r} (use {', '.join(PAYMENT_METHODS)})"
        )
    return m


def validate_product(rec: Dict[str, Any]) -> Dict[str, Any]:
    """Valida um produto (sem id).

    Regras:
        - ``name`` e ``price`` obrigatórios; ``price >= 0``.
        - ``category`` opcional; string vazia equivale a não informado.
        - ``stock`` opcional; inteiro ``>= 0``.
    """
    if _blank(rec.get("name")):
        raise ValidationError("nome do produto é obrigatório")
    price = _number(rec.get("price"), "preço")

    stock = rec.get("stock")
    if _blank(stock):
        stock = None
    else:
        try:
            stock = int(float(stock))
        except (TypeError, ValueError):
            raise ValidationError(f"estoque inválido: {rec.get('stock')!r}")
        if stock < 0:
            raise ValidationError("estoque não pode ser negativo")

    return {
        "name": str(rec["name"]).strip(),
        "price": price,
        "category": _optional_str(rec.get("category")),
        "stock": stock,
    }


def validate_expense(rec: Dict[str, Any]) -> Dict[str, Any]:
    """Valida uma despesa (sem id). ``amount`` ausente é erro, nunca zero."""
    if _blank(rec.get("description")):
        raise ValidationError("descrição da despesa é obrigatória")
    amount = _number(rec.get("amount"), "valor")

    cat = rec.get("category")
    if _blank(cat):
        raise ValidationError("categoria da despesa é obrigatória")
    cat = str(cat).strip().lower()
    if cat not in EXPENSE_CATEGORIES:
        raise ValidationError(
            f"categoria inválida: {rec.get('category')!r} (use {', '.join(EXPENSE_CATEGORIES)})"
        )

    return {
        "description": str(rec["description"]).strip(),
        "amount": amount,
        "category": cat,
        "date": _iso_date(rec.get("date"), "data"),
    }


def validate_sale(rec: Dict[str, Any]) -> Dict[str, Any]:
    """Valida um registro de venda vindo de fora do finalizador.

    Rejeita vendas sem itens ou sem total. Não recalcula o total.
    """
    items = rec.get("items")
    if not items or not isinstance(items, (list, tuple)):
        raise ValidationError("a venda precisa de ao menos um item")
    if rec.get("total") is None:
        raise ValidationError("total da venda é obrigatório")
    total = _number(rec.get("total"), "total")

    clean_items = []
    for i, it in enumerate(items, start=1):
        if _blank(it.get("productId")) or _blank(it.get("name")):
            raise ValidationError(f"item {i}: produto e nome são obrigatórios")
        qty = it.get("quantity")
        try:
            qty = int(qty)
        except (TypeError, ValueError):
            raise ValidationError(f"item {i}: quantidade inválida: {qty!r}")
        if qty <= 0:
            raise ValidationError(f"item {i}: quantidade deve ser maior que 0")
        price = it.get("unitPrice", it.get("price"))
        clean_items.append({
            "productId": str(it["productId"]),
            "name": str(it["name"]),
            "unitPrice": _number(price, f"item {i}: preço"),
            "quantity": qty,
        })

    out = {
        "date": _iso_date(rec.get("date"), "data"),
        "items": clean_items,
        "total": total,
        "paymentMethod": validate_payment_method(rec.get("paymentMethod")),
    }
    customer = _optional_str(rec.get("customerName"))
    if customer is not None:
        out["customerName"] = customer
    if rec.get("id") is not None:
        out["id"] = str(rec["id"])
    return out
