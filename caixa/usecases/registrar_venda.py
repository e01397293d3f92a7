# caixa/usecases/registrar_venda.py
"""
UC: Registrar VENDA (carrinho → venda).
- CartSession: carrinho corrente de UM terminal (cada terminal tem o seu).
- finalize_sale(): converte um carrinho não vazio em uma Sale imutável.
- run_registrar_venda(): finaliza, persiste e limpa o carrinho da sessão.
- run_venda_rapida(): monta o carrinho a partir de pares (id, qtd) da CLI.

Obs.:
- Carrinho vazio é recusado sem exceção (retorna None).
- O finalizador não persiste; quem chama grava e depois limpa o carrinho.
"""

from __future__ import annotations

import uuid
from datetime import date
from typing import Callable, Iterable, List, Optional, Tuple

from caixa.config import DB_PATH
from caixa.domain.cart import Cart
from caixa.domain.models import CartLine, Product, Sale
from caixa.domain.policies import ValidationError, validate_payment_method
from caixa.infra.repositories import ProdutoRepo, VendaRepo
from caixa.infra.logger import (
    log_transaction, log_venda, log_database_operation, log_system_event, print_system
)


class CartSession:
    """Carrinho mutável de um terminal, trocando valores ``Cart`` imutáveis."""

    def __init__(self, cart: Optional[Cart] = None):
        self.cart = cart or Cart()

    def add_item(self, product: Product) -> Cart:
        self.cart = self.cart.add_item(product)
        return self.cart

    def update_quantity(self, product_id: str, delta: int) -> Cart:
        self.cart = self.cart.update_quantity(product_id, delta)
        return self.cart

    def remove_item(self, product_id: str) -> Cart:
        self.cart = self.cart.remove_item(product_id)
        return self.cart

    def clear(self) -> Cart:
        self.cart = self.cart.clear()
        return self.cart

    def get_cart_lines(self) -> List[CartLine]:
        return self.cart.get_lines()

    def get_cart_total(self) -> float:
        return self.cart.compute_total()


def finalize_sale(
    cart: Cart,
    payment_method: str,
    customer_name: Optional[str] = None,
    today: Optional[date] = None,
    id_factory: Optional[Callable[[], str]] = None,
) -> Optional[Sale]:
    """Converte o carrinho em uma venda.

    Retorna None (recusa silenciosa) quando o carrinho está vazio. Caso
    contrário carimba a data, copia as linhas por valor, usa
    ``cart.compute_total()`` como total e atribui um id único.
    """
    if cart.is_empty:
        return None
    method = validate_payment_method(payment_method)
    customer = (customer_name or "").strip() or None
    make_id = id_factory or (lambda: uuid.uuid4().hex)
    return Sale(
        id=make_id(),
        date=today or date.today(),
        items=tuple(cart.get_lines()),
        total=cart.compute_total(),
        payment_method=method,
        customer_name=customer,
    )


def run_registrar_venda(
    session: CartSession,
    payment_method: str,
    customer_name: Optional[str] = None,
    db_path: str = DB_PATH,
    today: Optional[date] = None,
) -> Optional[Sale]:
    """Finaliza o carrinho da sessão, grava a venda e limpa o carrinho.

    Se a gravação falhar, o erro é propagado e o carrinho é mantido.
    """
    sale = finalize_sale(session.cart, payment_method, customer_name, today=today)
    if sale is None:
        log_venda("declined", None, motivo="carrinho vazio")
        return None

    log_venda("finalize", sale.id, sale.total, itens=len(sale.items), pagamento=sale.payment_method)
    try:
        saved = VendaRepo(db_path).create(sale)
        log_database_operation("venda", "INSERT", 1, venda_id=saved.id, itens=len(saved.items))
    except Exception as e:
        log_transaction("venda", {"venda_id": sale.id, "total": sale.total}, error=str(e))
        log_system_event("venda_error", {"error": str(e)}, level="error")
        raise

    session.clear()
    log_transaction("venda", {"venda_id": saved.id}, result={"total": saved.total})
    print_system(f">> Venda {saved.id} registrada ({len(saved.items)} itens, total {saved.total:.2f})")
    return saved


def montar_carrinho(itens: Iterable[Tuple[str, int]], db_path: str = DB_PATH) -> Cart:
    """Monta um carrinho a partir de pares (id do produto, quantidade)."""
    repo = ProdutoRepo(db_path)
    catalogo = {p.id: p for p in repo.list_products()}
    cart = Cart()
    for pid, qtd in itens:
        product = catalogo.get(pid)
        if product is None:
            raise ValidationError(f"produto não encontrado: {pid}")
        cart = cart.add_item(product)
        if qtd > 1:
            cart = cart.update_quantity(product.id, qtd - 1)
    return cart


def run_venda_rapida(
    itens: Iterable[Tuple[str, int]],
    payment_method: str,
    customer_name: Optional[str] = None,
    db_path: str = DB_PATH,
) -> Optional[Sale]:
    """Venda não interativa (CLI): monta o carrinho e registra."""
    log_system_event("venda_rapida_start", {"db_path": db_path})
    session = CartSession(montar_carrinho(itens, db_path=db_path))
    return run_registrar_venda(session, payment_method, customer_name, db_path=db_path)
