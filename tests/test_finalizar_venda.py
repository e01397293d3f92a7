from datetime import date

import sqlite3

import pytest

from caixa.domain.cart import Cart
from caixa.domain.models import Product
from caixa.domain.policies import ValidationError
from caixa.infra.migrations import apply_migrations
from caixa.infra.views import create_views
from caixa.infra.repositories import ProdutoRepo, VendaRepo
from caixa.usecases.registrar_venda import (
    CartSession,
    finalize_sale,
    montar_carrinho,
    run_registrar_venda,
    run_venda_rapida,
)


CAFE = Product(id="a", name="Café", price=10.0)
PAO = Product(id="b", name="Pão", price=5.0)


def _db(tmp_path):
    db_path = str(tmp_path / "caixa_test.sqlite")
    apply_migrations(db_path)
    create_views(db_path)
    return db_path


def _cart():
    return Cart().add_item(CAFE).add_item(CAFE).add_item(PAO)


def test_finalize_empty_cart_is_declined():
    assert finalize_sale(Cart(), "cash") is None


def test_finalize_builds_sale_snapshot():
    cart = _cart()
    sale = finalize_sale(cart, "card", "Ana", today=date(2026, 1, 31), id_factory=lambda: "v1")

    assert sale.id == "v1"
    assert sale.date == date(2026, 1, 31)
    assert sale.total == 25
    assert sale.payment_method == "card"
    assert sale.customer_name == "Ana"
    assert list(sale.items) == cart.get_lines()
    assert sale.items_count == 3
    # o carrinho não é alterado pelo finalizador
    assert cart.item_count == 3


def test_finalize_generates_unique_ids():
    a = finalize_sale(_cart(), "cash")
    b = finalize_sale(_cart(), "cash")
    assert a.id and b.id and a.id != b.id
    assert a.date == date.today()


def test_finalize_blank_customer_becomes_none():
    sale = finalize_sale(_cart(), "cash", "   ")
    assert sale.customer_name is None


def test_finalize_rejects_unknown_payment_method():
    with pytest.raises(ValidationError):
        finalize_sale(_cart(), "cheque")


def test_session_operations():
    s = CartSession()
    s.add_item(CAFE)
    s.add_item(PAO)
    s.update_quantity("a", 2)
    assert s.get_cart_total() == 35
    s.remove_item("b")
    assert [l.product_id for l in s.get_cart_lines()] == ["a"]
    s.clear()
    assert s.get_cart_lines() == []


def test_sessions_are_independent():
    s1, s2 = CartSession(), CartSession()
    s1.add_item(CAFE)
    assert s2.get_cart_lines() == []


def test_run_registrar_venda_persists_and_clears(tmp_path):
    db_path = _db(tmp_path)
    session = CartSession(_cart())

    sale = run_registrar_venda(session, "transfer", "", db_path=db_path, today=date(2026, 3, 5))

    assert sale is not None
    assert session.get_cart_lines() == []
    saved = VendaRepo(db_path).get(sale.id)
    assert saved == sale
    assert saved.customer_name is None
    assert [(i.product_id, i.quantity, i.unit_price) for i in saved.items] == [("a", 2, 10.0), ("b", 1, 5.0)]


def test_run_registrar_venda_empty_session(tmp_path):
    db_path = _db(tmp_path)
    assert run_registrar_venda(CartSession(), "cash", db_path=db_path) is None
    assert VendaRepo(db_path).list_sales() == []


def test_run_registrar_venda_keeps_cart_when_store_fails(tmp_path):
    db_path = str(tmp_path / "sem_schema.sqlite")
    session = CartSession(_cart())
    with pytest.raises(sqlite3.Error):
        run_registrar_venda(session, "cash", db_path=db_path)
    assert session.get_cart_total() == 25


def test_montar_carrinho_and_venda_rapida(tmp_path):
    db_path = _db(tmp_path)
    repo = ProdutoRepo(db_path)
    repo.create(CAFE)
    repo.create(PAO)

    cart = montar_carrinho([("a", 3), ("b", 1)], db_path=db_path)
    assert cart.compute_total() == 35

    sale = run_venda_rapida([("b", 2)], "cash", db_path=db_path)
    assert sale.total == 10
    assert len(VendaRepo(db_path).list_sales()) == 1


def test_montar_carrinho_unknown_product(tmp_path):
    db_path = _db(tmp_path)
    with pytest.raises(ValidationError):
        montar_carrinho([("nao-existe", 1)], db_path=db_path)
