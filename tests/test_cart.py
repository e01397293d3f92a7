from caixa.domain.cart import Cart, CartState
from caixa.domain.models import Product


CAFE = Product(id="a", name="Café", price=10.0)
PAO = Product(id="b", name="Pão", price=5.0)


def test_cart_example_total():
    cart = Cart().add_item(CAFE).add_item(CAFE).add_item(PAO)
    assert [(l.product_id, l.quantity) for l in cart.get_lines()] == [("a", 2), ("b", 1)]
    assert cart.compute_total() == 25
    assert cart.get_total() == 25
    assert cart.item_count == 3


def test_empty_cart():
    cart = Cart()
    assert cart.is_empty
    assert cart.state is CartState.EMPTY
    assert cart.compute_total() == 0
    assert cart.get_lines() == []


def test_transitions_do_not_mutate_original():
    base = Cart().add_item(CAFE)
    bigger = base.add_item(CAFE)
    assert base.get_lines()[0].quantity == 1
    assert bigger.get_lines()[0].quantity == 2

    removed = bigger.remove_item("a")
    assert removed.is_empty
    assert bigger.item_count == 2


def test_unit_price_frozen_on_first_add():
    cart = Cart().add_item(CAFE)
    remarcado = Product(id="a", name="Café", price=99.0)
    cart = cart.add_item(remarcado)
    line = cart.find("a")
    assert line.unit_price == 10.0
    assert line.quantity == 2
    assert cart.compute_total() == 20


def test_update_quantity_clamps_and_removes_at_zero():
    cart = Cart().add_item(CAFE).add_item(PAO)
    cart = cart.update_quantity("a", 4)
    assert cart.find("a").quantity == 5

    cart = cart.update_quantity("a", -10)
    assert cart.find("a") is None
    assert [l.product_id for l in cart.get_lines()] == ["b"]

    cart = cart.update_quantity("b", -1)
    assert cart.is_empty
    assert cart.state is CartState.EMPTY


def test_update_quantity_keeps_position():
    cart = Cart().add_item(CAFE).add_item(PAO).update_quantity("a", 1)
    assert [l.product_id for l in cart.get_lines()] == ["a", "b"]


def test_unknown_ids_are_no_ops():
    cart = Cart().add_item(CAFE)
    assert cart.update_quantity("zzz", 3) is cart
    assert cart.remove_item("zzz") is cart


def test_clear():
    cart = Cart().add_item(CAFE).add_item(PAO)
    assert cart.state is CartState.OPEN
    assert cart.clear().is_empty
    assert not cart.is_empty
