from datetime import date

from caixa.domain.agrupamentos import (
    daily_sales_series,
    dense_daily_series,
    expense_category_totals,
    payment_method_distribution,
    top_products,
)
from caixa.domain.models import CartLine, Expense, Sale


def _sale(sid, d, lines, method="cash"):
    items = tuple(CartLine(pid, name, price, qty) for pid, name, price, qty in lines)
    return Sale(sid, d, items, sum(i.line_total for i in items), method)


def test_daily_series_is_sparse_and_sorted():
    sales = [
        _sale("v1", date(2026, 1, 20), [("a", "A", 50.0, 1)]),
        _sale("v2", date(2026, 1, 5), [("a", "A", 60.0, 1)]),
        _sale("v3", date(2026, 1, 5), [("b", "B", 40.0, 1)]),
    ]
    assert daily_sales_series(sales) == [
        {"day": 5, "total": 100},
        {"day": 20, "total": 50},
    ]
    assert daily_sales_series([]) == []


def test_daily_series_rounds_totals():
    sales = [
        _sale("v1", date(2026, 1, 1), [("a", "A", 0.1, 1)]),
        _sale("v2", date(2026, 1, 1), [("a", "A", 0.2, 1)]),
    ]
    assert daily_sales_series(sales) == [{"day": 1, "total": 0.3}]


def test_dense_series_fills_month():
    dense = dense_daily_series([{"day": 5, "total": 100}], 2026, 2)
    assert len(dense) == 28
    assert dense[4] == {"day": 5, "total": 100}
    assert dense[0] == {"day": 1, "total": 0}


def test_top_products_groups_and_ranks():
    sales = [
        _sale("v1", date(2026, 1, 1), [("a", "Café", 10.0, 2), ("b", "Pão", 5.0, 1)]),
        _sale("v2", date(2026, 1, 2), [("b", "Pão Francês", 5.0, 10), ("c", "Suco", 8.0, 1)]),
    ]
    top = top_products(sales)
    assert top[0] == {"productId": "b", "name": "Pão", "quantity": 11, "revenue": 55.0}
    assert [t["productId"] for t in top] == ["b", "a", "c"]


def test_top_products_limit_and_ties():
    lines = [(f"p{i:02d}", f"P{i}", 1.0, 1) for i in range(15)]
    sales = [_sale("v1", date(2026, 1, 1), lines)]
    top = top_products(sales)
    assert len(top) == 10
    # empates mantêm a ordem de aparição
    assert [t["productId"] for t in top] == [f"p{i:02d}" for i in range(10)]
    assert top_products(sales, limit=3)[-1]["productId"] == "p02"
    assert top_products(sales, limit=0) == []


def test_payment_distribution_first_seen_order():
    sales = [
        _sale("v1", date(2026, 1, 1), [("a", "A", 1.0, 1)], "card"),
        _sale("v2", date(2026, 1, 1), [("a", "A", 1.0, 1)], "cash"),
        _sale("v3", date(2026, 1, 2), [("a", "A", 1.0, 1)], "card"),
    ]
    assert payment_method_distribution(sales) == [
        {"method": "card", "count": 2},
        {"method": "cash", "count": 1},
    ]


def test_expense_category_totals():
    expenses = [
        Expense("d1", "Aluguel", 1000.0, "rent", date(2026, 1, 1)),
        Expense("d2", "Luz", 120.5, "utilities", date(2026, 1, 3)),
        Expense("d3", "Água", 30.25, "utilities", date(2026, 1, 4)),
    ]
    assert expense_category_totals(expenses) == [
        {"category": "rent", "amount": 1000.0},
        {"category": "utilities", "amount": 150.75},
    ]
    assert expense_category_totals([]) == []
