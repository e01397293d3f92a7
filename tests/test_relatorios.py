import json
import sqlite3
from datetime import date

import pytest

from caixa.domain.models import AvailableAmount, CartLine, Expense, Sale
from caixa.infra.db import connect
from caixa.infra.migrations import apply_migrations
from caixa.infra.views import create_views
from caixa.infra.repositories import DespesaRepo, ParamsRepo, VendaRepo
from caixa.usecases.historico import run_venda_remover
from caixa.usecases.relatorios import build_report, format_money, relatorio_mensal


def _db(tmp_path):
    db_path = str(tmp_path / "caixa_test.sqlite")
    apply_migrations(db_path)
    create_views(db_path)
    return db_path


def _sale(sid, d, total, method="cash", pid="a", qty=1):
    return Sale(sid, d, (CartLine(pid, pid.upper(), total / qty, qty),), total, method)


def _seed(db_path):
    vendas = VendaRepo(db_path)
    vendas.create(_sale("v1", date(2026, 1, 5), 60.0, "cash", "a", 2))
    vendas.create(_sale("v2", date(2026, 1, 5), 40.0, "card", "b"))
    vendas.create(_sale("v3", date(2026, 1, 20), 50.0, "cash", "a"))
    vendas.create(_sale("v4", date(2026, 2, 1), 999.0, "cash", "c"))

    despesas = DespesaRepo(db_path)
    despesas.create(Expense(None, "Aluguel", 30.0, "rent", date(2026, 1, 1)))
    despesas.create(Expense(None, "Luz", 20.0, "utilities", date(2026, 1, 31)))
    despesas.create(Expense(None, "Aluguel fev", 30.0, "rent", date(2026, 2, 1)))


def test_build_report_filters_period():
    sales = [
        _sale("v1", date(2026, 1, 31), 100.0),
        _sale("v2", date(2026, 2, 1), 10.0),
    ]
    report = build_report(sales, [], 2026, 1)
    assert report.period == "2026-01"
    assert report.kpis.total_revenue == 100
    assert report.kpis.transaction_count == 1
    assert report.daily_sales_series == [{"day": 31, "total": 100}]
    assert report.kpis.total_expenses == AvailableAmount(True, 0)


def test_build_report_without_expenses():
    sales = [_sale("v1", date(2026, 1, 2), 80.0)]
    expenses = [Expense("d1", "Aluguel", 30.0, "rent", date(2026, 1, 1))]
    report = build_report(sales, expenses, 2026, 1, expenses_available=False)
    assert report.expense_category_totals == []
    assert format_money(report.kpis.total_expenses) == "N/A"
    assert format_money(report.kpis.net_profit) == "N/A"
    assert report.kpis.net_profit.partial


def test_build_report_empty_history():
    report = build_report([], [], 2026, 1)
    assert report.kpis.transaction_count == 0
    assert report.kpis.average_ticket == 0
    assert report.top_products == []
    assert report.payment_method_distribution == []


def test_relatorio_mensal_from_db(tmp_path):
    db_path = _db(tmp_path)
    _seed(db_path)

    report = relatorio_mensal(2026, 1, db_path=db_path)
    k = report.kpis
    assert k.total_revenue == 150
    assert k.total_expenses.value == 50
    assert k.net_profit.value == 100
    assert k.transaction_count == 3
    assert k.average_ticket == 50
    assert k.total_items_sold == 4
    assert report.daily_sales_series == [{"day": 5, "total": 100}, {"day": 20, "total": 50}]
    assert report.top_products[0]["productId"] == "a"
    assert report.top_products[0]["revenue"] == 110
    assert report.payment_method_distribution == [
        {"method": "cash", "count": 2},
        {"method": "card", "count": 1},
    ]
    assert report.expense_category_totals == [
        {"category": "rent", "amount": 30.0},
        {"category": "utilities", "amount": 20.0},
    ]

    # o dicionário é serializável
    d = json.loads(json.dumps(report.to_dict()))
    assert d["period"] == "2026-01"
    assert d["expensesAvailable"] is True


def test_relatorio_mensal_top_n_from_params(tmp_path):
    db_path = _db(tmp_path)
    _seed(db_path)
    ParamsRepo(db_path).set_many([("top_n", "1")])
    assert len(relatorio_mensal(2026, 1, db_path=db_path).top_products) == 1
    assert len(relatorio_mensal(2026, 1, db_path=db_path, top_n=5).top_products) == 2


def test_relatorio_mensal_expense_failure_degrades(tmp_path):
    db_path = _db(tmp_path)
    _seed(db_path)
    with connect(db_path) as c:
        c.execute("DROP TABLE despesa")

    report = relatorio_mensal(2026, 1, db_path=db_path)
    assert report.expenses_available is False
    assert report.kpis.total_revenue == 150
    assert format_money(report.kpis.total_expenses) == "N/A"
    assert report.kpis.net_profit == AvailableAmount(False, 150, partial=True)


def test_relatorio_mensal_sales_failure_propagates(tmp_path):
    db_path = _db(tmp_path)
    with connect(db_path) as c:
        c.execute("DROP VIEW vw_venda_resumo")
        c.execute("DROP TABLE venda_item")
        c.execute("DROP TABLE venda")
    with pytest.raises(sqlite3.Error):
        relatorio_mensal(2026, 1, db_path=db_path)


def test_deleted_sale_is_not_reported(tmp_path):
    db_path = _db(tmp_path)
    _seed(db_path)
    run_venda_remover("v3", db_path=db_path)

    report = relatorio_mensal(2026, 1, db_path=db_path)
    assert report.kpis.transaction_count == 2
    assert report.daily_sales_series == [{"day": 5, "total": 100}]


@pytest.mark.parametrize(
    "amount,moeda,expected",
    [
        (1234.5, "$", "$1,234.50"),
        (0, "R$", "R$0.00"),
        (AvailableAmount(True, 0.0), "$", "$0.00"),
        (AvailableAmount(False), "$", "N/A"),
    ],
)
def test_format_money(amount, moeda, expected):
    assert format_money(amount, moeda) == expected
