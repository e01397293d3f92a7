"""
Testes da importação de planilhas (produtos e despesas).

Cobrem:
1. Normalização de cabeçalhos (acentos, sinônimos PT/ES)
2. Valores monetários com vírgula e datas DD/MM/AAAA
3. Importação em lote com linhas inválidas relatadas e puladas
"""

import pandas as pd

from caixa.adapters.planilhas import (
    _normalize_columns,
    load_despesas_from_xlsx,
    load_produtos_from_xlsx,
)
from caixa.infra.migrations import apply_migrations
from caixa.infra.views import create_views
from caixa.domain.models import Product
from caixa.infra import repositories as repos_mod
from caixa.infra.repositories import DespesaRepo, ProdutoRepo
from caixa.usecases.catalogo import run_produto_lote
from caixa.usecases.despesas import run_despesa_lote


def _db(tmp_path):
    db_path = str(tmp_path / "caixa_test.sqlite")
    apply_migrations(db_path)
    create_views(db_path)
    return db_path


def test_normalize_columns_aliases():
    df = pd.DataFrame({
        "Descrição": ["x"],
        "Valor": ["1"],
        "Categoría": ["rent"],
        "Fecha": ["2026-01-01"],
        "Preço Unitário": ["2"],
    })
    cols = list(_normalize_columns(df).columns)
    assert cols == ["description", "amount", "category", "date", "price"]


def test_load_produtos(tmp_path):
    path = tmp_path / "produtos.xlsx"
    pd.DataFrame({
        "Código": ["P1", None],
        "Nome": ["Café", "Pão"],
        "Preço": ["12,50", "5"],
        "Categoria": ["bebidas", None],
    }).to_excel(path, index=False)

    rows = load_produtos_from_xlsx(str(path))
    assert rows[0] == {"id": "P1", "name": "Café", "price": 12.5, "category": "bebidas", "stock": None}
    assert rows[1]["id"] is None
    assert rows[1]["price"] == 5.0


def test_load_despesas_keeps_missing_amount_as_none(tmp_path):
    path = tmp_path / "despesas.xlsx"
    pd.DataFrame({
        "Descrição": ["Aluguel", "Luz"],
        "Valor": ["1.500,00", None],
        "Categoria": ["Aluguel", "utilities"],
        "Data": ["05/01/2026", "2026-01-10"],
    }).to_excel(path, index=False)

    rows = load_despesas_from_xlsx(str(path))
    assert rows[0] == {"description": "Aluguel", "amount": 1500.0, "category": "rent", "date": "2026-01-05"}
    assert rows[1]["amount"] is None
    assert rows[1]["date"] == "2026-01-10"


def test_run_produto_lote(tmp_path):
    db_path = _db(tmp_path)
    path = tmp_path / "produtos.xlsx"
    pd.DataFrame({
        "Produto": ["Café", None, "Suco"],
        "Preço": ["10", "3", "-1"],
    }).to_excel(path, index=False)

    info = run_produto_lote(str(path), db_path=db_path)
    assert info["total"] == 3
    assert info["sucessos"] == 1
    assert [e["linha"] for e in info["erros"]] == [3, 4]
    assert [p.name for p in ProdutoRepo(db_path).list_products()] == ["Café"]


def test_run_despesa_lote(tmp_path):
    db_path = _db(tmp_path)
    path = tmp_path / "despesas.xlsx"
    pd.DataFrame({
        "Descripción": ["Alquiler", "Luz", "Viaje"],
        "Monto": ["800", None, "50"],
        "Categoría": ["alquiler", "servicios", "viajes"],
        "Fecha": ["01/01/2026", "02/01/2026", "03/01/2026"],
    }).to_excel(path, index=False)

    info = run_despesa_lote(str(path), db_path=db_path)
    assert info["sucessos"] == 1
    assert [e["linha"] for e in info["erros"]] == [3, 4]
    [d] = DespesaRepo(db_path).list_expenses()
    assert (d.description, d.amount, d.category) == ("Alquiler", 800.0, "rent")


def test_run_produto_lote_duplicate_code_is_reported(tmp_path):
    db_path = _db(tmp_path)
    ProdutoRepo(db_path).create(Product("p1", "Café", 10.0))
    path = tmp_path / "produtos.xlsx"
    pd.DataFrame({
        "Código": ["p2", "p1", "p3"],
        "Nome": ["Pão", "Café Duplicado", "Suco"],
        "Preço": ["5", "11", "7"],
    }).to_excel(path, index=False)

    info = run_produto_lote(str(path), db_path=db_path)
    assert info["sucessos"] == 2
    [erro] = info["erros"]
    assert erro["linha"] == 3
    assert "p1" in erro["mensagem"]
    assert [p.id for p in ProdutoRepo(db_path).list_products()] == ["p1", "p2", "p3"]
    assert ProdutoRepo(db_path).get("p1").name == "Café"


def test_run_despesa_lote_db_conflict_is_reported(tmp_path, monkeypatch):
    db_path = _db(tmp_path)
    monkeypatch.setattr(repos_mod, "_new_id", lambda: "fixo")
    path = tmp_path / "despesas.xlsx"
    pd.DataFrame({
        "Descrição": ["Aluguel", "Luz"],
        "Valor": ["800", "120"],
        "Categoria": ["rent", "utilities"],
        "Data": ["2026-01-01", "2026-01-02"],
    }).to_excel(path, index=False)

    info = run_despesa_lote(str(path), db_path=db_path)
    assert info["sucessos"] == 1
    assert [e["linha"] for e in info["erros"]] == [3]
    assert [d.description for d in DespesaRepo(db_path).list_expenses()] == ["Aluguel"]
