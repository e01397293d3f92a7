# caixa/adapters/cli.py
"""
CLI do caixa (Typer).

Comandos principais:
- migrate                       -> aplica migrações e cria views
- params set/get/show           -> gerencia parâmetros globais
- produtos add/edit/rm/list     -> catálogo de produtos
- produtos importar <xlsx>      -> importa produtos de um XLSX
- venda --item ID[:QTD] ...     -> registra uma venda sem interação
- vendas list/show/rm           -> histórico de vendas
- despesas add/edit/rm/list     -> despesas do negócio
- despesas importar <xlsx>      -> importa despesas de um XLSX
- rel mensal                    -> relatório mensal (KPIs e agrupamentos)
- pdv                           -> terminal interativo do caixa
- logs [tipo]                   -> últimas linhas de um log
"""

from __future__ import annotations

import json
import sqlite3
from datetime import date
from typing import Optional, List, Dict, Any

import typer
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich import box

from caixa.config import DB_PATH, DEFAULTS
from caixa.adapters.parsers import parse_data, parse_item_spec, parse_valor
from caixa.domain.agrupamentos import dense_daily_series
from caixa.domain.models import EXPENSE_CATEGORIES, PAYMENT_METHODS
from caixa.domain.periodo import current_period, filter_period, parse_ano_mes
from caixa.infra.logger import get_log_summary, LOG_FILES
from caixa.infra.migrations import apply_migrations
from caixa.infra.views import create_views
from caixa.infra.repositories import DespesaRepo, ParamsRepo, ProdutoRepo, RepositoryError
from caixa.usecases.catalogo import (
    run_produto_criar, run_produto_editar, run_produto_listar,
    run_produto_lote, run_produto_remover,
)
from caixa.usecases.despesas import (
    run_despesa_criar, run_despesa_editar, run_despesa_listar,
    run_despesa_lote, run_despesa_remover,
)
from caixa.usecases.historico import run_historico, run_venda_detalhe, run_venda_remover
from caixa.usecases.registrar_venda import run_venda_rapida
from caixa.usecases.relatorios import MonthlyReport, format_money, relatorio_mensal


app = typer.Typer(help="Caixa PDV (CLI)")
console = Console()

# erros exibidos em vermelho com saída 1 (ValidationError é um ValueError)
_ERROS = (ValueError, sqlite3.Error, RepositoryError)


# -----------------------
# util
# -----------------------

def _print_json(obj) -> None:
    typer.echo(json.dumps(obj, ensure_ascii=False, indent=2))


def _erro(e: Exception) -> None:
    console.print(f"[bold red]Erro:[/] {e}")
    raise typer.Exit(code=1)


def _fmt_num(val: float) -> str:
    return f"{val:,.2f}".replace(",", "X").replace(".", ",").replace("X", ".")


def _moeda(db_path: str) -> str:
    return ParamsRepo(db_path).load().moeda


def _display_table(data: Dict[str, Any] | List[Dict[str, Any]], title: str = "Resultado") -> None:
    """Exibe os dados em tabelas formatadas usando Rich."""
    if not data:
        console.print(Panel("Nenhum dado encontrado", title=title, border_style="yellow"))
        return

    # Lista de registros (catálogo, histórico, despesas)
    if isinstance(data, list) and isinstance(data[0], dict):
        table = Table(title=title, box=box.ROUNDED)
        columns = list(data[0].keys())
        for column in columns:
            if column.lower() in ["preco", "total", "valor", "quantidade", "itens", "estoque"]:
                table.add_column(column, justify="right")
            elif column.lower() in ["data"]:
                table.add_column(column, justify="center")
            else:
                table.add_column(column)

        for row in data:
            values = []
            for col in columns:
                val = row.get(col)
                if val is None:
                    values.append("")
                elif isinstance(val, float):
                    values.append(_fmt_num(val))
                else:
                    values.append(str(val))
            table.add_row(*values)

        console.print(table)
        return

    # Importação em lote
    if isinstance(data, dict) and "sucessos" in data and "total" in data:
        titulo = f"{data.get('tipo', 'Registros')} em Lote"
        panel_content = [
            f"Arquivo: {data.get('arquivo', '')}",
            f"Total de registros: {data['total']}",
            f"Processados com sucesso: {data['sucessos']}",
        ]
        if data.get("erros"):
            panel_content.append(f"Erros: {len(data['erros'])}")
        console.print(Panel("\n".join(panel_content), title=titulo))

        if data.get("erros"):
            erro_table = Table(title="Erros Encontrados")
            erro_table.add_column("Linha")
            erro_table.add_column("Erro")
            for erro in data["erros"]:
                erro_table.add_row(str(erro.get("linha", "?")), erro.get("mensagem", "Erro desconhecido"))
            console.print(erro_table)
        return

    _print_json(data)


def _barras(series: List[Dict[str, Any]], largura: int = 30) -> str:
    """Gráfico de barras em texto para a série diária (dias sem venda = 0)."""
    maior = max((r["total"] for r in series), default=0)
    linhas = []
    for r in series:
        n = int(round(r["total"] / maior * largura)) if maior else 0
        linhas.append(f"{r['day']:>2} │{'█' * n} {_fmt_num(float(r['total'])) if r['total'] else ''}")
    return "\n".join(linhas)


def _display_report(report: MonthlyReport, moeda: str) -> None:
    k = report.kpis
    resumo = [
        f"Receita total:      {format_money(k.total_revenue, moeda)}",
        f"Despesas totais:    {format_money(k.total_expenses, moeda)}",
        f"Lucro líquido:      {format_money(k.net_profit, moeda)}",
        f"Transações:         {k.transaction_count}",
        f"Ticket médio:       {format_money(k.average_ticket, moeda)}",
        f"Itens vendidos:     {k.total_items_sold}",
    ]
    if not report.expenses_available:
        resumo.append("[yellow]Despesas indisponíveis: lucro calculado só com a receita.[/yellow]")
    console.print(Panel("\n".join(resumo), title=f"Relatório {report.period}", border_style="cyan"))

    if report.daily_sales_series:
        serie = dense_daily_series(report.daily_sales_series, report.year, report.month)
        console.print(Panel(_barras(serie), title="Vendas por dia"))

    _display_table(
        [
            {"produto": r["name"], "quantidade": r["quantity"], "receita": format_money(r["revenue"], moeda)}
            for r in report.top_products
        ],
        title="Produtos mais vendidos",
    )
    _display_table(
        [{"pagamento": r["method"], "vendas": r["count"]} for r in report.payment_method_distribution],
        title="Formas de pagamento",
    )
    if report.expenses_available:
        _display_table(
            [{"categoria": r["category"], "valor": format_money(r["amount"], moeda)}
             for r in report.expense_category_totals],
            title="Despesas por categoria",
        )


# -----------------------
# comandos de infra
# -----------------------

@app.command("migrate")
def cmd_migrate(db_path: str = typer.Option(DB_PATH, "--db", help="Caminho do SQLite")):
    """Aplica migrações e recria as views auxiliares."""
    apply_migrations(db_path)
    create_views(db_path)
    typer.echo(f">> Migrações aplicadas e views criadas em: {db_path}")


params_app = typer.Typer(help="Gerenciar parâmetros globais (ranking, moeda, pagamento padrão).")
app.add_typer(params_app, name="params")


@params_app.command("set")
def cmd_params_set(
    top_n: Optional[int] = typer.Option(None, help="Tamanho do ranking de produtos (ex.: 10)"),
    moeda: Optional[str] = typer.Option(None, help="Símbolo da moeda (ex.: R$)"),
    forma_pagamento: Optional[str] = typer.Option(None, help=f"Pagamento padrão ({', '.join(PAYMENT_METHODS)})"),
    db_path: str = typer.Option(DB_PATH, "--db", help="Caminho do SQLite"),
):
    """Define parâmetros globais (apenas os informados são alterados)."""
    repo = ParamsRepo(db_path)
    items: List[tuple[str, str]] = []
    if top_n is not None:
        items.append(("top_n", str(top_n)))
    if moeda is not None:
        items.append(("moeda", moeda))
    if forma_pagamento is not None:
        if forma_pagamento.strip().lower() not in PAYMENT_METHODS:
            _erro(ValueError(f"forma de pagamento inválida: {forma_pagamento!r}"))
        items.append(("forma_pagamento", forma_pagamento.strip().lower()))
    if not items:
        typer.echo("Nada a alterar. Informe pelo menos um parâmetro.")
        raise typer.Exit(code=1)
    repo.set_many(items)
    typer.echo(">> Parâmetros atualizados.")


@params_app.command("get")
def cmd_params_get(
    chave: str = typer.Argument(..., help="Ex.: top_n | moeda | forma_pagamento"),
    db_path: str = typer.Option(DB_PATH, "--db", help="Caminho do SQLite"),
):
    """Mostra um parâmetro específico."""
    val = ParamsRepo(db_path).get(chave)
    if val is None:
        typer.echo("(None)")
    else:
        typer.echo(val)


@params_app.command("show")
def cmd_params_show(
    db_path: str = typer.Option(DB_PATH, "--db", help="Caminho do SQLite"),
):
    """Exibe os parâmetros efetivos (com fallback para defaults) em JSON."""
    p = ParamsRepo(db_path).load()
    _print_json({
        "top_n": p.top_n,
        "moeda": p.moeda,
        "forma_pagamento": p.forma_pagamento,
        "_defaults": {
            "top_n": DEFAULTS.top_n,
            "moeda": DEFAULTS.moeda,
            "forma_pagamento": DEFAULTS.forma_pagamento,
        },
        "_db": db_path,
    })


# -----------------------
# produtos
# -----------------------

produtos_app = typer.Typer(help="Catálogo de produtos.")
app.add_typer(produtos_app, name="produtos")


def _produto_row(p) -> Dict[str, Any]:
    return {"id": p.id, "nome": p.name, "preco": p.price, "categoria": p.category, "estoque": p.stock}


@produtos_app.command("add")
def cmd_produto_add(
    nome: str = typer.Option(..., help="Nome do produto"),
    preco: str = typer.Option(..., help="Preço (ex.: 12,50)"),
    categoria: Optional[str] = typer.Option(None, help="Categoria"),
    estoque: Optional[int] = typer.Option(None, help="Estoque informativo"),
    produto_id: Optional[str] = typer.Option(None, "--id", help="Código (gerado se omitido)"),
    db_path: str = typer.Option(DB_PATH, "--db", help="Caminho do SQLite"),
):
    """Cadastra um produto."""
    rec = {"id": produto_id, "name": nome, "price": parse_valor(preco), "category": categoria, "stock": estoque}
    try:
        p = run_produto_criar(rec, db_path=db_path)
    except _ERROS as e:
        _erro(e)
    typer.echo(f">> Produto cadastrado: {p.id}")


@produtos_app.command("edit")
def cmd_produto_edit(
    produto_id: str = typer.Argument(..., help="Código do produto"),
    nome: Optional[str] = typer.Option(None, help="Novo nome"),
    preco: Optional[str] = typer.Option(None, help="Novo preço"),
    categoria: Optional[str] = typer.Option(None, help="Nova categoria"),
    estoque: Optional[int] = typer.Option(None, help="Novo estoque"),
    db_path: str = typer.Option(DB_PATH, "--db", help="Caminho do SQLite"),
):
    """Edita um produto (campos não informados são mantidos)."""
    atual = ProdutoRepo(db_path).get(produto_id)
    if atual is None:
        _erro(RepositoryError(f"produto não encontrado: {produto_id}"))
    rec = {
        "name": nome if nome is not None else atual.name,
        "price": parse_valor(preco) if preco is not None else atual.price,
        "category": categoria if categoria is not None else atual.category,
        "stock": estoque if estoque is not None else atual.stock,
    }
    try:
        run_produto_editar(produto_id, rec, db_path=db_path)
    except _ERROS as e:
        _erro(e)
    typer.echo(f">> Produto atualizado: {produto_id}")


@produtos_app.command("rm")
def cmd_produto_rm(
    produto_id: str = typer.Argument(..., help="Código do produto"),
    db_path: str = typer.Option(DB_PATH, "--db", help="Caminho do SQLite"),
):
    """Remove um produto do catálogo (vendas gravadas não mudam)."""
    try:
        run_produto_remover(produto_id, db_path=db_path)
    except _ERROS as e:
        _erro(e)
    typer.echo(f">> Produto removido: {produto_id}")


@produtos_app.command("list")
def cmd_produto_list(
    busca: Optional[str] = typer.Option(None, "--busca", "-b", help="Parte do nome ou código exato"),
    db_path: str = typer.Option(DB_PATH, "--db", help="Caminho do SQLite"),
):
    """Lista o catálogo (opcionalmente filtrado por nome)."""
    try:
        produtos = run_produto_listar(db_path=db_path, busca=busca)
    except _ERROS as e:
        _erro(e)
    _display_table([_produto_row(p) for p in produtos], title="Produtos")


@produtos_app.command("importar")
def cmd_produto_importar(
    path: str = typer.Argument(..., help="Caminho do XLSX de PRODUTOS"),
    db_path: str = typer.Option(DB_PATH, "--db", help="Caminho do SQLite"),
):
    """Importa produtos de um XLSX (linhas inválidas são relatadas)."""
    try:
        info = run_produto_lote(path, db_path=db_path)
    except (_ERROS + (OSError,)) as e:
        _erro(e)
    _display_table(info, title="Importação de Produtos")


# -----------------------
# vendas
# -----------------------

@app.command("venda")
def cmd_venda(
    itens: Optional[List[str]] = typer.Option(None, "--item", "-i", help="ID[:QTD], pode repetir"),
    pagamento: Optional[str] = typer.Option(None, "--pagamento", help=f"{', '.join(PAYMENT_METHODS)}"),
    cliente: Optional[str] = typer.Option(None, "--cliente", help="Nome do cliente (opcional)"),
    db_path: str = typer.Option(DB_PATH, "--db", help="Caminho do SQLite"),
):
    """Registra uma venda a partir de itens informados na linha de comando."""
    try:
        pares = []
        for item in itens or []:
            pid, qtd = parse_item_spec(item)
            if pid is None:
                raise ValueError(f"item sem código: {item!r}")
            pares.append((pid, qtd))
        params = ParamsRepo(db_path).load()
        sale = run_venda_rapida(pares, pagamento or params.forma_pagamento, cliente, db_path=db_path)
    except _ERROS as e:
        _erro(e)

    if sale is None:
        console.print("[yellow]Carrinho vazio: nenhuma venda registrada.[/yellow]")
        return
    typer.echo(f">> Venda registrada: {sale.id} ({format_money(sale.total, params.moeda)})")


vendas_app = typer.Typer(help="Histórico de vendas.")
app.add_typer(vendas_app, name="vendas")


@vendas_app.command("list")
def cmd_vendas_list(
    data: Optional[str] = typer.Option(None, "--data", help="Dia exato (YYYY-MM-DD ou DD/MM/AAAA)"),
    mes: Optional[str] = typer.Option(None, "--mes", help="Período YYYY-MM"),
    db_path: str = typer.Option(DB_PATH, "--db", help="Caminho do SQLite"),
):
    """Lista vendas, mais recentes primeiro."""
    try:
        dia = None
        if data:
            dia = parse_data(data)
            if dia is None:
                raise ValueError(f"data inválida: {data!r}")
        rows = run_historico(data=dia, ano_mes=mes, db_path=db_path)
    except _ERROS as e:
        _erro(e)
    _display_table(
        [
            {
                "id": r["id"],
                "data": r["date"],
                "cliente": r["customerName"] or "",
                "pagamento": r["paymentMethod"],
                "itens": r["itemsCount"],
                "total": r["total"],
            }
            for r in rows
        ],
        title="Vendas",
    )


@vendas_app.command("show")
def cmd_vendas_show(
    venda_id: str = typer.Argument(..., help="Id da venda"),
    db_path: str = typer.Option(DB_PATH, "--db", help="Caminho do SQLite"),
):
    """Mostra os itens de uma venda."""
    try:
        sale = run_venda_detalhe(venda_id, db_path=db_path)
        if sale is None:
            raise RepositoryError(f"venda não encontrada: {venda_id}")
    except _ERROS as e:
        _erro(e)
    moeda = _moeda(db_path)
    cabecalho = [
        f"Data: {sale.date.isoformat()}",
        f"Pagamento: {sale.payment_method}",
        f"Cliente: {sale.customer_name or '-'}",
        f"Total: {format_money(sale.total, moeda)}",
    ]
    console.print(Panel("\n".join(cabecalho), title=f"Venda {sale.id}"))
    _display_table(
        [
            {
                "produto": it.product_id,
                "nome": it.name,
                "quantidade": it.quantity,
                "preco": it.unit_price,
                "subtotal": format_money(it.line_total, moeda),
            }
            for it in sale.items
        ],
        title="Itens",
    )


@vendas_app.command("rm")
def cmd_vendas_rm(
    venda_id: str = typer.Argument(..., help="Id da venda"),
    db_path: str = typer.Option(DB_PATH, "--db", help="Caminho do SQLite"),
):
    """Remove uma venda inteira (não existe edição de venda)."""
    try:
        run_venda_remover(venda_id, db_path=db_path)
    except _ERROS as e:
        _erro(e)
    typer.echo(f">> Venda removida: {venda_id}")


# -----------------------
# despesas
# -----------------------

despesas_app = typer.Typer(help="Despesas do negócio.")
app.add_typer(despesas_app, name="despesas")


def _despesa_row(e) -> Dict[str, Any]:
    return {
        "id": e.id,
        "data": e.date.isoformat(),
        "descricao": e.description,
        "categoria": e.category,
        "valor": e.amount,
    }


@despesas_app.command("add")
def cmd_despesa_add(
    descricao: str = typer.Option(..., help="Descrição"),
    valor: str = typer.Option(..., help="Valor (ex.: 150,00)"),
    categoria: str = typer.Option(..., help=f"{', '.join(EXPENSE_CATEGORIES)}"),
    data: Optional[str] = typer.Option(None, help="Data (padrão: hoje)"),
    db_path: str = typer.Option(DB_PATH, "--db", help="Caminho do SQLite"),
):
    """Registra uma despesa."""
    rec = {
        "description": descricao,
        "amount": parse_valor(valor),
        "category": categoria,
        "date": parse_data(data) if data else date.today().isoformat(),
    }
    try:
        e = run_despesa_criar(rec, db_path=db_path)
    except _ERROS as err:
        _erro(err)
    typer.echo(f">> Despesa registrada: {e.id}")


@despesas_app.command("edit")
def cmd_despesa_edit(
    despesa_id: str = typer.Argument(..., help="Id da despesa"),
    descricao: Optional[str] = typer.Option(None, help="Nova descrição"),
    valor: Optional[str] = typer.Option(None, help="Novo valor"),
    categoria: Optional[str] = typer.Option(None, help="Nova categoria"),
    data: Optional[str] = typer.Option(None, help="Nova data"),
    db_path: str = typer.Option(DB_PATH, "--db", help="Caminho do SQLite"),
):
    """Edita uma despesa (o registro é substituído por inteiro)."""
    atual = DespesaRepo(db_path).get(despesa_id)
    if atual is None:
        _erro(RepositoryError(f"despesa não encontrada: {despesa_id}"))
    rec = {
        "description": descricao if descricao is not None else atual.description,
        "amount": parse_valor(valor) if valor is not None else atual.amount,
        "category": categoria if categoria is not None else atual.category,
        "date": parse_data(data) if data is not None else atual.date.isoformat(),
    }
    try:
        run_despesa_editar(despesa_id, rec, db_path=db_path)
    except _ERROS as err:
        _erro(err)
    typer.echo(f">> Despesa atualizada: {despesa_id}")


@despesas_app.command("rm")
def cmd_despesa_rm(
    despesa_id: str = typer.Argument(..., help="Id da despesa"),
    db_path: str = typer.Option(DB_PATH, "--db", help="Caminho do SQLite"),
):
    """Remove uma despesa."""
    try:
        run_despesa_remover(despesa_id, db_path=db_path)
    except _ERROS as err:
        _erro(err)
    typer.echo(f">> Despesa removida: {despesa_id}")


@despesas_app.command("list")
def cmd_despesa_list(
    mes: Optional[str] = typer.Option(None, "--mes", help="Período YYYY-MM"),
    db_path: str = typer.Option(DB_PATH, "--db", help="Caminho do SQLite"),
):
    """Lista despesas."""
    try:
        despesas = run_despesa_listar(db_path=db_path)
        if mes:
            despesas = filter_period(despesas, *parse_ano_mes(mes))
    except _ERROS as err:
        _erro(err)
    _display_table([_despesa_row(e) for e in despesas], title="Despesas")


@despesas_app.command("importar")
def cmd_despesa_importar(
    path: str = typer.Argument(..., help="Caminho do XLSX de DESPESAS"),
    db_path: str = typer.Option(DB_PATH, "--db", help="Caminho do SQLite"),
):
    """Importa despesas de um XLSX (linhas inválidas são relatadas)."""
    try:
        info = run_despesa_lote(path, db_path=db_path)
    except (_ERROS + (OSError,)) as err:
        _erro(err)
    _display_table(info, title="Importação de Despesas")


# -----------------------
# relatórios
# -----------------------

rel_app = typer.Typer(help="Relatórios do caixa")
app.add_typer(rel_app, name="rel")


@rel_app.command("mensal")
def rel_mensal(
    mes: Optional[str] = typer.Option(None, "--mes", help="YYYY-MM (padrão: mês corrente)"),
    top_n: Optional[int] = typer.Option(None, "--top-n", help="Tamanho do ranking de produtos"),
    como_json: bool = typer.Option(False, "--json", help="Saída em JSON"),
    db_path: str = typer.Option(DB_PATH, "--db", help="Caminho do SQLite"),
):
    """Relatório mensal: KPIs, vendas por dia, ranking e distribuições."""
    try:
        year, month = parse_ano_mes(mes) if mes else current_period()
        report = relatorio_mensal(year, month, db_path=db_path, top_n=top_n)
    except _ERROS as e:
        _erro(e)
    if como_json:
        _print_json(report.to_dict())
        return
    _display_report(report, _moeda(db_path))


# -----------------------
# terminal e logs
# -----------------------

@app.command("pdv")
def cmd_pdv(db_path: str = typer.Option(DB_PATH, "--db", help="Caminho do SQLite")):
    """Inicia o terminal interativo do caixa (carrinho, finalização, relatório)."""
    from caixa.adapters.tui import main_tui
    try:
        main_tui(db_path)
    except KeyboardInterrupt:
        typer.echo("\nSaindo do PDV...")
        raise typer.Exit(0)


@app.command("logs")
def cmd_logs(
    tipo: str = typer.Argument("transactions", help=f"{' | '.join(LOG_FILES)}"),
    linhas: int = typer.Option(50, help="Quantidade de linhas"),
):
    """Mostra as últimas linhas de um log."""
    typer.echo(get_log_summary(tipo, linhas))


# Entry point opcional:
def main():
    app()


if __name__ == "__main__":
    main()
