# caixa/adapters/tui.py
"""
TUI (Text User Interface) do caixa usando Rich.

Interface interativa baseada em menus para o operador do caixa:
- Ponto de venda: carrinho (adicionar, +/-, remover) e finalização
- Catálogo de produtos e histórico de vendas
- Relatório mensal
- Operações administrativas (migrações, importação de planilhas)

Cada instância de ``CaixaTUI`` é um terminal e tem o seu próprio carrinho.
"""

from __future__ import annotations

import os
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt, Confirm
from rich.table import Table
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.align import Align

from caixa.config import DB_PATH
from caixa.domain.models import PAYMENT_METHODS
from caixa.domain.periodo import current_period, parse_ano_mes
from caixa.infra.migrations import apply_migrations
from caixa.infra.views import create_views
from caixa.infra.repositories import ParamsRepo, ProdutoRepo
from caixa.usecases.catalogo import run_produto_listar, run_produto_lote
from caixa.usecases.despesas import run_despesa_lote
from caixa.usecases.historico import run_historico
from caixa.usecases.registrar_venda import CartSession, run_registrar_venda
from caixa.usecases.relatorios import format_money, relatorio_mensal


class CaixaTUI:
    """Text User Interface do caixa (um terminal, um carrinho)."""

    def __init__(self, db_path: str = DB_PATH, console: Optional[Console] = None):
        self.console = console or Console()
        self.db_path = db_path
        self.session = CartSession()

    @property
    def moeda(self) -> str:
        return ParamsRepo(self.db_path).load().moeda

    def run(self) -> None:
        """Inicia a interface principal."""
        self.show_banner()

        while True:
            try:
                choice = self.show_main_menu()
                if choice == "1":
                    self.menu_venda()
                elif choice == "2":
                    self.mostrar_produtos()
                elif choice == "3":
                    self.mostrar_historico()
                elif choice == "4":
                    self.mostrar_relatorio()
                elif choice == "5":
                    self.menu_sistema()
                elif choice == "0":
                    self.console.print("\n[green]Saindo do caixa...[/green]")
                    break
            except KeyboardInterrupt:
                self.console.print("\n[red]Saindo...[/red]")
                break
            except Exception as e:
                self.console.print(f"[red]Erro: {e}[/red]")

    def show_banner(self) -> None:
        banner = Panel.fit(
            "[bold blue]CAIXA PDV[/bold blue]\n"
            "[cyan]Terminal de vendas[/cyan]",
            border_style="blue"
        )
        self.console.print("\n")
        self.console.print(Align.center(banner))
        self.console.print("\n")

    def show_main_menu(self) -> str:
        """Exibe menu principal e retorna escolha do usuário."""
        menu = Panel(
            "[bold]MENU PRINCIPAL[/bold]\n\n"
            "[yellow]1.[/yellow] Nova venda\n"
            "[yellow]2.[/yellow] Produtos\n"
            "[yellow]3.[/yellow] Histórico de vendas\n"
            "[yellow]4.[/yellow] Relatório mensal\n"
            "[yellow]5.[/yellow] Sistema\n"
            "[yellow]0.[/yellow] Sair\n",
            title="Opções",
            border_style="green"
        )
        self.console.print(menu)
        return Prompt.ask("Escolha uma opção", choices=["0", "1", "2", "3", "4", "5"])

    # -----------------------
    # ponto de venda
    # -----------------------

    def mostrar_carrinho(self) -> None:
        lines = self.session.get_cart_lines()
        if not lines:
            self.console.print(Panel("Carrinho vazio", title="Carrinho", border_style="yellow"))
            return

        moeda = self.moeda
        table = Table(title="Carrinho", show_header=True, header_style="bold magenta")
        table.add_column("Código", style="cyan")
        table.add_column("Produto")
        table.add_column("Qtd", justify="right")
        table.add_column("Preço", justify="right")
        table.add_column("Subtotal", justify="right")
        for line in lines:
            table.add_row(
                line.product_id,
                line.name,
                str(line.quantity),
                format_money(line.unit_price, moeda),
                format_money(line.line_total, moeda),
            )
        self.console.print(table)
        self.console.print(f"[bold]Total: {format_money(self.session.get_cart_total(), moeda)}[/bold]")

    def menu_venda(self) -> None:
        """Loop do carrinho até finalizar ou voltar."""
        while True:
            self.mostrar_carrinho()
            menu = Panel(
                "[yellow]1.[/yellow] Adicionar produto\n"
                "[yellow]2.[/yellow] Aumentar quantidade (+1)\n"
                "[yellow]3.[/yellow] Diminuir quantidade (-1)\n"
                "[yellow]4.[/yellow] Remover item\n"
                "[yellow]5.[/yellow] Esvaziar carrinho\n"
                "[yellow]6.[/yellow] Finalizar venda\n"
                "[yellow]0.[/yellow] Voltar\n",
                title="Venda",
                border_style="cyan"
            )
            self.console.print(menu)
            choice = Prompt.ask("Escolha uma opção", choices=["0", "1", "2", "3", "4", "5", "6"])

            if choice == "0":
                break
            elif choice == "1":
                self.adicionar_produto()
            elif choice == "2":
                self.alterar_quantidade(+1)
            elif choice == "3":
                self.alterar_quantidade(-1)
            elif choice == "4":
                self.remover_item()
            elif choice == "5":
                if Confirm.ask("Esvaziar o carrinho?", default=False):
                    self.session.clear()
            elif choice == "6":
                if self.finalizar_venda() is not None:
                    break

    def adicionar_produto(self) -> None:
        """Adiciona pelo código exato ou por parte do nome."""
        termo = Prompt.ask("Código ou nome do produto")
        product = ProdutoRepo(self.db_path).get(termo.strip())
        if product is None:
            achados = run_produto_listar(db_path=self.db_path, busca=termo)
            if len(achados) > 1:
                self.mostrar_produtos(achados)
                self.console.print("[yellow]Mais de um produto encontrado: informe o código.[/yellow]")
                return
            if not achados:
                self.console.print(f"[red]Produto não encontrado: {termo}[/red]")
                return
            product = achados[0]
        self.session.add_item(product)
        self.console.print(f"[green]✓ {product.name} adicionado[/green]")

    def alterar_quantidade(self, delta: int) -> None:
        pid = Prompt.ask("Código do item")
        self.session.update_quantity(pid.strip(), delta)

    def remover_item(self) -> None:
        pid = Prompt.ask("Código do item")
        self.session.remove_item(pid.strip())

    def finalizar_venda(self):
        """Pede forma de pagamento e cliente; grava a venda."""
        if not self.session.get_cart_lines():
            self.console.print("[yellow]Carrinho vazio: nada a finalizar.[/yellow]")
            return None

        padrao = ParamsRepo(self.db_path).load().forma_pagamento
        pagamento = Prompt.ask("Forma de pagamento", choices=list(PAYMENT_METHODS), default=padrao)
        cliente = Prompt.ask("Cliente (opcional)", default="")
        try:
            sale = run_registrar_venda(self.session, pagamento, cliente, db_path=self.db_path)
        except Exception as e:
            self.console.print(f"[red]Erro ao registrar venda (carrinho mantido): {e}[/red]")
            return None

        self.console.print(
            f"[green]✓ Venda registrada: {sale.id} - {format_money(sale.total, self.moeda)}[/green]"
        )
        return sale

    # -----------------------
    # consultas
    # -----------------------

    def mostrar_produtos(self, produtos=None) -> None:
        if produtos is None:
            produtos = run_produto_listar(db_path=self.db_path)
        if not produtos:
            self.console.print("[yellow]Nenhum produto cadastrado[/yellow]")
            return

        moeda = self.moeda
        table = Table(title="Produtos", show_header=True, header_style="bold magenta")
        for coluna in ["Código", "Nome", "Preço", "Categoria"]:
            table.add_column(coluna, style="cyan")
        for p in produtos:
            table.add_row(p.id, p.name, format_money(p.price, moeda), p.category or "")
        self.console.print(table)

    def mostrar_historico(self, limite: int = 20) -> None:
        mes = Prompt.ask("Mês (YYYY-MM, vazio = todos)", default="")
        rows = run_historico(ano_mes=mes or None, db_path=self.db_path)
        if not rows:
            self.console.print("[yellow]Nenhuma venda encontrada[/yellow]")
            return

        moeda = self.moeda
        table = Table(title="Vendas", show_header=True, header_style="bold magenta")
        for coluna in ["Data", "Id", "Cliente", "Pagamento", "Itens", "Total"]:
            table.add_column(coluna)
        for r in rows[:limite]:
            table.add_row(
                r["date"], r["id"], r["customerName"] or "", r["paymentMethod"],
                str(r["itemsCount"]), format_money(r["total"], moeda),
            )
        self.console.print(table)
        if len(rows) > limite:
            self.console.print(f"[yellow]Mostrando apenas {limite} registros...[/yellow]")

    def mostrar_relatorio(self) -> None:
        ano, mes = current_period()
        periodo = Prompt.ask("Mês (YYYY-MM)", default=f"{ano:04d}-{mes:02d}")
        year, month = parse_ano_mes(periodo)
        report = relatorio_mensal(year, month, db_path=self.db_path)

        moeda = self.moeda
        k = report.kpis
        self.console.print(Panel(
            f"Receita: {format_money(k.total_revenue, moeda)}\n"
            f"Despesas: {format_money(k.total_expenses, moeda)}\n"
            f"Lucro: {format_money(k.net_profit, moeda)}\n"
            f"Transações: {k.transaction_count}  Ticket médio: {format_money(k.average_ticket, moeda)}\n"
            f"Itens vendidos: {k.total_items_sold}",
            title=f"Relatório {report.period}",
            border_style="red"
        ))
        if report.top_products:
            table = Table(title="Produtos mais vendidos")
            table.add_column("Produto")
            table.add_column("Qtd", justify="right")
            table.add_column("Receita", justify="right")
            for r in report.top_products:
                table.add_row(r["name"], str(r["quantity"]), format_money(r["revenue"], moeda))
            self.console.print(table)

    # -----------------------
    # sistema
    # -----------------------

    def menu_sistema(self) -> None:
        while True:
            menu = Panel(
                "[bold]SISTEMA[/bold]\n\n"
                "[yellow]1.[/yellow] Aplicar Migrações\n"
                "[yellow]2.[/yellow] Importar Produtos (XLSX)\n"
                "[yellow]3.[/yellow] Importar Despesas (XLSX)\n"
                "[yellow]0.[/yellow] Voltar\n",
                title="Sistema",
                border_style="yellow"
            )
            self.console.print(menu)
            choice = Prompt.ask("Escolha uma opção", choices=["0", "1", "2", "3"])

            if choice == "0":
                break
            elif choice == "1":
                self.aplicar_migracoes()
            elif choice == "2":
                self.importar(run_produto_lote, "produtos")
            elif choice == "3":
                self.importar(run_despesa_lote, "despesas")

    def aplicar_migracoes(self) -> None:
        try:
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                console=self.console
            ) as progress:
                progress.add_task("Aplicando migrações...", total=None)
                apply_migrations(self.db_path)
                create_views(self.db_path)

            self.console.print("[green]✓ Migrações aplicadas com sucesso![/green]")
        except Exception as e:
            self.console.print(f"[red]Erro ao aplicar migrações: {e}[/red]")

    def importar(self, run_lote, nome: str) -> None:
        arquivo = Prompt.ask(f"Caminho do arquivo XLSX de {nome}")
        if not os.path.exists(arquivo):
            self.console.print(f"[red]Arquivo não encontrado: {arquivo}[/red]")
            return

        try:
            resultado = run_lote(arquivo, self.db_path)
        except Exception as e:
            self.console.print(f"[red]Erro ao importar {nome}: {e}[/red]")
            return

        self.console.print(f"\n[green]✓ Importação concluída![/green]")
        self.console.print(f"Linhas processadas: {resultado['total']}  Inseridas: {resultado['sucessos']}")
        for erro in resultado["erros"]:
            self.console.print(f"[yellow]Linha {erro['linha']}: {erro['mensagem']}[/yellow]")


def main_tui(db_path: str = DB_PATH):
    """Ponto de entrada principal da TUI."""
    tui = CaixaTUI(db_path)
    tui.run()


if __name__ == "__main__":
    main_tui()
