# caixa/usecases/relatorios.py
"""
Relatório mensal do caixa:
- KPIs (receita, despesas, lucro, transações, ticket médio, itens vendidos)
- série diária de vendas
- produtos mais vendidos
- distribuição por forma de pagamento
- despesas por categoria

``build_report`` é puro (recebe histórico em memória). ``relatorio_mensal``
carrega o histórico do banco; se a leitura das despesas falhar, o relatório
sai com despesas indisponíveis em vez de falhar inteiro.
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from caixa.config import DB_PATH
from caixa.domain.agrupamentos import (
    daily_sales_series,
    expense_category_totals,
    payment_method_distribution,
    top_products,
)
from caixa.domain.indicadores import Kpis, compute_kpis
from caixa.domain.models import AvailableAmount, Expense, Sale
from caixa.domain.periodo import filter_period
from caixa.infra.repositories import DespesaRepo, ParamsRepo, RepositoryError, VendaRepo
from caixa.infra.logger import (
    log_system_event, log_database_operation, system_logger
)


NA = "N/A"


def format_money(amount: Any, moeda: str = "$") -> str:
    """Formata um valor; ``AvailableAmount`` indisponível vira "N/A"."""
    if isinstance(amount, AvailableAmount):
        if not amount.available:
            return NA
        amount = amount.value
    return f"{moeda}{float(amount):,.2f}"


@dataclass(frozen=True)
class MonthlyReport:
    year: int
    month: int
    expenses_available: bool
    kpis: Kpis
    daily_sales_series: List[Dict[str, Any]]
    top_products: List[Dict[str, Any]]
    payment_method_distribution: List[Dict[str, Any]]
    expense_category_totals: List[Dict[str, Any]]

    @property
    def period(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "period": self.period,
            "expensesAvailable": self.expenses_available,
            "kpis": self.kpis.to_dict(),
            "dailySalesSeries": self.daily_sales_series,
            "topProducts": self.top_products,
            "paymentMethodDistribution": self.payment_method_distribution,
            "expenseCategoryTotals": self.expense_category_totals,
        }


def build_report(
    sales: Sequence[Sale],
    expenses: Sequence[Expense],
    year: int,
    month: int,
    expenses_available: bool = True,
    top_n: int = 10,
) -> MonthlyReport:
    """Filtra o período e calcula KPIs e séries.

    Despesas por categoria só são calculadas quando ``expenses_available``.
    """
    month_sales = filter_period(sales, year, month)
    month_expenses = filter_period(expenses, year, month) if expenses_available else []

    return MonthlyReport(
        year=int(year),
        month=int(month),
        expenses_available=expenses_available,
        kpis=compute_kpis(month_sales, month_expenses, expenses_available),
        daily_sales_series=daily_sales_series(month_sales),
        top_products=top_products(month_sales, limit=top_n),
        payment_method_distribution=payment_method_distribution(month_sales),
        expense_category_totals=expense_category_totals(month_expenses) if expenses_available else [],
    )


def relatorio_mensal(
    year: int,
    month: int,
    db_path: str = DB_PATH,
    top_n: Optional[int] = None,
) -> MonthlyReport:
    """Carrega vendas e despesas do banco e monta o relatório do mês."""
    log_system_event("relatorio_mensal_start", {"year": year, "month": month, "db_path": db_path})

    try:
        if top_n is None:
            top_n = ParamsRepo(db_path).load().top_n

        sales = VendaRepo(db_path).list_sales()
        log_database_operation("venda", "SELECT_ALL", len(sales))

        try:
            expenses = DespesaRepo(db_path).list_expenses()
            expenses_available = True
            log_database_operation("despesa", "SELECT_ALL", len(expenses))
        except (sqlite3.Error, RepositoryError) as e:
            expenses = []
            expenses_available = False
            system_logger.warning(f"REPORT_MENSAL: despesas indisponíveis - {e}")
            log_system_event("relatorio_mensal_sem_despesas", {"error": str(e)}, level="warning")

        report = build_report(
            sales, expenses, year, month,
            expenses_available=expenses_available, top_n=top_n,
        )

        log_system_event("relatorio_mensal_success", {
            "period": report.period,
            "transacoes": report.kpis.transaction_count,
            "despesas_disponiveis": expenses_available,
        })
        return report

    except Exception as e:
        error_msg = str(e)
        log_system_event("relatorio_mensal_error", {"year": year, "month": month, "error": error_msg}, level="error")
        system_logger.error(f"REPORT_MENSAL: Erro - {error_msg}")
        raise
