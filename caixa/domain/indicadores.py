"""
Business KPIs for a reporting period.

These functions take sales and expenses that were already filtered to a
period (see ``caixa.domain.periodo``) and return scalar metrics. All of
them are pure: they read their inputs and never mutate them, so they can
be called repeatedly over the same history.

Expense-dependent metrics return an ``AvailableAmount`` so that
"no expenses recorded" (available, value 0) stays distinct from
"expense data could not be read" (not available).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Sequence

from caixa.domain.models import AvailableAmount, Expense, Sale


def total_revenue(sales: Sequence[Sale]) -> float:
    """Sum of the stored ``total`` of each sale."""
    return sum((s.total for s in sales), 0)


def total_expenses(expenses: Sequence[Expense], expenses_available: bool) -> AvailableAmount:
    """Sum of expense amounts, tagged with availability.

    When ``expenses_available`` is False the value is reported as
    unavailable; the numeric field is left at 0 and must not be shown.
    """
    if not expenses_available:
        return AvailableAmount(available=False)
    return AvailableAmount(available=True, value=sum((e.amount for e in expenses), 0))


def net_profit(revenue: float, expenses: AvailableAmount) -> AvailableAmount:
    """Revenue minus expenses.

    Without expense data the value equals the revenue and is tagged
    ``available=False, partial=True``; it is never a true net profit.
    """
    if not expenses.available:
        return AvailableAmount(available=False, value=revenue, partial=True)
    return AvailableAmount(available=True, value=revenue - expenses.value)


def transaction_count(sales: Sequence[Sale]) -> int:
    return len(sales)


def average_ticket(sales: Sequence[Sale]) -> float:
    """Mean sale total; 0 when there are no sales."""
    n = len(sales)
    if n == 0:
        return 0
    return total_revenue(sales) / n


def total_items_sold(sales: Sequence[Sale]) -> int:
    return sum(item.quantity for s in sales for item in s.items)


@dataclass(frozen=True)
class Kpis:
    total_revenue: float
    total_expenses: AvailableAmount
    net_profit: AvailableAmount
    transaction_count: int
    average_ticket: float
    total_items_sold: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalRevenue": self.total_revenue,
            "totalExpenses": self.total_expenses.to_dict(),
            "netProfit": self.net_profit.to_dict(),
            "transactionCount": self.transaction_count,
            "averageTicket": self.average_ticket,
            "totalItemsSold": self.total_items_sold,
        }


def compute_kpis(
    sales: Sequence[Sale],
    expenses: Sequence[Expense],
    expenses_available: bool = True,
) -> Kpis:
    """Compute every KPI for an already filtered period."""
    revenue = total_revenue(sales)
    exp = total_expenses(expenses, expenses_available)
    return Kpis(
        total_revenue=revenue,
        total_expenses=exp,
        net_profit=net_profit(revenue, exp),
        transaction_count=transaction_count(sales),
        average_ticket=average_ticket(sales),
        total_items_sold=total_items_sold(sales),
    )
