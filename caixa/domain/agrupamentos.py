"""
Derived series for the monthly report.

- daily_sales_series:          revenue per day of month (sparse)
- dense_daily_series:          zero-filled version over the month's days
- top_products:                best sellers by revenue
- payment_method_distribution: number of sales per payment method
- expense_category_totals:     expense amount per category

Inputs are period-filtered sales/expenses; outputs are lists of plain dicts
ready for rendering. Grouping keeps first-seen order (dicts preserve
insertion order) unless a function sorts explicitly.
"""

from __future__ import annotations

import calendar
from typing import Any, Dict, List, Sequence

from caixa.domain.models import Expense, Sale


def daily_sales_series(sales: Sequence[Sale]) -> List[Dict[str, Any]]:
    """Sum sale totals by day of month.

    One entry per day that has at least one sale, ascending by day.
    Days without sales are omitted.
    """
    by_day: Dict[int, float] = {}
    for s in sales:
        day = s.date.day
        by_day[day] = by_day.get(day, 0) + s.total
    return [
        {"day": day, "total": round(total, 2)}
        for day, total in sorted(by_day.items())
    ]


def dense_daily_series(series: Sequence[Dict[str, Any]], year: int, month: int) -> List[Dict[str, Any]]:
    """Zero-fill a sparse daily series over every day of ``year``/``month``."""
    n_days = calendar.monthrange(int(year), int(month))[1]
    totals = {int(r["day"]): r["total"] for r in series}
    return [{"day": d, "total": totals.get(d, 0)} for d in range(1, n_days + 1)]


def top_products(sales: Sequence[Sale], limit: int = 10) -> List[Dict[str, Any]]:
    """Rank products by revenue across the given sales.

    Groups line items by product id, summing quantity and
    ``unit_price * quantity``. The name is the one stored on the sale
    (first occurrence), so renamed or deleted catalog entries still report
    under their original name. Sorted by revenue descending; ties keep
    first-encountered order. At most ``limit`` entries.
    """
    agg: Dict[str, Dict[str, Any]] = {}
    for s in sales:
        for item in s.items:
            row = agg.get(item.product_id)
            if row is None:
                row = {"productId": item.product_id, "name": item.name, "quantity": 0, "revenue": 0}
                agg[item.product_id] = row
            row["quantity"] += item.quantity
            row["revenue"] += item.unit_price * item.quantity

    # sorted() is stable: ties keep first-seen order
    out = sorted(agg.values(), key=lambda r: -r["revenue"])
    return out[: max(0, int(limit))]


def payment_method_distribution(sales: Sequence[Sale]) -> List[Dict[str, Any]]:
    counts: Dict[str, int] = {}
    for s in sales:
        counts[s.payment_method] = counts.get(s.payment_method, 0) + 1
    return [{"method": method, "count": count} for method, count in counts.items()]


def expense_category_totals(expenses: Sequence[Expense]) -> List[Dict[str, Any]]:
    """Sum expense amounts per category (first-seen order)."""
    totals: Dict[str, float] = {}
    for e in expenses:
        totals[e.category] = totals.get(e.category, 0) + e.amount
    return [{"category": cat, "amount": round(amount, 2)} for cat, amount in totals.items()]
