"""
Period (calendar year-month) selection for sales and expenses.

Dates are always compared by their (year, month) integer components as
stored on the record. Nothing here converts through a time zone or does
day-count arithmetic, so a sale stored as ``2026-01-31`` belongs to
January 2026 no matter where or when the report runs.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Iterable, List, Tuple, TypeVar

from caixa.domain.models import date_components

T = TypeVar("T")


def _check_month(month: int) -> None:
    if not (1 <= int(month) <= 12):
        raise ValueError(f"month must be between 1 and 12, got {month!r}")


def _record_date(record: Any) -> Any:
    if isinstance(record, dict):
        return record.get("date")
    return getattr(record, "date")


def in_period(record: Any, year: int, month: int) -> bool:
    """Return True iff the record's stored date falls in ``year``/``month``.

    ``record`` may be a domain object with a ``date`` attribute or a plain
    record dict whose ``date`` is an ISO string.
    """
    _check_month(month)
    y, m, _d = date_components(_record_date(record))
    return y == int(year) and m == int(month)


def filter_period(records: Iterable[T], year: int, month: int) -> List[T]:
    """Keep the records of the given period, preserving input order."""
    _check_month(month)
    return [r for r in records if in_period(r, year, month)]


def parse_ano_mes(s: str) -> Tuple[int, int]:
    """Parse ``"YYYY-MM"`` into ``(year, month)``."""
    try:
        y, m = str(s).strip().split("-", 1)
        year, month = int(y), int(m)
    except ValueError:
        raise ValueError(f"expected YYYY-MM, got {s!r}")
    _check_month(month)
    return year, month


def current_period(today: date | None = None) -> Tuple[int, int]:
    today = today or date.today()
    return today.year, today.month
