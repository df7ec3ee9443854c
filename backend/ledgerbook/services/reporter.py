"""Reporting service: totals, category breakdowns, month windows, dashboard.

Everything here is a pure function over a sequence of canonical
transactions.  No function sorts implicitly; ``sort_by_date`` is the one
ordering helper and callers apply it before ``recent_n``.
"""

from collections import defaultdict
from typing import Iterable, Sequence

from ..schemas import CategorySlice, DashboardResponse, MonthTotals, Totals, Transaction


def _month_of(date_str: str) -> str:
    """YYYY-MM-DD → YYYY-MM."""
    return date_str[:7]


# ── Totals ────────────────────────────────────────────────────────────────────


def totals(txs: Iterable[Transaction]) -> Totals:
    income = 0.0
    expense = 0.0
    for t in txs:
        if t.type == "income":
            income += t.amount
        else:
            expense += t.amount
    return Totals(income=income, expense=expense, balance=income - expense)


def by_category(txs: Iterable[Transaction]) -> dict[str, float]:
    """Expense sums per category, keyed in first-seen order."""
    sums: dict[str, float] = {}
    for t in txs:
        if t.type != "expense":
            continue
        sums[t.category] = sums.get(t.category, 0.0) + t.amount
    return sums


def percentage_of(category_sum: float, total_expense: float) -> float:
    if total_expense == 0:
        return 0.0
    return category_sum / total_expense * 100


def budget_usage(total_expense: float, budget: float) -> float:
    """Percent of *budget* already spent; 0 when no budget is set."""
    return percentage_of(total_expense, budget)


def category_slices(txs: Sequence[Transaction]) -> list[CategorySlice]:
    sums = by_category(txs)
    total_expense = sum(sums.values())
    return [
        CategorySlice(name=name, value=value, percent=percentage_of(value, total_expense))
        for name, value in sums.items()
    ]


# ── Windows & ordering ────────────────────────────────────────────────────────


def windowed_by_month(txs: Iterable[Transaction], year: int, month: int) -> list[Transaction]:
    prefix = f"{year:04d}-{month:02d}"
    return [t for t in txs if _month_of(t.date) == prefix]


def recent_n(txs: Sequence[Transaction], n: int) -> list[Transaction]:
    """First *n* transactions in the order given.  Sort with sort_by_date first."""
    if n <= 0:
        return []
    return list(txs[:n])


def sort_by_date(txs: Iterable[Transaction], descending: bool = True) -> list[Transaction]:
    """Stable sort on the ISO date; equal dates keep their input order."""
    return sorted(txs, key=lambda t: t.date, reverse=descending)


def monthly_totals(txs: Iterable[Transaction]) -> list[MonthTotals]:
    """Income/expense per YYYY-MM, oldest month first."""
    income: dict[str, float] = defaultdict(float)
    expense: dict[str, float] = defaultdict(float)
    months: set[str] = set()
    for t in txs:
        mo = _month_of(t.date)
        months.add(mo)
        if t.type == "income":
            income[mo] += t.amount
        else:
            expense[mo] += t.amount

    return [
        MonthTotals(
            month=mo,
            income=income[mo],
            expense=expense[mo],
            balance=income[mo] - expense[mo],
        )
        for mo in sorted(months)
    ]


# ── Dashboard ─────────────────────────────────────────────────────────────────


def dashboard(
    txs: Sequence[Transaction],
    *,
    year: int,
    month: int,
    budget: int,
    recent: int = 5,
) -> DashboardResponse:
    """Month view: totals, expense slices, budget usage and recent activity.

    *txs* should already be sorted newest-first for ``recent`` to be
    meaningful.
    """
    window = windowed_by_month(txs, year, month)
    month_totals = totals(window)
    return DashboardResponse(
        month=f"{year:04d}-{month:02d}",
        totals=month_totals,
        budget=budget,
        budget_usage_pct=budget_usage(month_totals.expense, budget),
        categories=category_slices(window),
        recent=recent_n(window, recent),
        transaction_count=len(window),
    )
