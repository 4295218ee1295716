# Ledger Insight - Financial analytics & projections for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Period metrics and income/expense trends.

1. Period metrics
   --------------
   ``period_metrics()`` filters transactions on their accrual date and
   account scope, then derives:

   - income_realized  : settled inflows (actual amount)
   - expense_realized : paid outflows (actual amount)
   - income_pending   : receivable inflows (expected amount)
   - expense_pending  : payable outflows (expected amount)
   - period_result    : income_realized - expense_realized

   Pending amounts never enter the period result: unrealized income is
   not profit.

2. Monthly history and trends
   --------------------------
   ``monthly_history()`` returns realized income/expense/result for each
   of the last N calendar months, and ``trend_summary()`` derives the
   month-over-month and year-over-year income change.

3. Daily activity
   --------------
   ``daily_activity()`` returns realized income/expense per day of one
   month.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from .amounts import ZERO, resolve_amount, safe_percent
from .models import (
    ALL_ACCOUNTS,
    Transaction,
    TransactionStatus,
    in_scope,
)
from .periods import Period, month_bounds, shift_month


@dataclass(frozen=True)
class PeriodMetrics:
    """Aggregated income/expense figures for one period and scope."""

    income_realized: Decimal = ZERO
    expense_realized: Decimal = ZERO
    income_pending: Decimal = ZERO
    expense_pending: Decimal = ZERO

    @property
    def period_result(self) -> Decimal:
        return self.income_realized - self.expense_realized

    @property
    def committed_expense(self) -> Decimal:
        """Paid plus payable outflows of the period (open liabilities)."""
        return self.expense_realized + self.expense_pending


@dataclass(frozen=True)
class MonthlyTotals:
    year: int
    month: int
    income: Decimal
    expense: Decimal

    @property
    def result(self) -> Decimal:
        return self.income - self.expense

    @property
    def label(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


@dataclass(frozen=True)
class TrendSummary:
    current: MonthlyTotals
    previous_month: MonthlyTotals
    same_month_last_year: MonthlyTotals
    income_change_mom: Decimal
    income_change_yoy: Decimal


@dataclass(frozen=True)
class DailyTotals:
    day: int
    income: Decimal
    expense: Decimal

    @property
    def net(self) -> Decimal:
        return self.income - self.expense


def _is_realized_income(t: Transaction) -> bool:
    return t.is_inflow and t.status in (
        TransactionStatus.PAID,
        TransactionStatus.RECEIVED,
    )


def _is_realized_expense(t: Transaction) -> bool:
    return t.is_outflow and t.status is TransactionStatus.PAID


def _accumulate(transactions: Iterable[Transaction]) -> PeriodMetrics:
    income_realized = expense_realized = ZERO
    income_pending = expense_pending = ZERO

    for t in transactions:
        if _is_realized_income(t):
            income_realized += resolve_amount(t)
        elif _is_realized_expense(t):
            expense_realized += resolve_amount(t)
        elif t.is_inflow and t.status is TransactionStatus.RECEIVABLE:
            income_pending += resolve_amount(t)
        elif t.is_outflow and t.status is TransactionStatus.PAYABLE:
            expense_pending += resolve_amount(t)

    return PeriodMetrics(
        income_realized=income_realized,
        expense_realized=expense_realized,
        income_pending=income_pending,
        expense_pending=expense_pending,
    )


def period_metrics(
    transactions: Iterable[Transaction],
    start: date,
    end: date,
    scope: str = ALL_ACCOUNTS,
) -> PeriodMetrics:
    """
    Compute income, expense and pending amounts for a period.

    Args:
        transactions: Every transaction of the snapshot.
        start: First accrual date included.
        end: Last accrual date included.
        scope: 'all' or a single account id.

    Returns:
        A PeriodMetrics instance (all zeros when nothing matches).
    """
    selected = (
        t
        for t in transactions
        if start <= t.accrual_date <= end and in_scope(t.account_id, scope)
    )
    return _accumulate(selected)


def metrics_for_period(
    transactions: Iterable[Transaction],
    period: Period,
    scope: str = ALL_ACCOUNTS,
) -> PeriodMetrics:
    return period_metrics(transactions, period.start, period.end, scope)


def monthly_history(
    transactions: Sequence[Transaction],
    reference_date: date,
    scope: str = ALL_ACCOUNTS,
    months: int = 12,
) -> list[MonthlyTotals]:
    """
    Realized income and expense for the ``months`` calendar months ending
    with the month of ``reference_date`` (oldest first).
    """
    if months <= 0:
        return []

    buckets: dict[tuple[int, int], list[Decimal]] = {}
    for offset in range(months - 1, -1, -1):
        buckets[shift_month(reference_date.year, reference_date.month, -offset)] = [
            ZERO,
            ZERO,
        ]

    for t in transactions:
        if not in_scope(t.account_id, scope):
            continue
        bucket = buckets.get((t.accrual_date.year, t.accrual_date.month))
        if bucket is None:
            continue
        if _is_realized_income(t):
            bucket[0] += resolve_amount(t)
        elif _is_realized_expense(t):
            bucket[1] += resolve_amount(t)

    return [
        MonthlyTotals(year=y, month=m, income=values[0], expense=values[1])
        for (y, m), values in buckets.items()
    ]


def trend_summary(
    transactions: Sequence[Transaction],
    reference_date: date,
    scope: str = ALL_ACCOUNTS,
) -> TrendSummary:
    """
    Month-over-month and year-over-year change of realized income, in %.

    The comparison base is the previous month and the same month one year
    earlier. A zero base yields a change of 0.
    """
    history = monthly_history(transactions, reference_date, scope, months=13)
    current = history[-1]
    previous = history[-2]
    last_year = history[0]

    return TrendSummary(
        current=current,
        previous_month=previous,
        same_month_last_year=last_year,
        income_change_mom=safe_percent(current.income - previous.income, previous.income),
        income_change_yoy=safe_percent(
            current.income - last_year.income, last_year.income
        ),
    )


def daily_activity(
    transactions: Iterable[Transaction],
    year: int,
    month: int,
    scope: str = ALL_ACCOUNTS,
) -> list[DailyTotals]:
    """Realized income and expense for every day of a calendar month."""
    start, end = month_bounds(year, month)
    income = [ZERO] * end.day
    expense = [ZERO] * end.day

    for t in transactions:
        if not (start <= t.accrual_date <= end) or not in_scope(t.account_id, scope):
            continue
        index = t.accrual_date.day - 1
        if _is_realized_income(t):
            income[index] += resolve_amount(t)
        elif _is_realized_expense(t):
            expense[index] += resolve_amount(t)

    return [
        DailyTotals(day=i + 1, income=income[i], expense=expense[i])
        for i in range(end.day)
    ]
