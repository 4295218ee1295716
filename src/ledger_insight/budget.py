# Ledger Insight - Financial analytics & projections for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Budget versus actual comparison.

Budget items are matched against realized expenses of the same year:

- matching key: category id, or category id + subcategory id when the
  budget item names a subcategory. Actual expenses are keyed the same
  way, so a category-level item only collects expenses recorded without
  a subcategory.
- actual expenses: outflows with status "paid", a category id, and an
  accrual date in the budget year (actual amount).

For each item the engine reports budgeted, actual, variance
(actual - budgeted), variance percent and a month by month breakdown.
Items are ordered by descending absolute variance so that the largest
deviations come first.

Summary
-------
- total_budgeted : Σ item totals
- total_actual   : Σ every actual expense of the year, budgeted or not
- total_variance / total_variance_percent
- items_over_budget / items_under_budget (a zero variance counts as
  neither)
"""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional

from .amounts import ZERO, resolve_amount, safe_percent
from .classification import EMPTY_INDEX, CategoryIndex
from .models import Budget, Transaction, TransactionStatus, budget_key

logger = logging.getLogger(__name__)

MONTHS: tuple[int, ...] = tuple(range(1, 13))


@dataclass(frozen=True)
class MonthlyVariance:
    month: int
    budgeted: Decimal
    actual: Decimal

    @property
    def variance(self) -> Decimal:
        return self.actual - self.budgeted


@dataclass(frozen=True)
class BudgetLineComparison:
    category_id: str
    subcategory_id: Optional[str]
    category: str
    subcategory: Optional[str]
    budgeted: Decimal
    actual: Decimal
    variance: Decimal
    variance_percent: Decimal
    monthly: tuple[MonthlyVariance, ...]


@dataclass(frozen=True)
class BudgetSummary:
    total_budgeted: Decimal = ZERO
    total_actual: Decimal = ZERO
    total_variance: Decimal = ZERO
    total_variance_percent: Decimal = ZERO
    items_over_budget: int = 0
    items_under_budget: int = 0


@dataclass(frozen=True)
class BudgetComparison:
    items: tuple[BudgetLineComparison, ...] = ()
    summary: BudgetSummary = field(default_factory=BudgetSummary)
    monthly_totals: tuple[MonthlyVariance, ...] = ()


def select_budget(
    budgets: Sequence[Budget],
    year: int,
    budget_id: Optional[str] = None,
) -> Optional[Budget]:
    """
    Pick the budget to compare.

    An explicit ``budget_id`` wins. Otherwise the active budget of the
    year is used, then any budget of the year. Returns None when nothing
    matches.
    """
    if budget_id:
        return next((b for b in budgets if b.id == budget_id), None)

    for b in budgets:
        if b.year == year and b.is_active:
            return b
    return next((b for b in budgets if b.year == year), None)


def actual_expenses(
    transactions: Iterable[Transaction], year: int
) -> dict[str, dict[int, Decimal]]:
    """Paid expenses of ``year`` by matching key and accrual month."""
    expenses: dict[str, dict[int, Decimal]] = {}
    for t in transactions:
        if not t.is_outflow or t.status is not TransactionStatus.PAID:
            continue
        if not t.category_id or t.accrual_date.year != year:
            continue

        by_month = expenses.setdefault(budget_key(t.category_id, t.subcategory_id), {})
        month = t.accrual_date.month
        by_month[month] = by_month.get(month, ZERO) + resolve_amount(t)
    return expenses


def compare_budget(
    budget: Optional[Budget],
    transactions: Iterable[Transaction],
    year: int,
    categories: Optional[CategoryIndex] = None,
) -> BudgetComparison:
    """
    Compare a budget with the realized expenses of ``year``.

    Args:
        budget: Budget to compare, or None.
        transactions: Every transaction of the snapshot.
        year: Calendar year matched against accrual dates.
        categories: Optional index used for display names.

    Returns:
        A BudgetComparison. Without a budget, an empty zeroed comparison.
    """
    if budget is None:
        logger.debug("No budget to compare for year %s", year)
        return BudgetComparison()

    index = categories or EMPTY_INDEX
    actuals = actual_expenses(transactions, year)

    lines: list[BudgetLineComparison] = []
    for item in budget.items:
        actual_by_month = actuals.get(item.key, {})
        actual = sum(actual_by_month.values(), ZERO)
        budgeted = item.total_amount
        variance = actual - budgeted

        subcategory: Optional[str] = None
        if item.subcategory_id:
            subcategory = index.subcategory_label_for_id(item.subcategory_id)

        lines.append(
            BudgetLineComparison(
                category_id=item.category_id,
                subcategory_id=item.subcategory_id,
                category=index.category_label_for_id(item.category_id),
                subcategory=subcategory,
                budgeted=budgeted,
                actual=actual,
                variance=variance,
                variance_percent=safe_percent(variance, budgeted),
                monthly=tuple(
                    MonthlyVariance(
                        month=m,
                        budgeted=item.amount_for_month(m),
                        actual=actual_by_month.get(m, ZERO),
                    )
                    for m in MONTHS
                ),
            )
        )

    # Largest deviations first; sorted() keeps budget order on ties.
    lines.sort(key=lambda line: abs(line.variance), reverse=True)

    total_budgeted = sum((item.total_amount for item in budget.items), ZERO)
    total_actual = sum(
        (amount for by_month in actuals.values() for amount in by_month.values()),
        ZERO,
    )
    total_variance = total_actual - total_budgeted

    summary = BudgetSummary(
        total_budgeted=total_budgeted,
        total_actual=total_actual,
        total_variance=total_variance,
        total_variance_percent=safe_percent(total_variance, total_budgeted),
        items_over_budget=sum(1 for line in lines if line.variance > 0),
        items_under_budget=sum(1 for line in lines if line.variance < 0),
    )

    return BudgetComparison(
        items=tuple(lines),
        summary=summary,
        monthly_totals=_monthly_totals(budget, actuals),
    )


def _monthly_totals(
    budget: Budget, actuals: dict[str, dict[int, Decimal]]
) -> tuple[MonthlyVariance, ...]:
    """Budgeted vs actual for each month, across all items and keys."""
    return tuple(
        MonthlyVariance(
            month=m,
            budgeted=sum((item.amount_for_month(m) for item in budget.items), ZERO),
            actual=sum(
                (by_month.get(m, ZERO) for by_month in actuals.values()), ZERO
            ),
        )
        for m in MONTHS
    )
