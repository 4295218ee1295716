# Ledger Insight - Financial analytics & projections for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Category-level statements.

1. Cash-flow statement
   -------------------
   Realized income and expense grouped by category (or subcategory) label
   and by accrual year-month. Lines can be rolled up per quarter or per
   year with ``rollup_cash_flow()``.

2. Income statement
   ----------------
   For one year (accrual date), each category gets:
   - realized  : Σ actual amount of settled transactions
   - predicted : Σ expected amount of every transaction
   Revenue categories come first, then expense categories, each ordered
   by realized amount (descending). Totals and results are given for both
   the realized and the predicted view.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from .amounts import ZERO, is_settled, resolve_amount
from .classification import EMPTY_INDEX, CategoryIndex
from .models import (
    ALL_ACCOUNTS,
    CategoryKind,
    Transaction,
    TransactionStatus,
    in_scope,
)

GROUP_BY_CATEGORY = "category"
GROUP_BY_SUBCATEGORY = "subcategory"


@dataclass(frozen=True)
class CashFlowLine:
    group: str
    period: str  # "YYYY-MM", "YYYY-Qn" or "YYYY"
    income: Decimal
    expense: Decimal

    @property
    def balance(self) -> Decimal:
        return self.income - self.expense


@dataclass(frozen=True)
class IncomeStatementLine:
    category: str
    is_income: bool
    realized: Decimal
    predicted: Decimal

    @property
    def difference(self) -> Decimal:
        return self.realized - self.predicted


@dataclass(frozen=True)
class StatementTotals:
    income: Decimal = ZERO
    expense: Decimal = ZERO

    @property
    def result(self) -> Decimal:
        return self.income - self.expense


@dataclass(frozen=True)
class IncomeStatement:
    year: int
    lines: tuple[IncomeStatementLine, ...]
    realized: StatementTotals
    predicted: StatementTotals


def cash_flow_statement(
    transactions: Iterable[Transaction],
    categories: Optional[CategoryIndex] = None,
    scope: str = ALL_ACCOUNTS,
    category_id: Optional[str] = None,
    group_by: str = GROUP_BY_CATEGORY,
) -> list[CashFlowLine]:
    """
    Realized income/expense per group and month.

    Args:
        transactions: Every transaction of the snapshot.
        categories: Index used to resolve display labels.
        scope: 'all' or a single account id.
        category_id: Optional category filter.
        group_by: 'category' or 'subcategory'.

    Returns:
        Lines ordered by group label then month. Only months with at least
        one transaction appear.
    """
    if group_by not in (GROUP_BY_CATEGORY, GROUP_BY_SUBCATEGORY):
        raise ValueError(f"Unknown cash-flow grouping: {group_by!r}")

    index = categories or EMPTY_INDEX
    cells: dict[tuple[str, str], list[Decimal]] = {}

    for t in transactions:
        if not in_scope(t.account_id, scope):
            continue
        if category_id is not None and t.category_id != category_id:
            continue

        if group_by == GROUP_BY_CATEGORY:
            group = index.category_label(t)
        else:
            group = index.subcategory_label(t)

        period = f"{t.accrual_date.year:04d}-{t.accrual_date.month:02d}"
        cell = cells.setdefault((group, period), [ZERO, ZERO])

        if t.is_inflow:
            if is_settled(t):
                cell[0] += resolve_amount(t)
        elif t.status is TransactionStatus.PAID:
            cell[1] += resolve_amount(t)

    return [
        CashFlowLine(group=group, period=period, income=values[0], expense=values[1])
        for (group, period), values in sorted(cells.items())
    ]


def _rollup_period(period: str, by: str) -> str:
    year, month = period.split("-")
    if by == "year":
        return year
    return f"{year}-Q{(int(month) - 1) // 3 + 1}"


def rollup_cash_flow(lines: Iterable[CashFlowLine], by: str = "quarter") -> list[CashFlowLine]:
    """Aggregate monthly cash-flow lines per quarter or per year."""
    if by not in ("quarter", "year"):
        raise ValueError(f"Unknown roll-up level: {by!r}")

    totals: dict[tuple[str, str], list[Decimal]] = {}
    for line in lines:
        key = (line.group, _rollup_period(line.period, by))
        values = totals.setdefault(key, [ZERO, ZERO])
        values[0] += line.income
        values[1] += line.expense

    return [
        CashFlowLine(group=group, period=period, income=values[0], expense=values[1])
        for (group, period), values in sorted(totals.items())
    ]


def income_statement(
    transactions: Iterable[Transaction],
    year: int,
    categories: Optional[CategoryIndex] = None,
) -> IncomeStatement:
    """
    Realized vs predicted amounts per category for one year.

    A category counts as revenue when the category list says so; for
    categories missing from the list, the type of its first transaction
    decides.
    """
    index = categories or EMPTY_INDEX
    realized: dict[str, Decimal] = {}
    predicted: dict[str, Decimal] = {}
    is_income: dict[str, bool] = {}

    for t in transactions:
        if t.accrual_date.year != year:
            continue
        label = index.category_label(t)
        if label not in is_income:
            kind = index.category_kind(t.category_id)
            is_income[label] = (
                kind is CategoryKind.REVENUE if kind is not None else t.is_inflow
            )
            realized[label] = ZERO
            predicted[label] = ZERO

        if is_settled(t):
            realized[label] += resolve_amount(t)
        predicted[label] += t.expected_amount

    lines = [
        IncomeStatementLine(
            category=label,
            is_income=is_income[label],
            realized=realized[label],
            predicted=predicted[label],
        )
        for label in is_income
    ]
    lines.sort(key=lambda line: (not line.is_income, -line.realized))

    def _totals(attr: str) -> StatementTotals:
        return StatementTotals(
            income=sum((getattr(x, attr) for x in lines if x.is_income), ZERO),
            expense=sum((getattr(x, attr) for x in lines if not x.is_income), ZERO),
        )

    return IncomeStatement(
        year=year,
        lines=tuple(lines),
        realized=_totals("realized"),
        predicted=_totals("predicted"),
    )
