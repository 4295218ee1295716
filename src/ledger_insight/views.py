# Ledger Insight - Financial analytics & projections for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
View utilities for Ledger Insight.

This module turns the result objects of the analytics modules into pandas
DataFrames ready for display (``DataFrame.to_string``) or CSV export.

Amounts are Decimals inside the engine. Here they are rounded to the
requested number of decimals and converted to floats; this is the only
place where that conversion happens.

Every helper returns a DataFrame with a stable column order, including
when the input is empty, so that CSV exports always have the same header.
"""

from collections.abc import Iterable, Sequence
from decimal import Decimal

import pandas as pd

from .aging import AgingReport, OpenItemsSummary
from .amounts import resolve_amount
from .balances import AccountBalance
from .budget import BudgetComparison
from .health import HealthScorecard
from .metrics import MonthlyTotals, PeriodMetrics, TrendSummary
from .pareto import ParetoEntry
from .projection import BandedProjection
from .statements import CashFlowLine, IncomeStatement


def _money(value: Decimal, decimals: int) -> float:
    return round(float(value), decimals)


def _frame(rows: list[dict[str, object]], columns: Sequence[str]) -> pd.DataFrame:
    return pd.DataFrame(rows, columns=list(columns))


def metrics_to_dataframe(
    metrics: PeriodMetrics, balance: Decimal, decimals: int = 2
) -> pd.DataFrame:
    """Dashboard cards: balance, realized and pending amounts, result."""
    rows = [
        ("balance", "Current balance", balance),
        ("income_realized", "Realized income", metrics.income_realized),
        ("expense_realized", "Realized expense", metrics.expense_realized),
        ("period_result", "Period result", metrics.period_result),
        ("income_pending", "Pending income", metrics.income_pending),
        ("expense_pending", "Pending expense", metrics.expense_pending),
    ]
    return _frame(
        [
            {"key": key, "label": label, "value": _money(value, decimals)}
            for key, label, value in rows
        ],
        ["key", "label", "value"],
    )


def health_to_dataframe(scorecard: HealthScorecard, decimals: int = 2) -> pd.DataFrame:
    liq = scorecard.liquidity
    solv = scorecard.solvency
    prof = scorecard.profitability
    rows: list[dict[str, object]] = [
        {
            "indicator": "Liquidity",
            "value": _money(liq.ratio, decimals),
            "unit": "months",
            "detail": f"{liq.days} days of expenses",
            "status": liq.status.value,
        },
        {
            "indicator": "Solvency",
            "value": _money(solv.net_worth, decimals),
            "unit": "amount",
            "detail": f"liabilities {_money(solv.liabilities, decimals)}",
            "status": solv.status.value,
        },
        {
            "indicator": "Profitability",
            "value": _money(prof.ratio, decimals),
            "unit": "percent",
            "detail": f"net income {_money(prof.net_income, decimals)}",
            "status": prof.status.value,
        },
    ]
    return _frame(rows, ["indicator", "value", "unit", "detail", "status"])


def aging_to_dataframe(report: AgingReport, decimals: int = 2) -> pd.DataFrame:
    """One row per band with payables and receivables side by side."""
    rows = [
        {
            "band": pay.label,
            "payables": _money(pay.amount, decimals),
            "payables_count": pay.count,
            "receivables": _money(rec.amount, decimals),
            "receivables_count": rec.count,
        }
        for pay, rec in zip(report.payables, report.receivables)
    ]
    return _frame(
        rows, ["band", "payables", "payables_count", "receivables", "receivables_count"]
    )


def open_items_to_dataframe(summary: OpenItemsSummary, decimals: int = 2) -> pd.DataFrame:
    rows: list[dict[str, object]] = []
    for side, items in (("payable", summary.payables), ("receivable", summary.receivables)):
        for t in items:
            rows.append(
                {
                    "side": side,
                    "id": t.id,
                    "due_date": t.due_date,
                    "entity": t.entity,
                    "description": t.description,
                    "amount": _money(resolve_amount(t), decimals),
                }
            )
    return _frame(rows, ["side", "id", "due_date", "entity", "description", "amount"])


def pareto_to_dataframe(entries: Iterable[ParetoEntry], decimals: int = 2) -> pd.DataFrame:
    rows = [
        {
            "rank": rank,
            "category": e.category,
            "amount": _money(e.amount, decimals),
            "cumulative_amount": _money(e.cumulative_amount, decimals),
            "percent_of_total": _money(e.percent_of_total, decimals),
            "cumulative_percent": _money(e.cumulative_percent, decimals),
        }
        for rank, e in enumerate(entries, start=1)
    ]
    return _frame(
        rows,
        [
            "rank",
            "category",
            "amount",
            "cumulative_amount",
            "percent_of_total",
            "cumulative_percent",
        ],
    )


def projection_to_dataframe(projection: BandedProjection, decimals: int = 2) -> pd.DataFrame:
    """Banded projection: one row per point, one column per scenario."""
    rows = [
        {
            "label": label,
            "base": _money(base, decimals),
            "optimistic": _money(optimistic, decimals),
            "pessimistic": _money(pessimistic, decimals),
        }
        for label, base, optimistic, pessimistic in projection.rows()
    ]
    return _frame(rows, ["label", "base", "optimistic", "pessimistic"])


def budget_to_dataframe(comparison: BudgetComparison, decimals: int = 2) -> pd.DataFrame:
    """
    Budget lines followed by a TOTAL row built from the summary.

    The TOTAL actual includes expenses that no budget line covers, so it
    can exceed the sum of the line actuals.
    """
    rows: list[dict[str, object]] = [
        {
            "category": line.category,
            "subcategory": line.subcategory or "",
            "budgeted": _money(line.budgeted, decimals),
            "actual": _money(line.actual, decimals),
            "variance": _money(line.variance, decimals),
            "variance_percent": _money(line.variance_percent, decimals),
        }
        for line in comparison.items
    ]
    s = comparison.summary
    rows.append(
        {
            "category": "TOTAL",
            "subcategory": "",
            "budgeted": _money(s.total_budgeted, decimals),
            "actual": _money(s.total_actual, decimals),
            "variance": _money(s.total_variance, decimals),
            "variance_percent": _money(s.total_variance_percent, decimals),
        }
    )
    return _frame(
        rows,
        ["category", "subcategory", "budgeted", "actual", "variance", "variance_percent"],
    )


def budget_monthly_to_dataframe(
    comparison: BudgetComparison, decimals: int = 2
) -> pd.DataFrame:
    rows = [
        {
            "month": m.month,
            "budgeted": _money(m.budgeted, decimals),
            "actual": _money(m.actual, decimals),
            "variance": _money(m.variance, decimals),
        }
        for m in comparison.monthly_totals
    ]
    return _frame(rows, ["month", "budgeted", "actual", "variance"])


def cash_flow_to_dataframe(lines: Iterable[CashFlowLine], decimals: int = 2) -> pd.DataFrame:
    """Long format: one row per (group, period)."""
    rows = [
        {
            "group": line.group,
            "period": line.period,
            "income": _money(line.income, decimals),
            "expense": _money(line.expense, decimals),
            "balance": _money(line.balance, decimals),
        }
        for line in lines
    ]
    return _frame(rows, ["group", "period", "income", "expense", "balance"])


def cash_flow_pivot(
    lines: Iterable[CashFlowLine], value: str = "balance", decimals: int = 2
) -> pd.DataFrame:
    """
    Wide format: groups as rows, periods as columns (the report grid).

    Missing (group, period) cells are 0.
    """
    long_df = cash_flow_to_dataframe(lines, decimals)
    if long_df.empty:
        return pd.DataFrame(columns=["group"])

    wide = long_df.pivot_table(
        index="group", columns="period", values=value, aggfunc="sum", fill_value=0.0
    )
    wide.columns.name = None
    return wide.reset_index()


def income_statement_to_dataframe(
    statement: IncomeStatement, decimals: int = 2
) -> pd.DataFrame:
    rows: list[dict[str, object]] = [
        {
            "section": "income" if line.is_income else "expense",
            "category": line.category,
            "realized": _money(line.realized, decimals),
            "predicted": _money(line.predicted, decimals),
            "difference": _money(line.difference, decimals),
        }
        for line in statement.lines
    ]
    rows.append(
        {
            "section": "result",
            "category": "RESULT",
            "realized": _money(statement.realized.result, decimals),
            "predicted": _money(statement.predicted.result, decimals),
            "difference": _money(
                statement.realized.result - statement.predicted.result, decimals
            ),
        }
    )
    return _frame(rows, ["section", "category", "realized", "predicted", "difference"])


def account_balances_to_dataframe(
    balances: Iterable[AccountBalance], decimals: int = 2
) -> pd.DataFrame:
    rows = [
        {
            "account_id": b.account_id,
            "name": b.name,
            "kind": b.kind.value,
            "initial_balance": _money(b.initial_balance, decimals),
            "balance": _money(b.balance, decimals),
        }
        for b in balances
    ]
    return _frame(rows, ["account_id", "name", "kind", "initial_balance", "balance"])


def trends_to_dataframe(history: Iterable[MonthlyTotals], decimals: int = 2) -> pd.DataFrame:
    rows = [
        {
            "month": m.label,
            "income": _money(m.income, decimals),
            "expense": _money(m.expense, decimals),
            "result": _money(m.result, decimals),
        }
        for m in history
    ]
    return _frame(rows, ["month", "income", "expense", "result"])


def trend_summary_to_dataframe(summary: TrendSummary, decimals: int = 2) -> pd.DataFrame:
    rows = [
        {
            "comparison": "month_over_month",
            "base_month": summary.previous_month.label,
            "base_income": _money(summary.previous_month.income, decimals),
            "current_income": _money(summary.current.income, decimals),
            "change_percent": _money(summary.income_change_mom, decimals),
        },
        {
            "comparison": "year_over_year",
            "base_month": summary.same_month_last_year.label,
            "base_income": _money(summary.same_month_last_year.income, decimals),
            "current_income": _money(summary.current.income, decimals),
            "change_percent": _money(summary.income_change_yoy, decimals),
        },
    ]
    return _frame(
        rows, ["comparison", "base_month", "base_income", "current_income", "change_percent"]
    )
