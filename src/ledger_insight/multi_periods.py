# Ledger Insight - Financial analytics & projections for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Multi-period orchestration for period metrics and health indicators.

This module provides the entry point used to compute the period metrics
of a snapshot for several reporting periods in a single call, e.g. the
twelve months of a year or a set of quarters, for time-series consumers
(charts, BI tools, CSV exports).

Overview
--------
``compute_metrics_multi_period()``:

1. computes the current balance of the scope once (it does not depend on
   the period);
2. for each Period:
   - aggregates the period metrics (realized / pending income and
     expense),
   - derives the health scorecard from the balance and those metrics,
   - records one row per measure and one row per indicator with a
     ``period_label`` column;
3. returns two long-format DataFrames wrapped in frozen dataclasses:
   - ``MetricsMultiPeriod`` : monetary measures,
   - ``HealthMultiPeriod``  : liquidity, solvency and profitability.

Values are exported as floats: these frames are a presentation format.
The engine itself keeps Decimal amounts.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Optional

import pandas as pd

from .balances import current_balance
from .engine import LedgerSnapshot
from .health import DEFAULT_THRESHOLDS, HealthThresholds, health_scorecard
from .metrics import metrics_for_period
from .models import ALL_ACCOUNTS
from .periods import Period

METRIC_COLUMNS = [
    "period_label",
    "start",
    "end",
    "measure_key",
    "label",
    "value",
    "unit",
]

HEALTH_COLUMNS = [
    "period_label",
    "start",
    "end",
    "indicator",
    "value",
    "unit",
    "status",
]

# (measure key, label, unit)
_MEASURES: tuple[tuple[str, str, str], ...] = (
    ("income_realized", "Realized income", "amount"),
    ("expense_realized", "Realized expense", "amount"),
    ("period_result", "Period result", "amount"),
    ("income_pending", "Pending income", "amount"),
    ("expense_pending", "Pending expense", "amount"),
    ("committed_expense", "Committed expense", "amount"),
)


@dataclass(frozen=True)
class MetricsMultiPeriod:
    """
    Multi-period result for the period metrics.

    Each row represents the value of a measure for a given period.

    Expected columns:
        - period_label : str
            Label of the period (e.g. 'This month', '2025').
        - start / end  : datetime.date
            Period boundaries (inclusive).
        - measure_key  : str
            Internal measure identifier (e.g. 'income_realized').
        - label        : str
            Human-readable label for display.
        - value        : float
        - unit         : str
            Always 'amount' for now.
    """

    data: pd.DataFrame


@dataclass(frozen=True)
class HealthMultiPeriod:
    """
    Multi-period result for the health scorecard.

    Expected columns: period_label, start, end, indicator, value, unit
    ('months', 'days', 'amount' or 'percent') and status ('healthy',
    'warning', 'critical'; empty for liquidity days).
    """

    data: pd.DataFrame


def _health_rows(period: Period, scorecard) -> list[dict[str, Any]]:
    base = {"period_label": period.label, "start": period.start, "end": period.end}
    return [
        {
            **base,
            "indicator": "liquidity_ratio",
            "value": float(scorecard.liquidity.ratio),
            "unit": "months",
            "status": scorecard.liquidity.status.value,
        },
        {
            **base,
            "indicator": "liquidity_days",
            "value": float(scorecard.liquidity.days),
            "unit": "days",
            "status": "",
        },
        {
            **base,
            "indicator": "net_worth",
            "value": float(scorecard.solvency.net_worth),
            "unit": "amount",
            "status": scorecard.solvency.status.value,
        },
        {
            **base,
            "indicator": "profitability_ratio",
            "value": float(scorecard.profitability.ratio),
            "unit": "percent",
            "status": scorecard.profitability.status.value,
        },
    ]


def compute_metrics_multi_period(
    snapshot: LedgerSnapshot,
    periods: Sequence[Period],
    scope: str = ALL_ACCOUNTS,
    thresholds: Optional[HealthThresholds] = None,
) -> tuple[MetricsMultiPeriod, HealthMultiPeriod]:
    """
    Compute period metrics and health indicators over multiple periods.

    Parameters
    ----------
    snapshot :
        Ledger snapshot to analyse.
    periods :
        Period objects defining the time windows to compute.
    scope :
        'all' or a single account id.
    thresholds :
        Health classification thresholds (defaults when omitted).

    Returns
    -------
    (MetricsMultiPeriod, HealthMultiPeriod)

    Raises
    ------
    ValueError
        If no periods are provided.
    """
    if not periods:
        raise ValueError("compute_metrics_multi_period requires at least one Period.")

    thresholds = thresholds or DEFAULT_THRESHOLDS
    balance = current_balance(snapshot.accounts, snapshot.transactions, scope)

    metric_rows: list[dict[str, Any]] = []
    health_rows: list[dict[str, Any]] = []

    for period in periods:
        metrics = metrics_for_period(snapshot.transactions, period, scope)

        for key, label, unit in _MEASURES:
            metric_rows.append(
                {
                    "period_label": period.label,
                    "start": period.start,
                    "end": period.end,
                    "measure_key": key,
                    "label": label,
                    "value": float(getattr(metrics, key)),
                    "unit": unit,
                }
            )

        scorecard = health_scorecard(balance, metrics, thresholds)
        health_rows.extend(_health_rows(period, scorecard))

    metrics_df = pd.DataFrame(metric_rows, columns=METRIC_COLUMNS)
    health_df = pd.DataFrame(health_rows, columns=HEALTH_COLUMNS)

    return MetricsMultiPeriod(data=metrics_df), HealthMultiPeriod(data=health_df)
