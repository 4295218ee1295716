# Ledger Insight - Financial analytics & projections for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Financial health scorecard.

Three indicators are derived from the current balance and the period
metrics, each classified as healthy / warning / critical:

- Liquidity     : months of expenses covered by the current balance
                  (balance / realized expense), also expressed in days
                  (ratio x 30, rounded).
- Solvency      : net worth = balance - open liabilities, where open
                  liabilities are the paid and payable outflows of the
                  period.
- Profitability : period result as a percentage of realized income.

The thresholds are product policy values. They are kept in
``HealthThresholds`` and can be overridden from the configuration file.
"""

from dataclasses import dataclass
from decimal import ROUND_FLOOR, Decimal
from enum import Enum

from .amounts import ZERO, safe_percent, safe_ratio
from .metrics import PeriodMetrics

DAYS_PER_MONTH = Decimal("30")


class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    WARNING = "warning"
    CRITICAL = "critical"


@dataclass(frozen=True)
class HealthThresholds:
    """Classification thresholds (months of cash, margin in %)."""

    liquidity_healthy: Decimal = Decimal("6")
    liquidity_warning: Decimal = Decimal("3")
    profitability_healthy: Decimal = Decimal("20")
    profitability_warning: Decimal = Decimal("10")


DEFAULT_THRESHOLDS = HealthThresholds()


@dataclass(frozen=True)
class LiquidityIndicator:
    ratio: Decimal
    days: int
    status: HealthStatus


@dataclass(frozen=True)
class SolvencyIndicator:
    net_worth: Decimal
    liabilities: Decimal
    status: HealthStatus


@dataclass(frozen=True)
class ProfitabilityIndicator:
    ratio: Decimal
    net_income: Decimal
    status: HealthStatus


@dataclass(frozen=True)
class HealthScorecard:
    liquidity: LiquidityIndicator
    solvency: SolvencyIndicator
    profitability: ProfitabilityIndicator


def _round_half_up(value: Decimal) -> int:
    # Half rounds toward +infinity, for negative values too.
    return int((value + Decimal("0.5")).to_integral_value(rounding=ROUND_FLOOR))


def _classify(value: Decimal, healthy: Decimal, warning: Decimal) -> HealthStatus:
    if value >= healthy:
        return HealthStatus.HEALTHY
    if value >= warning:
        return HealthStatus.WARNING
    return HealthStatus.CRITICAL


def liquidity(
    current_balance: Decimal,
    monthly_expense: Decimal,
    thresholds: HealthThresholds = DEFAULT_THRESHOLDS,
) -> LiquidityIndicator:
    ratio = safe_ratio(current_balance, monthly_expense)
    return LiquidityIndicator(
        ratio=ratio,
        days=_round_half_up(ratio * DAYS_PER_MONTH),
        status=_classify(
            ratio, thresholds.liquidity_healthy, thresholds.liquidity_warning
        ),
    )


def solvency(
    current_balance: Decimal,
    open_liabilities: Decimal,
    monthly_expense: Decimal,
) -> SolvencyIndicator:
    net_worth = current_balance - open_liabilities
    return SolvencyIndicator(
        net_worth=net_worth,
        liabilities=open_liabilities,
        status=_classify(net_worth, ZERO, -monthly_expense),
    )


def profitability(
    net_income: Decimal,
    income: Decimal,
    thresholds: HealthThresholds = DEFAULT_THRESHOLDS,
) -> ProfitabilityIndicator:
    ratio = safe_percent(net_income, income)
    return ProfitabilityIndicator(
        ratio=ratio,
        net_income=net_income,
        status=_classify(
            ratio,
            thresholds.profitability_healthy,
            thresholds.profitability_warning,
        ),
    )


def health_scorecard(
    current_balance: Decimal,
    metrics: PeriodMetrics,
    thresholds: HealthThresholds = DEFAULT_THRESHOLDS,
) -> HealthScorecard:
    """
    Build the liquidity / solvency / profitability scorecard.

    Args:
        current_balance: Global balance for the scope (see balances.py).
        metrics: Metrics of the selected period and scope.
        thresholds: Classification thresholds.
    """
    return HealthScorecard(
        liquidity=liquidity(current_balance, metrics.expense_realized, thresholds),
        solvency=solvency(
            current_balance, metrics.committed_expense, metrics.expense_realized
        ),
        profitability=profitability(
            metrics.period_result, metrics.income_realized, thresholds
        ),
    )
