from datetime import date
from decimal import Decimal

import pytest

import ledger_insight.multi_periods as mp
from ledger_insight.engine import LedgerSnapshot
from ledger_insight.health import HealthThresholds
from ledger_insight.models import Account, Transaction, TransactionStatus, TransactionType
from ledger_insight.periods import Period, monthly_periods


def _tx(id, type_, status, amount, accrual, account_id="acc1"):
    return Transaction(
        id=id,
        issue_date=accrual,
        due_date=accrual,
        accrual_date=accrual,
        type=type_,
        status=status,
        expected_amount=Decimal(amount),
        actual_amount=Decimal(amount),
        account_id=account_id,
    )


SNAPSHOT = LedgerSnapshot(
    accounts=(Account("acc1", "Main", initial_balance=Decimal("1000")),),
    transactions=(
        _tx("t1", TransactionType.INFLOW, TransactionStatus.RECEIVED, "500", date(2025, 1, 10)),
        _tx("t2", TransactionType.OUTFLOW, TransactionStatus.PAID, "200", date(2025, 1, 20)),
        _tx("t3", TransactionType.OUTFLOW, TransactionStatus.PAYABLE, "100", date(2025, 2, 5)),
    ),
)


def test_compute_metrics_multi_period_shapes() -> None:
    """One row per (period, measure) and per (period, indicator)."""
    metrics_mp, health_mp = mp.compute_metrics_multi_period(
        SNAPSHOT, monthly_periods(2025)
    )

    assert list(metrics_mp.data.columns) == mp.METRIC_COLUMNS
    assert list(health_mp.data.columns) == mp.HEALTH_COLUMNS
    assert len(metrics_mp.data) == 12 * 6
    assert len(health_mp.data) == 12 * 4
    assert metrics_mp.data["period_label"].iloc[0] == "2025-01"


def test_compute_metrics_multi_period_values() -> None:
    periods = [
        Period(date(2025, 1, 1), date(2025, 1, 31), "Jan"),
        Period(date(2025, 2, 1), date(2025, 2, 28), "Feb"),
    ]
    metrics_mp, health_mp = mp.compute_metrics_multi_period(SNAPSHOT, periods)

    df = metrics_mp.data.set_index(["period_label", "measure_key"])["value"]
    assert df[("Jan", "income_realized")] == pytest.approx(500.0)
    assert df[("Jan", "period_result")] == pytest.approx(300.0)
    assert df[("Feb", "expense_pending")] == pytest.approx(100.0)
    assert df[("Feb", "income_realized")] == pytest.approx(0.0)

    health = health_mp.data.set_index(["period_label", "indicator"])
    # Balance 1300 over a 200 monthly expense.
    assert health.loc[("Jan", "liquidity_ratio"), "value"] == pytest.approx(6.5)
    assert health.loc[("Jan", "liquidity_ratio"), "status"] == "healthy"
    assert health.loc[("Jan", "liquidity_days"), "value"] == pytest.approx(195.0)
    # No expense in February: ratio falls back to 0.
    assert health.loc[("Feb", "liquidity_ratio"), "status"] == "critical"
    assert health.loc[("Feb", "net_worth"), "value"] == pytest.approx(1200.0)


def test_compute_metrics_multi_period_scope_and_thresholds() -> None:
    strict = HealthThresholds(
        liquidity_healthy=Decimal("12"),
        liquidity_warning=Decimal("6"),
        profitability_healthy=Decimal("90"),
        profitability_warning=Decimal("50"),
    )
    period = [Period(date(2025, 1, 1), date(2025, 1, 31), "Jan")]

    _, health_mp = mp.compute_metrics_multi_period(SNAPSHOT, period, thresholds=strict)
    statuses = dict(zip(health_mp.data["indicator"], health_mp.data["status"]))
    assert statuses["liquidity_ratio"] == "warning"
    assert statuses["profitability_ratio"] == "warning"

    metrics_mp, _ = mp.compute_metrics_multi_period(SNAPSHOT, period, scope="acc9")
    assert metrics_mp.data["value"].sum() == pytest.approx(0.0)


def test_compute_metrics_multi_period_requires_periods() -> None:
    with pytest.raises(ValueError):
        mp.compute_metrics_multi_period(SNAPSHOT, [])
