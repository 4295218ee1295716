from datetime import date
from decimal import Decimal
from types import SimpleNamespace

import pytest

import ledger_insight.periods as periods
from ledger_insight.models import Transaction, TransactionStatus, TransactionType

TODAY = date(2025, 3, 15)


def _args(**kwargs):
    base = {"from_date": None, "to_date": None, "period": None}
    base.update(kwargs)
    return SimpleNamespace(**base)


def _tx(id, accrual, account_id="acc1"):
    return Transaction(
        id=id,
        issue_date=accrual,
        due_date=accrual,
        accrual_date=accrual,
        type=TransactionType.INFLOW,
        status=TransactionStatus.RECEIVED,
        expected_amount=Decimal("1"),
        actual_amount=Decimal("1"),
        account_id=account_id,
    )


def test_filter_by_period_inclusive_bounds() -> None:
    """filter_by_period should keep transactions with accrual dates in [start, end]."""
    txs = [
        _tx("a", date(2025, 1, 1)),
        _tx("b", date(2025, 2, 1)),
        _tx("c", date(2025, 3, 10)),
        _tx("d", date(2025, 4, 1)),
        _tx("e", date(2025, 4, 2)),
    ]
    p = periods.Period(start=date(2025, 2, 1), end=date(2025, 4, 1), label="Test period")

    filtered = periods.filter_by_period(txs, p)

    assert [t.id for t in filtered] == ["b", "c", "d"]


def test_filter_by_period_scope() -> None:
    txs = [_tx("a", TODAY), _tx("b", TODAY, account_id="acc2")]
    p = periods.period_this_month(TODAY)

    assert [t.id for t in periods.filter_by_period(txs, p, "acc2")] == ["b"]


def test_presets_from_reference_date() -> None:
    assert periods.period_this_month(TODAY) == periods.Period(
        date(2025, 3, 1), date(2025, 3, 31), "This month"
    )
    last = periods.period_last_month(date(2025, 1, 10))
    assert (last.start, last.end) == (date(2024, 12, 1), date(2024, 12, 31))

    year = periods.period_this_year(TODAY)
    assert (year.start, year.end) == (date(2025, 1, 1), date(2025, 12, 31))

    last_30 = periods.period_last_days(30, TODAY)
    assert (last_30.start, last_30.end) == (date(2025, 2, 13), TODAY)


def test_month_helpers() -> None:
    assert periods.shift_month(2025, 1, -1) == (2024, 12)
    assert periods.shift_month(2024, 11, 14) == (2026, 1)
    assert periods.month_bounds(2024, 2) == (date(2024, 2, 1), date(2024, 2, 29))

    months = periods.monthly_periods(2025)
    assert len(months) == 12
    assert months[1].label == "2025-02"
    assert months[1].end == date(2025, 2, 28)


def test_determine_period_priority() -> None:
    """Custom dates win over presets, which win over the current month."""
    custom = periods.determine_period_from_args(
        _args(from_date="2025-01-10", to_date="2025-02-10", period="this-year"), TODAY
    )
    assert (custom.start, custom.end) == (date(2025, 1, 10), date(2025, 2, 10))

    preset = periods.determine_period_from_args(_args(period="last-90"), TODAY)
    assert preset.end == TODAY
    assert preset.label == "Last 90 days"

    default = periods.determine_period_from_args(_args(), TODAY)
    assert default.label == "This month"


def test_determine_period_partial_custom_range() -> None:
    only_from = periods.determine_period_from_args(_args(from_date="2025-02-01"), TODAY)
    assert only_from.end == TODAY

    only_to = periods.determine_period_from_args(_args(to_date="2025-02-01"), TODAY)
    assert only_to.start == date(2025, 1, 1)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"from_date": "2025-13-01"},
        {"from_date": "2025-03-10", "to_date": "2025-03-01"},
        {"period": "fortnight"},
    ],
)
def test_determine_period_errors(kwargs) -> None:
    with pytest.raises(ValueError):
        periods.determine_period_from_args(_args(**kwargs), TODAY)
