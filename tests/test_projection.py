from datetime import date, timedelta
from decimal import Decimal

import pytest

import ledger_insight.projection as projection
from ledger_insight.models import Transaction, TransactionStatus, TransactionType
from ledger_insight.projection import Scenario, ScenarioFactors

TODAY = date(2025, 6, 1)


def _open(id, type_, status, due, amount, account_id="acc1"):
    return Transaction(
        id=id,
        issue_date=TODAY,
        due_date=due,
        accrual_date=due,
        type=type_,
        status=status,
        expected_amount=Decimal(amount),
        actual_amount=Decimal("0"),
        account_id=account_id,
    )


UPCOMING = [
    _open("pay", TransactionType.OUTFLOW, TransactionStatus.PAYABLE, date(2025, 6, 20), "50"),
    _open("rec", TransactionType.INFLOW, TransactionStatus.RECEIVABLE, date(2025, 6, 10), "100"),
]


@pytest.mark.parametrize(
    "scenario, balances",
    [
        (Scenario.BASE, ["1000", "1100", "1050"]),
        (Scenario.OPTIMISTIC, ["1000", "1110", "1075"]),
        (Scenario.PESSIMISTIC, ["1000", "1060", "1005"]),
    ],
)
def test_projection_per_scenario(scenario, balances) -> None:
    """Receivable of 100 then payable of 50 from a balance of 1000."""
    points = projection.project(UPCOMING, Decimal("1000"), TODAY, scenario=scenario)

    assert [p.balance for p in points] == [Decimal(b) for b in balances]
    assert [p.label for p in points] == ["Today", "2025-06-10", "2025-06-20"]
    assert points[1].transaction_id == "rec"


def test_projection_skips_past_settled_and_overdue_items() -> None:
    txs = UPCOMING + [
        _open("past", TransactionType.OUTFLOW, TransactionStatus.PAYABLE, date(2025, 5, 31), "999"),
        _open("overdue", TransactionType.OUTFLOW, TransactionStatus.OVERDUE, date(2025, 7, 1), "999"),
        _open("paid", TransactionType.OUTFLOW, TransactionStatus.PAID, date(2025, 7, 1), "999"),
    ]
    points = projection.project(txs, Decimal("1000"), TODAY)

    assert [p.transaction_id for p in points[1:]] == ["rec", "pay"]


def test_due_today_is_included() -> None:
    txs = [_open("now", TransactionType.INFLOW, TransactionStatus.RECEIVABLE, TODAY, "10")]
    points = projection.project(txs, Decimal("0"), TODAY)
    assert points[-1].balance == Decimal("10")


def test_projection_capped_at_fifteen_transactions() -> None:
    txs = [
        _open(str(i), TransactionType.INFLOW, TransactionStatus.RECEIVABLE, TODAY + timedelta(days=i), "1")
        for i in range(20)
    ]
    points = projection.project(txs, Decimal("0"), TODAY)

    assert len(points) == 16
    assert points[-1].balance == Decimal("15")


def test_projection_scope() -> None:
    txs = UPCOMING + [
        _open("other", TransactionType.INFLOW, TransactionStatus.RECEIVABLE, date(2025, 6, 5), "7", account_id="acc2")
    ]
    points = projection.project(txs, Decimal("0"), TODAY, scope="acc2")
    assert [p.transaction_id for p in points[1:]] == ["other"]


def test_banded_projection_keeps_independent_accumulators() -> None:
    banded = projection.project_scenarios(UPCOMING, Decimal("1000"), TODAY)

    rows = list(banded.rows())
    assert rows[0] == ("Today", Decimal("1000"), Decimal("1000"), Decimal("1000"))
    assert rows[-1][1:] == (Decimal("1050"), Decimal("1075"), Decimal("1005"))
    assert banded.series(Scenario.PESSIMISTIC)[1].balance == Decimal("1060")


def test_custom_scenario_factors() -> None:
    factors = dict(projection.DEFAULT_FACTORS)
    factors[Scenario.OPTIMISTIC] = ScenarioFactors(Decimal("2"), Decimal("0"))

    points = projection.project(
        UPCOMING, Decimal("1000"), TODAY, scenario=Scenario.OPTIMISTIC, factors=factors
    )
    assert points[-1].balance == Decimal("1200")
