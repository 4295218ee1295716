# Ledger Insight - Financial analytics & projections for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Cash-flow projection under optimistic / base / pessimistic scenarios.

Starting from the current balance, the projection walks the open
transactions (payable, receivable) that are due on or after the
reference date, in due-date order, and accumulates their expected
amounts into a running balance. Only the first ``limit`` transactions
(15 by default) are projected to keep the series readable.

Each scenario scales the expected amount before it is accumulated:

    scenario      inflows   outflows
    base          x 1.00    x 1.00
    optimistic    x 1.10    x 0.70   (early collection, delayed payment)
    pessimistic   x 0.60    x 1.10   (delayed collection, penalties)

When several scenarios are requested together, each keeps its own
running balance.
"""

from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

from .amounts import is_open, resolve_amount
from .models import ALL_ACCOUNTS, Transaction, in_scope

DEFAULT_LIMIT = 15
TODAY_LABEL = "Today"


class Scenario(str, Enum):
    BASE = "base"
    OPTIMISTIC = "optimistic"
    PESSIMISTIC = "pessimistic"


@dataclass(frozen=True)
class ScenarioFactors:
    """Multipliers applied to expected inflows and outflows."""

    inflow_factor: Decimal = Decimal("1")
    outflow_factor: Decimal = Decimal("1")

    def adjust(self, transaction: Transaction) -> Decimal:
        """Signed, scenario-adjusted expected amount of a transaction."""
        amount = resolve_amount(transaction)
        if transaction.is_inflow:
            return amount * self.inflow_factor
        return -(amount * self.outflow_factor)


DEFAULT_FACTORS: Mapping[Scenario, ScenarioFactors] = {
    Scenario.BASE: ScenarioFactors(Decimal("1"), Decimal("1")),
    Scenario.OPTIMISTIC: ScenarioFactors(Decimal("1.10"), Decimal("0.70")),
    Scenario.PESSIMISTIC: ScenarioFactors(Decimal("0.60"), Decimal("1.10")),
}


@dataclass(frozen=True)
class ProjectionPoint:
    label: str
    balance: Decimal
    date: date
    transaction_id: Optional[str] = None


@dataclass(frozen=True)
class BandedProjection:
    """Base, optimistic and pessimistic series sharing the same points."""

    base: tuple[ProjectionPoint, ...]
    optimistic: tuple[ProjectionPoint, ...]
    pessimistic: tuple[ProjectionPoint, ...]

    def series(self, scenario: Scenario) -> tuple[ProjectionPoint, ...]:
        return getattr(self, scenario.value)

    def rows(self) -> Iterator[tuple[str, Decimal, Decimal, Decimal]]:
        """Yield (label, base, optimistic, pessimistic) per point."""
        for b, o, p in zip(self.base, self.optimistic, self.pessimistic):
            yield b.label, b.balance, o.balance, p.balance


def upcoming_transactions(
    transactions: Iterable[Transaction],
    reference_date: date,
    scope: str = ALL_ACCOUNTS,
    limit: int = DEFAULT_LIMIT,
) -> list[Transaction]:
    """Open transactions due on or after ``reference_date``, by due date."""
    upcoming = [
        t
        for t in transactions
        if is_open(t)
        and t.due_date >= reference_date
        and in_scope(t.account_id, scope)
    ]
    # Stable sort: same-day items keep snapshot order.
    upcoming.sort(key=lambda t: t.due_date)
    return upcoming[: max(limit, 0)]


def _walk(
    upcoming: Sequence[Transaction],
    current_balance: Decimal,
    reference_date: date,
    factors: ScenarioFactors,
) -> tuple[ProjectionPoint, ...]:
    running = current_balance
    points = [ProjectionPoint(label=TODAY_LABEL, balance=running, date=reference_date)]
    for t in upcoming:
        running += factors.adjust(t)
        points.append(
            ProjectionPoint(
                label=t.due_date.isoformat(),
                balance=running,
                date=t.due_date,
                transaction_id=t.id,
            )
        )
    return tuple(points)


def project(
    transactions: Iterable[Transaction],
    current_balance: Decimal,
    reference_date: date,
    scope: str = ALL_ACCOUNTS,
    scenario: Scenario = Scenario.BASE,
    limit: int = DEFAULT_LIMIT,
    factors: Optional[Mapping[Scenario, ScenarioFactors]] = None,
) -> list[ProjectionPoint]:
    """
    Project the running balance over upcoming open transactions.

    Returns:
        The "Today" point with ``current_balance`` followed by one point per
        projected transaction (at most ``limit``).
    """
    table = factors or DEFAULT_FACTORS
    upcoming = upcoming_transactions(transactions, reference_date, scope, limit)
    return list(_walk(upcoming, current_balance, reference_date, table[scenario]))


def project_scenarios(
    transactions: Iterable[Transaction],
    current_balance: Decimal,
    reference_date: date,
    scope: str = ALL_ACCOUNTS,
    limit: int = DEFAULT_LIMIT,
    factors: Optional[Mapping[Scenario, ScenarioFactors]] = None,
) -> BandedProjection:
    """Compute the three scenarios over the same upcoming transactions."""
    table = factors or DEFAULT_FACTORS
    upcoming = upcoming_transactions(transactions, reference_date, scope, limit)
    return BandedProjection(
        base=_walk(upcoming, current_balance, reference_date, table[Scenario.BASE]),
        optimistic=_walk(
            upcoming, current_balance, reference_date, table[Scenario.OPTIMISTIC]
        ),
        pessimistic=_walk(
            upcoming, current_balance, reference_date, table[Scenario.PESSIMISTIC]
        ),
    )
