# Ledger Insight - Financial analytics & projections for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Aging of open payables and receivables.

Open items (payable outflows, receivable inflows) are classified by the
number of days elapsed since their due date:

    0-30, 31-60, 61-90, 90+

Bands are inclusive and disjoint over days_overdue >= 0. Items that are
not yet due (negative days) belong to no band. Each band sums the
expected amount of its items.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from .amounts import ZERO, resolve_amount
from .models import ALL_ACCOUNTS, Transaction, TransactionStatus, in_scope


@dataclass(frozen=True)
class AgingBand:
    label: str
    min_days: int
    max_days: Optional[int]  # None = unbounded

    def contains(self, days: int) -> bool:
        if days < self.min_days:
            return False
        return self.max_days is None or days <= self.max_days


AGING_BANDS: tuple[AgingBand, ...] = (
    AgingBand("0-30", 0, 30),
    AgingBand("31-60", 31, 60),
    AgingBand("61-90", 61, 90),
    AgingBand("90+", 91, None),
)


@dataclass(frozen=True)
class AgingBucket:
    label: str
    amount: Decimal
    count: int


@dataclass(frozen=True)
class AgingReport:
    payables: tuple[AgingBucket, ...]
    receivables: tuple[AgingBucket, ...]


@dataclass(frozen=True)
class OpenItemsSummary:
    payables: tuple[Transaction, ...]
    receivables: tuple[Transaction, ...]
    total_payable: Decimal
    total_receivable: Decimal


def days_overdue(transaction: Transaction, reference_date: date) -> int:
    """Whole days between the due date and the reference date."""
    return (reference_date - transaction.due_date).days


def _is_open_payable(t: Transaction) -> bool:
    return t.is_outflow and t.status is TransactionStatus.PAYABLE


def _is_open_receivable(t: Transaction) -> bool:
    return t.is_inflow and t.status is TransactionStatus.RECEIVABLE


def _bucketize(
    items: Sequence[Transaction], reference_date: date
) -> tuple[AgingBucket, ...]:
    sums = [ZERO] * len(AGING_BANDS)
    counts = [0] * len(AGING_BANDS)

    for t in items:
        days = days_overdue(t, reference_date)
        for index, band in enumerate(AGING_BANDS):
            if band.contains(days):
                sums[index] += resolve_amount(t)
                counts[index] += 1
                break

    return tuple(
        AgingBucket(label=band.label, amount=sums[i], count=counts[i])
        for i, band in enumerate(AGING_BANDS)
    )


def aging_buckets(
    transactions: Iterable[Transaction],
    reference_date: date,
    scope: str = ALL_ACCOUNTS,
) -> AgingReport:
    """
    Bucket open payables and receivables by days overdue.

    Args:
        transactions: Every transaction of the snapshot (no period filter).
        reference_date: The "today" against which due dates are compared.
        scope: 'all' or a single account id.

    Returns:
        An AgingReport with four buckets for payables and four for
        receivables, in band order.
    """
    in_scope_items = [t for t in transactions if in_scope(t.account_id, scope)]
    payables = [t for t in in_scope_items if _is_open_payable(t)]
    receivables = [t for t in in_scope_items if _is_open_receivable(t)]

    return AgingReport(
        payables=_bucketize(payables, reference_date),
        receivables=_bucketize(receivables, reference_date),
    )


def open_items_summary(
    transactions: Iterable[Transaction],
    scope: str = ALL_ACCOUNTS,
) -> OpenItemsSummary:
    """List open payables and receivables (by due date) with their totals."""
    in_scope_items = [t for t in transactions if in_scope(t.account_id, scope)]
    payables = sorted(
        (t for t in in_scope_items if _is_open_payable(t)), key=lambda t: t.due_date
    )
    receivables = sorted(
        (t for t in in_scope_items if _is_open_receivable(t)),
        key=lambda t: t.due_date,
    )

    return OpenItemsSummary(
        payables=tuple(payables),
        receivables=tuple(receivables),
        total_payable=sum((resolve_amount(t) for t in payables), ZERO),
        total_receivable=sum((resolve_amount(t) for t in receivables), ZERO),
    )
