# Ledger Insight - Financial analytics & projections for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Amount resolution shared by every report.

A transaction carries two amounts: the expected (planned) amount and the
actual (realized) amount. Exactly one of them is authoritative:

- settled statuses (paid, received)  -> actual_amount
- any other status (payable, receivable, overdue, cancelled)
                                     -> expected_amount

Overdue is an open, unsettled state and therefore resolves to the
expected amount.

All other modules call ``resolve_amount`` instead of checking the status
themselves, so that balances, metrics, rankings and projections agree.
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from .models import OPEN_STATUSES, SETTLED_STATUSES, Transaction

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def is_settled(transaction: Transaction) -> bool:
    return transaction.status in SETTLED_STATUSES


def is_open(transaction: Transaction) -> bool:
    return transaction.status in OPEN_STATUSES


def resolve_amount(transaction: Transaction) -> Decimal:
    """Return the authoritative amount of a transaction for its status."""
    if is_settled(transaction):
        return transaction.actual_amount
    return transaction.expected_amount


def signed_amount(
    transaction: Transaction, amount: Optional[Decimal] = None
) -> Decimal:
    """
    Return ``amount`` (or the resolved amount) signed by direction:
    positive for inflows, negative for outflows.
    """
    value = resolve_amount(transaction) if amount is None else amount
    return value if transaction.is_inflow else -value


def safe_ratio(numerator: Decimal, denominator: Decimal) -> Decimal:
    """Divide, returning 0 when the denominator is 0."""
    if denominator == 0:
        return ZERO
    return numerator / denominator


def safe_percent(numerator: Decimal, denominator: Decimal) -> Decimal:
    """``numerator / denominator * 100``, or 0 when the denominator is 0."""
    if denominator == 0:
        return ZERO
    return numerator / denominator * HUNDRED


def to_decimal(value: Any) -> Decimal:
    """
    Convert a raw input value to Decimal.

    Floats go through ``str`` so that 0.1 becomes Decimal('0.1') and not
    its binary expansion. None, NaN and blank strings map to 0.

    Raises:
        ValueError: if the value cannot be interpreted as a number.
    """
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float) and value != value:  # NaN from pandas
        return ZERO

    text = str(value).strip()
    if not text:
        return ZERO

    try:
        result = Decimal(text)
    except InvalidOperation as exc:
        raise ValueError(f"Invalid monetary amount: {value!r}") from exc

    if result.is_nan():
        return ZERO
    if result.is_infinite():
        raise ValueError(f"Invalid monetary amount: {value!r}")
    return result
