# Ledger Insight - Financial analytics & projections for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Ledger balances.

A balance is a point-in-time fact: it is the sum of the initial balances
of the accounts in scope plus every settled transaction in scope,
regardless of any reporting period selected elsewhere. Open
transactions (payable, receivable, overdue, cancelled) never move a
balance.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from decimal import Decimal

from .amounts import ZERO, is_settled, signed_amount
from .models import ALL_ACCOUNTS, Account, AccountKind, Transaction, in_scope


@dataclass(frozen=True)
class AccountBalance:
    """Derived balance of a single account."""

    account_id: str
    name: str
    kind: AccountKind
    initial_balance: Decimal
    balance: Decimal


def _settled_movement(transactions: Iterable[Transaction], scope: str) -> Decimal:
    total = ZERO
    for t in transactions:
        if not in_scope(t.account_id, scope) or not is_settled(t):
            continue
        total += signed_amount(t)
    return total


def current_balance(
    accounts: Iterable[Account],
    transactions: Iterable[Transaction],
    scope: str = ALL_ACCOUNTS,
) -> Decimal:
    """
    Compute the current balance for one account or for all accounts.

    Args:
        accounts: Accounts of the snapshot.
        transactions: Every transaction of the snapshot (no date filter).
        scope: 'all' or a single account id.

    Returns:
        Σ initial balances in scope + Σ settled inflows − Σ settled outflows.
        An empty account list yields 0 plus the settled movements in scope.
    """
    opening = sum(
        (a.initial_balance for a in accounts if in_scope(a.id, scope)), ZERO
    )
    return opening + _settled_movement(transactions, scope)


def account_balances(
    accounts: Sequence[Account],
    transactions: Sequence[Transaction],
) -> list[AccountBalance]:
    """Return the derived balance of every account, in account order."""
    movements: dict[str, Decimal] = {}
    for t in transactions:
        if t.account_id is None or not is_settled(t):
            continue
        movements[t.account_id] = movements.get(t.account_id, ZERO) + signed_amount(t)

    return [
        AccountBalance(
            account_id=a.id,
            name=a.name,
            kind=a.kind,
            initial_balance=a.initial_balance,
            balance=a.initial_balance + movements.get(a.id, ZERO),
        )
        for a in accounts
    ]
