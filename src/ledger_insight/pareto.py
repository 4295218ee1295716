# Ledger Insight - Financial analytics & projections for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Pareto ranking of expense categories.

Outflows are grouped by category label, ranked by amount (descending)
and given a cumulative-percentage curve, which shows the few categories
that drive most of the spending. Only the top entries are returned, but
cumulative values are computed over the full ranking.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from .amounts import ZERO, resolve_amount, safe_percent
from .classification import EMPTY_INDEX, CategoryIndex
from .models import ALL_ACCOUNTS, Transaction, in_scope

DEFAULT_LIMIT = 10


@dataclass(frozen=True)
class ParetoEntry:
    category: str
    amount: Decimal
    cumulative_amount: Decimal
    percent_of_total: Decimal
    cumulative_percent: Decimal


def category_totals(
    transactions: Iterable[Transaction],
    scope: str = ALL_ACCOUNTS,
    categories: Optional[CategoryIndex] = None,
) -> dict[str, Decimal]:
    """Σ resolved amount of outflows per category label (first-seen order)."""
    index = categories or EMPTY_INDEX
    totals: dict[str, Decimal] = {}
    for t in transactions:
        if not t.is_outflow or not in_scope(t.account_id, scope):
            continue
        label = index.category_label(t)
        totals[label] = totals.get(label, ZERO) + resolve_amount(t)
    return totals


def pareto_ranking(
    transactions: Iterable[Transaction],
    scope: str = ALL_ACCOUNTS,
    categories: Optional[CategoryIndex] = None,
    limit: int = DEFAULT_LIMIT,
) -> list[ParetoEntry]:
    """
    Rank expense categories and compute the cumulative curve.

    Args:
        transactions: Transactions of the selected period.
        scope: 'all' or a single account id.
        categories: Optional index used to turn category ids into names.
        limit: Maximum number of entries returned.

    Returns:
        Entries sorted by amount descending. Empty when the total spend
        is zero.
    """
    totals = category_totals(transactions, scope, categories)
    grand_total = sum(totals.values(), ZERO)
    if grand_total == 0:
        return []

    # sorted() is stable: equal amounts keep first-seen order.
    ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)

    entries: list[ParetoEntry] = []
    cumulative = ZERO
    for name, amount in ranked:
        cumulative += amount
        entries.append(
            ParetoEntry(
                category=name,
                amount=amount,
                cumulative_amount=cumulative,
                percent_of_total=safe_percent(amount, grand_total),
                cumulative_percent=safe_percent(cumulative, grand_total),
            )
        )

    return entries[: max(limit, 0)]
