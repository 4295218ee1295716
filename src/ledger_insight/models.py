# Ledger Insight - Financial analytics & projections for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Domain entities for Ledger Insight.

All entities are immutable snapshots supplied by the persistent store
(or by ``io.load_snapshot``). The analytics modules only read them and
never keep references across calls.

Money values are carried as ``decimal.Decimal`` quantities.

Entities
--------
- Account          : bank / cash account with an initial balance.
- Transaction      : one income or expense line with four dates
                     (issue, due, accrual/competence, payment).
- CategoryItem     : revenue or expense category.
- SubcategoryItem  : child of a category (many-to-one by category_id).
- Budget           : yearly budget made of BudgetItem lines.
- BudgetItem       : monthly budgeted amounts for a category or a
                     category/subcategory pair.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

# Scope value selecting every account.
ALL_ACCOUNTS = "all"


class TransactionType(str, Enum):
    """Direction of a transaction."""

    INFLOW = "inflow"
    OUTFLOW = "outflow"


class TransactionStatus(str, Enum):
    """Lifecycle status of a transaction."""

    PAYABLE = "payable"
    PAID = "paid"
    RECEIVABLE = "receivable"
    RECEIVED = "received"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"


# Realized statuses: the actual amount is authoritative.
SETTLED_STATUSES: frozenset[TransactionStatus] = frozenset(
    {TransactionStatus.PAID, TransactionStatus.RECEIVED}
)

# Open statuses: not yet settled, the expected amount is authoritative.
OPEN_STATUSES: frozenset[TransactionStatus] = frozenset(
    {TransactionStatus.PAYABLE, TransactionStatus.RECEIVABLE}
)


class AccountKind(str, Enum):
    CHECKING = "checking"
    SAVINGS = "savings"
    CASH = "cash"
    INVESTMENT = "investment"


class CategoryKind(str, Enum):
    REVENUE = "revenue"
    EXPENSE = "expense"


@dataclass(frozen=True)
class Account:
    """A money account. Its balance is always derived, never stored."""

    id: str
    name: str
    kind: AccountKind = AccountKind.CHECKING
    initial_balance: Decimal = Decimal("0")
    color: str = ""


@dataclass(frozen=True)
class Transaction:
    """
    One ledger line.

    Attributes
    ----------
    issue_date :
        When the transaction was recorded.
    due_date :
        When it is contractually owed.
    accrual_date :
        Competence date: when it is economically recognized. Period
        reports filter on this date.
    payment_date :
        When it was settled, if it was.
    expected_amount / actual_amount :
        Planned and realized amounts (both non-negative). Which one is
        authoritative depends on ``status`` (see ``amounts.resolve_amount``).
    category :
        Legacy free-text category name, kept alongside ``category_id``.
    """

    id: str
    issue_date: date
    due_date: date
    accrual_date: date
    type: TransactionType
    status: TransactionStatus
    expected_amount: Decimal = Decimal("0")
    actual_amount: Decimal = Decimal("0")
    payment_date: Optional[date] = None
    category: str = ""
    category_id: Optional[str] = None
    subcategory_id: Optional[str] = None
    account_id: Optional[str] = None
    entity: str = ""
    description: str = ""
    product_service: str = ""
    cost_center: str = ""
    payment_method: str = ""
    tags: tuple[str, ...] = ()

    @property
    def is_inflow(self) -> bool:
        return self.type is TransactionType.INFLOW

    @property
    def is_outflow(self) -> bool:
        return self.type is TransactionType.OUTFLOW


@dataclass(frozen=True)
class CategoryItem:
    id: str
    name: str
    kind: CategoryKind


@dataclass(frozen=True)
class SubcategoryItem:
    id: str
    name: str
    category_id: str


@dataclass(frozen=True)
class BudgetItem:
    """
    One budget line.

    ``total_amount`` is written by the store and is expected to equal the
    sum of ``monthly_amounts``; the analytics read it as-is.
    """

    id: str
    budget_id: str
    category_id: str
    monthly_amounts: Mapping[int, Decimal] = field(default_factory=dict)
    total_amount: Decimal = Decimal("0")
    subcategory_id: Optional[str] = None
    notes: str = ""

    @classmethod
    def from_monthly(
        cls,
        id: str,
        budget_id: str,
        category_id: str,
        monthly_amounts: Mapping[int, Decimal],
        subcategory_id: Optional[str] = None,
        notes: str = "",
    ) -> "BudgetItem":
        """Build an item whose total is the sum of its monthly amounts."""
        amounts = {int(m): Decimal(v) for m, v in monthly_amounts.items()}
        return cls(
            id=id,
            budget_id=budget_id,
            category_id=category_id,
            monthly_amounts=amounts,
            total_amount=sum(amounts.values(), Decimal("0")),
            subcategory_id=subcategory_id,
            notes=notes,
        )

    @property
    def key(self) -> str:
        """Matching key shared with actual expenses (see budget.py)."""
        return budget_key(self.category_id, self.subcategory_id)

    def amount_for_month(self, month: int) -> Decimal:
        return Decimal(self.monthly_amounts.get(month, Decimal("0")))


@dataclass(frozen=True)
class Budget:
    id: str
    year: int
    name: str
    items: tuple[BudgetItem, ...] = ()
    is_active: bool = False
    description: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


def budget_key(category_id: str, subcategory_id: Optional[str] = None) -> str:
    """Composite key: category id alone, or category id + subcategory id."""
    if subcategory_id:
        return f"{category_id}:{subcategory_id}"
    return str(category_id)


def in_scope(account_id: Optional[str], scope: str) -> bool:
    """Return True if an account id matches the scope ('all' or one id)."""
    return scope == ALL_ACCOUNTS or account_id == scope
