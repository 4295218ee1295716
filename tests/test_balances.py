from datetime import date
from decimal import Decimal

import ledger_insight.balances as balances
from ledger_insight.models import (
    Account,
    AccountKind,
    Transaction,
    TransactionStatus,
    TransactionType,
)


def _tx(id, type_, status, amount, account_id="acc1", accrual=date(2025, 1, 15)):
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


ACCOUNTS = [
    Account(id="acc1", name="Main", initial_balance=Decimal("1000")),
    Account(id="acc2", name="Cash drawer", kind=AccountKind.CASH, initial_balance=Decimal("200")),
]

TRANSACTIONS = [
    _tx("t1", TransactionType.INFLOW, TransactionStatus.RECEIVED, "500"),
    _tx("t2", TransactionType.OUTFLOW, TransactionStatus.PAID, "300"),
    _tx("t3", TransactionType.OUTFLOW, TransactionStatus.PAYABLE, "999"),
    _tx("t4", TransactionType.INFLOW, TransactionStatus.RECEIVED, "50", account_id="acc2"),
    _tx("t5", TransactionType.OUTFLOW, TransactionStatus.CANCELLED, "70"),
    # Dates play no part in the balance.
    _tx("t6", TransactionType.INFLOW, TransactionStatus.RECEIVED, "10", accrual=date(2030, 1, 1)),
]


def test_current_balance_all_accounts() -> None:
    """Initial balances plus settled movements, open and cancelled rows ignored."""
    result = balances.current_balance(ACCOUNTS, TRANSACTIONS)
    assert result == Decimal("1000") + Decimal("200") + 500 - 300 + 50 + 10


def test_current_balance_single_account_scope() -> None:
    assert balances.current_balance(ACCOUNTS, TRANSACTIONS, "acc1") == Decimal("1210")
    assert balances.current_balance(ACCOUNTS, TRANSACTIONS, "acc2") == Decimal("250")


def test_current_balance_without_accounts_counts_movements() -> None:
    """An empty account list contributes 0, settled movements still count."""
    assert balances.current_balance([], TRANSACTIONS) == Decimal("260")
    assert balances.current_balance([], []) == Decimal("0")


def test_transaction_without_account_only_counts_for_all_scope() -> None:
    orphan = _tx("t9", TransactionType.INFLOW, TransactionStatus.RECEIVED, "40", account_id=None)

    assert balances.current_balance(ACCOUNTS, [orphan]) == Decimal("1240")
    assert balances.current_balance(ACCOUNTS, [orphan], "acc1") == Decimal("1000")


def test_account_balances_in_account_order() -> None:
    result = balances.account_balances(ACCOUNTS, TRANSACTIONS)

    assert [b.account_id for b in result] == ["acc1", "acc2"]
    assert result[0].balance == Decimal("1210")
    assert result[1].balance == Decimal("250")
    assert result[1].kind is AccountKind.CASH
