# Ledger Insight - Financial analytics & projections for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
I/O module for Ledger Insight.

This module reads a ledger snapshot exported by the store and turns it
into the immutable entities consumed by the analytics.

Expected directory layout
-------------------------

    <data directory>/
        accounts.csv          (required)
        transactions.csv      (required)
        categories.csv        (optional)
        subcategories.csv     (optional)
        budgets.toml          (optional)

CSV files
---------
Column names are case-insensitive. Besides the canonical snake_case names
below, the camelCase names of the store export (``issueDate``,
``expectedAmount``...) and the legacy Portuguese names (``dataVencimento``,
``valorPrevisto``, ``data_vencimento``...) are accepted as aliases.

- accounts.csv      : id, name, kind, initial_balance, color
- transactions.csv  : id, issue_date, due_date, accrual_date, payment_date,
                      type, status, expected_amount, actual_amount,
                      category, category_id, subcategory_id, account_id,
                      entity, description, product_service, cost_center,
                      payment_method, tags
- categories.csv    : id, name, kind
- subcategories.csv : id, name, category_id

Enum values accept the legacy labels as well, e.g. ``Entrada`` / ``Saída``
for the transaction type and ``Pago``, ``A pagar``, ``Atrasado``... for the
status. ``accrual_date`` falls back to ``due_date`` when blank. ``tags``
is a ``;`` separated list.

Amounts are read as text and converted with ``Decimal`` so that no binary
float enters a sum.

budgets.toml
------------

    [[budgets]]
    id = "b-2025"
    year = 2025
    name = "Budget 2025"
    is_active = true

    [[budgets.items]]
    id = "rent"
    category_id = "cat-rent"
    monthly_amounts = { 1 = 1500, 2 = 1500 }

``total_amount`` is optional on items; when missing it is the sum of the
monthly amounts.

Any structural problem (missing file, missing column, invalid date, amount
or enum value) raises a clear ValueError or FileNotFoundError.
"""

import logging
import os
from collections.abc import Mapping
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Any, Optional, Union

import pandas as pd

from .amounts import to_decimal
from .config import _load_toml
from .engine import LedgerSnapshot
from .models import (
    Account,
    AccountKind,
    Budget,
    BudgetItem,
    CategoryItem,
    CategoryKind,
    SubcategoryItem,
    Transaction,
    TransactionStatus,
    TransactionType,
)

logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]

ACCOUNTS_FILE = "accounts.csv"
TRANSACTIONS_FILE = "transactions.csv"
CATEGORIES_FILE = "categories.csv"
SUBCATEGORIES_FILE = "subcategories.csv"
BUDGETS_FILE = "budgets.toml"

# ---------------------------------------------------------------------------
# Column and value aliases (lowercase)
# ---------------------------------------------------------------------------

_ACCOUNT_ALIASES: dict[str, tuple[str, ...]] = {
    "name": ("nome",),
    "kind": ("type", "tipo"),
    "initial_balance": ("initialbalance", "saldo_inicial"),
    "color": ("cor",),
}

_TRANSACTION_ALIASES: dict[str, tuple[str, ...]] = {
    "issue_date": ("issuedate", "datalancamento", "data_lancamento", "data_emissao"),
    "due_date": ("duedate", "datavencimento", "data_vencimento"),
    "accrual_date": ("accrualdate", "datacompetencia", "data_competencia"),
    "payment_date": ("paymentdate", "datapagamento", "data_pagamento"),
    "type": ("tipo",),
    "expected_amount": ("expectedamount", "valorprevisto", "valor_previsto"),
    "actual_amount": ("actualamount", "valorrealizado", "valor_realizado"),
    "category": ("categoria",),
    "category_id": ("categoryid", "categoria_id"),
    "subcategory_id": ("subcategoryid", "subcategoria_id"),
    "account_id": ("accountid", "conta_id"),
    "entity": ("entidade",),
    "description": ("descricao",),
    "product_service": ("productservice", "produto_servico"),
    "cost_center": ("costcenter", "centro_custo"),
    "payment_method": ("paymentmethod", "forma_pagamento"),
}

_CATEGORY_ALIASES: dict[str, tuple[str, ...]] = {
    "name": ("nome",),
    "kind": ("type", "tipo"),
}

_SUBCATEGORY_ALIASES: dict[str, tuple[str, ...]] = {
    "name": ("nome",),
    "category_id": ("categoryid", "categoria_id"),
}

_TYPE_VALUES: dict[str, TransactionType] = {
    "entrada": TransactionType.INFLOW,
    "saída": TransactionType.OUTFLOW,
    "saida": TransactionType.OUTFLOW,
}

_STATUS_VALUES: dict[str, TransactionStatus] = {
    "pago": TransactionStatus.PAID,
    "recebido": TransactionStatus.RECEIVED,
    "a pagar": TransactionStatus.PAYABLE,
    "a receber": TransactionStatus.RECEIVABLE,
    "atrasado": TransactionStatus.OVERDUE,
    "cancelado": TransactionStatus.CANCELLED,
}

_ACCOUNT_KIND_VALUES: dict[str, AccountKind] = {
    "corrente": AccountKind.CHECKING,
    "poupança": AccountKind.SAVINGS,
    "poupanca": AccountKind.SAVINGS,
    "caixa": AccountKind.CASH,
    "investimento": AccountKind.INVESTMENT,
}

_CATEGORY_KIND_VALUES: dict[str, CategoryKind] = {
    "receita": CategoryKind.REVENUE,
    "despesa": CategoryKind.EXPENSE,
}


# ---------------------------------------------------------------------------
# Low-level helpers
# ---------------------------------------------------------------------------


def _read_csv(path: Path, aliases: Mapping[str, tuple[str, ...]]) -> pd.DataFrame:
    """
    Read a CSV file as text and normalize its column names.

    Column names are lowercased and stripped, then aliases are renamed to
    their canonical name (a canonical column already present wins).
    """
    if not path.is_file():
        raise FileNotFoundError(f"Snapshot file not found: {path}")

    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    df.columns = [str(c).lower().strip() for c in df.columns]

    renames: dict[str, str] = {}
    cols = set(df.columns)
    for canonical, names in aliases.items():
        if canonical in cols:
            continue
        for name in names:
            if name in cols:
                renames[name] = canonical
                break
    if renames:
        df = df.rename(columns=renames)

    return df


def _require_columns(df: pd.DataFrame, required: set[str], path: Path) -> None:
    missing = required - set(df.columns)
    if missing:
        raise ValueError(
            f"Invalid structure for {path.name}: missing column(s) "
            f"{', '.join(sorted(missing))}."
        )


def _text(row: Mapping[str, Any], column: str) -> str:
    value = row.get(column)
    if value is None:
        return ""
    return str(value).strip()


def _optional_text(row: Mapping[str, Any], column: str) -> Optional[str]:
    return _text(row, column) or None


def _parse_dates(df: pd.DataFrame, column: str) -> list[Optional[date]]:
    """Strictly parse a date column; blank cells become None."""
    if column not in df.columns:
        return [None] * len(df)

    raw = df[column].str.strip()
    try:
        parsed = pd.to_datetime(raw, errors="raise")
    except Exception as exc:  # noqa: BLE001
        raise ValueError(f"Invalid values in '{column}' column.") from exc

    return [None if pd.isna(value) else value.date() for value in parsed]


def _parse_amount(row: Mapping[str, Any], column: str) -> Decimal:
    try:
        return to_decimal(row.get(column))
    except ValueError as exc:
        raise ValueError(
            f"Invalid numeric value {row.get(column)!r} in '{column}' column."
        ) from exc


def _parse_enum(value: str, enum_cls, legacy: Mapping[str, Any], column: str):
    key = value.strip().lower()
    if key in legacy:
        return legacy[key]
    try:
        return enum_cls(key)
    except ValueError as exc:
        raise ValueError(f"Invalid value {value!r} in '{column}' column.") from exc


# ---------------------------------------------------------------------------
# Entity readers
# ---------------------------------------------------------------------------


def read_accounts(path: PathLike) -> list[Account]:
    """Read accounts.csv (id and name are required)."""
    path = Path(path)
    df = _read_csv(path, _ACCOUNT_ALIASES)
    _require_columns(df, {"id", "name"}, path)

    accounts: list[Account] = []
    for row in df.to_dict(orient="records"):
        kind_raw = _text(row, "kind")
        accounts.append(
            Account(
                id=_text(row, "id"),
                name=_text(row, "name"),
                kind=(
                    _parse_enum(kind_raw, AccountKind, _ACCOUNT_KIND_VALUES, "kind")
                    if kind_raw
                    else AccountKind.CHECKING
                ),
                initial_balance=_parse_amount(row, "initial_balance"),
                color=_text(row, "color"),
            )
        )
    return accounts


def read_transactions(path: PathLike) -> list[Transaction]:
    """
    Read transactions.csv.

    Required columns: id, issue_date, due_date, type, status and at least
    one of expected_amount / actual_amount.
    """
    path = Path(path)
    df = _read_csv(path, _TRANSACTION_ALIASES)
    _require_columns(df, {"id", "issue_date", "due_date", "type", "status"}, path)
    if not {"expected_amount", "actual_amount"} & set(df.columns):
        raise ValueError(
            f"Invalid structure for {path.name}: expected an 'expected_amount' "
            "and/or an 'actual_amount' column."
        )

    issue_dates = _parse_dates(df, "issue_date")
    due_dates = _parse_dates(df, "due_date")
    accrual_dates = _parse_dates(df, "accrual_date")
    payment_dates = _parse_dates(df, "payment_date")

    transactions: list[Transaction] = []
    for i, row in enumerate(df.to_dict(orient="records")):
        if issue_dates[i] is None or due_dates[i] is None:
            raise ValueError(
                f"Missing 'issue_date' or 'due_date' for transaction "
                f"{_text(row, 'id')!r} in {path.name}."
            )

        tags = tuple(tag.strip() for tag in _text(row, "tags").split(";") if tag.strip())

        transactions.append(
            Transaction(
                id=_text(row, "id"),
                issue_date=issue_dates[i],
                due_date=due_dates[i],
                accrual_date=accrual_dates[i] or due_dates[i],
                payment_date=payment_dates[i],
                type=_parse_enum(_text(row, "type"), TransactionType, _TYPE_VALUES, "type"),
                status=_parse_enum(
                    _text(row, "status"), TransactionStatus, _STATUS_VALUES, "status"
                ),
                expected_amount=_parse_amount(row, "expected_amount"),
                actual_amount=_parse_amount(row, "actual_amount"),
                category=_text(row, "category"),
                category_id=_optional_text(row, "category_id"),
                subcategory_id=_optional_text(row, "subcategory_id"),
                account_id=_optional_text(row, "account_id"),
                entity=_text(row, "entity"),
                description=_text(row, "description"),
                product_service=_text(row, "product_service"),
                cost_center=_text(row, "cost_center"),
                payment_method=_text(row, "payment_method"),
                tags=tags,
            )
        )
    return transactions


def read_categories(path: PathLike) -> list[CategoryItem]:
    path = Path(path)
    df = _read_csv(path, _CATEGORY_ALIASES)
    _require_columns(df, {"id", "name", "kind"}, path)
    return [
        CategoryItem(
            id=_text(row, "id"),
            name=_text(row, "name"),
            kind=_parse_enum(
                _text(row, "kind"), CategoryKind, _CATEGORY_KIND_VALUES, "kind"
            ),
        )
        for row in df.to_dict(orient="records")
    ]


def read_subcategories(path: PathLike) -> list[SubcategoryItem]:
    path = Path(path)
    df = _read_csv(path, _SUBCATEGORY_ALIASES)
    _require_columns(df, {"id", "name", "category_id"}, path)
    return [
        SubcategoryItem(
            id=_text(row, "id"),
            name=_text(row, "name"),
            category_id=_text(row, "category_id"),
        )
        for row in df.to_dict(orient="records")
    ]


def _parse_budget_item(raw: Mapping[str, Any], budget_id: str) -> BudgetItem:
    for key in ("id", "category_id"):
        if not raw.get(key):
            raise ValueError(f"Budget item of {budget_id!r} is missing '{key}'.")

    monthly_raw = raw.get("monthly_amounts") or {}
    if not isinstance(monthly_raw, Mapping):
        raise ValueError(
            f"'monthly_amounts' of budget item {raw['id']!r} must be a table."
        )

    monthly: dict[int, Any] = {}
    for month, amount in monthly_raw.items():
        try:
            month_number = int(month)
        except ValueError as exc:
            raise ValueError(
                f"Invalid month {month!r} in budget item {raw['id']!r}."
            ) from exc
        if not 1 <= month_number <= 12:
            raise ValueError(f"Invalid month {month!r} in budget item {raw['id']!r}.")
        monthly[month_number] = to_decimal(amount)

    item = BudgetItem.from_monthly(
        id=str(raw["id"]),
        budget_id=budget_id,
        category_id=str(raw["category_id"]),
        monthly_amounts=monthly,
        subcategory_id=str(raw["subcategory_id"]) if raw.get("subcategory_id") else None,
        notes=str(raw.get("notes", "")),
    )
    if raw.get("total_amount") is not None:
        item = BudgetItem(
            id=item.id,
            budget_id=item.budget_id,
            category_id=item.category_id,
            monthly_amounts=item.monthly_amounts,
            total_amount=to_decimal(raw["total_amount"]),
            subcategory_id=item.subcategory_id,
            notes=item.notes,
        )
    return item


def read_budgets(path: PathLike) -> list[Budget]:
    """Read budgets from a TOML file (see module docstring)."""
    raw = _load_toml(Path(path))
    entries = raw.get("budgets") or []
    if not isinstance(entries, list):
        raise ValueError(f"Invalid structure for {Path(path).name}: expected [[budgets]].")

    budgets: list[Budget] = []
    for entry in entries:
        for key in ("id", "year"):
            if key not in entry:
                raise ValueError(f"Budget entry is missing '{key}' in {Path(path).name}.")
        budget_id = str(entry["id"])
        try:
            year = int(entry["year"])
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Invalid year for budget {budget_id!r}.") from exc

        budgets.append(
            Budget(
                id=budget_id,
                year=year,
                name=str(entry.get("name") or budget_id),
                items=tuple(
                    _parse_budget_item(item, budget_id) for item in entry.get("items", [])
                ),
                is_active=bool(entry.get("is_active", False)),
                description=str(entry.get("description", "")),
                created_at=entry.get("created_at"),
                updated_at=entry.get("updated_at"),
            )
        )
    return budgets


# ---------------------------------------------------------------------------
# Snapshot
# ---------------------------------------------------------------------------


def _files_version(paths: list[Path]) -> int:
    """Version number derived from the modification times of the files."""
    return sum(p.stat().st_mtime_ns for p in paths if p.is_file())


def load_snapshot(directory: PathLike, version: Optional[int] = None) -> LedgerSnapshot:
    """
    Load every snapshot file of ``directory`` into a LedgerSnapshot.

    Parameters
    ----------
    directory:
        Folder containing the exported CSV / TOML files.
    version:
        Explicit snapshot version. When omitted, it is derived from the
        modification times of the files, so that re-exporting the data
        yields a new version.
    """
    base = Path(directory)
    if not base.is_dir():
        raise FileNotFoundError(f"Data directory not found: {base}")

    paths = [
        base / name
        for name in (
            ACCOUNTS_FILE,
            TRANSACTIONS_FILE,
            CATEGORIES_FILE,
            SUBCATEGORIES_FILE,
            BUDGETS_FILE,
        )
    ]
    accounts_path, transactions_path, categories_path, subcategories_path, budgets_path = paths

    accounts = read_accounts(accounts_path)
    transactions = read_transactions(transactions_path)
    categories = read_categories(categories_path) if categories_path.is_file() else []
    subcategories = (
        read_subcategories(subcategories_path) if subcategories_path.is_file() else []
    )
    budgets = read_budgets(budgets_path) if budgets_path.is_file() else []

    logger.info(
        "Loaded snapshot from %s: %d accounts, %d transactions, %d categories, "
        "%d budgets",
        base,
        len(accounts),
        len(transactions),
        len(categories),
        len(budgets),
    )

    return LedgerSnapshot(
        accounts=tuple(accounts),
        transactions=tuple(transactions),
        categories=tuple(categories),
        subcategories=tuple(subcategories),
        budgets=tuple(budgets),
        version=_files_version(paths) if version is None else version,
    )
