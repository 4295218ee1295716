from datetime import date
from decimal import Decimal

from ledger_insight.classification import EMPTY_INDEX, CategoryIndex
from ledger_insight.models import (
    CategoryItem,
    CategoryKind,
    SubcategoryItem,
    Transaction,
    TransactionStatus,
    TransactionType,
)

INDEX = CategoryIndex.build(
    [
        CategoryItem("c1", "Sales", CategoryKind.REVENUE),
        CategoryItem("c2", "Rent", CategoryKind.EXPENSE),
    ],
    [SubcategoryItem("s1", "Office", "c2")],
)


def _tx(category="", category_id=None, subcategory_id=None):
    d = date(2025, 1, 1)
    return Transaction(
        id="t",
        issue_date=d,
        due_date=d,
        accrual_date=d,
        type=TransactionType.OUTFLOW,
        status=TransactionStatus.PAID,
        expected_amount=Decimal("1"),
        actual_amount=Decimal("1"),
        category=category,
        category_id=category_id,
        subcategory_id=subcategory_id,
    )


def test_category_label_resolution_order() -> None:
    """Known id, then legacy name, then raw id, then 'Other'."""
    assert INDEX.category_label(_tx("Legacy", "c2")) == "Rent"
    assert INDEX.category_label(_tx("Legacy", "zz")) == "Legacy"
    assert INDEX.category_label(_tx("", "zz")) == "zz"
    assert INDEX.category_label(_tx()) == "Other"


def test_subcategory_lookups() -> None:
    assert INDEX.parent_of("s1") == "c2"
    assert INDEX.parent_of("nope") is None
    assert INDEX.subcategory_label(_tx(subcategory_id="s1")) == "Office"
    assert INDEX.subcategory_label(_tx(subcategory_id="unknown")) == "No subcategory"
    assert INDEX.subcategory_label(_tx()) == "No subcategory"
    assert INDEX.subcategory_label_for_id("s1") == "Office"
    assert INDEX.subcategory_label_for_id("s9") == "s9"


def test_category_kind_and_names() -> None:
    assert INDEX.category_kind("c1") is CategoryKind.REVENUE
    assert INDEX.category_kind(None) is None
    assert INDEX.category_label_for_id("c9") == "c9"
    assert EMPTY_INDEX.category_name("c1") is None
