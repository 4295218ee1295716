from datetime import date
from decimal import Decimal

import ledger_insight.budget as budget
from ledger_insight.classification import CategoryIndex
from ledger_insight.models import (
    Budget,
    BudgetItem,
    CategoryItem,
    CategoryKind,
    SubcategoryItem,
    Transaction,
    TransactionStatus,
    TransactionType,
)


def _expense(id, amount, month, category_id="c1", subcategory_id=None,
             status=TransactionStatus.PAID, year=2025):
    d = date(year, month, 15)
    return Transaction(
        id=id,
        issue_date=d,
        due_date=d,
        accrual_date=d,
        type=TransactionType.OUTFLOW,
        status=status,
        expected_amount=Decimal(amount),
        actual_amount=Decimal(amount),
        category_id=category_id,
        subcategory_id=subcategory_id,
    )


def _budget(*items, year=2025, active=True, id="b1"):
    return Budget(id=id, year=year, name=f"Budget {year}", items=tuple(items), is_active=active)


def test_single_item_variance() -> None:
    """200 budgeted and 250 spent: variance 50, i.e. 25 %."""
    item = BudgetItem.from_monthly("i1", "b1", "c1", {1: Decimal("200")})
    txs = [_expense("t1", "250", 1)]

    result = budget.compare_budget(_budget(item), txs, 2025)
    line = result.items[0]

    assert line.budgeted == Decimal("200")
    assert line.actual == Decimal("250")
    assert line.variance == Decimal("50")
    assert line.variance_percent == Decimal("25")
    assert line.monthly[0].actual == Decimal("250")
    assert line.monthly[0].variance == Decimal("50")
    assert len(line.monthly) == 12
    assert result.summary.items_over_budget == 1
    assert result.summary.items_under_budget == 0


def test_only_paid_expenses_of_the_year_with_category_count() -> None:
    item = BudgetItem.from_monthly("i1", "b1", "c1", {m: Decimal("100") for m in range(1, 13)})
    txs = [
        _expense("ok", "40", 2),
        _expense("payable", "500", 2, status=TransactionStatus.PAYABLE),
        _expense("last-year", "500", 2, year=2024),
        _expense("no-category", "500", 2, category_id=None),
    ]
    result = budget.compare_budget(_budget(item), txs, 2025)

    assert result.items[0].actual == Decimal("40")
    assert result.items[0].budgeted == Decimal("1200")
    assert result.summary.total_actual == Decimal("40")


def test_subcategory_items_match_on_composite_key() -> None:
    rent = BudgetItem.from_monthly("i1", "b1", "c1", {1: Decimal("100")})
    energy = BudgetItem.from_monthly("i2", "b1", "c1", {1: Decimal("100")}, subcategory_id="s1")
    txs = [_expense("a", "30", 1), _expense("b", "70", 1, subcategory_id="s1")]

    index = CategoryIndex.build(
        [CategoryItem("c1", "Facilities", CategoryKind.EXPENSE)],
        [SubcategoryItem("s1", "Energy", "c1")],
    )
    result = budget.compare_budget(_budget(rent, energy), txs, 2025, categories=index)
    by_id = {line.subcategory_id: line for line in result.items}

    assert by_id[None].actual == Decimal("30")
    assert by_id["s1"].actual == Decimal("70")
    assert by_id["s1"].subcategory == "Energy"
    assert by_id[None].category == "Facilities"


def test_unknown_subcategory_falls_back_to_raw_id() -> None:
    """Lines whose subcategory is not in the index show the raw id."""
    item = BudgetItem.from_monthly(
        "i1", "b1", "c1", {1: Decimal("50")}, subcategory_id="sub-missing"
    )
    result = budget.compare_budget(_budget(item), [], 2025)

    (line,) = result.items
    assert line.category == "c1"
    assert line.subcategory == "sub-missing"


def test_items_sorted_by_absolute_variance() -> None:
    a = BudgetItem.from_monthly("a", "b1", "ca", {1: Decimal("100")})
    b = BudgetItem.from_monthly("b", "b1", "cb", {1: Decimal("100")})
    c = BudgetItem.from_monthly("c", "b1", "cc", {1: Decimal("100")})
    txs = [_expense("1", "110", 1, "ca"), _expense("2", "20", 1, "cb"), _expense("3", "150", 1, "cc")]

    result = budget.compare_budget(_budget(a, b, c), txs, 2025)

    assert [line.category_id for line in result.items] == ["cb", "cc", "ca"]
    assert result.items[0].category == "cb"


def test_summary_includes_unbudgeted_expenses() -> None:
    item = BudgetItem.from_monthly("i1", "b1", "c1", {1: Decimal("100")})
    txs = [_expense("a", "100", 1), _expense("b", "60", 3, category_id="unbudgeted")]

    summary = budget.compare_budget(_budget(item), txs, 2025).summary

    assert summary.total_budgeted == Decimal("100")
    assert summary.total_actual == Decimal("160")
    assert summary.total_variance == Decimal("60")
    assert summary.total_variance_percent == Decimal("60")
    assert summary.items_over_budget == 0
    assert summary.items_under_budget == 0


def test_zero_budget_gives_zero_percent() -> None:
    item = BudgetItem("i1", "b1", "c1", {}, Decimal("0"))
    result = budget.compare_budget(_budget(item), [_expense("a", "10", 1)], 2025)

    assert result.items[0].variance == Decimal("10")
    assert result.items[0].variance_percent == Decimal("0")


def test_no_budget_returns_empty_comparison() -> None:
    result = budget.compare_budget(None, [_expense("a", "10", 1)], 2025)

    assert result.items == ()
    assert result.summary.total_actual == Decimal("0")
    assert result.monthly_totals == ()


def test_monthly_totals() -> None:
    item = BudgetItem.from_monthly("i1", "b1", "c1", {1: Decimal("100"), 2: Decimal("50")})
    txs = [_expense("a", "80", 1), _expense("b", "20", 2, category_id="c9")]

    totals = budget.compare_budget(_budget(item), txs, 2025).monthly_totals

    assert totals[0].budgeted == Decimal("100")
    assert totals[0].actual == Decimal("80")
    assert totals[1].actual == Decimal("20")
    assert totals[11].budgeted == Decimal("0")


def test_select_budget() -> None:
    inactive = _budget(id="old", active=False)
    active = _budget(id="new", active=True)
    other_year = _budget(id="y24", year=2024, active=True)
    budgets = [inactive, active, other_year]

    assert budget.select_budget(budgets, 2025).id == "new"
    assert budget.select_budget([inactive, other_year], 2025).id == "old"
    assert budget.select_budget(budgets, 2025, budget_id="y24").id == "y24"
    assert budget.select_budget(budgets, 2030) is None
    assert budget.select_budget(budgets, 2025, budget_id="missing") is None
