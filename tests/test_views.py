from datetime import date
from decimal import Decimal

import ledger_insight.views as views
from ledger_insight.aging import AgingBucket, AgingReport
from ledger_insight.budget import BudgetComparison, BudgetLineComparison, BudgetSummary
from ledger_insight.health import health_scorecard
from ledger_insight.metrics import PeriodMetrics
from ledger_insight.pareto import ParetoEntry
from ledger_insight.projection import BandedProjection, ProjectionPoint
from ledger_insight.statements import CashFlowLine


def _metrics() -> PeriodMetrics:
    return PeriodMetrics(
        income_realized=Decimal("1000"),
        expense_realized=Decimal("333.333"),
        income_pending=Decimal("0"),
        expense_pending=Decimal("50"),
    )


def test_metrics_to_dataframe_rounds_values() -> None:
    df = views.metrics_to_dataframe(_metrics(), Decimal("2000"), decimals=2)

    assert list(df.columns) == ["key", "label", "value"]
    values = dict(zip(df["key"], df["value"]))
    assert values["balance"] == 2000.0
    assert values["expense_realized"] == 333.33
    assert values["period_result"] == 666.67


def test_health_to_dataframe() -> None:
    df = views.health_to_dataframe(health_scorecard(Decimal("2000"), _metrics()))

    assert list(df["indicator"]) == ["Liquidity", "Solvency", "Profitability"]
    assert list(df.columns) == ["indicator", "value", "unit", "detail", "status"]
    assert df.loc[0, "status"] == "healthy"


def test_aging_to_dataframe_pairs_bands() -> None:
    report = AgingReport(
        payables=(AgingBucket("0-30", Decimal("50"), 1), AgingBucket("31-60", Decimal("0"), 0)),
        receivables=(AgingBucket("0-30", Decimal("0"), 0), AgingBucket("31-60", Decimal("20"), 2)),
    )
    df = views.aging_to_dataframe(report)

    assert list(df["band"]) == ["0-30", "31-60"]
    assert list(df["payables"]) == [50.0, 0.0]
    assert list(df["receivables_count"]) == [0, 2]


def test_empty_inputs_keep_headers() -> None:
    """Empty results still produce the expected columns for CSV export."""
    assert list(views.pareto_to_dataframe([]).columns) == [
        "rank",
        "category",
        "amount",
        "cumulative_amount",
        "percent_of_total",
        "cumulative_percent",
    ]
    assert views.trends_to_dataframe([]).empty
    assert list(views.cash_flow_to_dataframe([]).columns) == [
        "group",
        "period",
        "income",
        "expense",
        "balance",
    ]
    assert list(views.cash_flow_pivot([]).columns) == ["group"]


def test_pareto_to_dataframe_ranks() -> None:
    entries = [
        ParetoEntry("Rent", Decimal("800"), Decimal("800"), Decimal("80"), Decimal("80")),
        ParetoEntry("Fees", Decimal("200"), Decimal("1000"), Decimal("20"), Decimal("100")),
    ]
    df = views.pareto_to_dataframe(entries)

    assert list(df["rank"]) == [1, 2]
    assert list(df["cumulative_percent"]) == [80.0, 100.0]


def test_projection_to_dataframe() -> None:
    def series(*balances):
        return tuple(
            ProjectionPoint(label=f"p{i}", balance=Decimal(b), date=date(2025, 1, i + 1))
            for i, b in enumerate(balances)
        )

    banded = BandedProjection(
        base=series("100", "150"),
        optimistic=series("100", "160"),
        pessimistic=series("100", "140"),
    )
    df = views.projection_to_dataframe(banded)

    assert list(df.columns) == ["label", "base", "optimistic", "pessimistic"]
    assert df.iloc[1].tolist() == ["p1", 150.0, 160.0, 140.0]


def test_budget_to_dataframe_appends_total_row() -> None:
    line = BudgetLineComparison(
        category_id="rent",
        subcategory_id=None,
        category="Rent",
        subcategory=None,
        budgeted=Decimal("200"),
        actual=Decimal("250"),
        variance=Decimal("50"),
        variance_percent=Decimal("25"),
        monthly=(),
    )
    comparison = BudgetComparison(
        items=(line,),
        summary=BudgetSummary(
            total_budgeted=Decimal("200"),
            total_actual=Decimal("300"),
            total_variance=Decimal("100"),
            total_variance_percent=Decimal("50"),
        ),
    )
    df = views.budget_to_dataframe(comparison)

    assert list(df["category"]) == ["Rent", "TOTAL"]
    assert df.iloc[0]["subcategory"] == ""
    assert df.iloc[-1]["actual"] == 300.0


def test_cash_flow_pivot_fills_missing_cells() -> None:
    lines = [
        CashFlowLine("Sales", "2025-01", Decimal("100"), Decimal("0")),
        CashFlowLine("Rent", "2025-02", Decimal("0"), Decimal("40")),
    ]
    wide = views.cash_flow_pivot(lines)

    assert list(wide.columns) == ["group", "2025-01", "2025-02"]
    rent = wide.set_index("group").loc["Rent"]
    assert rent["2025-01"] == 0.0
    assert rent["2025-02"] == -40.0
