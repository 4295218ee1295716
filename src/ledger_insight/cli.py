# Ledger Insight - Financial analytics & projections for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Command-Line Interface (CLI) for Ledger Insight.

This module wires together the main building blocks of Ledger Insight:

- application configuration (data directory, health thresholds,
  projection scenarios, display and logging options),
- snapshot loading (accounts, transactions, categories, budgets),
- the analytics engine (dashboard, budget, statements),
- view helpers (tabular rendering and CSV export).

The CLI is intentionally thin: it does not implement any financial logic
itself. It orchestrates the underlying modules based on command-line
arguments and configuration files.


High-level pipeline
-------------------

1) Load the TOML configuration (``ledger_insight_config.toml`` by
   default, or ``--config PATH``). When no configuration file is given
   and the default one does not exist, built-in defaults are used.

2) Configure logging (``[logging]`` section, ``--log-level`` override).

3) Load the ledger snapshot from the data directory (``[data].directory``
   or ``--data-dir``).

4) Determine the reporting period, the account scope, the reference date
   ("today") and the projection scenario from the arguments.

5) Compute the requested report(s) and render them as console tables
   and/or CSV files depending on the display mode.


Reports
-------

``--report`` selects what to render:

- ``dashboard`` (default):
    metrics, health, aging, Pareto ranking and projection.
- ``metrics``:
    current balance, realized and pending income / expense.
- ``health``:
    liquidity, solvency and profitability scorecard.
- ``aging``:
    open payables / receivables by days overdue, plus the open items.
- ``pareto``:
    expense categories ranked with their cumulative percentage.
- ``projection``:
    running balance over upcoming open transactions, three scenarios.
- ``budget``:
    budget versus actual for ``--year`` (active budget or ``--budget-id``).
- ``cashflow``:
    realized cash flow per category (or subcategory) and month, quarter
    or year.
- ``income-statement``:
    realized versus predicted amounts per category for ``--year``.
- ``accounts``:
    balance of every account.
- ``trends``:
    monthly income / expense history and MoM / YoY change.
- ``monthly``:
    period metrics and health indicators for each month of ``--year``.
- ``all``:
    every report above.


Periods and scope
-----------------

The period used by dashboard reports is resolved as follows:

1. ``--from-date`` / ``--to-date`` (custom period),
2. ``--period`` (this-month, last-month, this-year, last-30, last-90),
3. the current month by default.

Periods filter transactions on their accrual date. The current month and
"today" are taken from ``--reference-date`` when provided, which makes
runs reproducible.

``--account ID`` restricts every report to a single account. Without it,
all accounts are included.


Display modes
-------------

- ``table``: print results to stdout (``DataFrame.to_string``),
- ``csv``:   write one timestamped CSV file per table into ``--output``
             (``data/output`` by default),
- ``both``:  do both.

Errors in the configuration or in the snapshot files are reported on
stderr and the process exits with status 2.

Examples:

    python -m ledger_insight.cli --data-dir data --report dashboard
    python -m ledger_insight.cli --report budget --year 2025
    python -m ledger_insight.cli --report cashflow --rollup quarter \\
        --display-mode csv --output exports

End of module description.
"""

import argparse
import logging
import sys
from dataclasses import replace
from datetime import date, datetime
from pathlib import Path
from typing import Optional

import pandas as pd

from . import __version__
from .config import DEFAULT_CONFIG_FILE, AppConfig, default_app_config, load_app_config
from .budget import select_budget
from .engine import AnalyticsEngine, ReportFilter
from .io import load_snapshot
from .logging_config import configure_logging
from .models import ALL_ACCOUNTS
from .multi_periods import compute_metrics_multi_period
from .periods import PRESETS, determine_period_from_args, monthly_periods
from .projection import Scenario
from .statements import rollup_cash_flow
from .views import (
    account_balances_to_dataframe,
    aging_to_dataframe,
    budget_monthly_to_dataframe,
    budget_to_dataframe,
    cash_flow_pivot,
    health_to_dataframe,
    income_statement_to_dataframe,
    metrics_to_dataframe,
    open_items_to_dataframe,
    pareto_to_dataframe,
    projection_to_dataframe,
    trend_summary_to_dataframe,
    trends_to_dataframe,
)

logger = logging.getLogger(__name__)

REPORTS: tuple[str, ...] = (
    "dashboard",
    "metrics",
    "health",
    "aging",
    "pareto",
    "projection",
    "budget",
    "cashflow",
    "income-statement",
    "accounts",
    "trends",
    "monthly",
    "all",
)

DASHBOARD_REPORTS = {"metrics", "health", "aging", "pareto", "projection"}

# (title, file stem, table)
Table = tuple[str, str, pd.DataFrame]


def _build_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser for the CLI."""
    ap = argparse.ArgumentParser(
        prog="python -m ledger_insight.cli",
        description=(
            "Ledger Insight - Financial analytics & projections for small "
            "businesses. Reads a ledger snapshot and renders balances, period "
            "metrics, health indicators, aging, category rankings, cash-flow "
            "projections and budget variance."
        ),
    )

    # Generic options
    ap.add_argument(
        "--version",
        action="store_true",
        help="Show the installed version of ledger_insight and exit.",
    )
    ap.add_argument(
        "--config",
        dest="config_path",
        help=(
            "Path to the TOML configuration file. If omitted, "
            f"'{DEFAULT_CONFIG_FILE}' in the current directory is used when it "
            "exists, otherwise built-in defaults."
        ),
    )
    ap.add_argument(
        "--data-dir",
        dest="data_dir",
        help="Snapshot directory. Overrides [data].directory from the config.",
    )
    ap.add_argument(
        "--log-level",
        dest="log_level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override the [logging].level setting.",
    )

    # Report selection
    ap.add_argument(
        "--report",
        choices=REPORTS,
        default="dashboard",
        help="Report to render (default: dashboard).",
    )

    # Period selection
    ap.add_argument(
        "--period",
        choices=PRESETS,
        help="Predefined reporting period. Defaults to the current month.",
    )
    ap.add_argument(
        "--from-date",
        dest="from_date",
        help="Custom period start date (YYYY-MM-DD).",
    )
    ap.add_argument(
        "--to-date",
        dest="to_date",
        help="Custom period end date (YYYY-MM-DD).",
    )
    ap.add_argument(
        "--reference-date",
        dest="reference_date",
        help="Date used as 'today' (YYYY-MM-DD). Defaults to the system date.",
    )

    # Filters
    ap.add_argument(
        "--account",
        dest="account",
        help="Restrict reports to a single account id (default: all accounts).",
    )
    ap.add_argument(
        "--scenario",
        choices=[s.value for s in Scenario],
        default=Scenario.BASE.value,
        help="Projection scenario highlighted in the dashboard.",
    )
    ap.add_argument(
        "--year",
        type=int,
        help=(
            "Year for budget, income-statement and monthly reports. "
            "Defaults to the year of the reference date."
        ),
    )
    ap.add_argument(
        "--budget-id",
        dest="budget_id",
        help="Budget to compare. Defaults to the active budget of the year.",
    )
    ap.add_argument(
        "--group-by",
        dest="group_by",
        choices=["category", "subcategory"],
        default="category",
        help="Grouping of the cash-flow report.",
    )
    ap.add_argument(
        "--rollup",
        choices=["month", "quarter", "year"],
        default="month",
        help="Time granularity of the cash-flow report.",
    )

    # Display options
    ap.add_argument(
        "--display-mode",
        dest="display_mode",
        choices=["table", "csv", "both"],
        help=(
            "Override the display.mode setting from the configuration file. "
            "'table' prints results to stdout, "
            "'csv' writes CSV files only, "
            "'both' does both."
        ),
    )
    ap.add_argument(
        "--output",
        dest="output_dir",
        help=(
            "Output directory where CSV files will be written when display "
            "mode includes 'csv'. If omitted, 'data/output' is used."
        ),
    )

    return ap


def _parse_optional_date(value: Optional[str]) -> Optional[date]:
    """Parse an optional CLI date argument (YYYY-MM-DD)."""
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise ValueError(f"Invalid date format: {value!r}. Expected YYYY-MM-DD.") from exc


def _resolve_config(args: argparse.Namespace) -> AppConfig:
    """Load the configuration and apply the --data-dir override."""
    if args.config_path:
        config = load_app_config(args.config_path)
    elif Path(DEFAULT_CONFIG_FILE).is_file():
        config = load_app_config()
    else:
        config = default_app_config()

    if args.data_dir:
        config = replace(config, data_directory=Path(args.data_dir).resolve())
    return config


def _wanted(report: str, name: str) -> bool:
    if report == "all":
        return True
    if report == "dashboard":
        return name in DASHBOARD_REPORTS
    return report == name


def build_tables(
    args: argparse.Namespace,
    engine: AnalyticsEngine,
    report_filter: ReportFilter,
    decimals: int,
) -> list[Table]:
    """Compute the requested report(s) and convert them into tables."""
    report = args.report
    scope = report_filter.scope
    year = args.year or report_filter.reference_date.year
    tables: list[Table] = []

    if any(_wanted(report, name) for name in DASHBOARD_REPORTS | {"trends"}):
        board = engine.dashboard(report_filter)

        if _wanted(report, "metrics"):
            tables.append(
                (
                    f"Metrics - {report_filter.period.label} ({engine.config.currency})",
                    "metrics",
                    metrics_to_dataframe(board.metrics, board.balance, decimals),
                )
            )
        if _wanted(report, "health"):
            tables.append(
                ("Health scorecard", "health", health_to_dataframe(board.health, decimals))
            )
        if _wanted(report, "aging"):
            tables.append(("Aging", "aging", aging_to_dataframe(board.aging, decimals)))
            tables.append(
                (
                    "Open payables / receivables",
                    "open_items",
                    open_items_to_dataframe(board.open_items, decimals),
                )
            )
        if _wanted(report, "pareto"):
            tables.append(
                (
                    "Expense categories (Pareto)",
                    "pareto",
                    pareto_to_dataframe(board.pareto, decimals),
                )
            )
        if _wanted(report, "projection"):
            tables.append(
                (
                    f"Cash-flow projection (selected: {report_filter.scenario.value})",
                    "projection",
                    projection_to_dataframe(board.projection, decimals),
                )
            )
        if _wanted(report, "trends"):
            tables.append(
                ("Monthly trends", "trends", trends_to_dataframe(board.trends, decimals))
            )
            tables.append(
                (
                    "Income change",
                    "trend_summary",
                    trend_summary_to_dataframe(board.trend_summary, decimals),
                )
            )

    if _wanted(report, "budget"):
        if select_budget(engine.snapshot.budgets, year, args.budget_id) is None:
            print(f"Warning: no budget found for {year}.")
        comparison = engine.budget_comparison(year, args.budget_id)
        tables.append(
            (f"Budget vs actual - {year}", "budget", budget_to_dataframe(comparison, decimals))
        )
        tables.append(
            (
                f"Budget vs actual by month - {year}",
                "budget_monthly",
                budget_monthly_to_dataframe(comparison, decimals),
            )
        )

    if _wanted(report, "cashflow"):
        lines = engine.cash_flow(scope=scope, group_by=args.group_by)
        if args.rollup != "month":
            lines = rollup_cash_flow(lines, by=args.rollup)
        tables.append(
            (
                f"Cash flow by {args.group_by} ({args.rollup})",
                "cashflow",
                cash_flow_pivot(lines, value="balance", decimals=decimals),
            )
        )

    if _wanted(report, "income-statement"):
        tables.append(
            (
                f"Income statement - {year}",
                "income_statement",
                income_statement_to_dataframe(engine.income_statement(year), decimals),
            )
        )

    if _wanted(report, "accounts"):
        tables.append(
            (
                "Accounts",
                "accounts",
                account_balances_to_dataframe(engine.account_balances(), decimals),
            )
        )

    if _wanted(report, "monthly"):
        metrics_mp, health_mp = compute_metrics_multi_period(
            engine.snapshot,
            monthly_periods(year),
            scope,
            thresholds=engine.config.health,
        )
        tables.append((f"Monthly metrics - {year}", "monthly_metrics", metrics_mp.data))
        tables.append((f"Monthly health - {year}", "monthly_health", health_mp.data))

    return tables


def _render(tables: list[Table], display_mode: str, output_dir: Optional[str]) -> None:
    # Console tables
    if display_mode in {"table", "both"}:
        for title, _, df in tables:
            print()
            print(f"=== {title} ===")
            print(df.to_string(index=False))

    # CSV files
    if display_mode in {"csv", "both"}:
        out = Path(output_dir) if output_dir else Path("data/output")
        out.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y-%m-%d-%H-%M-%S")
        for _, stem, df in tables:
            path = out / f"{stem}_{timestamp}.csv"
            df.to_csv(path, index=False)
            print(f"Wrote {path} ({len(df)} rows)")


def main(argv: Optional[list[str]] = None) -> None:
    """Entry point for the Ledger Insight CLI.

    This function parses command-line arguments, loads the configuration
    and the ledger snapshot, computes the requested report(s) through the
    analytics engine and renders them as console tables and/or CSV files.
    Configuration and data errors are printed on stderr and end the
    process with exit status 2.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    # --version: short-circuit and exit early.
    if args.version:
        print(f"ledger_insight version {__version__}")
        return

    try:
        # 1) Configuration and logging
        config = _resolve_config(args)
        configure_logging(level=args.log_level or config.log_level, fmt=config.log_format)

        # 2) Snapshot
        snapshot = load_snapshot(config.data_directory)

        # 3) Report filter
        today = _parse_optional_date(args.reference_date) or date.today()
        period = determine_period_from_args(args, today=today)
        scope = args.account or ALL_ACCOUNTS
        if scope != ALL_ACCOUNTS and scope not in {a.id for a in snapshot.accounts}:
            logger.warning("Account %r is not part of the snapshot", scope)

        report_filter = ReportFilter(
            period=period,
            reference_date=today,
            scope=scope,
            scenario=Scenario(args.scenario),
        )
        print(
            f"Applied period: {period.label} "
            f"({period.start.isoformat()} → {period.end.isoformat()}), "
            f"scope: {scope}"
        )

        # 4) Reports
        engine = AnalyticsEngine(snapshot, config)
        tables = build_tables(args, engine, report_filter, config.decimals)
    except (FileNotFoundError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(2) from exc

    # 5) Rendering: config value overridden by CLI if provided.
    display_mode = args.display_mode or config.display_mode
    _render(tables, display_mode, args.output_dir)


if __name__ == "__main__":
    main()
