# Ledger Insight - Financial analytics & projections for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Dashboard orchestration for Ledger Insight.

The analytics modules (balances, metrics, health, aging, pareto,
projection, budget, statements) are pure functions over a list of
transactions. This module ties them together for one ledger snapshot.

1. LedgerSnapshot
   --------------
   Immutable view of the store at one point in time: accounts,
   transactions, categories, subcategories and budgets, plus a
   ``version`` number. The store bumps the version whenever any entity
   changes; two snapshots with the same version are considered equal
   for caching purposes.

2. ReportFilter
   ------------
   Hashable set of user choices driving a dashboard: period, account
   scope, reference date ("today") and projection scenario.

3. AnalyticsEngine
   ---------------
   Computes a complete ``Dashboard`` for a filter:
   - current balance (scope-aware),
   - period metrics and health scorecard,
   - aging buckets and open items,
   - Pareto ranking of expense categories,
   - banded cash-flow projection (three scenarios),
   - monthly trends and MoM / YoY income change.

   Results are memoized per ``(snapshot version, filter)``. Calling
   ``refresh()`` with a snapshot of another version drops the cache, so
   a dashboard is never served from stale data.

The engine also exposes the year-based reports (budget comparison,
cash-flow statement, income statement) and per-account balances, which
are cheap enough to compute on demand.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from functools import cached_property, lru_cache
from typing import Optional

from .aging import AgingReport, OpenItemsSummary, aging_buckets, open_items_summary
from .balances import AccountBalance, account_balances, current_balance
from .budget import BudgetComparison, compare_budget, select_budget
from .classification import CategoryIndex
from .config import AppConfig, default_app_config
from .health import HealthScorecard, health_scorecard
from .metrics import (
    MonthlyTotals,
    PeriodMetrics,
    TrendSummary,
    metrics_for_period,
    monthly_history,
    trend_summary,
)
from .models import (
    ALL_ACCOUNTS,
    Account,
    Budget,
    CategoryItem,
    SubcategoryItem,
    Transaction,
)
from .pareto import ParetoEntry, pareto_ranking
from .periods import Period, filter_by_period, period_this_month
from .projection import (
    BandedProjection,
    ProjectionPoint,
    Scenario,
    project_scenarios,
)
from .statements import CashFlowLine, IncomeStatement, cash_flow_statement, income_statement

logger = logging.getLogger(__name__)

DASHBOARD_CACHE_SIZE = 32


class _SnapshotKey:
    """Cache key carrying a snapshot, hashed and compared on its version only."""

    __slots__ = ("snapshot",)

    def __init__(self, snapshot: "LedgerSnapshot") -> None:
        self.snapshot = snapshot

    def __hash__(self) -> int:
        return hash(self.snapshot.version)

    def __eq__(self, other: object) -> bool:
        return (
            isinstance(other, _SnapshotKey)
            and other.snapshot.version == self.snapshot.version
        )


@dataclass(frozen=True)
class LedgerSnapshot:
    """Immutable snapshot of every entity the analytics read."""

    accounts: tuple[Account, ...] = ()
    transactions: tuple[Transaction, ...] = ()
    categories: tuple[CategoryItem, ...] = ()
    subcategories: tuple[SubcategoryItem, ...] = ()
    budgets: tuple[Budget, ...] = ()
    version: int = 0

    @cached_property
    def category_index(self) -> CategoryIndex:
        return CategoryIndex.build(self.categories, self.subcategories)


@dataclass(frozen=True)
class ReportFilter:
    """User selection for a dashboard. Hashable, used as a cache key."""

    period: Period
    reference_date: date
    scope: str = ALL_ACCOUNTS
    scenario: Scenario = Scenario.BASE

    @classmethod
    def current_month(
        cls,
        reference_date: date,
        scope: str = ALL_ACCOUNTS,
        scenario: Scenario = Scenario.BASE,
    ) -> "ReportFilter":
        return cls(
            period=period_this_month(reference_date),
            reference_date=reference_date,
            scope=scope,
            scenario=scenario,
        )


@dataclass(frozen=True)
class Dashboard:
    filter: ReportFilter
    balance: Decimal
    metrics: PeriodMetrics
    health: HealthScorecard
    aging: AgingReport
    open_items: OpenItemsSummary
    pareto: tuple[ParetoEntry, ...]
    projection: BandedProjection
    trends: tuple[MonthlyTotals, ...]
    trend_summary: TrendSummary
    version: int = 0

    @property
    def selected_projection(self) -> tuple[ProjectionPoint, ...]:
        """Series of the scenario chosen in the filter."""
        return self.projection.series(self.filter.scenario)


@dataclass
class AnalyticsEngine:
    """
    Memoizing facade over the analytics modules for one snapshot.

    Examples
    --------
    >>> engine = AnalyticsEngine(snapshot)
    >>> board = engine.dashboard(ReportFilter.current_month(date.today()))
    >>> board.health.liquidity.status
    """

    snapshot: LedgerSnapshot
    config: AppConfig = field(default_factory=default_app_config)

    def __post_init__(self) -> None:
        self._cached_dashboard = lru_cache(maxsize=DASHBOARD_CACHE_SIZE)(
            self._compute_dashboard
        )

    # ------------------------------------------------------------------
    # Snapshot lifecycle
    # ------------------------------------------------------------------

    def refresh(self, snapshot: LedgerSnapshot) -> None:
        """Swap in a new snapshot, dropping cached results on version change."""
        if snapshot.version != self.snapshot.version:
            logger.debug(
                "Snapshot version %s -> %s, clearing dashboard cache",
                self.snapshot.version,
                snapshot.version,
            )
            self._cached_dashboard.cache_clear()
        self.snapshot = snapshot

    def cache_info(self):
        return self._cached_dashboard.cache_info()

    # ------------------------------------------------------------------
    # Dashboard
    # ------------------------------------------------------------------

    def dashboard(self, report_filter: ReportFilter) -> Dashboard:
        """Return the dashboard for ``report_filter`` (memoized)."""
        # Read the snapshot once: the cache key and the computed data must
        # come from the same version even if refresh() runs meanwhile.
        snapshot = self.snapshot
        hits_before = self._cached_dashboard.cache_info().hits
        board = self._cached_dashboard(_SnapshotKey(snapshot), report_filter)
        if self._cached_dashboard.cache_info().hits > hits_before:
            logger.debug(
                "Dashboard cache hit (version=%s, scope=%s, period=%s)",
                snapshot.version,
                report_filter.scope,
                report_filter.period.label,
            )
        return board

    def _compute_dashboard(
        self, key: _SnapshotKey, report_filter: ReportFilter
    ) -> Dashboard:
        snap = key.snapshot
        version = snap.version
        logger.debug(
            "Computing dashboard (version=%s, scope=%s, period=%s)",
            version,
            report_filter.scope,
            report_filter.period.label,
        )
        cfg = self.config
        scope = report_filter.scope
        today = report_filter.reference_date
        transactions = snap.transactions

        balance = current_balance(snap.accounts, transactions, scope)
        metrics = metrics_for_period(transactions, report_filter.period, scope)

        return Dashboard(
            filter=report_filter,
            balance=balance,
            metrics=metrics,
            health=health_scorecard(balance, metrics, cfg.health),
            aging=aging_buckets(transactions, today, scope),
            open_items=open_items_summary(transactions, scope),
            pareto=tuple(
                pareto_ranking(
                    filter_by_period(transactions, report_filter.period),
                    scope,
                    categories=snap.category_index,
                    limit=cfg.pareto_limit,
                )
            ),
            projection=project_scenarios(
                transactions,
                balance,
                today,
                scope,
                limit=cfg.projection_limit,
                factors=cfg.scenario_factors,
            ),
            trends=tuple(
                monthly_history(transactions, today, scope, months=cfg.trend_months)
            ),
            trend_summary=trend_summary(transactions, today, scope),
            version=version,
        )

    # ------------------------------------------------------------------
    # On-demand reports
    # ------------------------------------------------------------------

    def account_balances(self) -> list[AccountBalance]:
        return account_balances(self.snapshot.accounts, self.snapshot.transactions)

    def budget_comparison(
        self, year: int, budget_id: Optional[str] = None
    ) -> BudgetComparison:
        budget = select_budget(self.snapshot.budgets, year, budget_id)
        return compare_budget(
            budget,
            self.snapshot.transactions,
            year,
            categories=self.snapshot.category_index,
        )

    def cash_flow(
        self,
        scope: str = ALL_ACCOUNTS,
        category_id: Optional[str] = None,
        group_by: str = "category",
    ) -> list[CashFlowLine]:
        return cash_flow_statement(
            self.snapshot.transactions,
            self.snapshot.category_index,
            scope=scope,
            category_id=category_id,
            group_by=group_by,
        )

    def income_statement(self, year: int) -> IncomeStatement:
        return income_statement(
            self.snapshot.transactions, year, self.snapshot.category_index
        )
