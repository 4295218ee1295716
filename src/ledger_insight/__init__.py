# Ledger Insight - Financial analytics & projections for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Ledger Insight
--------------

A Python-based analytics and projection engine for the transaction ledger
of a small business. It reads an immutable snapshot of accounts,
transactions, categories and budgets, and derives:

- current balances (global or per account),
- realized and pending income / expense for a period,
- a liquidity / solvency / profitability health scorecard,
- aging of open payables and receivables,
- a Pareto ranking of expense categories,
- cash-flow projections under base / optimistic / pessimistic scenarios,
- budget versus actual variance,
- cash-flow and income statements per category,
- monthly trends and multi-period metrics.

Every analytics function is a pure function of the snapshot; the
``engine`` module memoizes complete dashboards per snapshot version.

Version: 0.1.0

Usage:
    python -m ledger_insight.cli --help
"""

__all__ = ["engine", "io", "views", "config"]

__version__ = "0.1.0"
