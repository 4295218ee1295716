# Ledger Insight - Financial analytics & projections for small businesses
# Copyright (c) 2025 Maxence Bernard (maxencebernardhub)
# Licensed under the MIT License. See LICENSE file for details.

"""
Period helpers for Ledger Insight.

This module defines a Period value object and helpers to derive
reporting periods (this month, last month, this year, last 30/90 days,
custom range) from a reference date and CLI arguments.

Periods always filter transactions on their accrual (competence) date:
a period report answers "what was earned or incurred in this window",
not "what fell due in it".
"""

from calendar import monthrange
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional

from .models import ALL_ACCOUNTS, Transaction, in_scope

PRESETS: tuple[str, ...] = (
    "this-month",
    "last-month",
    "this-year",
    "last-30",
    "last-90",
)


@dataclass(frozen=True)
class Period:
    """Represents a reporting period with a human-readable label."""

    start: date
    end: date
    label: str

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


def _today() -> date:
    """Return today's date as a date object (isolated for easier testing)."""
    return datetime.today().date()


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    """Return (year, month) moved by ``delta`` months."""
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First and last day of a calendar month."""
    return date(year, month, 1), date(year, month, monthrange(year, month)[1])


def period_this_month(today: Optional[date] = None) -> Period:
    """Full current calendar month."""
    today = today or _today()
    start, end = month_bounds(today.year, today.month)
    return Period(start=start, end=end, label="This month")


def period_last_month(today: Optional[date] = None) -> Period:
    """Full previous calendar month."""
    today = today or _today()
    year, month = shift_month(today.year, today.month, -1)
    start, end = month_bounds(year, month)
    return Period(start=start, end=end, label="Last month")


def period_this_year(today: Optional[date] = None) -> Period:
    """Full current calendar year."""
    today = today or _today()
    return Period(
        start=date(today.year, 1, 1),
        end=date(today.year, 12, 31),
        label=f"Year {today.year}",
    )


def period_last_days(days: int, today: Optional[date] = None) -> Period:
    """The last ``days`` days up to and including today."""
    today = today or _today()
    return Period(
        start=today - timedelta(days=days),
        end=today,
        label=f"Last {days} days",
    )


def monthly_periods(year: int) -> list[Period]:
    """The twelve calendar months of ``year``, labelled 'YYYY-MM'."""
    periods = []
    for month in range(1, 13):
        start, end = month_bounds(year, month)
        periods.append(Period(start=start, end=end, label=f"{year:04d}-{month:02d}"))
    return periods


def determine_period_from_args(args, today: Optional[date] = None) -> Period:
    """
    Determine the reporting period to use based on CLI args.

    Priority (highest to lowest):

        1. args.from_date / args.to_date (custom period)
        2. args.period (this-month, last-month, this-year, last-30, last-90)
        3. this month by default
    """
    today = today or _today()

    # 1) Custom from/to dates
    from_raw: Optional[str] = getattr(args, "from_date", None)
    to_raw: Optional[str] = getattr(args, "to_date", None)

    if from_raw or to_raw:
        try:
            start = date.fromisoformat(from_raw) if from_raw else date(today.year, 1, 1)
            end = date.fromisoformat(to_raw) if to_raw else today
        except ValueError as exc:
            raise ValueError(
                "Invalid custom period dates, expected YYYY-MM-DD format."
            ) from exc

        if end < start:
            raise ValueError("Custom period end date cannot be before start date.")

        return Period(start=start, end=end, label=f"Custom period ({start} → {end})")

    # 2) Predefined period
    preset = getattr(args, "period", None)
    if preset:
        if preset == "this-month":
            return period_this_month(today)
        if preset == "last-month":
            return period_last_month(today)
        if preset == "this-year":
            return period_this_year(today)
        if preset == "last-30":
            return period_last_days(30, today)
        if preset == "last-90":
            return period_last_days(90, today)
        raise ValueError(f"Unknown period: {preset!r}")

    # 3) Default: current month
    return period_this_month(today)


def filter_by_period(
    transactions: Iterable[Transaction],
    period: Period,
    scope: str = ALL_ACCOUNTS,
) -> list[Transaction]:
    """
    Keep transactions whose accrual date is within [start, end] (inclusive)
    and whose account matches ``scope``.
    """
    return [
        t
        for t in transactions
        if period.contains(t.accrual_date) and in_scope(t.account_id, scope)
    ]
