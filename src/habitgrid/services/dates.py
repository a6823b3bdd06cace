"""Calendar helpers shared by the stats engine, the grid and the printable tracker.

Months are 0-indexed (January is 0) throughout, matching how the dashboard
navigates between months. Entry dates are ``YYYY-MM-DD`` strings.
"""

from __future__ import annotations

from calendar import monthrange
from datetime import date, datetime

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def days_in_month(year: int, month_index0: int) -> int:
    """Return the number of days in the given month."""

    return monthrange(year, month_index0 + 1)[1]


def month_prefix(year: int, month_index0: int) -> str:
    """Return the ``YYYY-MM`` prefix that every date in the month starts with."""

    return f"{year:04d}-{month_index0 + 1:02d}"


def format_date(year: int, month_index0: int, day: int) -> str:
    """Return ``YYYY-MM-DD`` for the given day."""

    return f"{month_prefix(year, month_index0)}-{day:02d}"


def parse_date(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` entry date."""

    return datetime.strptime(value, "%Y-%m-%d").date()


def shift_month(year: int, month_index0: int, offset: int) -> tuple[int, int]:
    """Move ``offset`` months forward (or backward) and return (year, month_index0)."""

    absolute = year * 12 + month_index0 + offset
    return absolute // 12, absolute % 12


def month_label(year: int, month_index0: int) -> str:
    return f"{MONTH_NAMES[month_index0]} {year}"


__all__ = [
    "MONTH_NAMES",
    "days_in_month",
    "format_date",
    "month_label",
    "month_prefix",
    "parse_date",
    "shift_month",
]
