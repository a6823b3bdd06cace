"""Dashboard statistics computed from habits and their daily entries.

Every function here is pure: inputs are never mutated and the result depends
only on the arguments (plus the wall clock for the current streak when
``today`` is not supplied). Habits and entries are read by attribute, so ORM
rows, dataclasses and ``SimpleNamespace`` objects all work.

Month filtering is done on the ``YYYY-MM`` string prefix of the entry date;
real date arithmetic is only used to measure gaps between streak days.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Sequence

from .dates import days_in_month, format_date, month_prefix, parse_date

WEEK_BUCKET_BOUNDS = (7, 14, 21, 28)


@dataclass(frozen=True)
class DashboardStats:
    """Headline numbers for the dashboard cards."""

    total_habits: int = 0
    overall_completion: int = 0
    current_streak: int = 0
    best_streak: int = 0
    completed_days: int = 0


@dataclass(frozen=True)
class DailyStat:
    date: str
    completion_rate: int


@dataclass(frozen=True)
class HabitRank:
    id: str
    name: str
    count: int
    color: str
    monthly_goal: int


def percentage(numerator: int, denominator: int) -> int:
    """Return ``round(100 * numerator / denominator)`` with .5 rounding up, 0 for an empty denominator."""

    if denominator <= 0:
        return 0
    value = Decimal(100 * numerator) / Decimal(denominator)
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _completed_in_month(entries: Iterable[Any], prefix: str) -> list[Any]:
    return [e for e in entries if e.completed and e.date.startswith(prefix)]


def compute_streaks(completed_dates: Iterable[str], *, today: date | None = None) -> tuple[int, int]:
    """Return (current_streak, best_streak) for a collection of completed dates.

    Dates are de-duplicated and walked in ascending order. A run grows only when
    the calendar gap to the previous date is exactly one day. The final run
    counts as current only while the latest completed date is today or
    yesterday.
    """

    days = sorted(set(completed_dates))
    if not days:
        return 0, 0

    best = 0
    run = 0
    previous: date | None = None
    for value in days:
        current_day = parse_date(value)
        if previous is not None and current_day - previous == timedelta(days=1):
            run += 1
        else:
            run = 1
        best = max(best, run)
        previous = current_day

    today = today or date.today()
    if previous in (today, today - timedelta(days=1)):
        return run, best
    return 0, best


def compute_dashboard_stats(
    habits: Sequence[Any],
    entries: Iterable[Any],
    year: int,
    month_index0: int,
    *,
    today: date | None = None,
) -> DashboardStats:
    """Aggregate the dashboard cards for one month.

    Completion figures only look at the target month, while streaks cover the
    whole entry history across all habits combined.
    """

    if not habits:
        return DashboardStats()

    entries = list(entries)
    completed_days = len(_completed_in_month(entries, month_prefix(year, month_index0)))
    total_possible = len(habits) * days_in_month(year, month_index0)
    current_streak, best_streak = compute_streaks(
        (e.date for e in entries if e.completed), today=today
    )

    return DashboardStats(
        total_habits=len(habits),
        overall_completion=percentage(completed_days, total_possible),
        current_streak=current_streak,
        best_streak=best_streak,
        completed_days=completed_days,
    )


def get_daily_stats(
    habits: Sequence[Any], entries: Iterable[Any], year: int, month_index0: int
) -> list[DailyStat]:
    """Return the completion rate of every day in the month, in day order."""

    per_day: dict[str, int] = {}
    for entry in entries:
        if entry.completed:
            per_day[entry.date] = per_day.get(entry.date, 0) + 1

    stats = []
    for day in range(1, days_in_month(year, month_index0) + 1):
        key = format_date(year, month_index0, day)
        stats.append(DailyStat(date=key, completion_rate=percentage(per_day.get(key, 0), len(habits))))
    return stats


def _week_bucket(day_of_month: int) -> int:
    for index, upper in enumerate(WEEK_BUCKET_BOUNDS):
        if day_of_month <= upper:
            return index
    return len(WEEK_BUCKET_BOUNDS)


def get_weekly_stats(
    habits: Sequence[Any], entries: Iterable[Any], year: int, month_index0: int
) -> list[int]:
    """Count completed entries in five fixed buckets: days 1-7, 8-14, 15-21, 22-28, 29-end.

    ``habits`` is accepted for signature symmetry with the other aggregations.
    """

    weeks = [0] * (len(WEEK_BUCKET_BOUNDS) + 1)
    for entry in _completed_in_month(entries, month_prefix(year, month_index0)):
        parts = entry.date.split("-")
        if len(parts) != 3:
            continue
        weeks[_week_bucket(int(parts[2]))] += 1
    return weeks


def get_habit_ranking(
    habits: Sequence[Any], entries: Iterable[Any], year: int, month_index0: int
) -> list[HabitRank]:
    """Rank habits by completions in the month, most first.

    ``sorted`` is stable (also with ``reverse=True``), so habits with equal
    counts keep the order they were given in.
    """

    counts: dict[Any, int] = {}
    for entry in _completed_in_month(entries, month_prefix(year, month_index0)):
        counts[entry.habit_id] = counts.get(entry.habit_id, 0) + 1

    ranking = [
        HabitRank(
            id=habit.id,
            name=habit.name,
            count=counts.get(habit.id, 0),
            color=habit.color,
            monthly_goal=habit.monthly_goal,
        )
        for habit in habits
    ]
    return sorted(ranking, key=lambda rank: rank.count, reverse=True)


def goal_progress(rank: HabitRank, month_days: int) -> int:
    """Share of the month a ranked habit was completed, as a whole percentage."""

    return percentage(rank.count, month_days)


__all__ = [
    "DailyStat",
    "DashboardStats",
    "HabitRank",
    "compute_dashboard_stats",
    "compute_streaks",
    "get_daily_stats",
    "get_habit_ranking",
    "get_weekly_stats",
    "goal_progress",
    "percentage",
]
