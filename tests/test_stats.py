"""Tests for the dashboard statistics engine.

Covers headline stats (completion ratio, completed entries, streaks), per-day
completion rates, fixed weekly buckets and the stable habit ranking.
"""

from __future__ import annotations

from datetime import date
from types import SimpleNamespace

import pytest

from habitgrid.services.stats import (
    DailyStat,
    DashboardStats,
    HabitRank,
    compute_dashboard_stats,
    compute_streaks,
    get_daily_stats,
    get_habit_ranking,
    get_weekly_stats,
    goal_progress,
    percentage,
)


def make_habit(habit_id: str, name: str | None = None, color: str = "#10b981", monthly_goal: int = 31):
    return SimpleNamespace(
        id=habit_id, user_id="u1", name=name or habit_id, color=color, monthly_goal=monthly_goal
    )


def make_entry(habit_id: str, day: str, completed: bool = True):
    return SimpleNamespace(id=f"{habit_id}:{day}", habit_id=habit_id, date=day, completed=completed)


class TestPercentage:
    def test_rounds_half_up(self):
        assert percentage(1, 8) == 13
        assert percentage(1, 200) == 1
        assert percentage(3, 8) == 38

    def test_rounds_down_below_half(self):
        assert percentage(1, 3) == 33

    def test_zero_denominator(self):
        assert percentage(5, 0) == 0


class TestDashboardStats:
    """Headline numbers for one month."""

    def test_no_habits_returns_all_zero(self):
        entries = [make_entry("h1", "2024-01-01"), make_entry("h1", "2024-01-02")]

        result = compute_dashboard_stats([], entries, 2024, 0, today=date(2024, 1, 2))

        assert result == DashboardStats(0, 0, 0, 0, 0)

    def test_overall_completion_two_habits_february(self):
        """2 habits, 28-day month, 14 completions -> round(100*14/56) = 25."""
        habits = [make_habit("h1"), make_habit("h2")]
        entries = [make_entry("h1", f"2023-02-{d:02d}") for d in range(1, 8)]
        entries += [make_entry("h2", f"2023-02-{d:02d}") for d in range(1, 8)]

        result = compute_dashboard_stats(habits, entries, 2023, 1, today=date(2023, 2, 7))

        assert result.total_habits == 2
        assert result.completed_days == 14
        assert result.overall_completion == 25

    def test_completed_days_only_counts_target_month(self):
        habits = [make_habit("h1")]
        entries = [
            make_entry("h1", "2024-03-01"),
            make_entry("h1", "2024-03-02", completed=False),
            make_entry("h1", "2024-02-29"),
            make_entry("h1", "2024-04-01"),
        ]

        result = compute_dashboard_stats(habits, entries, 2024, 2, today=date(2024, 3, 2))

        assert result.completed_days == 1
        assert result.overall_completion == 3  # 100 / 31 = 3.2

    def test_streaks_span_all_months(self):
        habits = [make_habit("h1")]
        entries = [make_entry("h1", f"2024-01-{d:02d}") for d in range(25, 32)]

        # Viewing February with no February entries still reports the January run
        result = compute_dashboard_stats(habits, entries, 2024, 1, today=date(2024, 2, 1))

        assert result.completed_days == 0
        assert result.best_streak == 7
        assert result.current_streak == 7

    def test_streak_counts_any_habit_per_day(self):
        habits = [make_habit("h1"), make_habit("h2")]
        entries = [
            make_entry("h1", "2024-01-01"),
            make_entry("h2", "2024-01-02"),
            make_entry("h1", "2024-01-02"),
            make_entry("h2", "2024-01-03"),
        ]

        result = compute_dashboard_stats(habits, entries, 2024, 0, today=date(2024, 1, 3))

        assert result.best_streak == 3
        assert result.current_streak == 3

    def test_entries_are_not_mutated(self):
        habits = [make_habit("h1"), make_habit("h2")]
        entries = [make_entry("h2", "2024-01-05"), make_entry("h1", "2024-01-01")]
        snapshot = [(e.habit_id, e.date, e.completed) for e in entries]

        compute_dashboard_stats(habits, entries, 2024, 0, today=date(2024, 1, 5))

        assert [(e.habit_id, e.date, e.completed) for e in entries] == snapshot
        assert [h.id for h in habits] == ["h1", "h2"]

    def test_accepts_generator_of_entries(self):
        habits = [make_habit("h1")]
        entries = (make_entry("h1", f"2024-01-0{d}") for d in (1, 2))

        result = compute_dashboard_stats(habits, entries, 2024, 0, today=date(2024, 1, 2))

        assert result.completed_days == 2
        assert result.current_streak == 2


class TestStreaks:
    """Streak walk over distinct completed dates."""

    def test_three_consecutive_days_ending_today(self):
        dates = ["2024-01-01", "2024-01-02", "2024-01-03"]

        assert compute_streaks(dates, today=date(2024, 1, 3)) == (3, 3)

    def test_last_completion_yesterday_keeps_streak_alive(self):
        dates = ["2024-01-01", "2024-01-02", "2024-01-03"]

        assert compute_streaks(dates, today=date(2024, 1, 4)) == (3, 3)

    def test_two_days_since_last_completion_breaks_streak(self):
        dates = ["2024-01-01", "2024-01-02", "2024-01-03"]

        assert compute_streaks(dates, today=date(2024, 1, 5)) == (0, 3)

    def test_gap_resets_run(self):
        dates = ["2024-01-01", "2024-01-05"]

        assert compute_streaks(dates, today=date(2024, 1, 7)) == (0, 1)
        assert compute_streaks(dates, today=date(2024, 1, 5)) == (1, 1)

    def test_no_dates(self):
        assert compute_streaks([], today=date(2024, 1, 1)) == (0, 0)

    def test_single_date(self):
        assert compute_streaks(["2024-06-10"], today=date(2024, 6, 10)) == (1, 1)

    def test_duplicates_and_unsorted_input(self):
        dates = ["2024-01-03", "2024-01-01", "2024-01-02", "2024-01-02"]

        assert compute_streaks(dates, today=date(2024, 1, 3)) == (3, 3)

    def test_month_and_leap_day_boundaries(self):
        dates = ["2024-01-31", "2024-02-01", "2024-02-28", "2024-02-29", "2024-03-01"]

        assert compute_streaks(dates, today=date(2024, 3, 1)) == (3, 3)

    def test_best_streak_from_earlier_run(self):
        dates = [f"2024-01-{d:02d}" for d in range(1, 8)] + ["2024-01-20", "2024-01-21"]

        assert compute_streaks(dates, today=date(2024, 1, 21)) == (2, 7)

    def test_year_boundary(self):
        dates = ["2023-12-30", "2023-12-31", "2024-01-01"]

        assert compute_streaks(dates, today=date(2024, 1, 1)) == (3, 3)

    def test_defaults_to_wall_clock_today(self):
        today = date.today().isoformat()

        assert compute_streaks([today]) == (1, 1)


class TestDailyStats:
    def test_one_row_per_day_in_order(self):
        result = get_daily_stats([make_habit("h1")], [], 2024, 1)

        assert len(result) == 29
        assert result[0] == DailyStat(date="2024-02-01", completion_rate=0)
        assert result[-1].date == "2024-02-29"
        assert [r.date for r in result] == sorted(r.date for r in result)

    def test_completion_rate_per_day(self):
        habits = [make_habit("h1"), make_habit("h2"), make_habit("h3")]
        entries = [
            make_entry("h1", "2024-01-01"),
            make_entry("h2", "2024-01-01"),
            make_entry("h3", "2024-01-01", completed=False),
            make_entry("h1", "2024-01-02"),
        ]

        result = get_daily_stats(habits, entries, 2024, 0)

        assert result[0].completion_rate == 67
        assert result[1].completion_rate == 33
        assert result[2].completion_rate == 0

    def test_half_values_round_up(self):
        habits = [make_habit(f"h{i}") for i in range(8)]
        entries = [make_entry("h0", "2024-01-10")]

        result = get_daily_stats(habits, entries, 2024, 0)

        assert result[9].completion_rate == 13

    def test_no_habits_gives_zero_rates(self):
        entries = [make_entry("h1", "2024-01-01")]

        result = get_daily_stats([], entries, 2024, 0)

        assert len(result) == 31
        assert all(r.completion_rate == 0 for r in result)


class TestWeeklyStats:
    @pytest.mark.parametrize(
        ("day", "bucket"),
        [(1, 0), (7, 0), (8, 1), (14, 1), (15, 2), (21, 2), (22, 3), (28, 3), (29, 4), (31, 4)],
    )
    def test_bucket_boundaries(self, day, bucket):
        entries = [make_entry("h1", f"2024-01-{day:02d}")]

        weeks = get_weekly_stats([make_habit("h1")], entries, 2024, 0)

        expected = [0, 0, 0, 0, 0]
        expected[bucket] = 1
        assert weeks == expected

    def test_short_month_leaves_last_bucket_empty(self):
        entries = [make_entry("h1", f"2023-02-{d:02d}") for d in range(1, 29)]

        assert get_weekly_stats([make_habit("h1")], entries, 2023, 1) == [7, 7, 7, 7, 0]

    def test_ignores_incomplete_and_other_months(self):
        entries = [
            make_entry("h1", "2024-01-03"),
            make_entry("h2", "2024-01-03"),
            make_entry("h1", "2024-01-04", completed=False),
            make_entry("h1", "2023-01-04"),
            make_entry("h1", "2024-02-04"),
        ]

        weeks = get_weekly_stats([make_habit("h1"), make_habit("h2")], entries, 2024, 0)

        assert weeks == [2, 0, 0, 0, 0]

    def test_empty_inputs(self):
        assert get_weekly_stats([], [], 2024, 0) == [0, 0, 0, 0, 0]


class TestHabitRanking:
    def test_sorted_by_count_descending(self):
        habits = [make_habit("read"), make_habit("run"), make_habit("code")]
        entries = [make_entry("run", f"2024-05-0{d}") for d in range(1, 4)]
        entries += [make_entry("code", "2024-05-01")]

        ranking = get_habit_ranking(habits, entries, 2024, 4)

        assert [(r.id, r.count) for r in ranking] == [("run", 3), ("code", 1), ("read", 0)]

    def test_ties_keep_input_order(self):
        habits = [make_habit("a"), make_habit("b"), make_habit("c"), make_habit("d")]
        entries = [
            make_entry("c", "2024-05-01"),
            make_entry("d", "2024-05-02"),
            make_entry("b", "2024-05-01"),
            make_entry("b", "2024-05-02"),
        ]

        ranking = get_habit_ranking(habits, entries, 2024, 4)

        assert [r.id for r in ranking] == ["b", "c", "d", "a"]

    def test_counts_only_completed_entries_in_month(self):
        habits = [make_habit("a")]
        entries = [
            make_entry("a", "2024-05-01"),
            make_entry("a", "2024-05-02", completed=False),
            make_entry("a", "2024-04-30"),
        ]

        (rank,) = get_habit_ranking(habits, entries, 2024, 4)

        assert rank.count == 1

    def test_carries_habit_fields(self):
        habits = [make_habit("a", name="Read", color="#f43f5e", monthly_goal=30)]

        ranking = get_habit_ranking(habits, [], 2024, 3)

        assert ranking == [HabitRank(id="a", name="Read", count=0, color="#f43f5e", monthly_goal=30)]

    def test_does_not_reorder_input(self):
        habits = [make_habit("a"), make_habit("b")]
        entries = [make_entry("b", "2024-05-01")]

        get_habit_ranking(habits, entries, 2024, 4)

        assert [h.id for h in habits] == ["a", "b"]

    def test_empty_habits(self):
        assert get_habit_ranking([], [make_entry("a", "2024-05-01")], 2024, 4) == []


def test_goal_progress_uses_month_length():
    rank = HabitRank(id="a", name="Read", count=15, color="#10b981", monthly_goal=31)

    assert goal_progress(rank, 30) == 50
    assert goal_progress(rank, 0) == 0
