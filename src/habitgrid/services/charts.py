"""Dashboard chart rendering with matplotlib."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
import matplotlib.ticker as mticker
from matplotlib.figure import Figure

from ..constants import WEEK_BAR_COLORS
from .stats import DailyStat, HabitRank, goal_progress

_ACCENT = "#10b981"
_MUTED = "#94a3b8"
WEEK_LABELS = ["W1", "W2", "W3", "W4", "W5"]


def _placeholder(ax, message: str) -> None:
    ax.text(0.5, 0.5, message, ha="center", va="center", fontsize=12, color="#999")
    ax.axis("off")


def build_daily_trend_chart(daily: Sequence[DailyStat]) -> Figure:
    """Area chart of the per-day completion rate across the month."""

    fig, ax = plt.subplots(figsize=(10, 4))
    if not daily:
        _placeholder(ax, "No days to chart")
        return fig

    days = [int(stat.date[-2:]) for stat in daily]
    rates = [stat.completion_rate for stat in daily]
    ax.plot(days, rates, color=_ACCENT, linewidth=2.5)
    ax.fill_between(days, rates, color=_ACCENT, alpha=0.2)
    ax.set_xlim(days[0], days[-1])
    ax.set_ylim(0, 100)
    ax.yaxis.set_major_formatter(mticker.PercentFormatter())
    ax.xaxis.set_major_locator(mticker.MaxNLocator(integer=True))
    ax.set_title("Monthly Performance Trend", fontsize=13, fontweight="bold")
    ax.grid(axis="y", linestyle="--", alpha=0.4)
    ax.spines[["top", "right"]].set_visible(False)
    fig.tight_layout()
    return fig


def build_weekly_chart(weeks: Sequence[int]) -> Figure:
    """Bar chart of completed entries per fixed weekly bucket."""

    fig, ax = plt.subplots(figsize=(6, 4))
    labels = WEEK_LABELS[: len(weeks)]
    colors = [WEEK_BAR_COLORS[i % len(WEEK_BAR_COLORS)] for i in range(len(weeks))]
    ax.bar(labels, list(weeks), color=colors)
    ax.yaxis.set_major_locator(mticker.MaxNLocator(integer=True))
    ax.set_title("Weekly Volume", fontsize=13, fontweight="bold")
    ax.spines[["top", "right"]].set_visible(False)
    fig.tight_layout()
    return fig


def build_ranking_chart(ranking: Sequence[HabitRank], days_in_month: int, *, limit: int = 5) -> Figure:
    """Horizontal bars for the top habits, coloured per habit, scaled to the month."""

    fig, ax = plt.subplots(figsize=(6, 4))
    top = list(ranking)[:limit]
    if not top or all(rank.count == 0 for rank in top):
        _placeholder(ax, "No data recorded for this month")
        return fig

    labels = [f"{i + 1}. {rank.name}" for i, rank in enumerate(top)]
    progress = [goal_progress(rank, days_in_month) for rank in top]
    bars = ax.barh(labels, progress, color=[rank.color for rank in top])
    ax.invert_yaxis()
    ax.set_xlim(0, 100)
    ax.xaxis.set_major_formatter(mticker.PercentFormatter())
    for bar, rank in zip(bars, top):
        ax.text(
            bar.get_width() + 1,
            bar.get_y() + bar.get_height() / 2,
            f"{rank.count}/{days_in_month}",
            va="center",
            fontsize=9,
            color=_MUTED,
        )
    ax.set_title(f"Top {len(top)} Habits", fontsize=13, fontweight="bold")
    ax.spines[["top", "right"]].set_visible(False)
    fig.tight_layout()
    return fig


def save_figure(fig: Figure, output_path: Path) -> Path:
    """Write ``fig`` to ``output_path`` as PNG and release it."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    try:
        fig.savefig(output_path, bbox_inches="tight", dpi=120)
    finally:
        plt.close(fig)
    return output_path


def export_dashboard_charts(
    *,
    daily: Sequence[DailyStat],
    weeks: Sequence[int],
    ranking: Sequence[HabitRank],
    days_in_month: int,
    output_dir: Path,
) -> list[Path]:
    """Render the three dashboard charts into ``output_dir`` and return their paths."""

    return [
        save_figure(build_daily_trend_chart(daily), output_dir / "daily_trend.png"),
        save_figure(build_weekly_chart(weeks), output_dir / "weekly_volume.png"),
        save_figure(build_ranking_chart(ranking, days_in_month), output_dir / "top_habits.png"),
    ]
