"""Shared constants."""

from .habits import DEFAULT_HABIT_COLOR, HABIT_COLORS, WEEK_BAR_COLORS

__all__ = ["DEFAULT_HABIT_COLOR", "HABIT_COLORS", "WEEK_BAR_COLORS"]
