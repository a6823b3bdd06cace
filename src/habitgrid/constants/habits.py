"""Habit colour palette offered when creating a habit."""

from __future__ import annotations

HABIT_COLORS: list[dict[str, str]] = [
    {"name": "Emerald", "value": "#10b981"},
    {"name": "Sky", "value": "#0ea5e9"},
    {"name": "Violet", "value": "#8b5cf6"},
    {"name": "Amber", "value": "#f59e0b"},
    {"name": "Rose", "value": "#f43f5e"},
    {"name": "Cyan", "value": "#06b6d4"},
]

DEFAULT_HABIT_COLOR = HABIT_COLORS[0]["value"]

# One colour per weekly bucket on the volume chart
WEEK_BAR_COLORS = ["#10b981", "#3b82f6", "#8b5cf6", "#f59e0b", "#ec4899"]
