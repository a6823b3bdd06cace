"""Habit creation rules and list reordering."""

from __future__ import annotations

import re
from datetime import date
from typing import Sequence, TypeVar

from ..constants import DEFAULT_HABIT_COLOR
from ..models.habit import Habit
from .dates import days_in_month

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}$")

T = TypeVar("T")


def new_habit(
    user_id: str,
    name: str,
    *,
    color: str | None = None,
    year: int | None = None,
    month_index0: int | None = None,
) -> Habit:
    """Build an unsaved habit for ``user_id``.

    The monthly goal is the length of the month the habit is created in
    (the month being viewed, defaulting to the current one).
    """

    name = (name or "").strip()
    if not name:
        raise ValueError("Habit name is required")
    color = color or DEFAULT_HABIT_COLOR
    if not _HEX_COLOR.match(color):
        raise ValueError(f"Invalid habit color: {color}")

    today = date.today()
    year = today.year if year is None else year
    month_index0 = today.month - 1 if month_index0 is None else month_index0

    return Habit(
        user_id=user_id,
        name=name,
        color=color.lower(),
        monthly_goal=days_in_month(year, month_index0),
    )


def move_habit(habits: Sequence[T], from_index: int, to_index: int) -> list[T]:
    """Return a copy of ``habits`` with one item moved, as a drag and drop would."""

    size = len(habits)
    if not (0 <= from_index < size and 0 <= to_index < size):
        raise IndexError(f"Cannot move habit {from_index} -> {to_index} in a list of {size}")
    reordered = list(habits)
    moved = reordered.pop(from_index)
    reordered.insert(to_index, moved)
    return reordered


__all__ = ["move_habit", "new_habit"]
