"""Habit repository protocol."""

from __future__ import annotations

from typing import Iterable, Optional, Protocol, Sequence

from ...models.habit import Habit, HabitEntry


class HabitRepository(Protocol):
    """Query and mutation contract the dashboard and stats callers rely on."""

    def get_habits(self, user_id: str) -> list[Habit]:
        """List a user's habits in their persisted order."""
        ...

    def get_habit(self, habit_id: str) -> Optional[Habit]:
        """Retrieve a habit by ID."""
        ...

    def save_habit(self, habit: Habit) -> Habit:
        """Insert or update a habit by ID."""
        ...

    def update_habits_order(self, user_id: str, ordered_habits: Sequence[Habit]) -> list[Habit]:
        """Persist a new order for one user's habits."""
        ...

    def delete_habit(self, habit_id: str) -> None:
        """Delete a habit and all of its entries."""
        ...

    def get_entries(self, habit_ids: Iterable[str]) -> list[HabitEntry]:
        """List entries belonging to any of the given habits."""
        ...

    def toggle_entry(self, habit_id: str, date: str) -> HabitEntry:
        """Flip completion for a habit on a day, creating a completed entry if none exists."""
        ...
