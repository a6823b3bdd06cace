"""SQLModel table exports."""

from .habit import Habit, HabitEntry
from .user import User, new_id

__all__ = [
    "Habit",
    "HabitEntry",
    "User",
    "new_id",
]
