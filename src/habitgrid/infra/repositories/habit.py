"""SQLModel implementation of Habit repository."""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

from sqlalchemy import func
from sqlmodel import col, select

from ...logging_config import get_logger
from ...models.habit import Habit, HabitEntry
from ..database import SessionFactory

logger = get_logger(__name__)


class SQLModelHabitRepository:
    """SQLModel-based habit repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def get_habits(self, user_id: str) -> list[Habit]:
        """List a user's habits in their persisted order."""
        with self.session_factory() as session:
            statement = (
                select(Habit).where(Habit.user_id == user_id).order_by(col(Habit.position))
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def get_habit(self, habit_id: str) -> Optional[Habit]:
        """Retrieve a habit by ID."""
        with self.session_factory() as session:
            obj = session.get(Habit, habit_id)
            if obj:
                session.expunge(obj)
            return obj

    def save_habit(self, habit: Habit) -> Habit:
        """Insert or update a habit by ID.

        New habits go after the owner's last habit; updates keep their position.
        """
        with self.session_factory() as session:
            existing = session.get(Habit, habit.id) if habit.id else None
            if existing is not None:
                existing.name = habit.name
                existing.color = habit.color
                existing.monthly_goal = habit.monthly_goal
                target = existing
            else:
                last_position = session.exec(
                    select(func.max(Habit.position)).where(Habit.user_id == habit.user_id)
                ).one()
                habit.position = 0 if last_position is None else last_position + 1
                target = habit
            session.add(target)
            session.commit()
            session.refresh(target)
            session.expunge(target)
        logger.info("Habit saved", extra={"habit_id": target.id, "user_id": target.user_id})
        return target

    def update_habits_order(self, user_id: str, ordered_habits: Sequence[Habit]) -> list[Habit]:
        """Rewrite positions of one user's habits to follow ``ordered_habits``.

        Other users' habits are never touched. Owned habits missing from the
        list keep their relative order after the listed ones.
        """
        with self.session_factory() as session:
            owned = list(
                session.exec(
                    select(Habit).where(Habit.user_id == user_id).order_by(col(Habit.position))
                ).all()
            )
            by_id = {habit.id: habit for habit in owned}

            ordered_ids: list[str] = []
            for habit in ordered_habits:
                if habit.id not in by_id:
                    logger.warning(
                        "Ignoring habit outside user during reorder",
                        extra={"habit_id": habit.id, "user_id": user_id},
                    )
                    continue
                if habit.id not in ordered_ids:
                    ordered_ids.append(habit.id)
            ordered_ids.extend(h.id for h in owned if h.id not in ordered_ids)

            result = []
            for position, habit_id in enumerate(ordered_ids):
                habit = by_id[habit_id]
                habit.position = position
                session.add(habit)
                result.append(habit)
            session.commit()
            for habit in result:
                session.refresh(habit)
            session.expunge_all()
            return result

    def delete_habit(self, habit_id: str) -> None:
        """Delete a habit and cascade to all of its entries."""
        with self.session_factory() as session:
            habit = session.get(Habit, habit_id)
            if habit is None:
                return
            entries = session.exec(select(HabitEntry).where(HabitEntry.habit_id == habit_id)).all()
            for entry in entries:
                session.delete(entry)
            session.flush()
            session.delete(habit)
            session.commit()
        logger.info("Habit deleted", extra={"habit_id": habit_id, "entries_removed": len(entries)})

    # Habit entry operations
    def get_entries(self, habit_ids: Iterable[str]) -> list[HabitEntry]:
        """List entries belonging to any of the given habits."""
        ids = list(set(habit_ids))
        if not ids:
            return []
        with self.session_factory() as session:
            statement = (
                select(HabitEntry)
                .where(col(HabitEntry.habit_id).in_(ids))
                .order_by(col(HabitEntry.date))
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def get_entry(self, habit_id: str, date: str) -> Optional[HabitEntry]:
        """Get the entry for a habit on a specific day."""
        with self.session_factory() as session:
            obj = session.exec(
                select(HabitEntry)
                .where(HabitEntry.habit_id == habit_id)
                .where(HabitEntry.date == date)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def toggle_entry(self, habit_id: str, date: str) -> HabitEntry:
        """Flip the entry for (habit, day), or create it as completed."""
        with self.session_factory() as session:
            if session.get(Habit, habit_id) is None:
                raise LookupError(f"Habit {habit_id} does not exist")
            entry = session.exec(
                select(HabitEntry)
                .where(HabitEntry.habit_id == habit_id)
                .where(HabitEntry.date == date)
            ).first()
            if entry is None:
                entry = HabitEntry(habit_id=habit_id, date=date, completed=True)
            else:
                entry.completed = not entry.completed
            session.add(entry)
            session.commit()
            session.refresh(entry)
            session.expunge(entry)
        logger.info(
            "Entry toggled",
            extra={"habit_id": habit_id, "date": date, "completed": entry.completed},
        )
        return entry
