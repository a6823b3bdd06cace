"""Pytest configuration and shared fixtures for HabitGrid tests.

Provides an isolated configuration rooted in ``tmp_path``, a throwaway SQLite
database per test, repository instances and factories for users, habits and
entries.
"""

from __future__ import annotations

from contextlib import contextmanager

import pytest
from sqlmodel import Session

from habitgrid.config import BaseConfig
from habitgrid.infra.database import create_db_engine, init_database
from habitgrid.infra.repositories import SQLModelHabitRepository, SQLModelUserRepository
from habitgrid.models import Habit, HabitEntry, User

_ENV_VARS = (
    "HABITGRID_DATA_DIR",
    "HABITGRID_DATABASE_URL",
    "HABITGRID_DEV_MODE",
    "HABITGRID_LOG_LEVEL",
)


# =============================================================================
# Configuration & Database Fixtures
# =============================================================================


@pytest.fixture
def config(tmp_path, monkeypatch) -> BaseConfig:
    """Configuration whose data directory lives under the test's tmp_path."""

    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return BaseConfig(data_dir=tmp_path / "data")


@pytest.fixture
def db_engine(config):
    """Create an isolated SQLite database for each test.

    Yields:
        Engine: SQLModel engine with all tables created
    """
    engine = create_db_engine(config)
    init_database(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    """Session factory matching the one repositories get in the app."""

    @contextmanager
    def factory():
        session = Session(db_engine, expire_on_commit=False)
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    return factory


@pytest.fixture
def habit_repo(session_factory) -> SQLModelHabitRepository:
    return SQLModelHabitRepository(session_factory)


@pytest.fixture
def user_repo(session_factory) -> SQLModelUserRepository:
    return SQLModelUserRepository(session_factory)


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def user_factory(user_repo):
    """Factory for creating persisted users."""

    counter = {"n": 0}

    def _create_user(name: str = "Test Pilot", email: str | None = None) -> User:
        counter["n"] += 1
        email = email or f"pilot{counter['n']}@example.com"
        return user_repo.create(User(name=name, email=email))

    return _create_user


@pytest.fixture
def user(user_factory) -> User:
    """A default persisted user."""

    return user_factory(name="Ada", email="ada@example.com")


@pytest.fixture
def habit_factory(habit_repo, user):
    """Factory for creating persisted habits appended to the owner's list.

    Returns:
        Callable: Function that creates and persists Habit instances
    """

    def _create_habit(
        name: str = "Test Habit",
        color: str = "#10b981",
        monthly_goal: int = 31,
        owner: User | None = None,
    ) -> Habit:
        owner = owner or user
        return habit_repo.save_habit(
            Habit(user_id=owner.id, name=name, color=color, monthly_goal=monthly_goal)
        )

    return _create_habit


@pytest.fixture
def entry_factory(session_factory):
    """Factory for inserting entries directly, bypassing toggle semantics."""

    def _create_entry(habit: Habit, date: str, completed: bool = True) -> HabitEntry:
        with session_factory() as session:
            entry = HabitEntry(habit_id=habit.id, date=date, completed=completed)
            session.add(entry)
            session.commit()
            session.refresh(entry)
            session.expunge(entry)
            return entry

    return _create_entry
