"""Application context for dependency injection.

The signed-in user lives on the context object and is passed explicitly to
whatever needs it; nothing reads a process-wide "current user".
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .config import BaseConfig
from .domain.repositories import HabitRepository, UserRepository
from .infra.database import SessionFactory, bootstrap_database
from .infra.repositories import SQLModelHabitRepository, SQLModelUserRepository
from .infra.session_store import SessionStore
from .logging_config import get_logger
from .models.habit import Habit, HabitEntry
from .models.user import User
from .services import auth

logger = get_logger(__name__)


@dataclass
class AppContext:
    """Centralized application context with repositories and session state."""

    config: BaseConfig
    session_factory: SessionFactory
    habit_repo: HabitRepository
    user_repo: UserRepository
    session_store: SessionStore
    current_user: Optional[User] = None

    def require_user(self) -> User:
        """Return the signed-in user or raise if nobody is signed in."""

        if self.current_user is None:
            raise RuntimeError("User is not authenticated")
        return self.current_user

    def register(self, name: str, email: str) -> User:
        user = auth.register_user(name, email, users=self.user_repo)
        self._start_session(user)
        return user

    def login(self, email: str) -> Optional[User]:
        """Sign in an existing user; returns None (and keeps the session) when unknown."""

        user = auth.login_user(email, users=self.user_repo)
        if user is not None:
            self._start_session(user)
        return user

    def logout(self) -> None:
        auth.set_user_session(self.session_store, None)
        self.current_user = None

    def restore_session(self) -> Optional[User]:
        """Sign back in as the persisted user if that user is still registered.

        A saved user missing from the database (a fallback profile, or a
        session file left over from another database) clears the session.
        """

        saved = auth.get_user(self.session_store)
        if saved is None:
            self.current_user = None
            return None
        user = self.user_repo.get_by_id(saved.id)
        if user is None:
            logger.warning("Discarding session for unknown user", extra={"user_id": saved.id})
            self.logout()
            return None
        self.current_user = user
        return user

    def load_habits_and_entries(self) -> tuple[list[Habit], list[HabitEntry]]:
        """Fetch the signed-in user's habits (in order) and every entry they own."""

        user = self.require_user()
        habits = self.habit_repo.get_habits(user.id)
        entries = self.habit_repo.get_entries(h.id for h in habits)
        return habits, entries

    def _start_session(self, user: User) -> None:
        self.current_user = user
        if user.id == auth.FALLBACK_USER_ID:
            # Unsaved profile; keep it for this process only
            auth.set_user_session(self.session_store, None)
            return
        auth.set_user_session(self.session_store, user)


def create_app_context(config: Optional[BaseConfig] = None) -> AppContext:
    """Create and initialize the application context, restoring any saved session."""

    if config is None:
        config = BaseConfig()

    _, session_factory = bootstrap_database(config)

    ctx = AppContext(
        config=config,
        session_factory=session_factory,
        habit_repo=SQLModelHabitRepository(session_factory),
        user_repo=SQLModelUserRepository(session_factory),
        session_store=SessionStore(config.session_path),
    )
    ctx.restore_session()
    return ctx
