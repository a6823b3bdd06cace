"""Registration, login and session helpers.

Login is a plain lookup by normalized e-mail; there are no passwords.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from ..domain.repositories import UserRepository
from ..infra.session_store import SessionStore
from ..logging_config import get_logger
from ..models.user import User

logger = get_logger(__name__)

FALLBACK_USER_ID = "temp"


def normalize_email(email: str) -> str:
    """Return the registry key for an e-mail address."""

    return (email or "").strip().lower()


def register_user(name: str, email: str, *, users: UserRepository) -> User:
    """Create a user, or return the existing profile for an already registered e-mail.

    Storage faults do not propagate: the caller gets an unsaved fallback
    profile so the session can still start.
    """

    normalized = normalize_email(email)
    if not normalized:
        raise ValueError("Email is required")
    name = (name or "").strip()

    try:
        existing = users.get_by_email(normalized)
        if existing is not None:
            logger.info("Returning existing profile", extra={"user_id": existing.id})
            return existing
        user = users.create(User(name=name, email=normalized))
    except SQLAlchemyError:
        logger.exception("Registration failed; using fallback profile")
        return User(id=FALLBACK_USER_ID, name=name, email=normalized)

    logger.info("User registered", extra={"user_id": user.id})
    return user


def login_user(email: str, *, users: UserRepository) -> Optional[User]:
    """Return the registered user for ``email`` or None when unknown."""

    normalized = normalize_email(email)
    if not normalized:
        return None
    try:
        return users.get_by_email(normalized)
    except SQLAlchemyError:
        logger.exception("Login failed due to storage error")
        return None


def get_user(store: SessionStore) -> Optional[User]:
    """Return the user of the persisted session, if any."""

    return store.load()


def set_user_session(store: SessionStore, user: Optional[User]) -> None:
    """Persist ``user`` as the current session, or sign out with None."""

    store.save(user)


__all__ = [
    "FALLBACK_USER_ID",
    "get_user",
    "login_user",
    "normalize_email",
    "register_user",
    "set_user_session",
]
