"""User repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol

from ...models.user import User


class UserRepository(Protocol):
    """Registry of users keyed by normalized e-mail."""

    def get_by_id(self, user_id: str) -> Optional[User]:
        """Retrieve a user by ID."""
        ...

    def get_by_email(self, email: str) -> Optional[User]:
        """Retrieve a user by normalized e-mail."""
        ...

    def create(self, user: User) -> User:
        """Persist a new user."""
        ...
