"""User model for the e-mail keyed profile registry."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING, ClassVar
from uuid import uuid4

from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:  # pragma: no cover
    from .habit import Habit


def new_id() -> str:
    """Return a fresh opaque identifier for any table row."""

    return uuid4().hex


class User(SQLModel, table=True):
    """Registered profile; the normalized e-mail is the identity key."""

    __tablename__: ClassVar[str] = "user"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    name: str = Field(nullable=False, max_length=120)
    email: str = Field(nullable=False, unique=True, index=True, max_length=255)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    habits: list["Habit"] = Relationship(
        sa_relationship=relationship("Habit", back_populates="user"),
    )
