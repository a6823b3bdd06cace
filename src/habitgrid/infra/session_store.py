"""File-backed record of the signed-in user.

The session is a small JSON document next to the database. Anything that
cannot be read back as a valid profile is treated as "signed out".
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

from ..logging_config import get_logger
from ..models.user import User

logger = get_logger(__name__)

_REQUIRED_KEYS = ("id", "email")


class SessionStore:
    """Persist the current session user between CLI invocations."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> Optional[User]:
        """Return the stored session user, or None when absent or unusable."""

        if not self.path.exists():
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Discarding unreadable session file: %s", exc)
            self._discard()
            return None

        if not isinstance(data, dict) or not all(
            isinstance(data.get(key), str) and data.get(key) for key in _REQUIRED_KEYS
        ):
            logger.warning("Discarding malformed session file", extra={"path": str(self.path)})
            self._discard()
            return None

        name = data.get("name")
        return User(id=data["id"], name=name if isinstance(name, str) else "", email=data["email"])

    def save(self, user: Optional[User]) -> None:
        """Write the session user, or clear the session when ``user`` is None."""

        if user is None:
            self._discard()
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = {"id": user.id, "name": user.name, "email": user.email}
        self.path.write_text(json.dumps(payload), encoding="utf-8")

    def _discard(self) -> None:
        self.path.unlink(missing_ok=True)
