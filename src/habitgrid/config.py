"""Application configuration objects and helpers."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "HabitGrid"
    DB_FILENAME = "habitgrid.db"
    SESSION_FILENAME = "session.json"
    LOG_FILENAME = "habitgrid.log"

    def __init__(self, data_dir: str | Path | None = None) -> None:
        self.DATA_DIR = self._resolve_data_dir(data_dir)
        self.DEV_MODE = _env_bool("HABITGRID_DEV_MODE", default=True)
        self.LOG_LEVEL = self._resolve_log_level(os.getenv("HABITGRID_LOG_LEVEL", "INFO"))
        self.DATABASE_URL = os.getenv("HABITGRID_DATABASE_URL", self._build_sqlite_url())

    def _resolve_data_dir(self, override: str | Path | None) -> Path:
        """Return the directory holding the database, session file and logs."""

        data_root = override if override is not None else os.getenv("HABITGRID_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    @staticmethod
    def _resolve_log_level(raw: str) -> int:
        level = logging.getLevelName(raw.strip().upper())
        if not isinstance(level, int):
            raise ValueError(f"Invalid HABITGRID_LOG_LEVEL: {raw}")
        return level

    def _build_sqlite_url(self) -> str:
        return f"sqlite:///{self.DATA_DIR / self.DB_FILENAME}"

    @property
    def session_path(self) -> Path:
        return self.DATA_DIR / self.SESSION_FILENAME

    @property
    def logs_dir(self) -> Path:
        return self.DATA_DIR / "logs"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        if self.DATABASE_URL.startswith("sqlite"):
            return {"connect_args": {"check_same_thread": False}}
        return {}


class DevConfig(BaseConfig):
    """Development configuration using local SQLite."""
