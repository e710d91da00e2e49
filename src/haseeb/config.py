"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

load_dotenv()

DEFAULT_PRAYER_HABIT_IDS = ("fajr", "dhuhr", "asr", "maghrib", "isha")


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return int(value)


def _env_list(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    value = os.getenv(name)
    if value is None:
        return default
    items = tuple(part.strip() for part in value.split(",") if part.strip())
    return items or default


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "Haseeb"
    DB_FILENAME = "haseeb.db"
    SQLITE_PRAGMAS = {"journal_mode": "wal", "foreign_keys": "on"}

    def __init__(self) -> None:
        self.DATA_DIR = self._resolve_data_dir()
        self.DEV_MODE = _env_bool("HASEEB_DEV_MODE", default=True)
        self.DATABASE_URL = os.getenv("HASEEB_DATABASE_URL", self._build_sqlite_url())
        self.PRAYER_HABIT_IDS = _env_list("HASEEB_PRAYER_HABIT_IDS", DEFAULT_PRAYER_HABIT_IDS)
        self.OBSTACLE_TOP_N = _env_int("HASEEB_OBSTACLE_TOP_N", 3)
        self.TREND_DAYS = _env_int("HASEEB_TREND_DAYS", 90)
        self.TREND_WINDOW = _env_int("HASEEB_TREND_WINDOW", 7)
        if self.OBSTACLE_TOP_N < 1:
            raise ValueError("HASEEB_OBSTACLE_TOP_N must be at least 1.")
        if self.TREND_DAYS < 1 or self.TREND_WINDOW < 1:
            raise ValueError("HASEEB_TREND_DAYS and HASEEB_TREND_WINDOW must be positive.")

    def _resolve_data_dir(self) -> Path:
        """Return the directory where the SQLite file and logs live."""

        data_root = os.getenv("HASEEB_DATA_DIR", "instance")
        base_path = Path(data_root).expanduser()
        try:
            path = base_path.resolve()
            path.mkdir(parents=True, exist_ok=True)
            return path
        except PermissionError:
            # Protected locations fall back to user-local storage.
            fallback_path = Path.home() / ".local" / "share" / self.APP_NAME.lower()
            fallback_path.mkdir(parents=True, exist_ok=True)
            return fallback_path.resolve()

    def _build_sqlite_url(self) -> str:
        """Construct the default SQLite URL inside the data directory."""

        db_path = self.DATA_DIR / self.DB_FILENAME
        return f"sqlite:///{db_path}"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        connect_args: dict[str, Any] = {}
        if self.DATABASE_URL.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        return {"connect_args": connect_args}


class DevConfig(BaseConfig):
    """Development configuration using local SQLite."""

    DEBUG = True
    TESTING = False


class TestConfig(BaseConfig):
    """Configuration used by the test-suite (in-memory database)."""

    DEBUG = True
    TESTING = True

    def __init__(self) -> None:
        super().__init__()
        self.DATABASE_URL = "sqlite://"
