"""Engine configuration objects and helpers."""

from __future__ import annotations

import calendar
import os
import tempfile
from datetime import date
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from sqlalchemy.pool import StaticPool

load_dotenv()

_WEEKDAY_NAMES = {name.lower(): idx for idx, name in enumerate(calendar.day_name)}


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _parse_week_start(raw: str) -> int:
    """Accept a weekday name ("monday") or index (0 = Monday)."""

    value = raw.strip().lower()
    if value in _WEEKDAY_NAMES:
        return _WEEKDAY_NAMES[value]
    try:
        index = int(value)
    except ValueError:
        raise ValueError(f"RHYTHMCHAIN_WEEK_START must be a weekday name or 0-6, got {raw!r}") from None
    if not 0 <= index <= 6:
        raise ValueError(f"RHYTHMCHAIN_WEEK_START must be between 0 and 6, got {index}")
    return index


class BaseConfig:
    """Base configuration shared across environments."""

    DB_FILENAME = "rhythmchain.db"
    SQLITE_PRAGMAS = {"journal_mode": "wal", "foreign_keys": "on"}

    def __init__(self) -> None:
        self.DEV_MODE = _env_bool("RHYTHMCHAIN_DEV_MODE", default=True)
        self.DATA_DIR = self._resolve_data_dir()
        self.DATABASE_URL = os.getenv("RHYTHMCHAIN_DATABASE_URL", self._build_sqlite_url())
        self.WEEK_START_DAY = _parse_week_start(os.getenv("RHYTHMCHAIN_WEEK_START", "monday"))
        self.HISTORY_START = self._parse_history_start(
            os.getenv("RHYTHMCHAIN_HISTORY_START", "2000-01-01")
        )
        self.LOG_LEVEL = os.getenv("RHYTHMCHAIN_LOG_LEVEL", "INFO").upper()
        self.LOG_TO_FILE = _env_bool("RHYTHMCHAIN_LOG_TO_FILE", default=True)

    def _resolve_data_dir(self) -> Path:
        """Return the directory holding the SQLite file and logs."""

        data_root = os.getenv("RHYTHMCHAIN_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    @staticmethod
    def _parse_history_start(raw: str) -> date:
        try:
            return date.fromisoformat(raw.strip())
        except ValueError:
            raise ValueError(f"RHYTHMCHAIN_HISTORY_START must be an ISO date, got {raw!r}") from None

    def _build_sqlite_url(self) -> str:
        """Construct the default SQLite URL inside the data dir."""

        db_path = self.DATA_DIR / self.DB_FILENAME
        return f"sqlite:///{db_path}"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        connect_args: dict[str, Any] = {}
        engine_options: dict[str, Any] = {"connect_args": connect_args}
        if self.DATABASE_URL.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        if self.DATABASE_URL in {"sqlite://", "sqlite:///:memory:"}:
            # one shared connection, otherwise each checkout sees an empty database
            engine_options["poolclass"] = StaticPool
        return engine_options


class DevConfig(BaseConfig):
    """Development configuration: local SQLite, verbose logging."""

    def __init__(self) -> None:
        super().__init__()
        self.DEV_MODE = True
        self.LOG_LEVEL = "DEBUG"


class TestConfig(BaseConfig):
    """Configuration for the test suite: in-memory database, no dev chatter."""

    __test__ = False  # keep pytest from collecting this class

    def __init__(self) -> None:
        super().__init__()
        self.DEV_MODE = False
        self.DATABASE_URL = "sqlite://"

    def _resolve_data_dir(self) -> Path:
        path = Path(tempfile.gettempdir()) / "rhythmchain-tests"
        path.mkdir(parents=True, exist_ok=True)
        return path


__all__ = ["BaseConfig", "DevConfig", "TestConfig"]
