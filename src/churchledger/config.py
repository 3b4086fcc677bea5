"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from .constants.categories import EXPENSE_CATEGORIES, INCOME_CATEGORIES

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    """Read a positive integer, falling back to ``default`` on bad input."""

    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        parsed = int(value)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _env_list(name: str, default: list[str]) -> list[str]:
    """Split a comma-separated variable into trimmed, non-empty entries."""

    value = os.getenv(name)
    if value is None:
        return list(default)
    items = [item.strip() for item in value.split(",") if item.strip()]
    return items or list(default)


class BaseConfig:
    """Base configuration shared across environments."""

    DB_FILENAME = "churchledger.db"

    def __init__(self) -> None:
        self.DATA_DIR = self._resolve_data_dir()
        self.DEV_MODE = _env_bool("CHURCHLEDGER_DEV_MODE", default=True)
        self.DATABASE_URL = os.getenv("CHURCHLEDGER_DATABASE_URL", self._build_sqlite_url())
        self.INCOME_CATEGORIES = _env_list("CHURCHLEDGER_INCOME_CATEGORIES", INCOME_CATEGORIES)
        self.EXPENSE_CATEGORIES = _env_list("CHURCHLEDGER_EXPENSE_CATEGORIES", EXPENSE_CATEGORIES)
        self.TREND_MONTHS = _env_int("CHURCHLEDGER_TREND_MONTHS", 12)
        self.TOP_CATEGORIES = _env_int("CHURCHLEDGER_TOP_CATEGORIES", 10)
        self.ACTIVE_DONOR_MONTHS = _env_int("CHURCHLEDGER_ACTIVE_DONOR_MONTHS", 6)

    def _resolve_data_dir(self) -> Path:
        """Return the directory where the SQLite file and logs live."""

        data_root = os.getenv("CHURCHLEDGER_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _build_sqlite_url(self) -> str:
        db_path = self.DATA_DIR / self.DB_FILENAME
        return f"sqlite:///{db_path}"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        if self.DATABASE_URL.startswith("sqlite"):
            return {"connect_args": {"check_same_thread": False}}
        return {}
