"""Application configuration objects and helpers."""

from __future__ import annotations

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

    APP_NAME = "FinTrack"
    DB_FILENAME = "fintrack.db"
    STORAGE_KEY = "fintrack_transactions"
    INSIGHT_HISTORY_LIMIT = 20
    DEFAULT_GEMINI_MODEL = "gemini-3-flash-preview"

    def __init__(self) -> None:
        self.DATA_DIR = self._resolve_data_dir()
        self.DEV_MODE = _env_bool("FINTRACK_DEV_MODE", default=True)
        self.DATABASE_URL = os.getenv("FINTRACK_DATABASE_URL", self._build_sqlite_url())
        self.GEMINI_API_KEY = (
            os.getenv("FINTRACK_GEMINI_API_KEY")
            or os.getenv("GEMINI_API_KEY")
            or os.getenv("API_KEY")
        )
        self.GEMINI_MODEL = os.getenv("FINTRACK_GEMINI_MODEL", self.DEFAULT_GEMINI_MODEL)
        self.SEED_DEMO_DATA = _env_bool("FINTRACK_SEED_DEMO", default=False)

    def _resolve_data_dir(self) -> Path:
        """Return the directory holding the SQLite file and logs."""

        data_root = os.getenv("FINTRACK_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _build_sqlite_url(self) -> str:
        db_path = self.DATA_DIR / self.DB_FILENAME
        return f"sqlite:///{db_path}"

    @property
    def gateway_enabled(self) -> bool:
        """True when an AI provider credential is configured."""

        return bool(self.GEMINI_API_KEY)

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        if self.DATABASE_URL.startswith("sqlite"):
            return {"connect_args": {"check_same_thread": False}}
        return {}


class TestConfig(BaseConfig):
    """Configuration for tests: isolated data dir and no AI provider."""

    __test__ = False  # keep pytest from collecting this class

    def __init__(self, data_dir: str | Path) -> None:
        self._data_dir = Path(data_dir)
        super().__init__()
        self.DATABASE_URL = self._build_sqlite_url()
        self.GEMINI_API_KEY = None
        self.SEED_DEMO_DATA = False

    def _resolve_data_dir(self) -> Path:
        self._data_dir.mkdir(parents=True, exist_ok=True)
        return self._data_dir.resolve()
