"""
Configuration helpers for the SafetyNet backend.

Settings are read once from environment variables so that routers, services
and storage adapters never fetch os.environ directly.
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
import os

DEFAULT_DATA_FILE = Path(__file__).resolve().parents[1] / "data.json"
STORAGE_BACKENDS = {"json", "sql"}


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    data_file: Path
    storage_backend: str
    database_url: str
    log_level: str


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _backend(value: str | None) -> str:
        backend = (value or "json").strip().lower()
        if backend not in STORAGE_BACKENDS:
            raise ValueError(f"Unknown SAFETYNET_STORAGE backend: {value!r}")
        return backend

    app_env = (os.getenv("APP_ENV") or "dev").lower()
    default_level = "DEBUG" if app_env == "dev" else "INFO"
    data_file = os.getenv("SAFETYNET_DATA_FILE")

    return Settings(
        app_env=app_env,
        data_file=Path(data_file) if data_file else DEFAULT_DATA_FILE,
        storage_backend=_backend(os.getenv("SAFETYNET_STORAGE")),
        database_url=os.getenv("DATABASE_URL", ""),
        log_level=(os.getenv("LOG_LEVEL") or default_level).upper(),
    )
