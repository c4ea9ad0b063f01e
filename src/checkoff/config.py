# src/checkoff/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Nothing is read from disk except the optional .env file.
- Settings stay injectable: tests build their own object instead of patching env.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

ENV_PREFIX = "CHECKOFF"

DEFAULT_STORAGE_KEY = "checkoff_tasks"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv
    except ImportError:
        return
    load_dotenv(override=False)


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    log_to_file: bool

    # ---- Local data (ignored by git) ----
    data_dir: Path
    storage_path: Path
    storage_key: str

    # ---- Persistence tuning ----
    background_writes: bool
    flush_timeout_seconds: float

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "checkoff").strip() or "checkoff"
        log_level = _env(_k("LOG_LEVEL"), "INFO").strip().upper() or "INFO"
        log_to_file = _env_bool(_k("LOG_TO_FILE"), True)

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/checkoff"))
        storage_path = _env_path(_k("STORAGE_PATH"), data_dir / "storage.sqlite3")
        storage_key = _env(_k("STORAGE_KEY"), DEFAULT_STORAGE_KEY).strip() or DEFAULT_STORAGE_KEY

        background_writes = _env_bool(_k("BACKGROUND_WRITES"), True)
        flush_timeout_seconds = max(0.0, _env_float(_k("FLUSH_TIMEOUT"), 5.0))

        return Settings(
            app_name=app_name,
            log_level=log_level,
            log_to_file=log_to_file,
            data_dir=data_dir,
            storage_path=storage_path,
            storage_key=storage_key,
            background_writes=background_writes,
            flush_timeout_seconds=flush_timeout_seconds,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    """Return the process settings, building them from env on first use."""
    global _SETTINGS
    if _SETTINGS is None:
        _load_dotenv_if_available()
        _SETTINGS = Settings.from_env()
    return _SETTINGS


def reset_settings_cache() -> None:
    """Forget cached settings (tests change env between cases)."""
    global _SETTINGS
    _SETTINGS = None
