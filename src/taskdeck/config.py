# src/taskdeck/config.py

"""Centralized settings loaded from environment variables.

One Settings object for the whole app; command-line flags override it.
Invalid values fall back to defaults instead of failing.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .engine.stats import Granularity
from .engine.storage import DEFAULT_KEY

ENV_PREFIX = "TASKDECK"

DEFAULT_DATA_DIR = Path("~/.local/share/taskdeck")


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None or v.strip() == "" else v.strip()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default.expanduser()
    return Path(raw).expanduser()


def _env_log_level(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    level = logging.getLevelName(raw.strip().upper())
    return level if isinstance(level, int) else default


def _env_granularity(name: str, default: Granularity) -> Granularity:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return Granularity(raw.strip().lower())
    except ValueError:
        return default


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- Storage ----
    data_dir: Path
    storage_key: str

    # ---- Logging ----
    log_level: int
    log_file: Optional[Path]

    # ---- Presentation ----
    color: bool
    overdue_granularity: Granularity

    @staticmethod
    def from_env() -> "Settings":
        log_file_raw = _env(_k("LOG_FILE"))

        return Settings(
            data_dir=_env_path(_k("DATA_DIR"), DEFAULT_DATA_DIR),
            storage_key=_env(_k("STORAGE_KEY"), DEFAULT_KEY),
            log_level=_env_log_level(_k("LOG_LEVEL"), logging.WARNING),
            log_file=Path(log_file_raw).expanduser() if log_file_raw else None,
            color=_env_bool(_k("COLOR"), True),
            overdue_granularity=_env_granularity(_k("OVERDUE_GRANULARITY"), Granularity.TIMESTAMP),
        )


_SETTINGS: Optional[Settings] = None


def get_settings() -> Settings:
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS


def reset_settings() -> None:
    """Drop the cached settings (next get_settings() re-reads the environment)."""
    global _SETTINGS
    _SETTINGS = None
