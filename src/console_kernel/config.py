# src/console_kernel/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- Nothing required at import time; every value has a default.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "CONSOLE_KERNEL"
DIST_NAME = "console-kernel"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _package_version() -> str:
    try:
        return version(DIST_NAME)
    except PackageNotFoundError:
        return "0.1.0"


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
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    app_version: str
    log_level: str
    log_to_file: bool

    # ---- Scheduler ----
    scheduler_interval_seconds: float

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    schedules_path: Path

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "console").strip() or "console"
        app_version = _env(_k("APP_VERSION"), "").strip() or _package_version()
        log_level = _env(_k("LOG_LEVEL"), "WARNING").strip().upper() or "WARNING"
        log_to_file = _env_bool(_k("LOG_TO_FILE"), True)

        scheduler_interval_seconds = _env_float(_k("SCHEDULER_INTERVAL_SECONDS"), 60.0)

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/console"))
        schedules_path = _env_path(_k("SCHEDULES_PATH"), data_dir / "schedules.json")

        return Settings(
            app_name=app_name,
            app_version=app_version,
            log_level=log_level,
            log_to_file=log_to_file,
            scheduler_interval_seconds=scheduler_interval_seconds,
            data_dir=data_dir,
            schedules_path=schedules_path,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # .env never overrides variables already set in the environment.
    load_dotenv(override=False)
    return Settings.from_env()
