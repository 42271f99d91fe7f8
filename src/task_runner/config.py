# src/task_runner/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Nothing is created on disk at import time.
- Malformed values fall back to defaults instead of failing startup.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TASKRUNNER"

DEFAULT_INTERVAL_MS = 1000


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


load_dotenv(override=False)


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


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

    # ---- Scheduling ----
    default_interval_ms: int
    persist_on_completion: bool

    # ---- Storage ----
    storage_method: str
    data_dir: Path
    tasks_file_path: Path
    tasks_db_path: Path

    # ---- Demo ----
    demo_seconds: float

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "task-runner")
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        default_interval_ms = _env_int(_k("DEFAULT_INTERVAL_MS"), DEFAULT_INTERVAL_MS)
        if default_interval_ms <= 0:
            default_interval_ms = DEFAULT_INTERVAL_MS
        persist_on_completion = _env_bool(_k("PERSIST_ON_COMPLETION"), True)

        storage_method = _env(_k("STORAGE"), "memory").strip() or "memory"
        data_dir = _env_path(_k("DATA_DIR"), Path(".local/task_runner"))
        tasks_file_path = _env_path(_k("TASKS_FILE_PATH"), data_dir / "tasks.json")
        tasks_db_path = _env_path(_k("TASKS_DB_PATH"), data_dir / "tasks.sqlite3")

        demo_seconds = max(0.0, _env_float(_k("DEMO_SECONDS"), 30.0))

        return Settings(
            app_name=app_name,
            log_level=log_level,
            default_interval_ms=default_interval_ms,
            persist_on_completion=persist_on_completion,
            storage_method=storage_method,
            data_dir=data_dir,
            tasks_file_path=tasks_file_path,
            tasks_db_path=tasks_db_path,
            demo_seconds=demo_seconds,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
