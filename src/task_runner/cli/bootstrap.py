# src/task_runner/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the storage backends into a TaskScheduler and activates the configured one.
"""

from __future__ import annotations

import logging

from ..config import Settings, get_settings
from ..storage import JsonFileStorage
from ..tasks.task_scheduler import TaskScheduler

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings: Settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_file_path.parent.mkdir(parents=True, exist_ok=True)
    settings.tasks_db_path.parent.mkdir(parents=True, exist_ok=True)


def create_scheduler(*, settings: Settings | None = None) -> TaskScheduler:
    """
    Build a TaskScheduler with "memory", "sqlite" and "file" backends,
    then switch to settings.storage_method.

    Keeping settings injectable makes this easy to test.
    Raises ConfigurationError if storage_method names none of them.
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    scheduler = TaskScheduler("memory", settings=settings)
    scheduler.add_storage_backend("file", JsonFileStorage(settings.tasks_file_path))
    scheduler.set_active_storage(settings.storage_method)
    return scheduler
