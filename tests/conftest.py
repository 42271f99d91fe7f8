# tests/conftest.py

from __future__ import annotations

from pathlib import Path

import pytest

from task_runner.config import Settings
from task_runner.storage import shared_memory_storage
from task_runner.tasks.task_scheduler import TaskScheduler

from .fakes import RecordingStorage


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    """
    Settings pointing every path at tmp_path.

    Built directly instead of via Settings.from_env() so the developer's
    environment / .env cannot leak into tests.
    """
    return Settings(
        app_name="task-runner-test",
        log_level="DEBUG",
        default_interval_ms=1000,
        persist_on_completion=True,
        storage_method="memory",
        data_dir=tmp_path,
        tasks_file_path=tmp_path / "tasks.json",
        tasks_db_path=tmp_path / "tasks.sqlite3",
        demo_seconds=0.0,
    )


@pytest.fixture()
def storage() -> RecordingStorage:
    return RecordingStorage()


@pytest.fixture()
def scheduler(settings: Settings, storage: RecordingStorage):
    """
    Scheduler using a RecordingStorage as its active backend.

    The loop is bound lazily, so the fixture itself can stay sync.
    """
    sched = TaskScheduler("custom", storage, settings=settings)
    yield sched
    sched.shutdown()


@pytest.fixture(autouse=True)
def _empty_shared_memory_storage():
    """The built-in "memory" backend is process-wide; start and end every test empty."""
    shared_memory_storage().clear()
    yield
    shared_memory_storage().clear()
