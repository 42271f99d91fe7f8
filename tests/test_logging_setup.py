# tests/test_logging_setup.py

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from task_runner.logging_setup import _PackageConsoleFilter, setup_logging


def _record(name: str, level: int) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, "msg", None, None)


@pytest.mark.parametrize(
    ("name", "level", "shown"),
    [
        ("task_runner", logging.DEBUG, True),
        ("task_runner.tasks.task_scheduler", logging.INFO, True),
        ("task_runner_other", logging.WARNING, False),
        ("asyncio", logging.WARNING, False),
        ("asyncio", logging.ERROR, True),
        ("py.warnings", logging.WARNING, False),
    ],
)
def test_console_filter_keeps_package_logs(name: str, level: int, shown: bool) -> None:
    assert _PackageConsoleFilter().filter(_record(name, level)) is shown


def test_console_filter_foreign_level_is_configurable() -> None:
    flt = _PackageConsoleFilter(foreign_level=logging.WARNING)
    assert flt.filter(_record("py.warnings", logging.WARNING)) is True
    assert flt.filter(_record("py.warnings", logging.INFO)) is False


def test_setup_logging_writes_file_and_replaces_handlers(tmp_path: Path) -> None:
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        setup_logging(log_dir=tmp_path)
        log_file = setup_logging(log_dir=tmp_path)

        assert len(root.handlers) == 2
        logging.getLogger("task_runner.test").debug("hello file")
        for h in root.handlers:
            h.flush()
        assert "hello file" in log_file.read_text("utf-8")
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
            h.close()
        for h in saved_handlers:
            root.addHandler(h)
        root.setLevel(saved_level)
        logging.captureWarnings(False)
