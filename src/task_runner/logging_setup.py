# src/task_runner/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path


class _PackageConsoleFilter(logging.Filter):
    """
    Console shows every task_runner record that passes the handler level.
    Anything else (asyncio, captured py.warnings, libraries) only at `foreign_level`+.
    """

    def __init__(self, package: str = "task_runner", foreign_level: int = logging.ERROR) -> None:
        super().__init__()
        self._package = package
        self._foreign_level = foreign_level

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if name == self._package or name.startswith(self._package + "."):
            return True
        return record.levelno >= self._foreign_level


def setup_logging(
    *,
    log_dir: str | Path = ".local/task_runner",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
    foreign_level: int = logging.ERROR,
) -> Path:
    """
    Send task_runner logs to stderr (filtered) and to <log_dir>/task_runner.log (everything).

    Replaces whatever handlers the root logger already had, so calling it
    twice does not duplicate output. Returns the log file path.
    """
    log_file = Path(log_dir) / "task_runner.log"
    log_file.parent.mkdir(parents=True, exist_ok=True)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.addFilter(_PackageConsoleFilter(foreign_level=foreign_level))

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(file_level)

    root = logging.getLogger()
    for old in list(root.handlers):
        root.removeHandler(old)
    for handler in (console, file_handler):
        handler.setFormatter(fmt)
        root.addHandler(handler)
    root.setLevel(min(console_level, file_level))

    # warnings.warn(...) -> 'py.warnings' logger
    logging.captureWarnings(True)
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    return log_file
