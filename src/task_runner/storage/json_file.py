# src/task_runner/storage/json_file.py

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from ..core.ports import SAVED_TASKS_KEY, LoadPayload, TaskTable
from .codec import decode_table

logger = logging.getLogger(__name__)


class JsonFileStorage:
    """
    Task table as a JSON object keyed by taskId:

        {"heartbeatTask": {"functionName": "heartbeat", "interval": 10000}}

    Writes go to a .tmp sibling first and are swapped in with os.replace,
    so a crash mid-write leaves the previous file intact.
    """

    def __init__(self, path: str | Path = "tasks.json") -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def save(self, table: TaskTable) -> None:
        path = self._path
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp = path.with_suffix(path.suffix + ".tmp")
            tmp.write_text(json.dumps(table, ensure_ascii=False, indent=2), "utf-8")
            os.replace(tmp, path)
            logger.debug("Saved %d tasks to %s", len(table), path)
        except OSError:
            logger.exception("Failed to save tasks to %s", path)

    async def load(self) -> LoadPayload:
        path = self._path
        if not path.exists():
            return {SAVED_TASKS_KEY: {}}
        try:
            raw = path.read_text("utf-8")
        except OSError:
            logger.exception("Failed to read tasks from %s", path)
            return {SAVED_TASKS_KEY: {}}
        table = decode_table(raw)
        logger.debug("Loaded %d tasks from %s", len(table), path)
        return {SAVED_TASKS_KEY: table}
