# src/task_runner/storage/codec.py

from __future__ import annotations

import json
import logging
from typing import Any

from ..core.ports import TaskTable

logger = logging.getLogger(__name__)


def encode_table(table: TaskTable) -> str:
    return json.dumps(table, ensure_ascii=False, sort_keys=True)


def decode_table(raw: str | bytes | None) -> TaskTable:
    """JSON text -> task table. Empty, malformed or non-object input gives {}."""
    if not raw:
        return {}
    try:
        val: Any = json.loads(raw)
    except ValueError:
        logger.warning("Stored task table is not valid JSON; treating as empty.")
        return {}
    if not isinstance(val, dict):
        logger.warning("Stored task table is %s, expected object; treating as empty.", type(val).__name__)
        return {}
    return val
