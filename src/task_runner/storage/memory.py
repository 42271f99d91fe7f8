# src/task_runner/storage/memory.py

from __future__ import annotations

from ..core.ports import SAVED_TASKS_KEY, LoadPayload, TaskTable
from .codec import decode_table, encode_table


class MemoryStorage:
    """
    Process-local key/value store.

    The table is kept as JSON text under the "savedTasks" key, so what load()
    returns is a fresh copy and never aliases the scheduler's own state.
    shared_memory_storage() is the instance every scheduler registers as
    "memory", so a second scheduler in the same process sees what the first saved.
    """

    def __init__(self) -> None:
        self._items: dict[str, str] = {}

    def save(self, table: TaskTable) -> None:
        self._items[SAVED_TASKS_KEY] = encode_table(table)

    async def load(self) -> LoadPayload:
        return {SAVED_TASKS_KEY: decode_table(self._items.get(SAVED_TASKS_KEY))}

    def clear(self) -> None:
        self._items.clear()


_SHARED = MemoryStorage()


def shared_memory_storage() -> MemoryStorage:
    """The process-wide store behind every scheduler's built-in "memory" backend."""
    return _SHARED
