# src/task_runner/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the scheduler.

The scheduler depends on Protocols instead of concrete implementations.
This keeps storage backends swappable and makes testing easier.
"""

from typing import Any, Awaitable, Callable, Protocol, TypedDict

SAVED_TASKS_KEY = "savedTasks"


class SavedTask(TypedDict):
    """Persisted form of one task. Field names match the JSON files on disk."""

    functionName: str
    interval: int | float | None


TaskTable = dict[str, SavedTask]
# taskId -> {"functionName": ..., "interval": ...}

LoadPayload = dict[str, TaskTable]
# {"savedTasks": TaskTable}; an empty table when nothing was saved.

TaskHandler = Callable[[], Any]
# Zero-argument callable. May return an awaitable (coroutine functions are allowed).


class StorageBackend(Protocol):
    """
    Where the task table goes between process lifetimes.

    save(table):
    - called after every mutation with the full table
    - fire-and-forget: the scheduler does not look at the result.
      If it is awaitable it gets scheduled on the loop.
    - backend owns its own failure handling

    load():
    - returns an awaitable resolving to {"savedTasks": table}
    """

    def save(self, table: TaskTable) -> Awaitable[None] | None: ...

    def load(self) -> Awaitable[LoadPayload]: ...
