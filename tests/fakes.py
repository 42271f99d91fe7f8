# tests/fakes.py

from __future__ import annotations

import copy
from dataclasses import dataclass, field

from task_runner.core.ports import SAVED_TASKS_KEY, LoadPayload, TaskTable


class RecordingStorage:
    """
    In-memory StorageBackend that keeps every saved snapshot.

    load() returns `seed` when one was given (saves never overwrite it), so a
    test can offer a fixed table regardless of what the scheduler saved since.
    Without a seed it returns the last snapshot, like a real store.
    """

    def __init__(self, seed: TaskTable | None = None) -> None:
        self.seed = seed
        self.saved: list[TaskTable] = []
        self.load_calls = 0

    @property
    def last(self) -> TaskTable:
        return self.saved[-1] if self.saved else {}

    def save(self, table: TaskTable) -> None:
        self.saved.append(copy.deepcopy(table))

    async def load(self) -> LoadPayload:
        self.load_calls += 1
        table = self.seed if self.seed is not None else self.last
        return {SAVED_TASKS_KEY: copy.deepcopy(table)}


class AsyncRecordingStorage(RecordingStorage):
    """Same, but save() is a coroutine function."""

    async def save(self, table: TaskTable) -> None:  # type: ignore[override]
        self.saved.append(copy.deepcopy(table))


@dataclass(slots=True)
class CallCounter:
    """Zero-arg handler that counts calls and optionally raises."""

    calls: int = 0
    error: Exception | None = None
    side_effects: list = field(default_factory=list)

    def __call__(self) -> None:
        self.calls += 1
        for fn in self.side_effects:
            fn()
        if self.error is not None:
            raise self.error


class FailingStorage(RecordingStorage):
    """save() raises after recording the attempt."""

    def __init__(self, error: Exception) -> None:
        super().__init__()
        self.error = error

    def save(self, table: TaskTable) -> None:
        super().save(table)
        raise self.error
