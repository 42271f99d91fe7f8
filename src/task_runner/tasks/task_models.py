# src/task_runner/tasks/task_models.py

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from enum import StrEnum

from ..core.ports import SavedTask


class TaskType(StrEnum):
    """Derived from the interval, never stored."""

    ONE_TIME = "one-time"
    RECURRING = "recurring"

    @classmethod
    def for_interval(cls, interval: int | float | None) -> TaskType:
        if interval is not None and interval > 0:
            return cls.RECURRING
        return cls.ONE_TIME


@dataclass(slots=True, eq=False)
class ScheduledTask:
    """
    One live entry of the scheduler's task table.

    `timer` is the pending loop timer for the next firing. It is owned by the
    scheduler and never leaves the process (see to_saved()).
    """

    task_id: str
    function_name: str
    interval: int | float | None
    timer: asyncio.TimerHandle | None = field(default=None, repr=False)

    @property
    def type(self) -> TaskType:
        return TaskType.for_interval(self.interval)

    @property
    def recurring(self) -> bool:
        return self.type is TaskType.RECURRING

    def cancel(self) -> None:
        # TimerHandle.cancel() is itself idempotent; drop the reference anyway.
        if self.timer is not None:
            self.timer.cancel()
            self.timer = None

    def to_saved(self) -> SavedTask:
        return {"functionName": self.function_name, "interval": self.interval}


def format_interval(interval: int | float | None) -> str:
    """1500 -> '1.5 seconds', None -> 'one-time'."""
    if not interval or interval <= 0:
        return "one-time"
    return f"{interval / 1000:g} seconds"


@dataclass(slots=True, frozen=True)
class TaskInfo:
    """Read-only listing row returned by TaskScheduler.list_tasks()."""

    task_id: str
    function_name: str
    interval: str
    type: TaskType

    @classmethod
    def from_task(cls, task: ScheduledTask) -> TaskInfo:
        return cls(
            task_id=task.task_id,
            function_name=task.function_name,
            interval=format_interval(task.interval),
            type=task.type,
        )
