# src/task_runner/tasks/task_scheduler.py

from __future__ import annotations

"""
Task scheduler.

Runs registered handlers by name on asyncio loop timers:
- one-time tasks fire once (next loop iteration) and drop out of the table,
- recurring tasks re-arm `interval` ms after each run returns (fixed delay),
- the table (functionName + interval per task) is pushed to the active
  storage backend after every add/remove/clear.

All methods must be called from the loop thread. The scheduler binds to the
running loop the first time it needs one, unless a loop is passed in.
"""

import asyncio
import inspect
import logging
import math
from collections.abc import Mapping
from typing import Any

from ..config import Settings, get_settings
from ..core.ports import SAVED_TASKS_KEY, StorageBackend, TaskHandler, TaskTable
from ..errors import ConfigurationError
from ..storage import SqliteStorage, shared_memory_storage
from .task_models import ScheduledTask, TaskInfo

logger = logging.getLogger(__name__)


class TaskScheduler:
    def __init__(
            self,
            storage_method: str | None = None,
            custom_storage: StorageBackend | None = None,
            *,
            settings: Settings | None = None,
            loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        """
        storage_method: name of the backend to activate (defaults to settings.storage_method).
        custom_storage: registered as "custom" before the active backend is picked,
            so storage_method="custom" works in one call.
        """
        if settings is None:
            settings = get_settings()

        self._default_interval_ms = settings.default_interval_ms
        self._persist_on_completion = settings.persist_on_completion
        self._loop = loop

        self._tasks: dict[str, ScheduledTask] = {}
        self._handlers: dict[str, TaskHandler] = {}
        # Strong refs to fire-and-forget futures (async handlers, async saves).
        self._background: set[asyncio.Future[Any]] = set()

        self._storage_backends: dict[str, StorageBackend] = {
            "memory": shared_memory_storage(),
            "sqlite": SqliteStorage(settings.tasks_db_path),
        }
        if custom_storage is not None:
            self.add_storage_backend("custom", custom_storage)

        self._storage_name = ""
        self._storage: StorageBackend
        self.set_active_storage(storage_method or settings.storage_method)

    def __len__(self) -> int:
        return len(self._tasks)

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._tasks

    # ---- storage registry ----

    def add_storage_backend(self, name: str, backend: StorageBackend) -> None:
        missing = [m for m in ("save", "load") if not callable(getattr(backend, m, None))]
        if missing:
            raise ConfigurationError(
                f"Invalid storage backend {name!r}: missing {', '.join(missing)} method(s)."
            )
        self._storage_backends[name] = backend
        logger.debug("Storage backend %r registered", name)

    def set_active_storage(self, name: str) -> None:
        backend = self._storage_backends.get(name)
        if backend is None:
            known = ", ".join(sorted(self._storage_backends))
            raise ConfigurationError(f"Unknown storage backend {name!r} (known: {known}).")
        self._storage = backend
        self._storage_name = name
        logger.info("Active storage: %s", name)

    @property
    def active_storage_name(self) -> str:
        return self._storage_name

    @property
    def active_storage(self) -> StorageBackend:
        return self._storage

    # ---- handler registry ----

    def register_handler(self, name: str, fn: TaskHandler) -> None:
        """Register (or replace) the callable run by tasks whose function_name is `name`."""
        self._handlers[name] = fn
        logger.debug("Handler %r registered", name)

    # ---- task lifecycle ----

    def add_task(self, task_id: str, function_name: str, interval: int | float | None = None) -> bool:
        """
        Schedule `function_name` under `task_id`.

        interval=None -> one-time, runs on the next loop iteration.
        interval > 0  -> recurring every `interval` ms (first run after one interval).
        interval <= 0, NaN or inf -> coerced to the default interval, so recurring.

        Returns False (and logs) when task_id is taken or the handler is unknown.
        """
        if task_id in self._tasks:
            logger.warning("Task %s already exists.", task_id)
            return False
        if function_name not in self._handlers:
            logger.error("Function %s is not registered.", function_name)
            return False

        if interval is not None and (not math.isfinite(interval) or interval <= 0):
            logger.warning(
                "Invalid interval %sms for task %s. Defaulting to %sms.",
                interval,
                task_id,
                self._default_interval_ms,
            )
            interval = self._default_interval_ms

        task = ScheduledTask(task_id=task_id, function_name=function_name, interval=interval)
        self._arm(task, delay_ms=interval or 0)
        self._tasks[task_id] = task

        self.save_tasks()
        logger.info("Task %s added (%s, %s).", task_id, function_name, task.type.value)
        return True

    def remove_task(self, task_id: str) -> bool:
        task = self._tasks.pop(task_id, None)
        if task is None:
            logger.warning("Task %s not found.", task_id)
            return False
        task.cancel()
        self.save_tasks()
        logger.info("Task %s removed.", task_id)
        return True

    def clear_all_tasks(self) -> None:
        for task in self._tasks.values():
            task.cancel()
        self._tasks.clear()
        self.save_tasks()
        logger.info("All tasks cleared.")

    def list_tasks(self) -> list[TaskInfo]:
        tasks = [TaskInfo.from_task(t) for t in self._tasks.values()]
        logger.debug("Current tasks: %s", tasks)
        return tasks

    def shutdown(self) -> None:
        """
        Cancel every pending timer and background future, forget the live table.

        Unlike clear_all_tasks() nothing is persisted, so the saved table
        survives for the next load_tasks().
        """
        for task in self._tasks.values():
            task.cancel()
        count = len(self._tasks)
        self._tasks.clear()

        pending = [fut for fut in self._background if not fut.done()]
        for fut in pending:
            fut.cancel()
        logger.info(
            "Scheduler stopped (%d pending tasks dropped, %d background jobs cancelled).",
            count,
            len(pending),
        )

    # ---- firing ----

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def _arm(self, task: ScheduledTask, *, delay_ms: int | float) -> None:
        task.timer = self._get_loop().call_later(delay_ms / 1000, self._fire, task)

    def _fire(self, task: ScheduledTask) -> None:
        task_id = task.task_id
        # Stale timer: the entry was removed or replaced after this was armed.
        if self._tasks.get(task_id) is not task:
            return
        task.timer = None

        try:
            result = self._handlers[task.function_name]()
            if inspect.isawaitable(result):
                self._spawn(result, on_done=self._make_handler_reporter(task_id))
        except Exception:
            logger.exception("Error executing task %r", task_id)

        # The handler may have removed (or replaced) its own task.
        if self._tasks.get(task_id) is not task:
            return

        if task.recurring:
            self._arm(task, delay_ms=task.interval or self._default_interval_ms)
            return

        del self._tasks[task_id]
        logger.debug("One-time task %s finished.", task_id)
        if self._persist_on_completion:
            self.save_tasks()

    def _spawn(self, aw: Any, *, on_done) -> None:
        fut = asyncio.ensure_future(aw, loop=self._get_loop())
        self._background.add(fut)
        fut.add_done_callback(self._background.discard)
        fut.add_done_callback(on_done)

    @staticmethod
    def _make_handler_reporter(task_id: str):
        def _report(fut: asyncio.Future[Any]) -> None:
            if fut.cancelled():
                return
            exc = fut.exception()
            if exc is not None:
                logger.error("Error executing task %r", task_id, exc_info=exc)

        return _report

    @staticmethod
    def _report_save(fut: asyncio.Future[Any]) -> None:
        if fut.cancelled():
            return
        exc = fut.exception()
        if exc is not None:
            logger.warning("Storage save failed: %s", exc)

    # ---- persistence ----

    def snapshot(self) -> TaskTable:
        """The persisted view of the live table: functionName + interval per task."""
        return {task_id: task.to_saved() for task_id, task in self._tasks.items()}

    def save_tasks(self) -> None:
        """Push the snapshot to the active backend. Backend errors are logged, never raised."""
        try:
            result = self._storage.save(self.snapshot())
            if inspect.isawaitable(result):
                self._spawn(result, on_done=self._report_save)
        except Exception:
            logger.exception("Storage save failed (%s)", self._storage_name)

    async def load_tasks(self) -> int:
        """
        Re-add every saved task whose id is not already live.

        Tasks that are already scheduled in this process are left untouched.
        Returns the number of tasks actually added.
        """
        storage_name = self._storage_name
        payload = await self._storage.load()
        saved = payload.get(SAVED_TASKS_KEY) if isinstance(payload, Mapping) else None
        if not saved:
            logger.info("No saved tasks in %s.", storage_name)
            return 0
        if not isinstance(saved, Mapping):
            logger.warning("Saved tasks in %s are not a mapping; ignoring.", storage_name)
            return 0

        added = 0
        for task_id, record in saved.items():
            task_id = str(task_id)
            if task_id in self._tasks:
                continue

            if not isinstance(record, Mapping) or not isinstance(record.get("functionName"), str):
                logger.warning("Skipping malformed saved task %s: %r", task_id, record)
                continue
            interval = record.get("interval")
            if interval is not None and (isinstance(interval, bool) or not isinstance(interval, (int, float))):
                logger.warning("Skipping saved task %s with bad interval %r", task_id, interval)
                continue

            if self.add_task(task_id, record["functionName"], interval):
                added += 1

        logger.info("Loaded %d of %d saved tasks from %s.", added, len(saved), storage_name)
        return added
