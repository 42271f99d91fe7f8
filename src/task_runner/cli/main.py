# src/task_runner/cli/main.py

"""
Demo entrypoint.

Initializes logging, builds the scheduler, restores saved tasks, schedules a
one-time "fetch_data" and a recurring "heartbeat" task, then runs until
settings.demo_seconds elapse or SIGINT/SIGTERM arrives.

Run it twice with TASKRUNNER_STORAGE=file to see tasks restored from disk.
"""

from __future__ import annotations

import asyncio
import logging
import signal

from ..cli.bootstrap import create_scheduler
from ..config import Settings, get_settings
from ..logging_setup import setup_logging
from ..tasks.task_scheduler import TaskScheduler

logger = logging.getLogger(__name__)


def _register_demo_handlers(scheduler: TaskScheduler) -> None:
    scheduler.register_handler("fetch_data", lambda: logger.info("Fetching API data..."))
    scheduler.register_handler("heartbeat", lambda: logger.info("Heartbeat ping..."))


async def run_demo(settings: Settings) -> None:
    scheduler = create_scheduler(settings=settings)
    _register_demo_handlers(scheduler)

    restored = await scheduler.load_tasks()
    if restored:
        logger.info("Restored %d tasks from %s storage.", restored, scheduler.active_storage_name)

    scheduler.add_task("fetchDataTask", "fetch_data")
    scheduler.add_task("heartbeatTask", "heartbeat", 10_000)

    for info in scheduler.list_tasks():
        logger.info("  %s -> %s (%s, %s)", info.task_id, info.function_name, info.interval, info.type.value)

    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    installed: list[signal.Signals] = []
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop.set)
            installed.append(sig)
        except (NotImplementedError, RuntimeError):
            # add_signal_handler is not available on every platform/thread.
            pass

    try:
        await asyncio.wait_for(stop.wait(), timeout=settings.demo_seconds)
        logger.info("Signal received, shutting down...")
    except asyncio.TimeoutError:
        logger.info("Demo finished after %ss.", settings.demo_seconds)
    finally:
        for sig in installed:
            loop.remove_signal_handler(sig)
        scheduler.shutdown()


def main() -> None:
    settings = get_settings()

    level_name = str(settings.log_level).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)
    try:
        asyncio.run(run_demo(settings))
    except KeyboardInterrupt:
        pass
    logger.info("Bye.")


if __name__ == "__main__":
    main()
