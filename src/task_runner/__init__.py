"""
task_runner: in-process task scheduler with pluggable persistence.

Register handlers by name, schedule one-time or recurring runs of them,
and keep the task table in a storage backend so it survives restarts.
"""

from .errors import ConfigurationError, TaskRunnerError
from .tasks.task_models import TaskInfo, TaskType
from .tasks.task_scheduler import TaskScheduler

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "TaskInfo",
    "TaskRunnerError",
    "TaskScheduler",
    "TaskType",
]
