# src/task_runner/errors.py

from __future__ import annotations


class TaskRunnerError(Exception):
    """Base class for errors raised by the task runner."""


class ConfigurationError(TaskRunnerError, ValueError):
    """
    Invalid scheduler configuration.

    Raised for an unknown storage backend name or a backend missing
    its save/load methods. This is the only error that leaves the scheduler;
    task-level problems are logged instead.
    """
