"""
Storage backends for the task table.

- memory.py: process-local key/value store, one shared instance per process (default)
- sqlite.py: SQLite key/value table
- json_file.py: JSON file keyed by taskId
- codec.py: JSON encode/decode shared by the backends
"""

from .json_file import JsonFileStorage
from .memory import MemoryStorage, shared_memory_storage
from .sqlite import SqliteStorage

__all__ = ["JsonFileStorage", "MemoryStorage", "SqliteStorage", "shared_memory_storage"]
