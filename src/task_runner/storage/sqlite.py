# src/task_runner/storage/sqlite.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
import time
from pathlib import Path

from ..core.ports import SAVED_TASKS_KEY, LoadPayload, TaskTable
from .codec import decode_table, encode_table

logger = logging.getLogger(__name__)


class SqliteStorage:
    """
    SQLite key/value store for the task table.

    One row per key in a `kv` table; the task table is stored as JSON text
    under "savedTasks".

    - the database file and schema are created on first use, not in __init__,
      so registering this backend costs nothing until it is selected
    - each call opens its own short-lived connection
    """

    def __init__(self, db_path: str | Path = "tasks.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._schema_ready = False

    @property
    def db_path(self) -> Path:
        return self._db_path

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        if not self._schema_ready:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        if not self._schema_ready:
            self._ensure_schema(conn)
            self._schema_ready = True
            logger.info("SqliteStorage ready db=%s", self._db_path)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(sqlite3.DatabaseError):
            conn.execute("PRAGMA journal_mode=WAL")

    @staticmethod
    def _ensure_schema(conn: sqlite3.Connection) -> None:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS kv (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at REAL NOT NULL
            )
            """
        )
        conn.commit()

    # ---- StorageBackend ----

    def save(self, table: TaskTable) -> None:
        try:
            conn = self._get_conn()
        except sqlite3.Error:
            logger.exception("Failed to open task db %s", self._db_path)
            return
        try:
            conn.execute(
                """
                INSERT INTO kv(key, value, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
                """,
                (SAVED_TASKS_KEY, encode_table(table), time.time()),
            )
            conn.commit()
        except sqlite3.Error:
            logger.exception("Failed to save %d tasks to %s", len(table), self._db_path)
        finally:
            conn.close()

    async def load(self) -> LoadPayload:
        try:
            conn = self._get_conn()
        except sqlite3.Error:
            logger.exception("Failed to open task db %s", self._db_path)
            return {SAVED_TASKS_KEY: {}}
        try:
            row = conn.execute("SELECT value FROM kv WHERE key = ?", (SAVED_TASKS_KEY,)).fetchone()
        except sqlite3.Error:
            logger.exception("Failed to load tasks from %s", self._db_path)
            return {SAVED_TASKS_KEY: {}}
        finally:
            conn.close()
        return {SAVED_TASKS_KEY: decode_table(row["value"] if row is not None else None)}
