# tests/test_storage.py

from __future__ import annotations

import json
from pathlib import Path

import pytest

from task_runner.core.ports import SAVED_TASKS_KEY
from task_runner.storage import JsonFileStorage, MemoryStorage, SqliteStorage

TABLE = {
    "fetchDataTask": {"functionName": "fetchData", "interval": None},
    "heartbeatTask": {"functionName": "heartbeat", "interval": 10000},
}


@pytest.mark.asyncio
async def test_memory_storage_returns_copies() -> None:
    store = MemoryStorage()
    assert await store.load() == {SAVED_TASKS_KEY: {}}

    table = json.loads(json.dumps(TABLE))
    store.save(table)
    table["heartbeatTask"]["interval"] = 1

    loaded = await store.load()
    assert loaded[SAVED_TASKS_KEY] == TABLE

    loaded[SAVED_TASKS_KEY].clear()
    assert (await store.load())[SAVED_TASKS_KEY] == TABLE

    store.clear()
    assert await store.load() == {SAVED_TASKS_KEY: {}}


@pytest.mark.asyncio
async def test_json_file_storage_writes_object_keyed_by_task_id(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "tasks.json"
    store = JsonFileStorage(path)

    assert await store.load() == {SAVED_TASKS_KEY: {}}

    store.save(TABLE)

    assert json.loads(path.read_text("utf-8")) == TABLE
    assert not path.with_suffix(".json.tmp").exists()
    assert await store.load() == {SAVED_TASKS_KEY: TABLE}


@pytest.mark.asyncio
@pytest.mark.parametrize("content", ["", "not json", "[1, 2]"])
async def test_json_file_storage_ignores_bad_content(tmp_path: Path, content: str) -> None:
    path = tmp_path / "tasks.json"
    path.write_text(content, "utf-8")

    assert await JsonFileStorage(path).load() == {SAVED_TASKS_KEY: {}}


@pytest.mark.asyncio
async def test_sqlite_storage_round_trip_and_overwrite(tmp_path: Path) -> None:
    db = tmp_path / "db" / "tasks.sqlite3"
    store = SqliteStorage(db)
    assert not db.exists()

    assert await store.load() == {SAVED_TASKS_KEY: {}}
    assert db.exists()

    store.save(TABLE)
    store.save({"only": {"functionName": "x", "interval": 5}})

    reopened = SqliteStorage(db)
    assert await reopened.load() == {SAVED_TASKS_KEY: {"only": {"functionName": "x", "interval": 5}}}
