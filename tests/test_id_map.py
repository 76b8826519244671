import sqlite3
import uuid

import pytest

from pg_batch_import.errors import SinkFailure
from pg_batch_import.io import ExternalIdMap, SqliteExternalIdMap
from pg_batch_import.io import id_map as id_map_module


@pytest.fixture(params=["memory", "sqlite"])
def id_map(request, tmp_path):
    if request.param == "memory":
        m = ExternalIdMap()
    else:
        m = SqliteExternalIdMap(str(tmp_path / "ids.sqlite"), batch_size=2)
    yield m
    m.close()


def test_add_and_resolve(id_map):
    for i, ext in enumerate(["a", "b", "c", "d", "e"]):
        id_map.add(ext, i + 10)
    assert len(id_map) == 5
    assert "c" in id_map
    assert "z" not in id_map
    assert id_map.resolve("e") == 14
    assert id_map.resolve("a") == 10
    assert id_map.resolve("z") is None


def test_duplicate_add_raises(id_map):
    id_map.add("a", 1)
    id_map.add("b", 2)
    id_map.add("c", 3)
    with pytest.raises(KeyError):
        id_map.add("a", 4)
    assert id_map.resolve("a") == 1


def test_frozen_map_rejects_writes(id_map):
    id_map.add("a", 1)
    id_map.freeze()
    with pytest.raises(RuntimeError):
        id_map.add("b", 2)
    assert id_map.resolve("a") == 1


def test_sqlite_map_keeps_string_ids(tmp_path):
    m = SqliteExternalIdMap(":memory:")
    m.add("x", "node-x")
    m.freeze()
    assert m.resolve("x") == "node-x"
    m.close()


def test_sqlite_map_starts_empty(tmp_path):
    path = str(tmp_path / "ids.sqlite")
    first = SqliteExternalIdMap(path)
    first.add("a", 1)
    first.close()

    second = SqliteExternalIdMap(path)
    assert len(second) == 0
    assert "a" not in second
    second.close()


def test_sqlite_map_round_trips_non_scalar_ids(tmp_path):
    m = SqliteExternalIdMap(str(tmp_path / "ids.sqlite"), batch_size=2)
    ids = {"a": uuid.uuid4(), "b": ("shard-1", 7), "c": uuid.uuid4()}
    for ext, internal in ids.items():
        m.add(ext, internal)
    m.freeze()
    for ext, internal in ids.items():
        assert m.resolve(ext) == internal
    m.close()


def test_sqlite_map_rejects_unpicklable_ids():
    m = SqliteExternalIdMap(":memory:")
    with pytest.raises(SinkFailure):
        m.add("a", lambda: None)
    assert "a" not in m
    m.close()


def test_sqlite_map_close_releases_connection_when_flush_fails(monkeypatch):
    m = SqliteExternalIdMap(":memory:")
    m.add("a", 1)

    def failing_put_many(conn, rows):
        raise sqlite3.OperationalError("disk I/O error")

    monkeypatch.setattr(id_map_module, "sqlite_kv_put_many", failing_put_many)
    with pytest.raises(sqlite3.OperationalError):
        m.close()
    with pytest.raises(sqlite3.ProgrammingError):
        m._conn.execute("SELECT 1")
