"""Tests for the SQLite key-value store and schema."""

import json

import pytest

from spicesync.db.kv import PAYLOAD_VERSION, KeyValueStore
from spicesync.db.schema import _SCHEMA_VERSION, ensure_schema


@pytest.fixture
def kv(tmp_path):
    store = KeyValueStore(db_path=tmp_path / "kv.db")
    yield store
    store.close()


def test_ensure_schema_creates_tables(tmp_path):
    conn = ensure_schema(tmp_path / "nested" / "db.sqlite")
    tables = {
        r["name"]
        for r in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
    }
    assert {"kv_store", "schema_version"} <= tables
    row = conn.execute("SELECT version FROM schema_version").fetchone()
    assert row["version"] == _SCHEMA_VERSION
    conn.close()


def test_ensure_schema_is_idempotent(tmp_path):
    path = tmp_path / "db.sqlite"
    ensure_schema(path).close()
    conn = ensure_schema(path)
    rows = conn.execute("SELECT version FROM schema_version").fetchall()
    assert len(rows) == 1
    conn.close()


def test_get_missing_returns_default(kv):
    assert kv.get("nothing") is None
    assert kv.get("nothing", []) == []


def test_set_and_get_roundtrip(kv):
    kv.set("k", {"a": [1, 2, 3], "b": "トマト"})
    assert kv.get("k") == {"a": [1, 2, 3], "b": "トマト"}


def test_set_writes_versioned_envelope(kv):
    kv.set("k", [1])
    raw = json.loads(kv.get_raw("k"))
    assert raw == {"version": PAYLOAD_VERSION, "data": [1]}


def test_set_overwrites(kv):
    kv.set("k", 1)
    kv.set("k", 2)
    assert kv.get("k") == 2


def test_legacy_value_without_envelope(tmp_path):
    path = tmp_path / "kv.db"
    conn = ensure_schema(path)
    conn.execute(
        "INSERT INTO kv_store (key, value) VALUES (?, ?)",
        ("legacy", json.dumps([{"id": "x"}])),
    )
    conn.commit()
    conn.close()

    kv = KeyValueStore(path)
    assert kv.get("legacy") == [{"id": "x"}]
    kv.close()


def test_corrupt_value_raises(tmp_path):
    path = tmp_path / "kv.db"
    conn = ensure_schema(path)
    conn.execute("INSERT INTO kv_store (key, value) VALUES ('bad', '{oops')")
    conn.commit()
    conn.close()

    kv = KeyValueStore(path)
    with pytest.raises(ValueError, match="not valid JSON"):
        kv.get("bad")
    kv.close()


def test_delete(kv):
    kv.set("k", 1)
    kv.delete("k")
    assert kv.get("k") is None


def test_persists_across_instances(tmp_path):
    path = tmp_path / "kv.db"
    first = KeyValueStore(path)
    first.set("k", "v")
    first.close()

    second = KeyValueStore(path)
    assert second.get("k") == "v"
    second.close()


def test_in_memory_database():
    kv = KeyValueStore(":memory:")
    kv.set("k", True)
    assert kv.get("k") is True
    kv.close()


def test_close_is_idempotent(kv):
    kv.get("k")
    kv.close()
    kv.close()
    assert kv.get("k") is None
