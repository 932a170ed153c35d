"""Tests for the SQLite key-value store."""

from song_catalog.core.database import KeyValueStore, open_store


def test_set_get_roundtrip(tmp_path):
    store = open_store(tmp_path / "kv.db")

    store.set("catalogo-bks-v4", "[]")

    assert store.get("catalogo-bks-v4") == "[]"
    assert store.get("missing") is None


def test_set_replaces_existing_value(tmp_path):
    store = open_store(tmp_path / "kv.db")

    store.set("k", "one")
    store.set("k", "two")

    assert store.get("k") == "two"


def test_delete(tmp_path):
    store = open_store(tmp_path / "kv.db")
    store.set("k", "v")

    store.delete("k")
    store.delete("never-existed")

    assert store.get("k") is None


def test_keys_prefix_is_literal(tmp_path):
    store = open_store(tmp_path / "kv.db")
    store.set("a_b-1", "x")
    store.set("axb-2", "x")
    store.set("a_b-3", "x")

    assert store.keys("a_b") == ["a_b-1", "a_b-3"]


def test_init_is_idempotent(tmp_path):
    db_path = tmp_path / "nested" / "kv.db"
    store = KeyValueStore(db_path)

    store.init()
    store.set("k", "v")
    store.init()

    assert store.get("k") == "v"
