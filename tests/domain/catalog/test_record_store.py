"""Tests for the record store: primary list, backups and sort preference."""

import sqlite3
from datetime import datetime
from unittest.mock import MagicMock

import pytest

from song_catalog.core.database import open_store
from song_catalog.domain.catalog.exceptions import BackupNotFoundError
from song_catalog.domain.catalog.models import Song, SortKey, Status
from song_catalog.domain.catalog.store import RecordStore


@pytest.fixture
def kv(tmp_path):
    return open_store(tmp_path / "catalog.db")


@pytest.fixture
def store(kv):
    return RecordStore(kv)


def _songs():
    return [
        Song(id="A1", title="Luna"),
        Song(id="B2", title="Sol", status=Status.PLACED, artist="Rosalía"),
    ]


class TestLoadSave:
    def test_load_missing_is_empty(self, store):
        assert store.load() == []

    def test_save_then_load(self, store):
        store.save(_songs())

        loaded = store.load()

        assert [s.id for s in loaded] == ["A1", "B2"]
        assert loaded[1].status is Status.PLACED
        assert loaded[1].artist == "Rosalía"

    def test_corrupt_json_loads_empty(self, kv, store):
        kv.set("catalogo-bks-v4", "{not json")

        assert store.load() == []

    def test_non_list_payload_loads_empty(self, kv, store):
        kv.set("catalogo-bks-v4", '{"id": "A1"}')

        assert store.load() == []

    def test_malformed_entries_are_skipped(self, kv, store):
        kv.set("catalogo-bks-v4", '[{"id": "A1", "title": "Luna"}, {"title": "no id"}, 5]')

        assert [s.id for s in store.load()] == ["A1"]

    def test_save_failure_is_swallowed(self):
        kv = MagicMock()
        kv.set.side_effect = sqlite3.OperationalError("disk full")
        store = RecordStore(kv)

        store.save(_songs())  # Does not raise

    def test_subscribers_notified_after_save(self, store):
        received = []
        unsubscribe = store.subscribe(received.append)

        store.save(_songs())
        unsubscribe()
        store.save([])

        assert len(received) == 1
        assert [s.id for s in received[0]] == ["A1", "B2"]


class TestBackups:
    def test_snapshot_key_uses_timestamp(self, store):
        key = store.snapshot_backup(_songs(), moment=datetime(2025, 10, 27, 14, 3, 12, 999))

        assert key == "catalogo-bks-v4-backup-2025-10-27T14:03:12"

    def test_same_day_snapshots_are_kept_apart(self, store):
        store.snapshot_backup(_songs(), moment=datetime(2025, 10, 27, 9, 0))
        store.snapshot_backup(_songs()[:1], moment=datetime(2025, 10, 27, 18, 30))

        backups = store.list_backups()

        assert [len(b.songs) for b in backups] == [1, 2]
        assert [b.date for b in backups] == ["2025-10-27", "2025-10-27"]

    def test_same_second_snapshot_gets_next_key(self, store):
        moment = datetime(2025, 10, 27, 9, 0, 0)
        first = store.snapshot_backup(_songs(), moment=moment)
        second = store.snapshot_backup(_songs()[:1], moment=moment)

        assert first == "catalogo-bks-v4-backup-2025-10-27T09:00:00"
        assert second == "catalogo-bks-v4-backup-2025-10-27T09:00:01"
        assert len(store.restore_backup(first)) == 2

    def test_list_newest_first(self, store):
        store.snapshot_backup(_songs(), moment=datetime(2025, 1, 5, 12, 0))
        store.snapshot_backup(_songs(), moment=datetime(2025, 3, 1, 8, 0))
        store.snapshot_backup(_songs(), moment=datetime(2024, 12, 31, 23, 59))

        dates = [b.date for b in store.list_backups()]

        assert dates == ["2025-03-01", "2025-01-05", "2024-12-31"]

    def test_day_only_keys_still_listed(self, kv, store):
        kv.set("catalogo-bks-v4-backup-2025-01-01", "[]")
        store.snapshot_backup([], moment=datetime(2025, 1, 1, 10, 0))

        assert [b.created_at for b in store.list_backups()] == [
            "2025-01-01T10:00:00",
            "2025-01-01",
        ]

    def test_backups_not_mixed_with_primary_list(self, store):
        store.save(_songs())
        store.snapshot_backup([], moment=datetime(2025, 1, 1, 10, 0))

        assert len(store.load()) == 2
        assert [b.key for b in store.list_backups()] == ["catalogo-bks-v4-backup-2025-01-01T10:00:00"]

    def test_restore_returns_snapshot(self, store):
        key = store.snapshot_backup(_songs())

        assert [s.id for s in store.restore_backup(key)] == ["A1", "B2"]

    def test_restore_unknown_key(self, store):
        with pytest.raises(BackupNotFoundError):
            store.restore_backup("catalogo-bks-v4-backup-1999-01-01T00:00:00")

    def test_restore_rejects_non_backup_key(self, store):
        store.save(_songs())

        with pytest.raises(BackupNotFoundError):
            store.restore_backup("catalogo-bks-v4")

    def test_delete_backup(self, store):
        key = store.snapshot_backup(_songs())

        store.delete_backup(key)

        assert store.list_backups() == []
        with pytest.raises(BackupNotFoundError):
            store.delete_backup(key)


class TestSortPreference:
    def test_defaults_to_title(self, store):
        assert store.load_sort_preference() is SortKey.TITLE

    def test_persisted_under_its_own_key(self, kv, store):
        store.save_sort_preference(SortKey.STYLE)

        assert store.load_sort_preference() is SortKey.STYLE
        assert kv.get("catalogo-sort") == '"style"'

    def test_garbage_falls_back_to_title(self, kv, store):
        kv.set("catalogo-sort", '"popularity"')

        assert store.load_sort_preference() is SortKey.TITLE
