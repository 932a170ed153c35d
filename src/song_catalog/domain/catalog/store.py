"""
Record store: the song list persisted under one key of the key-value store,
plus dated backup snapshots and the sort preference.

Persistence is best effort. Failed writes are logged and swallowed so the
in-memory list stays authoritative for the session.
"""

import json
import sqlite3
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, List, Optional

from loguru import logger

from ...core.database import KeyValueStore
from .exceptions import BackupNotFoundError
from .models import Song, SortKey

Listener = Callable[[List[Song]], None]


@dataclass(frozen=True)
class Backup:
    """A dated snapshot of the full song list."""

    key: str
    created_at: str  # ISO timestamp taken from the key
    songs: List[Song]

    @property
    def date(self) -> str:
        return self.created_at[:10]


def songs_to_json(songs: List[Song]) -> str:
    """Serialize songs to the stored JSON array."""
    return json.dumps([s.to_dict() for s in songs], ensure_ascii=False)


def songs_from_json(raw: str) -> List[Song]:
    """Parse a stored JSON array, skipping malformed entries.

    Raises:
        ValueError: If raw is not a JSON array
    """
    data = json.loads(raw)
    if not isinstance(data, list):
        raise ValueError("Stored songs must be a JSON array")

    songs = []
    for item in data:
        try:
            songs.append(Song.from_dict(item))
        except (TypeError, ValueError, AttributeError) as e:
            logger.warning(f"Skipping malformed stored song: {e}")
    return songs


class RecordStore:
    """Reads and writes the catalog under a fixed namespace key."""

    def __init__(
        self,
        kv: KeyValueStore,
        namespace: str = "catalogo-bks-v4",
        sort_key: str = "catalogo-sort",
    ):
        self.kv = kv
        self.namespace = namespace
        self.sort_key = sort_key
        self._listeners: List[Listener] = []

    @property
    def backup_prefix(self) -> str:
        return f"{self.namespace}-backup-"

    def load(self) -> List[Song]:
        """Load the primary song list; missing or corrupt data yields []."""
        try:
            raw = self.kv.get(self.namespace)
        except sqlite3.Error:
            logger.exception(f"Failed to read {self.namespace}")
            return []

        if raw is None:
            return []

        try:
            return songs_from_json(raw)
        except ValueError as e:
            logger.warning(f"Stored catalog under {self.namespace} is corrupt: {e}")
            return []

    def save(self, songs: List[Song]) -> None:
        """Persist the song list and notify subscribers.

        Failures are logged, never raised.
        """
        try:
            self.kv.set(self.namespace, songs_to_json(songs))
        except (sqlite3.Error, TypeError, ValueError) as e:
            logger.warning(f"Failed to persist {len(songs)} songs: {e}")

        for listener in list(self._listeners):
            listener(list(songs))

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a callback run after every save; returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # Backups

    def backup_key_for(self, moment: datetime) -> str:
        return f"{self.backup_prefix}{moment.isoformat(timespec='seconds')}"

    def snapshot_backup(self, songs: List[Song], moment: Optional[datetime] = None) -> str:
        """Write songs under a new timestamped backup key and return the key.

        Existing backups are never replaced; a taken second moves the key
        forward one second.
        """
        moment = (moment or datetime.now()).replace(microsecond=0)
        key = self.backup_key_for(moment)
        while self.kv.get(key) is not None:
            moment += timedelta(seconds=1)
            key = self.backup_key_for(moment)

        self.kv.set(key, songs_to_json(songs))
        logger.info(f"Backup {key} written ({len(songs)} songs)")
        return key

    def list_backups(self) -> List[Backup]:
        """All backups, newest first."""
        backups = []
        for key in self.kv.keys(self.backup_prefix):
            raw = self.kv.get(key)
            if raw is None:
                continue
            try:
                songs = songs_from_json(raw)
            except ValueError as e:
                logger.warning(f"Backup {key} is corrupt: {e}")
                songs = []
            backups.append(Backup(key=key, created_at=key[len(self.backup_prefix):], songs=songs))

        backups.sort(key=lambda b: b.created_at, reverse=True)
        return backups

    def restore_backup(self, key: str) -> List[Song]:
        """Return the songs stored in a backup; the caller installs them.

        Raises:
            BackupNotFoundError: If key is not a stored backup
        """
        raw = self.kv.get(key) if key.startswith(self.backup_prefix) else None
        if raw is None:
            raise BackupNotFoundError(key)

        try:
            return songs_from_json(raw)
        except ValueError as e:
            logger.warning(f"Backup {key} is corrupt: {e}")
            return []

    def delete_backup(self, key: str) -> None:
        """Remove one backup.

        Raises:
            BackupNotFoundError: If key is not a stored backup
        """
        if not key.startswith(self.backup_prefix) or self.kv.get(key) is None:
            raise BackupNotFoundError(key)
        self.kv.delete(key)
        logger.info(f"Backup {key} deleted")

    # Sort preference

    def load_sort_preference(self) -> SortKey:
        """Stored list ordering, defaulting to title."""
        try:
            raw = self.kv.get(self.sort_key)
            if raw is not None:
                return SortKey(json.loads(raw))
        except (sqlite3.Error, ValueError) as e:
            logger.warning(f"Ignoring stored sort preference: {e}")
        return SortKey.TITLE

    def save_sort_preference(self, sort_by: SortKey) -> None:
        try:
            self.kv.set(self.sort_key, json.dumps(sort_by.value))
        except sqlite3.Error as e:
            logger.warning(f"Failed to persist sort preference: {e}")
