"""
SQLite-backed key-value store for Song Catalog.

The catalog persists opaque JSON strings under string keys, the same shape a
browser's local storage offers. One table holds every key.
"""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional

from loguru import logger

# Database schema version for migrations
SCHEMA_VERSION = 1


class KeyValueStore:
    """Durable string-to-string slots in a single SQLite file."""

    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)

    @contextmanager
    def connection(self) -> Iterator[sqlite3.Connection]:
        """Get a database connection with proper cleanup."""
        conn = sqlite3.connect(self.db_path, timeout=30.0)
        conn.row_factory = sqlite3.Row  # Enable dict-like access
        try:
            yield conn
        finally:
            conn.close()

    def init(self) -> None:
        """Create the schema if it does not exist yet."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        with self.connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS schema_version (
                    version INTEGER PRIMARY KEY
                )
            """)

            conn.execute("""
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            """)

            row = conn.execute("SELECT MAX(version) AS version FROM schema_version").fetchone()
            current_version = row["version"] if row and row["version"] is not None else 0
            if current_version < SCHEMA_VERSION:
                conn.execute(
                    "INSERT OR REPLACE INTO schema_version (version) VALUES (?)",
                    (SCHEMA_VERSION,),
                )
                logger.debug(f"Key-value schema at version {SCHEMA_VERSION}: {self.db_path}")

            conn.commit()

    def get(self, key: str) -> Optional[str]:
        """Return the value stored under key, or None."""
        with self.connection() as conn:
            row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
            return row["value"] if row else None

    def set(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""
        with self.connection() as conn:
            conn.execute("""
                INSERT INTO kv (key, value, updated_at)
                VALUES (?, ?, CURRENT_TIMESTAMP)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = CURRENT_TIMESTAMP
            """, (key, value))
            conn.commit()

    def delete(self, key: str) -> None:
        """Remove key if present."""
        with self.connection() as conn:
            conn.execute("DELETE FROM kv WHERE key = ?", (key,))
            conn.commit()

    def keys(self, prefix: str = "") -> List[str]:
        """List keys starting with prefix, in key order."""
        with self.connection() as conn:
            # Escape LIKE wildcards so the prefix matches literally
            escaped = prefix.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
            cursor = conn.execute(
                "SELECT key FROM kv WHERE key LIKE ? ESCAPE '\\' ORDER BY key",
                (escaped + "%",),
            )
            return [row["key"] for row in cursor.fetchall()]


def open_store(db_path: Path) -> KeyValueStore:
    """Open (and initialize) the key-value store at db_path."""
    store = KeyValueStore(db_path)
    store.init()
    return store
