"""SQLite key-value store.

One table, one row per key. Each operation runs in its own transaction,
so bulk removal is all-or-nothing.
"""
import sqlite3
from pathlib import Path
from typing import Iterable, Optional

from .backend import KeyValueStore, StoreError


class SqliteStore(KeyValueStore):
    """Persistent key-value store using SQLite.

    - One DB file per device (configurable via path).
    - Use ":memory:" for a throwaway database.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = str(path)
        try:
            if self._path != ":memory:":
                Path(self._path).parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(self._path, check_same_thread=False)
            self._conn.execute("PRAGMA journal_mode=WAL")
            self._init_schema()
        except (OSError, sqlite3.Error) as e:
            raise StoreError(f"Cannot open sqlite store {self._path}: {e}") from e

    def _init_schema(self) -> None:
        create_sql = """
        CREATE TABLE IF NOT EXISTS kv (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL
        );
        """
        self._conn.execute(create_sql)
        self._conn.commit()

    def set(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise StoreError(f"Store values must be str, got {type(value).__name__}")
        try:
            with self._conn:
                self._conn.execute(
                    "INSERT INTO kv (key, value) VALUES (?, ?) "
                    "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
                    (key, value),
                )
        except sqlite3.Error as e:
            raise StoreError(f"Cannot write key {key}: {e}") from e

    def get(self, key: str) -> Optional[str]:
        try:
            row = self._conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
        except sqlite3.Error as e:
            raise StoreError(f"Cannot read key {key}: {e}") from e
        return row[0] if row else None

    def remove(self, key: str) -> None:
        self.remove_many([key])

    def remove_many(self, keys: Iterable[str]) -> None:
        rows = [(key,) for key in keys]
        if not rows:
            return
        try:
            with self._conn:
                self._conn.executemany("DELETE FROM kv WHERE key = ?", rows)
        except sqlite3.Error as e:
            raise StoreError(f"Cannot remove keys: {e}") from e

    def list_keys(self) -> list[str]:
        try:
            return [r[0] for r in self._conn.execute("SELECT key FROM kv ORDER BY key").fetchall()]
        except sqlite3.Error as e:
            raise StoreError(f"Cannot list keys: {e}") from e

    def close(self) -> None:
        self._conn.close()
