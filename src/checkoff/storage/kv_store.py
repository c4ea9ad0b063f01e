# src/checkoff/storage/kv_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
from pathlib import Path

from .errors import StorageUnavailable

logger = logging.getLogger(__name__)


class SqliteKeyValueStore:
    """
    SQLite-backed key-value store.

    One table, one row per key; values are opaque text blobs.

    Thread-safety:
    - each method opens its own SQLite connection
    - any sqlite3/OS failure surfaces as StorageUnavailable
    """

    def __init__(self, db_path: str | Path = "storage.sqlite3") -> None:
        self._db_path = Path(db_path)
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            self._ensure_schema()
        except (sqlite3.Error, OSError) as e:
            raise StorageUnavailable(f"cannot open key-value store at {self._db_path}: {e}") from e
        logger.info("SqliteKeyValueStore ready db=%s", self._db_path)

    @property
    def db_path(self) -> Path:
        return self._db_path

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
                """
            )
            conn.commit()
        finally:
            conn.close()

    # ---- public API ----

    def get_item(self, key: str) -> str | None:
        try:
            conn = self._get_conn()
            try:
                row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise StorageUnavailable(f"read of {key!r} failed: {e}") from e
        return None if row is None else str(row[0])

    def set_item(self, key: str, value: str) -> None:
        try:
            conn = self._get_conn()
            try:
                conn.execute(
                    """
                    INSERT INTO kv(key, value) VALUES (?, ?)
                    ON CONFLICT(key) DO UPDATE SET value = excluded.value
                    """,
                    (key, value),
                )
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise StorageUnavailable(f"write of {key!r} failed: {e}") from e
        logger.debug("kv set key=%s bytes=%d", key, len(value))

    def remove_item(self, key: str) -> None:
        try:
            conn = self._get_conn()
            try:
                conn.execute("DELETE FROM kv WHERE key = ?", (key,))
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise StorageUnavailable(f"delete of {key!r} failed: {e}") from e

    def keys(self) -> list[str]:
        try:
            conn = self._get_conn()
            try:
                rows = conn.execute("SELECT key FROM kv ORDER BY key").fetchall()
            finally:
                conn.close()
        except sqlite3.Error as e:
            raise StorageUnavailable(f"listing keys failed: {e}") from e
        return [str(r[0]) for r in rows]
