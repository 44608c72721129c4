"""Local key-value stores backing the record snapshot."""

import logging
import sqlite3
from pathlib import Path
from typing import Optional, Protocol

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when the store cannot be read or written."""


class StorageQuotaExceeded(StorageError):
    """Raised when a value is larger than the store allows."""


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...


def _check_quota(key: str, value: str, quota_bytes: Optional[int]) -> None:
    if quota_bytes is None:
        return
    size = len(value.encode("utf-8"))
    if size > quota_bytes:
        raise StorageQuotaExceeded(
            f"Value for {key!r} is {size} bytes, quota is {quota_bytes} bytes"
        )


class MemoryStore:
    """Dict-backed store, mostly for tests and embedding."""

    def __init__(self, quota_bytes: Optional[int] = None):
        self.quota_bytes = quota_bytes
        self._data: dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        _check_quota(key, value, self.quota_bytes)
        self._data[key] = value


class SQLiteStore:
    """Key-value store in a single SQLite table."""

    def __init__(self, path: Path, quota_bytes: Optional[int] = None):
        self.path = Path(path)
        self.quota_bytes = quota_bytes
        self._initialized = False

    def get_connection(self) -> sqlite3.Connection:
        """Get SQLite database connection."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(self.path)
        conn.row_factory = sqlite3.Row
        return conn

    def init_db(self) -> None:
        """Initialize database schema."""
        conn = self.get_connection()
        try:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS kv_store (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
                )
            """)
            conn.commit()
            self._initialized = True
            logger.debug(f"Key-value store initialized at {self.path}")
        finally:
            conn.close()

    def get(self, key: str) -> Optional[str]:
        if not self._initialized:
            self.init_db()
        conn = self.get_connection()
        try:
            cursor = conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,))
            row = cursor.fetchone()
            return row["value"] if row is not None else None
        except sqlite3.Error as e:
            raise StorageError(f"Failed to read {key!r}: {e}") from e
        finally:
            conn.close()

    def set(self, key: str, value: str) -> None:
        _check_quota(key, value, self.quota_bytes)
        if not self._initialized:
            self.init_db()
        conn = self.get_connection()
        try:
            conn.execute(
                """
                INSERT OR REPLACE INTO kv_store (key, value, updated_at)
                VALUES (?, ?, CURRENT_TIMESTAMP)
                """,
                (key, value),
            )
            conn.commit()
            logger.debug(f"Wrote {len(value)} characters to {key!r}")
        except sqlite3.Error as e:
            raise StorageError(f"Failed to write {key!r}: {e}") from e
        finally:
            conn.close()
