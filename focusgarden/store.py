"""Key-value string store. Values are opaque strings; callers serialize.

Two backends share one async contract: an in-memory dict (tests, previews)
and a SQLite table (the on-device store).
"""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Iterable, Optional, Protocol

from focusgarden.config import get_store_path as _config_get_store_path

_SCHEMA = """
CREATE TABLE IF NOT EXISTS entries (
    key    TEXT PRIMARY KEY,
    value  TEXT NOT NULL
);
"""


class StoreError(Exception):
    """The backing store could not be read or written."""


class KeyValueStore(Protocol):
    async def get(self, key: str) -> Optional[str]: ...

    async def set(self, key: str, value: str) -> None: ...

    async def remove(self, key: str) -> None: ...

    async def remove_many(self, keys: Iterable[str]) -> None: ...

    def close(self) -> None: ...


class MemoryStore:
    """Dict-backed store."""

    def __init__(self, initial: Optional[dict[str, str]] = None) -> None:
        self.data: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        self.data[key] = value

    async def remove(self, key: str) -> None:
        self.data.pop(key, None)

    async def remove_many(self, keys: Iterable[str]) -> None:
        for key in keys:
            self.data.pop(key, None)

    def close(self) -> None:
        pass


# ---------------------------------------------------------------------------
# SQLite
# ---------------------------------------------------------------------------


def _get_store_path() -> Path:
    """Return the store file path from config (or default)."""
    return _config_get_store_path()


def get_connection(store_path: Optional[Path] = None) -> sqlite3.Connection:
    """Open a connection and ensure the schema exists."""
    path = store_path or _get_store_path()
    conn = sqlite3.connect(str(path))
    conn.row_factory = sqlite3.Row
    conn.executescript(_SCHEMA)
    return conn


class SqliteStore:
    """Store backed by a single SQLite ``entries`` table.

    Calls run on the event loop thread; each statement is short and the
    app has a single writer.
    """

    def __init__(self, store_path: Optional[Path] = None) -> None:
        try:
            self.conn = get_connection(store_path)
        except sqlite3.Error as exc:
            raise StoreError(f"Could not open store: {exc}") from exc

    async def get(self, key: str) -> Optional[str]:
        try:
            row = self.conn.execute(
                "SELECT value FROM entries WHERE key = ?", (key,)
            ).fetchone()
        except sqlite3.Error as exc:
            raise StoreError(f"Could not read {key!r}: {exc}") from exc
        return row["value"] if row else None

    async def set(self, key: str, value: str) -> None:
        try:
            self.conn.execute(
                """INSERT INTO entries (key, value) VALUES (?, ?)
                   ON CONFLICT(key) DO UPDATE SET value = excluded.value""",
                (key, value),
            )
            self.conn.commit()
        except sqlite3.Error as exc:
            raise StoreError(f"Could not write {key!r}: {exc}") from exc

    async def remove(self, key: str) -> None:
        await self.remove_many([key])

    async def remove_many(self, keys: Iterable[str]) -> None:
        try:
            self.conn.executemany(
                "DELETE FROM entries WHERE key = ?", [(k,) for k in keys]
            )
            self.conn.commit()
        except sqlite3.Error as exc:
            raise StoreError(f"Could not remove keys: {exc}") from exc

    def close(self) -> None:
        self.conn.close()


def open_store(store_path: Optional[Path] = None) -> SqliteStore:
    """Open the on-disk store at *store_path* (or the configured default)."""
    return SqliteStore(store_path or _get_store_path())
