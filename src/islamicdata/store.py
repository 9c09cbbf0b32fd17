"""Persistent key/value stores.

A store holds opaque string values under string keys, like a device's local
storage. ``PersistentCache`` layers namespacing, envelopes and TTLs on top.
Backends raise ``StoreError`` for infrastructure failures so the cache layer
does not need to know which backend it is talking to.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Protocol

import aiosqlite

_CREATE_KV_TABLE = """
CREATE TABLE IF NOT EXISTS kv_store (
    key        TEXT PRIMARY KEY,
    value      TEXT NOT NULL,
    updated_at TEXT NOT NULL
)
"""


class StoreError(Exception):
    """A backend failed to read or write."""


class KeyValueStore(Protocol):
    async def get_item(self, key: str) -> str | None: ...

    async def set_item(self, key: str, value: str) -> None: ...

    async def remove_item(self, key: str) -> None: ...

    async def keys(self, prefix: str = "") -> list[str]: ...


class InMemoryStore:
    """Dict-backed store for hosts without durable storage, and for tests."""

    def __init__(self) -> None:
        self._items: dict[str, str] = {}

    async def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    async def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    async def keys(self, prefix: str = "") -> list[str]:
        return [k for k in self._items if k.startswith(prefix)]


class SqliteStore:
    """SQLite-backed store implementing KeyValueStore."""

    def __init__(self, db: aiosqlite.Connection) -> None:
        self._db = db

    async def init_db(self) -> None:
        """Create the table and set WAL mode. Called once at startup."""
        try:
            await self._db.execute("PRAGMA journal_mode = WAL")
            await self._db.execute(_CREATE_KV_TABLE)
            await self._db.commit()
        except aiosqlite.Error as exc:
            raise StoreError("failed to initialise kv_store") from exc

    async def get_item(self, key: str) -> str | None:
        try:
            cursor = await self._db.execute("SELECT value FROM kv_store WHERE key = ?", (key,))
            row = await cursor.fetchone()
        except aiosqlite.Error as exc:
            raise StoreError(f"read failed for {key!r}") from exc
        return None if row is None else row[0]

    async def set_item(self, key: str, value: str) -> None:
        try:
            await self._db.execute(
                "INSERT OR REPLACE INTO kv_store (key, value, updated_at) VALUES (?, ?, ?)",
                (key, value, datetime.now(UTC).isoformat()),
            )
            await self._db.commit()
        except aiosqlite.Error as exc:
            raise StoreError(f"write failed for {key!r}") from exc

    async def remove_item(self, key: str) -> None:
        try:
            await self._db.execute("DELETE FROM kv_store WHERE key = ?", (key,))
            await self._db.commit()
        except aiosqlite.Error as exc:
            raise StoreError(f"delete failed for {key!r}") from exc

    async def keys(self, prefix: str = "") -> list[str]:
        # substr comparison keeps LIKE wildcards in the prefix literal
        try:
            cursor = await self._db.execute(
                "SELECT key FROM kv_store WHERE substr(key, 1, ?) = ? ORDER BY key",
                (len(prefix), prefix),
            )
            rows = await cursor.fetchall()
        except aiosqlite.Error as exc:
            raise StoreError("key listing failed") from exc
        return [row[0] for row in rows]
