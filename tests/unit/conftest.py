"""Unit-specific fixtures (no I/O beyond in-memory SQLite)."""

from __future__ import annotations

import aiosqlite
import pytest

from islamicdata.cache import PersistentCache
from islamicdata.store import SqliteStore


@pytest.fixture()
async def store():
    """In-memory SQLite store for unit tests."""
    async with aiosqlite.connect(":memory:") as db:
        s = SqliteStore(db)
        await s.init_db()
        yield s


@pytest.fixture()
async def cache(store: SqliteStore) -> PersistentCache:
    return PersistentCache(store, namespace="test-")
