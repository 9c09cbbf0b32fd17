"""Unit tests for islamicdata.cache."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import pytest

from islamicdata import cache as cache_module
from islamicdata.cache import MemoryCache, PersistentCache
from islamicdata.store import InMemoryStore, StoreError

if TYPE_CHECKING:
    from islamicdata.store import SqliteStore

HOUR_MS = 60 * 60 * 1000


def _travel(monkeypatch: pytest.MonkeyPatch, hours: float) -> None:
    """Move the cache clock ``hours`` into the future."""
    offset = int(hours * HOUR_MS)
    real_now = cache_module._now_ms
    monkeypatch.setattr(cache_module, "_now_ms", lambda: real_now() + offset)


# ---------------------------------------------------------------------------
# MemoryCache
# ---------------------------------------------------------------------------


class TestMemoryCache:
    def test_set_and_get(self) -> None:
        memory = MemoryCache()
        memory.set("chapter-1", {"chapter": 1})
        assert memory.get("chapter-1") == {"chapter": 1}
        assert "chapter-1" in memory
        assert len(memory) == 1

    def test_miss_returns_none(self) -> None:
        assert MemoryCache().get("chapter-1") is None

    def test_clear(self) -> None:
        memory = MemoryCache()
        memory.set("a", 1)
        memory.set("b", 2)
        memory.clear()
        assert len(memory) == 0
        assert memory.get("a") is None

    def test_items_is_a_snapshot(self) -> None:
        memory = MemoryCache()
        memory.set("a", 1)
        items = memory.items()
        memory.set("b", 2)
        assert list(items) == [("a", 1)]


# ---------------------------------------------------------------------------
# PersistentCache
# ---------------------------------------------------------------------------


class TestPersistentCache:
    async def test_set_and_get_fresh(self, cache: PersistentCache) -> None:
        await cache.set("chapter-1", {"chapter": 1, "content": []}, ttl_hours=24)
        entry = await cache.get("chapter-1")
        assert entry is not None
        assert entry.key == "test-chapter-1"
        assert entry.value == {"chapter": 1, "content": []}
        assert entry.stale is False
        assert entry.expires_at is not None
        assert entry.expires_at > datetime.now(UTC)
        assert entry.stored_at <= datetime.now(UTC)

    async def test_get_nonexistent_returns_none(self, cache: PersistentCache) -> None:
        assert await cache.get("nonexistent") is None

    async def test_envelope_format(self, cache: PersistentCache, store: SqliteStore) -> None:
        await cache.set("quran-index", {"quran": {}}, ttl_hours=1)
        raw = await store.get_item("test-quran-index")
        assert raw is not None
        envelope = json.loads(raw)
        assert envelope["data"] == {"quran": {}}
        assert envelope["expires"] - envelope["cached"] == HOUR_MS

    async def test_zero_ttl_never_expires(
        self, cache: PersistentCache, store: SqliteStore, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        await cache.set("metadata", {"version": "1"}, ttl_hours=0)
        raw = await store.get_item("test-metadata")
        assert raw is not None
        assert json.loads(raw)["expires"] is None

        _travel(monkeypatch, hours=24 * 365)
        entry = await cache.get("metadata")
        assert entry is not None
        assert entry.expires_at is None

    async def test_expired_entry_is_miss_and_removed(
        self, cache: PersistentCache, store: SqliteStore, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        await cache.set("chapter-1", {"chapter": 1}, ttl_hours=1)
        _travel(monkeypatch, hours=2)

        assert await cache.get("chapter-1") is None
        assert await store.get_item("test-chapter-1") is None

    async def test_entry_expires_exactly_at_ttl(
        self, cache: PersistentCache, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(cache_module, "_now_ms", lambda: 1_000_000)
        await cache.set("chapter-1", {"chapter": 1}, ttl_hours=1)

        monkeypatch.setattr(cache_module, "_now_ms", lambda: 1_000_000 + HOUR_MS - 1)
        assert await cache.get("chapter-1") is not None

        monkeypatch.setattr(cache_module, "_now_ms", lambda: 1_000_000 + HOUR_MS)
        assert await cache.get("chapter-1") is None

    async def test_get_any_returns_stale_entry(
        self, cache: PersistentCache, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        await cache.set("chapter-1", {"chapter": 1}, ttl_hours=1)
        _travel(monkeypatch, hours=2)

        entry = await cache.get_any("chapter-1")
        assert entry is not None
        assert entry.stale is True
        assert entry.value == {"chapter": 1}

    async def test_upsert_overwrites(self, cache: PersistentCache) -> None:
        await cache.set("chapter-1", {"version": 1}, ttl_hours=24)
        await cache.set("chapter-1", {"version": 2}, ttl_hours=24)
        entry = await cache.get("chapter-1")
        assert entry is not None
        assert entry.value == {"version": 2}

    async def test_undecodable_value_is_miss(
        self, cache: PersistentCache, store: SqliteStore
    ) -> None:
        await store.set_item("test-chapter-1", "{not json")
        assert await cache.get("chapter-1") is None
        assert await cache.get_any("chapter-1") is None

    async def test_clear_only_touches_namespace(
        self, cache: PersistentCache, store: SqliteStore
    ) -> None:
        await cache.set("chapter-1", {"chapter": 1}, ttl_hours=24)
        await cache.set("chapter-2", {"chapter": 2}, ttl_hours=24)
        await store.set_item("other-app-key", "keep me")

        removed = await cache.clear()

        assert removed == 2
        assert await cache.get("chapter-1") is None
        assert await store.get_item("other-app-key") == "keep me"

    async def test_stats(self, cache: PersistentCache, store: SqliteStore) -> None:
        await cache.set("chapter-1", {"chapter": 1}, ttl_hours=24)
        await store.set_item("other-app-key", "ignored")

        items, size = await cache.stats()

        raw = await store.get_item("test-chapter-1")
        assert raw is not None
        assert items == 1
        assert size == len(raw.encode("utf-8"))


class _BrokenStore(InMemoryStore):
    async def get_item(self, key: str) -> str | None:
        raise StoreError("disk I/O error")

    async def set_item(self, key: str, value: str) -> None:
        raise StoreError("disk I/O error")

    async def keys(self, prefix: str = "") -> list[str]:
        raise StoreError("disk I/O error")


class TestPersistentCacheStoreFailures:
    async def test_read_failure_returns_none(self) -> None:
        """A store read error is a cache miss, not an exception."""
        cache = PersistentCache(_BrokenStore())
        assert await cache.get("chapter-1") is None
        assert await cache.get_any("chapter-1") is None

    async def test_write_failure_does_not_raise(self) -> None:
        cache = PersistentCache(_BrokenStore())
        await cache.set("chapter-1", {"chapter": 1}, ttl_hours=24)

    async def test_clear_and_stats_failures_do_not_raise(self) -> None:
        cache = PersistentCache(_BrokenStore())
        assert await cache.clear() == 0
        assert await cache.stats() == (0, 0)
