"""Two-level document cache: in-process memory plus a persistent store.

All persistent cache operations catch ``StoreError`` internally and degrade
gracefully: read failures return ``None`` (treated as cache miss by callers),
write failures are logged and ignored (fetched content is still returned).
A stored value that no longer decodes is also treated as a miss. Errors are
logged with ``exc_info=True`` so they remain observable via stderr.
"""

from __future__ import annotations

import time
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import structlog
from pydantic import ValidationError

from islamicdata.models.cache import CacheEntry, CacheEnvelope
from islamicdata.store import StoreError

if TYPE_CHECKING:
    from collections.abc import Iterator

    from islamicdata.store import KeyValueStore

log = structlog.get_logger()

_MS_PER_HOUR = 60 * 60 * 1000


def _now_ms() -> int:
    return int(time.time() * 1000)


def _from_ms(ms: int) -> datetime:
    return datetime.fromtimestamp(ms / 1000, tz=UTC)


class MemoryCache:
    """Exact-match mapping from cache key to decoded document. No eviction."""

    def __init__(self) -> None:
        self._items: dict[str, Any] = {}

    def get(self, key: str) -> Any | None:
        return self._items.get(key)

    def set(self, key: str, value: Any) -> None:
        self._items[key] = value

    def clear(self) -> None:
        self._items.clear()

    def items(self) -> Iterator[tuple[str, Any]]:
        return iter(list(self._items.items()))

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def __len__(self) -> int:
        return len(self._items)


class PersistentCache:
    """Namespaced, TTL-aware envelope cache over a KeyValueStore."""

    def __init__(self, store: KeyValueStore, namespace: str = "islamic-data-") -> None:
        self._store = store
        self._namespace = namespace

    def _key(self, key: str) -> str:
        return f"{self._namespace}{key}"

    async def _read(self, key: str) -> CacheEntry | None:
        full_key = self._key(key)
        try:
            raw = await self._store.get_item(full_key)
        except StoreError:
            log.warning("cache_read_error", key=full_key, exc_info=True)
            return None
        if raw is None:
            return None

        try:
            envelope = CacheEnvelope.model_validate_json(raw)
        except ValidationError:
            log.warning("cache_decode_error", key=full_key, exc_info=True)
            return None

        expires_at = None if envelope.expires is None else _from_ms(envelope.expires)
        return CacheEntry(
            key=full_key,
            value=envelope.data,
            stored_at=_from_ms(envelope.cached),
            expires_at=expires_at,
            stale=envelope.expires is not None and _now_ms() >= envelope.expires,
        )

    async def get(self, key: str) -> CacheEntry | None:
        """Read a fresh entry. An expired entry is removed and reported as a miss."""
        entry = await self._read(key)
        if entry is None:
            return None
        if entry.stale:
            log.debug("cache_entry_expired", key=entry.key)
            await self.remove(key)
            return None
        return entry

    async def get_any(self, key: str) -> CacheEntry | None:
        """Read an entry regardless of expiry. ``stale`` tells the caller which it got."""
        return await self._read(key)

    async def set(self, key: str, data: Any, ttl_hours: float = 0) -> None:
        """Write an entry. ``ttl_hours <= 0`` stores it without expiry. Non-fatal on failure."""
        now = _now_ms()
        envelope = CacheEnvelope(
            data=data,
            expires=now + int(ttl_hours * _MS_PER_HOUR) if ttl_hours > 0 else None,
            cached=now,
        )
        full_key = self._key(key)
        try:
            await self._store.set_item(full_key, envelope.model_dump_json())
        except StoreError:
            log.warning("cache_write_error", key=full_key, exc_info=True)

    async def remove(self, key: str) -> None:
        full_key = self._key(key)
        try:
            await self._store.remove_item(full_key)
        except StoreError:
            log.warning("cache_delete_error", key=full_key, exc_info=True)

    async def clear(self) -> int:
        """Remove every entry under this namespace. Returns the number removed."""
        removed = 0
        try:
            for full_key in await self._store.keys(self._namespace):
                await self._store.remove_item(full_key)
                removed += 1
        except StoreError:
            log.warning("cache_clear_error", namespace=self._namespace, exc_info=True)
        log.info("cache_cleared", namespace=self._namespace, removed=removed)
        return removed

    async def stats(self) -> tuple[int, int]:
        """Return ``(items, bytes)`` stored under this namespace."""
        items = 0
        size = 0
        try:
            for full_key in await self._store.keys(self._namespace):
                raw = await self._store.get_item(full_key)
                if raw is None:
                    continue
                items += 1
                size += len(raw.encode("utf-8"))
        except StoreError:
            log.warning("cache_stats_error", namespace=self._namespace, exc_info=True)
        return items, size
