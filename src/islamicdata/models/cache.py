from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel

from islamicdata.models.content import Verse  # noqa: TCH001


class CacheEntry(BaseModel):
    """A persistent cache envelope, decoded."""

    key: str  # Namespaced store key
    value: Any  # Raw JSON document
    stored_at: datetime
    expires_at: datetime | None  # None means no TTL
    stale: bool = False


class CacheEnvelope(BaseModel):
    """Wire format of a stored value: ``{data, expires, cached}`` in epoch millis."""

    data: Any
    expires: int | None = None
    cached: int


class ContentResult(BaseModel):
    """A loaded document plus where it came from."""

    key: str
    document: Any  # One of the models in islamicdata.models.content
    source: Literal["memory", "persistent", "network", "fallback"]
    cached_at: datetime | None = None
    stale: bool = False

    @property
    def cached(self) -> bool:
        return self.source != "network"


class SearchMatch(BaseModel):
    """Single result returned by search_verses."""

    chapter: int
    verse: int
    arabic: str
    translation: str  # The text the query matched in
    transliteration: str | None = None

    @classmethod
    def from_verse(cls, chapter: int, verse: Verse, text: str) -> SearchMatch:
        return cls(
            chapter=chapter,
            verse=verse.verse,
            arabic=verse.arabic,
            translation=text,
            transliteration=verse.transliteration,
        )


class CacheStats(BaseModel):
    memory_items: int
    storage_items: int
    storage_bytes: int
