from __future__ import annotations

from islamicdata.models.cache import (
    CacheEntry,
    CacheEnvelope,
    CacheStats,
    ContentResult,
    SearchMatch,
)
from islamicdata.models.content import (
    Chapter,
    ChapterSummary,
    CategorySummary,
    CollectionSummary,
    Dua,
    DuaCategory,
    DuasIndex,
    Hadith,
    HadithBook,
    HadithCollection,
    HadithIndex,
    HadithText,
    IndexInfo,
    LocalizedName,
    Metadata,
    QuranIndex,
    Verse,
)
from islamicdata.models.identifiers import (
    BookRef,
    CategoryRef,
    ChapterRef,
    CollectionRef,
    ContentRef,
    IndexRef,
    MetadataRef,
    SearchQuery,
    VerseQuery,
)

__all__ = [
    # identifiers
    "MetadataRef",
    "IndexRef",
    "ChapterRef",
    "CollectionRef",
    "BookRef",
    "CategoryRef",
    "ContentRef",
    "VerseQuery",
    "SearchQuery",
    # documents
    "Metadata",
    "IndexInfo",
    "LocalizedName",
    "QuranIndex",
    "ChapterSummary",
    "HadithIndex",
    "CollectionSummary",
    "DuasIndex",
    "CategorySummary",
    "Chapter",
    "Verse",
    "HadithCollection",
    "HadithBook",
    "Hadith",
    "HadithText",
    "DuaCategory",
    "Dua",
    # cache
    "CacheEntry",
    "CacheEnvelope",
    "ContentResult",
    "SearchMatch",
    "CacheStats",
]
