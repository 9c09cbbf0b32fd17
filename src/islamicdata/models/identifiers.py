"""Content identifiers.

Each identifier knows its cache key, its path under the CDN base URL, and the
resource class that picks its TTL. Validation happens on construction, so an
out-of-range identifier never reaches the network.
"""

from __future__ import annotations

import re
from typing import ClassVar, Literal

from pydantic import BaseModel, ConfigDict, field_validator

ResourceClass = Literal["metadata", "index", "content"]
ContentType = Literal["quran", "hadith", "duas"]

TOTAL_CHAPTERS = 114

_SLUG_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_-]*$")


def _validate_slug(v: str, what: str) -> str:
    v = v.strip()
    if not _SLUG_RE.match(v):
        raise ValueError(f"Invalid {what}: {v!r}")
    return v


class MetadataRef(BaseModel):
    model_config = ConfigDict(frozen=True)

    resource_class: ClassVar[ResourceClass] = "metadata"

    @property
    def cache_key(self) -> str:
        return "metadata"

    @property
    def path(self) -> str:
        return "metadata.json"


class IndexRef(BaseModel):
    model_config = ConfigDict(frozen=True)

    content_type: ContentType
    resource_class: ClassVar[ResourceClass] = "index"

    @property
    def cache_key(self) -> str:
        return f"{self.content_type}-index"

    @property
    def path(self) -> str:
        return f"data/{self.content_type}/index.json"


class ChapterRef(BaseModel):
    model_config = ConfigDict(frozen=True)

    number: int
    resource_class: ClassVar[ResourceClass] = "content"

    @field_validator("number")
    @classmethod
    def validate_number(cls, v: int) -> int:
        if not 1 <= v <= TOTAL_CHAPTERS:
            raise ValueError(f"Invalid chapter number {v}. Must be between 1 and 114.")
        return v

    @property
    def cache_key(self) -> str:
        return f"chapter-{self.number}"

    @property
    def path(self) -> str:
        return f"data/quran/chapters/{self.number:03d}.json"


class CollectionRef(BaseModel):
    model_config = ConfigDict(frozen=True)

    collection_id: str
    resource_class: ClassVar[ResourceClass] = "content"

    @field_validator("collection_id")
    @classmethod
    def validate_collection_id(cls, v: str) -> str:
        return _validate_slug(v, "collection ID")

    @property
    def cache_key(self) -> str:
        return f"collection_{self.collection_id}"

    @property
    def path(self) -> str:
        return f"data/hadith/collections/{self.collection_id}/collection.json"


class BookRef(BaseModel):
    model_config = ConfigDict(frozen=True)

    collection_id: str
    book_number: int
    resource_class: ClassVar[ResourceClass] = "content"

    @field_validator("collection_id")
    @classmethod
    def validate_collection_id(cls, v: str) -> str:
        return _validate_slug(v, "collection ID")

    @field_validator("book_number")
    @classmethod
    def validate_book_number(cls, v: int) -> int:
        if v < 1:
            raise ValueError("book number must be >= 1")
        return v

    @property
    def cache_key(self) -> str:
        return f"book_{self.collection_id}_{self.book_number}"

    @property
    def path(self) -> str:
        return f"data/hadith/collections/{self.collection_id}/book-{self.book_number:03d}.json"


class CategoryRef(BaseModel):
    model_config = ConfigDict(frozen=True)

    category_id: str
    resource_class: ClassVar[ResourceClass] = "content"

    @field_validator("category_id")
    @classmethod
    def validate_category_id(cls, v: str) -> str:
        return _validate_slug(v, "category ID")

    @property
    def cache_key(self) -> str:
        return f"duas_{self.category_id}"

    @property
    def path(self) -> str:
        return f"data/duas/categories/{self.category_id}.json"


ContentRef = MetadataRef | IndexRef | ChapterRef | CollectionRef | BookRef | CategoryRef


class VerseQuery(BaseModel):
    chapter: int
    verse: int

    @field_validator("chapter")
    @classmethod
    def validate_chapter(cls, v: int) -> int:
        if not 1 <= v <= TOTAL_CHAPTERS:
            raise ValueError(f"Invalid chapter number {v}. Must be between 1 and 114.")
        return v

    @field_validator("verse")
    @classmethod
    def validate_verse(cls, v: int) -> int:
        if v < 1:
            raise ValueError("verse number must be >= 1")
        return v

    @classmethod
    def parse(cls, reference: str) -> VerseQuery:
        """Parse a ``"chapter:verse"`` reference such as ``"2:255"``."""
        match = re.fullmatch(r"\s*(\d+)\s*:\s*(\d+)\s*", reference)
        if match is None:
            raise ValueError(
                'Invalid verse reference format. Use "chapter:verse" (e.g., "2:255")'
            )
        return cls(chapter=int(match.group(1)), verse=int(match.group(2)))


class SearchQuery(BaseModel):
    query: str
    language: str = "en"
    edition: str | None = None
    limit: int = 50

    @field_validator("query")
    @classmethod
    def validate_query(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("query must not be empty")
        if len(v) > 500:
            raise ValueError("query must not exceed 500 characters")
        return v

    @field_validator("language")
    @classmethod
    def validate_language(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("language must not be empty")
        return v

    @field_validator("limit")
    @classmethod
    def validate_limit(cls, v: int) -> int:
        if v < 1:
            raise ValueError("limit must be >= 1")
        return v
