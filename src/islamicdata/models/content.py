"""Typed resource documents.

Field names are snake_case in Python and camelCase on the wire. Documents are
self-describing, so fields this package does not use are kept as extras and
survive a round trip through the persistent cache.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class Document(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )


class LocalizedName(Document):
    arabic: str = ""
    transliteration: str = ""
    translation: str = ""


# ---------------------------------------------------------------------------
# Indexes
# ---------------------------------------------------------------------------


class IndexInfo(Document):
    version: str
    last_updated: str | None = None


class LoadingStrategy(Document):
    priority1: list[int | str] = []
    priority2: list[int | str] = []
    priority3: str | list[int | str] | None = None


class Metadata(Document):
    """Root ``metadata.json``: repository-level version information."""

    version: str | None = None
    last_updated: str | None = None


class ChapterSummary(Document):
    chapter: int
    name: LocalizedName | str = ""
    revelation: str | None = None
    verses: int | None = None


class QuranIndex(Document):
    quran: IndexInfo
    chapters: list[ChapterSummary] = []
    loading_strategy: LoadingStrategy | None = None


class CollectionSummary(Document):
    name: str
    title: LocalizedName | str = ""
    total_books: int | None = None
    total_hadith: int | None = None
    priority: int | None = None


class HadithIndex(Document):
    hadith: IndexInfo
    collections: list[CollectionSummary] = []
    loading_strategy: LoadingStrategy | None = None


class CategorySummary(Document):
    id: str
    name: LocalizedName | str = ""
    total_duas: int | None = None
    priority: int | None = None
    occasions: list[str] = []


class DuasIndex(Document):
    duas: IndexInfo
    categories: list[CategorySummary] = []
    loading_strategy: LoadingStrategy | None = None


ContentIndex = QuranIndex | HadithIndex | DuasIndex


# ---------------------------------------------------------------------------
# Quran
# ---------------------------------------------------------------------------


class Verse(Document):
    verse: int
    arabic: str = ""
    transliteration: str | None = None
    translations: dict[str, str] = {}
    tafsir: dict[str, Any] = {}

    def translation_for(self, language: str, edition: str | None = None) -> str | None:
        """Return the translation text for ``language``, or None.

        Translation keys are edition tags such as ``en.sahih``. With an
        explicit edition only that key matches; otherwise the first key equal
        to ``language`` or prefixed by ``language.`` wins.
        """
        if edition is not None:
            return self.translations.get(f"{language}.{edition}")
        for key, text in self.translations.items():
            if key == language or key.startswith(f"{language}."):
                return text
        return None


class Chapter(Document):
    chapter: int
    name: LocalizedName | str = ""
    revelation: str | None = None
    verses: int | None = None
    content: list[Verse]

    def find_verse(self, number: int) -> Verse | None:
        return next((v for v in self.content if v.verse == number), None)

    @property
    def display_name(self) -> str:
        if isinstance(self.name, str):
            return self.name
        return self.name.transliteration or self.name.translation


# ---------------------------------------------------------------------------
# Hadith
# ---------------------------------------------------------------------------


class HadithText(Document):
    arabic: str = ""
    translations: dict[str, str] = {}


class Hadith(Document):
    hadith_number: int | float
    arabic_number: int | float | None = None
    book: int | None = None
    hadith_in_book: int | None = None
    text: HadithText = HadithText()
    grades: list[Any] = []


class HadithCollection(Document):
    collection: str
    name: LocalizedName | str = ""
    compiler: dict[str, Any] | None = None
    authenticity: str | None = None
    total_books: int
    total_hadith: int | None = None


class HadithBook(Document):
    collection: str
    book: int
    name: LocalizedName | str = ""
    total_hadith: int | None = None
    content: list[Hadith]

    def find_hadith(self, hadith_number: int) -> Hadith | None:
        return next((h for h in self.content if h.hadith_number == hadith_number), None)


# ---------------------------------------------------------------------------
# Duas
# ---------------------------------------------------------------------------


class Dua(Document):
    id: str | None = None
    occasion: str
    name: LocalizedName | str = ""
    arabic: str = ""
    transliteration: str = ""
    translation: dict[str, str] = {}


class DuaCategory(Document):
    category: str
    name: LocalizedName | str = ""
    total_duas: int | None = None
    content: list[Dua]


ResourceDocument = Metadata | ContentIndex | Chapter | HadithCollection | HadithBook | DuaCategory
