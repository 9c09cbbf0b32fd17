"""ContentClient: the single entry point for reading CDN content.

Every accessor resolves a content identifier through the same chain:

  1. memory cache (process lifetime, decoded documents)
  2. persistent cache (raw JSON with a per-class TTL)
  3. network (write-through to both caches on success)
  4. on network failure, the persistent entry regardless of expiry

Identifiers are validated before any I/O. Documents are validated against
their model at the deserialization boundary.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import TYPE_CHECKING, Any, TypeVar

import aiosqlite
import structlog
from pydantic import BaseModel, ValidationError

from islamicdata.cache import MemoryCache, PersistentCache
from islamicdata.config import Settings
from islamicdata.errors import (
    ContentError,
    FetchFailedError,
    InvalidArgumentError,
    NotFoundError,
    SchemaError,
    UnavailableError,
)
from islamicdata.fetcher import Fetcher, build_http_client
from islamicdata.models.cache import CacheStats, ContentResult, SearchMatch
from islamicdata.models.content import (
    Chapter,
    DuaCategory,
    DuasIndex,
    HadithBook,
    HadithCollection,
    HadithIndex,
    Metadata,
    QuranIndex,
)
from islamicdata.models.identifiers import (
    BookRef,
    CategoryRef,
    ChapterRef,
    CollectionRef,
    IndexRef,
    MetadataRef,
    SearchQuery,
    VerseQuery,
)
from islamicdata.preloader import Preloader
from islamicdata.store import SqliteStore

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    import httpx

    from islamicdata.models.cache import CacheEntry
    from islamicdata.models.content import ContentIndex, Hadith, Verse
    from islamicdata.models.identifiers import ContentRef

log = structlog.get_logger()

T = TypeVar("T")

_INDEX_MODELS: dict[str, type[BaseModel]] = {
    "quran": QuranIndex,
    "hadith": HadithIndex,
    "duas": DuasIndex,
}


def _document_model(ref: ContentRef) -> type[BaseModel]:
    match ref:
        case MetadataRef():
            return Metadata
        case IndexRef(content_type=content_type):
            return _INDEX_MODELS[content_type]
        case ChapterRef():
            return Chapter
        case CollectionRef():
            return HadithCollection
        case BookRef():
            return HadithBook
        case CategoryRef():
            return DuaCategory
    raise TypeError(f"Unknown content identifier: {ref!r}")


def _validated(factory: Callable[..., T], **kwargs: Any) -> T:
    """Build an input model, turning validation failures into InvalidArgumentError."""
    try:
        return factory(**kwargs)
    except ValidationError as exc:
        message = exc.errors()[0]["msg"].removeprefix("Value error, ")
        raise InvalidArgumentError(message) from exc
    except ValueError as exc:
        raise InvalidArgumentError(str(exc)) from exc


class ContentClient:
    """Fetch-with-cache client for Quran, hadith and dua documents."""

    def __init__(
        self,
        fetcher: Fetcher,
        cache: PersistentCache,
        settings: Settings | None = None,
        *,
        memory: MemoryCache | None = None,
        http_client: httpx.AsyncClient | None = None,
        db: aiosqlite.Connection | None = None,
    ) -> None:
        self._fetcher = fetcher
        self._cache = cache
        self._settings = settings or Settings()
        self._memory = memory or MemoryCache()
        # Resources this client opened itself and must close
        self._http_client = http_client
        self._db = db
        self._inflight: dict[str, asyncio.Future[ContentResult]] = {}
        self._preloader = Preloader(self, self._settings.preload)
        self.index: QuranIndex | None = None

    @classmethod
    async def open(cls, settings: Settings | None = None) -> ContentClient:
        """Build a client backed by SQLite at ``settings.cache.db_path``."""
        settings = settings or Settings()
        db_path = Path(settings.cache.db_path).expanduser()
        db_path.parent.mkdir(parents=True, exist_ok=True)

        db = await aiosqlite.connect(db_path)
        store = SqliteStore(db)
        await store.init_db()

        http_client = build_http_client(settings.cdn)
        return cls(
            Fetcher(http_client, settings.cdn),
            PersistentCache(store, settings.cache.namespace),
            settings,
            http_client=http_client,
            db=db,
        )

    async def close(self) -> None:
        """Cancel pending preload work and release owned resources."""
        await self._preloader.cancel()
        await self._cancel_inflight()
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None
        if self._db is not None:
            await self._db.close()
            self._db = None

    async def _cancel_inflight(self) -> None:
        # Shared requests outlive their cancelled callers; stop them before
        # the http client and the store go away
        pending = list(self._inflight.values())
        for future in pending:
            future.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
            log.info("inflight_cancelled", count=len(pending))

    async def __aenter__(self) -> ContentClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    @property
    def preloader(self) -> Preloader:
        return self._preloader

    # ------------------------------------------------------------------
    # Startup
    # ------------------------------------------------------------------

    async def initialize(self) -> bool:
        """Load the Quran index and warm the cache.

        The essential chapters are loaded before this returns; the popular
        chapters load in the background after a delay. Preload failures are
        logged, never raised. Returns False only when the index is unavailable.
        """
        log.info("client_initializing", base_url=self._fetcher.base_url)
        try:
            self.index = await self.get_index("quran")
        except ContentError as exc:
            log.error("client_initialize_failed", code=exc.code, error=exc.message)
            return False

        if self._settings.preload.enabled:
            await self._preloader.preload_essential()
            self._preloader.schedule_popular()

        log.info("client_initialized")
        return True

    # ------------------------------------------------------------------
    # Generic load
    # ------------------------------------------------------------------

    async def load(self, ref: ContentRef) -> ContentResult:
        """Resolve ``ref`` through memory, persistent store and network.

        Concurrent loads of the same uncached key share one request.
        """
        key = ref.cache_key
        document = self._memory.get(key)
        if document is not None:
            return ContentResult(key=key, document=document, source="memory")

        future = self._inflight.get(key)
        if future is None:
            future = asyncio.ensure_future(self._load_uncached(ref))
            self._inflight[key] = future

            def _forget(done: asyncio.Future[ContentResult]) -> None:
                if self._inflight.get(key) is done:
                    del self._inflight[key]

            future.add_done_callback(_forget)

        # One caller's cancellation must not cancel the shared request
        return await asyncio.shield(future)

    async def _load_uncached(self, ref: ContentRef) -> ContentResult:
        key = ref.cache_key
        model = _document_model(ref)

        # An expired entry is a miss here but is kept as the network fallback
        cached = await self._read_cached(key, model)
        if cached is not None and self._settings.cache.offline_first and not cached[0].stale:
            entry, document = cached
            self._memory.set(key, document)
            log.debug("content_loaded", key=key, source="persistent")
            return ContentResult(
                key=key, document=document, source="persistent", cached_at=entry.stored_at
            )

        try:
            data = await self._fetcher.fetch_json(ref.path)
        except FetchFailedError as exc:
            return self._fallback(ref, cached, exc)

        try:
            document = model.model_validate(data)
        except ValidationError as exc:
            raise SchemaError(
                f"{ref.path} does not match the {model.__name__} schema: "
                f"{exc.error_count()} validation error(s)"
            ) from exc

        self._memory.set(key, document)
        await self._cache.set(key, data, ttl_hours=self._settings.cache.ttl_hours(ref.resource_class))
        log.info("content_loaded", key=key, source="network")
        return ContentResult(key=key, document=document, source="network")

    def _fallback(
        self,
        ref: ContentRef,
        cached: tuple[CacheEntry, BaseModel] | None,
        exc: FetchFailedError,
    ) -> ContentResult:
        key = ref.cache_key
        if cached is not None:
            entry, document = cached
            log.warning("content_fallback", key=key, stale=entry.stale, error=exc.message)
            self._memory.set(key, document)
            return ContentResult(
                key=key,
                document=document,
                source="fallback",
                cached_at=entry.stored_at,
                stale=entry.stale,
            )

        if exc.status_code == 404:
            raise NotFoundError(f"{ref.path} was not found") from exc
        raise UnavailableError(
            f"{ref.path} is unavailable and not cached: {exc.message}",
            suggestion="Retry when the network is reachable.",
        ) from exc

    async def _read_cached(
        self, key: str, model: type[BaseModel]
    ) -> tuple[CacheEntry, BaseModel] | None:
        """Persistent entry and its decoded document, ignoring expiry.

        An entry that no longer fits its model is dropped from the store.
        """
        entry = await self._cache.get_any(key)
        if entry is None:
            return None
        try:
            return entry, model.model_validate(entry.value)
        except ValidationError:
            log.warning("cache_schema_mismatch", key=entry.key, model=model.__name__, exc_info=True)
            await self._cache.remove(key)
            return None

    # ------------------------------------------------------------------
    # Typed accessors
    # ------------------------------------------------------------------

    async def get_metadata(self) -> Metadata:
        return (await self.load(MetadataRef())).document

    async def get_index(self, content_type: str) -> ContentIndex:
        ref = _validated(IndexRef, content_type=content_type)
        return (await self.load(ref)).document

    async def get_chapter(self, number: int) -> Chapter:
        ref = _validated(ChapterRef, number=number)
        return (await self.load(ref)).document

    async def get_chapters(self, numbers: Iterable[int]) -> list[Chapter]:
        """Load several chapters concurrently; failures are logged and skipped."""
        numbers = list(numbers)
        results = await asyncio.gather(
            *(self.get_chapter(n) for n in numbers), return_exceptions=True
        )

        chapters: list[Chapter] = []
        failed: list[int] = []
        for number, result in zip(numbers, results, strict=True):
            if isinstance(result, ContentError):
                log.warning("chapter_load_failed", chapter=number, code=result.code)
                failed.append(number)
            elif isinstance(result, BaseException):
                raise result
            else:
                chapters.append(result)

        log.info("chapters_loaded", loaded=len(chapters), requested=len(numbers), failed=failed)
        return chapters

    async def get_collection(self, collection_id: str) -> HadithCollection:
        ref = _validated(CollectionRef, collection_id=collection_id)
        return (await self.load(ref)).document

    async def get_book(self, collection_id: str, book_number: int) -> HadithBook:
        ref = _validated(BookRef, collection_id=collection_id, book_number=book_number)
        collection = self._memory.get(CollectionRef(collection_id=ref.collection_id).cache_key)
        if isinstance(collection, HadithCollection) and ref.book_number > collection.total_books:
            raise InvalidArgumentError(
                f"Book number must be between 1 and {collection.total_books} "
                f"for {ref.collection_id}."
            )
        return (await self.load(ref)).document

    async def get_category(self, category_id: str) -> DuaCategory:
        ref = _validated(CategoryRef, category_id=category_id)
        return (await self.load(ref)).document

    async def get_verse(self, chapter: int, verse: int) -> Verse:
        query = _validated(VerseQuery, chapter=chapter, verse=verse)
        document = await self.get_chapter(query.chapter)
        found = document.find_verse(query.verse)
        if found is None:
            raise NotFoundError(f"Verse {query.chapter}:{query.verse} not found")
        return found

    async def get_verse_by_reference(self, reference: str) -> Verse:
        """Look up a verse by ``"chapter:verse"`` reference, e.g. ``"2:255"``."""
        query = _validated(VerseQuery.parse, reference=reference)
        return await self.get_verse(query.chapter, query.verse)

    async def find_hadith(self, collection_id: str, hadith_number: int) -> Hadith:
        """Scan a collection's books in order and return the first matching hadith.

        Books missing from the CDN are skipped. Raises NotFoundError once every
        book has been scanned without a match.
        """
        if hadith_number < 1:
            raise InvalidArgumentError("hadith number must be >= 1")
        collection = await self.get_collection(collection_id)

        for book_number in range(1, collection.total_books + 1):
            try:
                book = await self.get_book(collection_id, book_number)
            except NotFoundError:
                log.debug("hadith_book_missing", collection=collection_id, book=book_number)
                continue
            found = book.find_hadith(hadith_number)
            if found is not None:
                return found

        raise NotFoundError(
            f"Hadith {hadith_number} not found in {collection_id} "
            f"after scanning {collection.total_books} books"
        )

    def search_verses(
        self,
        query: str,
        language: str = "en",
        edition: str | None = None,
        limit: int | None = None,
    ) -> list[SearchMatch]:
        """Case-insensitive substring search over chapters already in memory.

        Matches against the translation in ``language`` (or the Arabic text
        when a verse has none). Nothing is fetched. Results are ordered by
        chapter, then verse, and capped at ``limit``.
        """
        params = _validated(
            SearchQuery,
            query=query,
            language=language,
            edition=edition,
            limit=limit if limit is not None else self._settings.search.limit,
        )
        needle = params.query.lower()

        chapters = sorted(
            (doc for _, doc in self._memory.items() if isinstance(doc, Chapter)),
            key=lambda c: c.chapter,
        )
        matches: list[SearchMatch] = []
        for chapter in chapters:
            for verse in sorted(chapter.content, key=lambda v: v.verse):
                text = verse.translation_for(params.language, params.edition)
                if text is None:
                    text = verse.arabic
                if needle in text.lower():
                    matches.append(SearchMatch.from_verse(chapter.chapter, verse, text))
                    if len(matches) >= params.limit:
                        log.debug("search_complete", query=params.query, results=len(matches))
                        return matches

        log.debug("search_complete", query=params.query, results=len(matches))
        return matches

    # ------------------------------------------------------------------
    # Cache management
    # ------------------------------------------------------------------

    async def clear_cache(self) -> None:
        self._memory.clear()
        await self._cache.clear()

    async def cache_stats(self) -> CacheStats:
        items, size = await self._cache.stats()
        return CacheStats(memory_items=len(self._memory), storage_items=items, storage_bytes=size)

    def is_commonly_read(self, chapter: int) -> bool:
        preload = self._settings.preload
        return chapter in preload.essential or chapter in preload.popular

    def recommended_chapters(self) -> dict[str, Any]:
        return {
            "essential": list(self._settings.preload.essential),
            "popular": list(self._settings.preload.popular),
            "description": (
                "Start with essential chapters (Al-Fatihah, short surahs), "
                "then explore popular ones"
            ),
        }
