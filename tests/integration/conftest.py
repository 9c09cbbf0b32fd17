"""Integration test fixtures.

Provides Settings pointing at a temporary SQLite database and a fake CDN
(respx router) serving a small but complete content tree.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import httpx
import pytest
import respx

from islamicdata.config import Settings

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

BASE_URL = "https://cdn.example.com/islamic-data"


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(
        cdn={"base_url": BASE_URL},
        cache={"db_path": str(tmp_path / "nested" / "cache.db")},
        preload={"essential": [1], "popular": [2], "popular_delay_seconds": 0.01},
    )


@pytest.fixture()
def cdn(
    quran_index: dict[str, Any],
    fatihah: dict[str, Any],
    baqarah: dict[str, Any],
    bukhari_collection: dict[str, Any],
    bukhari_books: dict[int, dict[str, Any]],
    morning_duas: dict[str, Any],
) -> Iterator[respx.MockRouter]:
    """Fake CDN. Routes are named after their cache key for call counting."""
    with respx.mock(base_url=BASE_URL, assert_all_called=False) as router:
        router.get("/metadata.json", name="metadata").mock(
            return_value=httpx.Response(200, json={"version": "1.0.0"})
        )
        router.get("/data/quran/index.json", name="quran-index").mock(
            return_value=httpx.Response(200, json=quran_index)
        )
        router.get("/data/quran/chapters/001.json", name="chapter-1").mock(
            return_value=httpx.Response(200, json=fatihah)
        )
        router.get("/data/quran/chapters/002.json", name="chapter-2").mock(
            return_value=httpx.Response(200, json=baqarah)
        )
        router.get(
            "/data/hadith/collections/bukhari/collection.json", name="collection_bukhari"
        ).mock(return_value=httpx.Response(200, json=bukhari_collection))
        for number, book in bukhari_books.items():
            router.get(
                f"/data/hadith/collections/bukhari/book-{number:03d}.json",
                name=f"book_bukhari_{number}",
            ).mock(return_value=httpx.Response(200, json=book))
        router.get("/data/duas/categories/morning.json", name="duas_morning").mock(
            return_value=httpx.Response(200, json=morning_duas)
        )
        # Anything else on the CDN is a 404
        router.route(name="fallthrough").mock(return_value=httpx.Response(404))
        yield router
