"""Shared sample documents, shaped like the files published on the CDN."""

from __future__ import annotations

from typing import Any

import pytest


def chapter_doc(number: int, verses: dict[int, str], name: str = "") -> dict[str, Any]:
    return {
        "chapter": number,
        "name": {
            "arabic": f"سورة {number}",
            "transliteration": name or f"Chapter {number}",
            "translation": name or f"Chapter {number}",
        },
        "revelation": "meccan",
        "verses": len(verses),
        "content": [
            {
                "verse": verse,
                "arabic": f"آية {verse}",
                "transliteration": f"ayah {verse}",
                "translations": {"en.sahih": text},
                "tafsir": {},
            }
            for verse, text in verses.items()
        ],
        "metadata": {"priority": 1, "commonlyRead": True},
    }


def hadith_book_doc(collection: str, book: int, numbers: list[int]) -> dict[str, Any]:
    return {
        "collection": collection,
        "book": book,
        "name": {
            "arabic": "كتاب",
            "transliteration": f"kitab {book}",
            "translation": f"Book {book}",
        },
        "totalHadith": len(numbers),
        "hadithNumberRange": {"first": min(numbers), "last": max(numbers)},
        "content": [
            {
                "hadithNumber": n,
                "arabicNumber": n,
                "book": book,
                "hadithInBook": i + 1,
                "text": {"arabic": f"حديث {n}", "translations": {"en": f"Hadith {n} text"}},
                "grades": [],
                "reference": {"collection": collection, "book": book, "hadith": i + 1},
            }
            for i, n in enumerate(numbers)
        ],
    }


@pytest.fixture()
def fatihah() -> dict[str, Any]:
    return chapter_doc(
        1,
        {
            1: "In the name of Allah, the Entirely Merciful, the Especially Merciful.",
            2: "[All] praise is [due] to Allah, Lord of the worlds -",
            5: "It is You we worship and You we ask for help.",
        },
        name="Al-Fatihah",
    )


@pytest.fixture()
def baqarah() -> dict[str, Any]:
    return chapter_doc(
        2,
        {
            45: "And seek help through Patience and prayer, and indeed, it is difficult",
            153: "O you who have believed, seek help through patience and prayer.",
            255: "Allah - there is no deity except Him, the Ever-Living, the Sustainer of existence.",
        },
        name="Al-Baqarah",
    )


@pytest.fixture()
def quran_index() -> dict[str, Any]:
    return {
        "quran": {
            "version": "1.0.0",
            "lastUpdated": "2024-01-01T00:00:00.000Z",
            "totalChapters": 2,
        },
        "chapters": [
            {"chapter": 1, "name": {"transliteration": "Al-Fatihah"}, "verses": 7},
            {"chapter": 2, "name": {"transliteration": "Al-Baqarah"}, "verses": 286},
        ],
        "loadingStrategy": {
            "priority1": [1, 67, 112, 113, 114],
            "priority2": [18, 19, 20, 36, 48, 55, 56, 62, 78, 97],
            "priority3": "remaining",
        },
    }


@pytest.fixture()
def bukhari_collection() -> dict[str, Any]:
    return {
        "collection": "bukhari",
        "name": {
            "arabic": "صحيح البخاري",
            "transliteration": "Sahih al-Bukhari",
            "translation": "The Authentic Collection of al-Bukhari",
        },
        "authenticity": "sahih",
        "totalBooks": 3,
        "totalHadith": 6,
    }


@pytest.fixture()
def bukhari_books() -> dict[int, dict[str, Any]]:
    return {
        1: hadith_book_doc("bukhari", 1, [1, 2, 3]),
        2: hadith_book_doc("bukhari", 2, [4, 5]),
        3: hadith_book_doc("bukhari", 3, [6]),
    }


@pytest.fixture()
def morning_duas() -> dict[str, Any]:
    return {
        "category": "morning",
        "name": {"transliteration": "Adhkar as-Sabah", "translation": "Morning remembrance"},
        "totalDuas": 1,
        "content": [
            {
                "id": "morning-01",
                "occasion": "morning",
                "arabic": "أَصْبَحْنَا وَأَصْبَحَ الْمُلْكُ لِلَّهِ",
                "transliteration": "Asbahna wa asbahal-mulku lillah",
                "translation": {"en": "We have reached the morning and the dominion belongs to Allah"},
                "repetitions": 1,
            }
        ],
    }
