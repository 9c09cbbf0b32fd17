"""Caching client for the Islamic reference data CDN."""

from __future__ import annotations

from islamicdata.cache import MemoryCache, PersistentCache
from islamicdata.client import ContentClient
from islamicdata.config import Settings
from islamicdata.errors import (
    ContentError,
    ErrorCode,
    FetchFailedError,
    InvalidArgumentError,
    NotFoundError,
    SchemaError,
    UnavailableError,
)
from islamicdata.fetcher import Fetcher, build_http_client
from islamicdata.logging_config import configure_logging
from islamicdata.store import InMemoryStore, KeyValueStore, SqliteStore, StoreError

__version__ = "0.1.0"

__all__ = [
    "ContentClient",
    "Settings",
    "configure_logging",
    # caching
    "MemoryCache",
    "PersistentCache",
    "KeyValueStore",
    "InMemoryStore",
    "SqliteStore",
    "StoreError",
    # network
    "Fetcher",
    "build_http_client",
    # errors
    "ErrorCode",
    "ContentError",
    "InvalidArgumentError",
    "NotFoundError",
    "FetchFailedError",
    "UnavailableError",
    "SchemaError",
]
