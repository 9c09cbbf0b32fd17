"""Background cache warming.

Two waves: the essential chapters are awaited during client start-up, the
popular chapters load in a background task after a delay so they do not
compete with the first user reads. Nothing here raises to the caller.
"""

from __future__ import annotations

import asyncio
import contextlib
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from collections.abc import Sequence

    from islamicdata.client import ContentClient
    from islamicdata.config import PreloadSettings
    from islamicdata.models.content import Chapter

log = structlog.get_logger()


class Preloader:
    def __init__(self, client: ContentClient, settings: PreloadSettings) -> None:
        self._client = client
        self._settings = settings
        self._cancelled = asyncio.Event()
        self._task: asyncio.Task[list[Chapter]] | None = None

    @property
    def task(self) -> asyncio.Task[list[Chapter]] | None:
        return self._task

    async def preload_essential(self) -> list[Chapter]:
        return await self._load_wave("essential", self._settings.essential)

    def schedule_popular(self) -> asyncio.Task[list[Chapter]]:
        """Start the delayed popular wave. Calling again while it runs is a no-op."""
        if self._task is not None and not self._task.done():
            return self._task
        self._cancelled.clear()
        self._task = asyncio.create_task(self._run_popular(), name="islamicdata-preload-popular")
        return self._task

    async def cancel(self) -> None:
        """Stop pending background work and wait for it to unwind."""
        self._cancelled.set()
        if self._task is None or self._task.done():
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        log.info("preload_cancelled", wave="popular")

    async def _run_popular(self) -> list[Chapter]:
        try:
            await asyncio.wait_for(
                self._cancelled.wait(), timeout=self._settings.popular_delay_seconds
            )
        except TimeoutError:
            pass
        else:
            log.info("preload_cancelled", wave="popular")
            return []
        return await self._load_wave("popular", self._settings.popular)

    async def _load_wave(self, wave: str, chapters: Sequence[int]) -> list[Chapter]:
        log.info("preload_started", wave=wave, chapters=len(chapters))
        try:
            loaded = await self._client.get_chapters(chapters)
        except Exception:
            # Background warming must never take the host down
            log.warning("preload_failed", wave=wave, exc_info=True)
            return []
        log.info("preload_complete", wave=wave, loaded=len(loaded), requested=len(chapters))
        return loaded
