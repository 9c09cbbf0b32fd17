"""HTTP fetcher for the content CDN.

Turns a resource path into a GET against the configured base URL and
classifies the outcome. Success is HTTP 200 with a JSON body; every other
outcome raises ``FetchFailedError``. No retries happen at this layer.
"""

from __future__ import annotations

import json
from typing import Any

import httpx
import structlog

from islamicdata.config import CdnSettings
from islamicdata.errors import FetchFailedError

log = structlog.get_logger()

_REDIRECT_CODES = frozenset({301, 302, 303, 307, 308})


def build_http_client(settings: CdnSettings | None = None) -> httpx.AsyncClient:
    """Shared AsyncClient. Redirects are handled by Fetcher so they can be counted."""
    settings = settings or CdnSettings()
    return httpx.AsyncClient(
        follow_redirects=False,
        timeout=httpx.Timeout(settings.timeout_seconds),
        headers={"User-Agent": settings.user_agent, "Accept": "application/json"},
    )


def resource_url(base_url: str, path: str) -> str:
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"


class Fetcher:
    def __init__(self, client: httpx.AsyncClient, settings: CdnSettings | None = None) -> None:
        self._client = client
        self._settings = settings or CdnSettings()

    @property
    def base_url(self) -> str:
        return self._settings.base_url

    async def fetch_json(self, path: str) -> Any:
        """GET ``base_url/path`` and return the decoded JSON body."""
        url = resource_url(self._settings.base_url, path)
        response = await self._get(url)

        if response.status_code != 200:
            raise FetchFailedError(
                f"HTTP {response.status_code} fetching {url}",
                url=url,
                status_code=response.status_code,
                suggestion="Check the resource identifier and the CDN base URL.",
            )

        try:
            return json.loads(response.content)
        except ValueError as exc:
            raise FetchFailedError(
                f"Response from {url} is not valid JSON",
                url=url,
                status_code=response.status_code,
            ) from exc

    async def _get(self, url: str) -> httpx.Response:
        current = url
        for _ in range(self._settings.max_redirects + 1):
            try:
                response = await self._client.get(current)
            except httpx.HTTPError as exc:
                log.warning("fetch_transport_error", url=current, error=str(exc))
                raise FetchFailedError(
                    f"Network error fetching {current}: {exc}",
                    url=current,
                    suggestion="Check connectivity; cached content is used when available.",
                ) from exc

            if response.status_code not in _REDIRECT_CODES:
                log.debug("fetch_complete", url=current, status_code=response.status_code)
                return response

            location = response.headers.get("location")
            if not location:
                return response
            current = str(httpx.URL(current).join(location))
            log.debug("fetch_redirect", url=current)

        raise FetchFailedError(
            f"Too many redirects fetching {url}",
            url=url,
            status_code=response.status_code,
        )
