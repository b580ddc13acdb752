"""Minimal aiohttp adapter for the subtitle site. One request per call, no retries."""

from __future__ import annotations

import asyncio
import time
from typing import Awaitable, Callable, TypeVar

import aiohttp
from yarl import URL

from subgrab import logger
from subgrab.config import DEFAULT_USER_AGENT
from subgrab.errors import NetworkError
from subgrab.search.protocols import PageFetcher

_T = TypeVar("_T")


class SiteClient(PageFetcher):
    """Fetches search pages, detail pages and subtitle archives."""

    def __init__(self, user_agent: str = DEFAULT_USER_AGENT):
        self.user_agent = user_agent
        self._session: aiohttp.ClientSession | None = None

    async def get_page(self, url: URL) -> str:
        """GET ``url`` and return the body, with undecodable bytes replaced."""
        return await self._request(url, lambda response: response.text(errors="replace"))

    async def get_bytes(self, url: URL) -> bytes:
        """GET ``url`` and return the raw body."""
        return await self._request(url, lambda response: response.read())

    async def _request(
        self,
        url: URL,
        reader: Callable[[aiohttp.ClientResponse], Awaitable[_T]],
    ) -> _T:
        log = logger.get_logger()
        log.http_request("GET", str(url))
        request_start = time.time()
        session = await self._ensure_session()
        try:
            async with session.get(url) as response:
                if response.status >= 400:
                    raise NetworkError(f"GET {url} returned {response.status} {response.reason}")
                data = await reader(response)
                elapsed_ms = (time.time() - request_start) * 1000
                log.http_response(response.status, len(data), elapsed_ms)
                return data
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            detail = str(exc) or type(exc).__name__
            raise NetworkError(f"GET {url} failed: {detail}") from exc

    async def _ensure_session(self) -> aiohttp.ClientSession:
        session = self._session
        if session is None or session.closed:
            session = aiohttp.ClientSession(headers={"User-Agent": self.user_agent})
            self._session = session
        return session

    async def close(self) -> None:
        """Close any open connections."""
        session = self._session
        self._session = None
        if session is not None and not session.closed:
            await session.close()

    async def __aenter__(self) -> "SiteClient":
        return self

    async def __aexit__(self, *args) -> None:
        await self.close()
