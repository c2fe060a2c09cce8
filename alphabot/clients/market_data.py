"""Market data fetcher contract and shared caching/HTTP plumbing."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, Protocol, TypeVar, runtime_checkable

import httpx

from alphabot.clients.http import MARKET_DATA_BASE_DELAY, Sleep, fetch_with_retry, request_json
from alphabot.storage import ExpiringCache
from alphacore.models import MarketSnapshot

logger = logging.getLogger(__name__)

T = TypeVar("T")


def now_ms() -> int:
    """Wall-clock time in milliseconds since epoch."""
    return int(time.time() * 1000)


@runtime_checkable
class MarketDataFetcher(Protocol):
    """Produces one MarketSnapshot per call."""

    async def get_market_snapshot(self) -> MarketSnapshot:
        ...

    async def close(self) -> None:
        ...


class CachedRestFetcher:
    """Base for REST quote fetchers.

    Each underlying call is cached independently (keyed by call type and
    parameters) and executed through the retrying fetch.
    """

    def __init__(
        self,
        base_url: str,
        *,
        headers: dict[str, str] | None = None,
        client: httpx.AsyncClient | None = None,
        cache: ExpiringCache | None = None,
        timeout: float = 30.0,
        base_delay: float = MARKET_DATA_BASE_DELAY,
        sleep: Sleep = asyncio.sleep,
    ):
        self.base_url = base_url.rstrip("/")
        self._headers = headers or {}
        self._client = client
        self._owns_client = client is None
        self._timeout = timeout
        self._base_delay = base_delay
        self._sleep = sleep
        self.cache = cache if cache is not None else ExpiringCache()

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self._timeout)
            self._owns_client = True
        return self._client

    async def close(self) -> None:
        """Close the HTTP client if this fetcher created it."""
        if self._owns_client and self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _get_json(self, path: str, params: dict[str, Any], description: str) -> Any:
        client = await self._get_client()
        return await fetch_with_retry(
            lambda: request_json(
                client, "GET", f"{self.base_url}{path}", params=params, headers=self._headers
            ),
            base_delay=self._base_delay,
            description=description,
            sleep=self._sleep,
        )

    async def _cached(
        self,
        key: str,
        ttl_ms: int,
        loader: Callable[[], Awaitable[T]],
    ) -> T:
        """Return the cached value for ``key`` or load and cache it."""
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("Cache hit: %s", key)
            return cached
        value = await loader()
        self.cache.set(key, value, ttl_ms)
        return value
