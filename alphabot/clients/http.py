"""Shared HTTP helpers: bounded exponential-backoff retry and JSON requests."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, TypeVar

import httpx

from alphabot.errors import ResponseValidationError, TransientNetworkError

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_ATTEMPTS = 3
MARKET_DATA_BASE_DELAY = 1.0  # seconds: 1s, 2s
INFERENCE_BASE_DELAY = 2.0  # seconds: 2s, 4s (LLM calls are slower)

Sleep = Callable[[float], Awaitable[None]]


def backoff_delay(base_delay: float, attempt: int) -> float:
    """Delay before retrying after failed ``attempt`` (0-based)."""
    return base_delay * (2 ** attempt)


async def fetch_with_retry(
    call: Callable[[], Awaitable[T]],
    *,
    attempts: int = DEFAULT_ATTEMPTS,
    base_delay: float = MARKET_DATA_BASE_DELAY,
    description: str = "request",
    sleep: Sleep = asyncio.sleep,
) -> T:
    """
    Run one network call with bounded exponential-backoff retry.

    Transport errors, timeouts and non-2xx responses (``httpx.HTTPError``) are
    retried. Any other exception propagates immediately.

    Args:
        call: Zero-argument coroutine factory performing a single attempt
        attempts: Maximum number of attempts
        base_delay: Delay in seconds after the first failure; doubles each time
        description: Label used in log messages
        sleep: Awaitable sleep function (injectable for tests)

    Returns:
        The first successful result

    Raises:
        TransientNetworkError: After the final attempt fails
    """
    for attempt in range(attempts):
        try:
            return await call()
        except httpx.HTTPError as e:
            if attempt == attempts - 1:
                raise TransientNetworkError(
                    f"{description} failed after {attempts} attempts: {e}",
                    attempts=attempts,
                ) from e
            delay = backoff_delay(base_delay, attempt)
            logger.warning(
                "%s attempt %d/%d failed (%s), retrying in %.1fs",
                description,
                attempt + 1,
                attempts,
                e,
                delay,
            )
            await sleep(delay)

    raise TransientNetworkError(f"{description}: no attempts made", attempts=0)


async def request_json(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    **kwargs: Any,
) -> Any:
    """Make one request, raise on non-2xx, and decode the JSON body."""
    response = await client.request(method, url, **kwargs)
    response.raise_for_status()
    try:
        return response.json()
    except ValueError as e:
        raise ResponseValidationError(f"Invalid JSON from {url}: {e}") from e
