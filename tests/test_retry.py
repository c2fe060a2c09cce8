"""Tests for the retrying fetch helper."""

from unittest.mock import AsyncMock

import httpx
import pytest

from alphabot.clients import backoff_delay, fetch_with_retry, request_json
from alphabot.errors import ResponseValidationError, TransientNetworkError


class RecordingSleep:
    def __init__(self):
        self.delays = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


class TestFetchWithRetry:
    """Tests for fetch_with_retry."""

    @pytest.mark.asyncio
    async def test_succeeds_on_third_attempt(self):
        sleep = RecordingSleep()
        call = AsyncMock(side_effect=[
            httpx.ConnectError("refused"),
            httpx.ReadTimeout("slow"),
            {"ok": True},
        ])

        result = await fetch_with_retry(call, sleep=sleep)

        assert result == {"ok": True}
        assert call.await_count == 3
        assert sleep.delays == [1.0, 2.0]
        assert sleep.delays[0] < sleep.delays[1]

    @pytest.mark.asyncio
    async def test_exhaustion_raises_transient_error(self):
        sleep = RecordingSleep()
        call = AsyncMock(side_effect=httpx.ConnectError("refused"))

        with pytest.raises(TransientNetworkError) as exc_info:
            await fetch_with_retry(call, attempts=3, description="ticker", sleep=sleep)

        assert exc_info.value.attempts == 3
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)
        assert call.await_count == 3
        assert sleep.delays == [1.0, 2.0]

    @pytest.mark.asyncio
    async def test_non_network_errors_not_retried(self):
        sleep = RecordingSleep()
        call = AsyncMock(side_effect=ResponseValidationError("bad shape"))

        with pytest.raises(ResponseValidationError):
            await fetch_with_retry(call, sleep=sleep)

        assert call.await_count == 1
        assert sleep.delays == []

    def test_backoff_delay(self):
        assert [backoff_delay(2.0, i) for i in range(3)] == [2.0, 4.0, 8.0]


class TestRequestJson:
    """Tests for request_json."""

    @pytest.mark.asyncio
    async def test_non_2xx_raises_http_error(self):
        client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(404)))

        with pytest.raises(httpx.HTTPStatusError):
            await request_json(client, "GET", "https://api.test/x")

    @pytest.mark.asyncio
    async def test_invalid_json(self):
        client = httpx.AsyncClient(
            transport=httpx.MockTransport(lambda r: httpx.Response(200, content=b"<html>"))
        )

        with pytest.raises(ResponseValidationError):
            await request_json(client, "GET", "https://api.test/x")
