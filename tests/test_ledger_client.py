"""Tests for the ledger GraphQL client."""

import asyncio
import json

import httpx
import pytest
from pydantic import ValidationError

from alphabot.clients import LedgerClient, LedgerConfig
from alphacore.models import Action, Signal

ENDPOINT = "http://localhost:8080/graphql"

STATE = {
    "botId": "alphabot-simple-ma",
    "latestSignal": {
        "timestamp": "1700000000000",
        "action": "BUY",
        "predictedPriceMicro": "3575500000",
        "confidenceBps": 7800,
        "reasoning": "Golden cross",
        "actualPriceMicro": None,
    },
    "accuracy24H": {
        "rmseMicro": "12500000",
        "directionalAccuracyBps": 6250,
        "totalPredictions": 16,
        "correctPredictions": 10,
        "lastUpdated": "1700000000000",
    },
    "followerCount": 3,
}


def make_client(handler, **config):
    return LedgerClient(
        LedgerConfig(endpoint=ENDPOINT, application_id="app-1", chain_id="chain-1", **config),
        client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


@pytest.fixture
def signal():
    return Signal(
        timestamp=1_700_000_000_000,
        action=Action.BUY,
        predicted_price=3575.5,
        confidence=0.78,
        reasoning="Golden cross",
    )


class TestSubmitPrediction:
    """Tests for submit_prediction."""

    @pytest.mark.asyncio
    async def test_encodes_fixed_point_variables(self, signal):
        bodies = []

        def handler(request):
            bodies.append(json.loads(request.content))
            return httpx.Response(200, json={"data": "0xabc123"})

        result = await make_client(handler).submit_prediction(signal)

        assert result.success
        assert result.certificate_hash == "0xabc123"
        assert result.error is None

        body = bodies[0]
        assert "submitPrediction" in body["query"]
        assert body["variables"] == {
            "timestamp": "1700000000000",
            "action": "BUY",
            "predictedPriceMicro": "3575500000",
            "confidenceBps": 7800,
            "reasoning": "Golden cross",
        }

    @pytest.mark.asyncio
    async def test_certificate_hash_field(self, signal):
        client = make_client(lambda r: httpx.Response(200, json={"data": {}, "certificateHash": "cert-1"}))

        result = await client.submit_prediction(signal)

        assert result.success
        assert result.certificate_hash == "cert-1"

    @pytest.mark.asyncio
    async def test_success_without_certificate(self, signal):
        client = make_client(lambda r: httpx.Response(200, json={"data": {"submitPrediction": None}}))

        result = await client.submit_prediction(signal)

        assert result.success
        assert result.certificate_hash is None

    @pytest.mark.asyncio
    async def test_http_error(self, signal):
        client = make_client(lambda r: httpx.Response(500, text="boom"))

        result = await client.submit_prediction(signal)

        assert not result.success
        assert "HTTP 500" in result.error

    @pytest.mark.asyncio
    async def test_graphql_errors_fail_despite_200(self, signal):
        def handler(request):
            return httpx.Response(200, json={"data": None, "errors": [{"message": "unknown field"}]})

        result = await make_client(handler).submit_prediction(signal)

        assert not result.success
        assert "unknown field" in result.error

    @pytest.mark.asyncio
    async def test_transport_error(self, signal):
        def handler(request):
            raise httpx.ConnectError("refused")

        result = await make_client(handler).submit_prediction(signal)

        assert not result.success
        assert "refused" in result.error

    @pytest.mark.asyncio
    async def test_timeout(self, signal):
        async def slow_post(endpoint, body, timeout):
            await asyncio.sleep(1)

        client = make_client(lambda r: httpx.Response(200, json={}), timeout=0.01)
        client._post = slow_post

        result = await client.submit_prediction(signal)

        assert not result.success
        assert "timed out" in result.error

    @pytest.mark.asyncio
    async def test_configured_timeout_reaches_http_request(self, signal):
        timeouts = []

        def handler(request):
            timeouts.append(request.extensions["timeout"])
            return httpx.Response(200, json={"data": "0xabc"})

        result = await make_client(handler, timeout=30).submit_prediction(signal)

        assert result.success
        assert timeouts == [{"connect": 30.0, "read": 30.0, "write": 30.0, "pool": 30.0}]

    @pytest.mark.asyncio
    async def test_owned_client_uses_configured_timeout(self):
        client = LedgerClient(
            LedgerConfig(endpoint=ENDPOINT, application_id="a", chain_id="c", timeout=45)
        )

        http_client = await client._get_client()

        assert http_client.timeout == httpx.Timeout(45.0)
        await client.close()

    @pytest.mark.asyncio
    async def test_http_timeout_reported_as_timeout(self, signal):
        def handler(request):
            raise httpx.ReadTimeout("", request=request)

        result = await make_client(handler, timeout=30).submit_prediction(signal)

        assert not result.success
        assert result.error == "Request timed out after 30.0s"

    @pytest.mark.asyncio
    async def test_slow_node_within_configured_timeout(self, signal):
        """A node slower than httpx's 5s default still succeeds under a 30s timeout."""
        reply = b'{"data": "0xslow"}'

        async def handle(reader, writer):
            headers = await reader.readuntil(b"\r\n\r\n")
            length = 0
            for line in headers.decode().split("\r\n"):
                name, _, value = line.partition(":")
                if name.lower() == "content-length":
                    length = int(value)
            await reader.readexactly(length)
            await asyncio.sleep(5.5)
            writer.write(
                b"HTTP/1.1 200 OK\r\nContent-Type: application/json\r\n"
                b"Content-Length: " + str(len(reply)).encode() + b"\r\n"
                b"Connection: close\r\n\r\n" + reply
            )
            await writer.drain()
            writer.close()

        server = await asyncio.start_server(handle, "127.0.0.1", 0)
        port = server.sockets[0].getsockname()[1]
        client = LedgerClient(
            LedgerConfig(
                endpoint=f"http://127.0.0.1:{port}/graphql",
                application_id="a",
                chain_id="c",
                timeout=30,
            )
        )
        try:
            result = await client.submit_prediction(signal)
        finally:
            await client.close()
            server.close()
            await server.wait_closed()

        assert result.success, result.error
        assert result.certificate_hash == "0xslow"


class TestResolveSignal:
    """Tests for resolve_signal."""

    @pytest.mark.asyncio
    async def test_encodes_actual_price(self):
        bodies = []

        def handler(request):
            bodies.append(json.loads(request.content))
            return httpx.Response(200, json={"data": "0xdef"})

        result = await make_client(handler).resolve_signal(1_700_000_000_000, 3601.1234567)

        assert result.success
        assert "resolveSignal" in bodies[0]["query"]
        assert bodies[0]["variables"] == {
            "timestamp": "1700000000000",
            "actualPriceMicro": "3601123456",
        }


class TestQueryState:
    """Tests for the state query."""

    @pytest.mark.asyncio
    async def test_converts_ledger_units(self):
        client = make_client(lambda r: httpx.Response(200, json={"data": STATE}))

        state = await client.query_state()

        assert state.bot_id == "alphabot-simple-ma"
        assert state.follower_count == 3
        assert state.latest_signal.action == Action.BUY
        assert state.latest_signal.predicted_price == 3575.5
        assert state.latest_signal.confidence == 0.78
        assert state.latest_signal.actual_price is None
        assert state.accuracy_24h.rmse == 12.5
        assert state.accuracy_24h.directional_accuracy == 62.5
        assert state.accuracy_24h.total_predictions == 16
        assert state.accuracy_24h.last_updated == 1_700_000_000_000

    @pytest.mark.asyncio
    async def test_failure_is_absent(self):
        client = make_client(lambda r: httpx.Response(503))

        assert await client.query_state() is None

        result = await client.fetch_state()
        assert result.failed
        assert not result.found

    @pytest.mark.asyncio
    async def test_no_data_is_not_a_failure(self):
        client = make_client(lambda r: httpx.Response(200, json={"data": None}))

        result = await client.fetch_state()

        assert not result.found
        assert not result.failed

    @pytest.mark.asyncio
    async def test_non_object_data_is_failure(self):
        client = make_client(lambda r: httpx.Response(200, json={"data": "0xabc"}))

        result = await client.fetch_state()

        assert result.failed
        assert "expected an object" in result.error
        assert await client.query_state() is None

    @pytest.mark.asyncio
    async def test_non_object_nested_fields_are_failure(self):
        state = {**STATE, "latestSignal": "oops", "accuracy24H": ["oops"]}
        client = make_client(lambda r: httpx.Response(200, json={"data": state}))

        assert (await client.fetch_state()).failed
        assert await client.query_state() is None

    @pytest.mark.asyncio
    async def test_malformed_payload_is_failure(self):
        state = {**STATE, "accuracy24H": {"rmseMicro": "not-a-number"}}
        client = make_client(lambda r: httpx.Response(200, json={"data": state}))

        result = await client.fetch_state()

        assert result.failed
        assert await client.query_state() is None


class TestLedgerConfig:
    """Tests for configuration handling."""

    def test_get_config_returns_copy(self):
        client = make_client(lambda r: httpx.Response(200))

        first = client.get_config()
        second = client.get_config()

        assert first == second
        assert first is not second

    def test_config_is_immutable(self):
        config = make_client(lambda r: httpx.Response(200)).get_config()
        with pytest.raises(ValidationError):
            config.endpoint = "http://elsewhere"

    def test_update_merges_fields(self):
        client = make_client(lambda r: httpx.Response(200))

        client.update_config(timeout=5.0)

        config = client.get_config()
        assert config.timeout == 5.0
        assert config.endpoint == ENDPOINT
        assert config.chain_id == "chain-1"

    def test_update_validates(self):
        client = make_client(lambda r: httpx.Response(200))

        with pytest.raises(ValidationError):
            client.update_config(timeout=-1)
        assert client.get_config().timeout == 30.0

    def test_replace(self):
        client = make_client(lambda r: httpx.Response(200))
        new = LedgerConfig(endpoint="http://other/graphql", application_id="a", chain_id="c")

        client.replace_config(new)

        assert client.get_config() == new

    def test_application_url(self):
        config = LedgerConfig(endpoint="http://localhost:8080/", application_id="app", chain_id="chain")
        assert config.application_url == "http://localhost:8080/chains/chain/applications/app"
