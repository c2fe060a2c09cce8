"""GraphQL client for the bot-state ledger application.

Prices cross the wire as micro-USD integer strings and fractions as basis
points; this client converts in both directions with the fixed-point codec.
Mutations never raise: failures come back as ``OperationResult``.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

import httpx
import orjson
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from alphabot.errors import LedgerError
from alphacore.models import (
    AccuracyMetrics,
    Action,
    BotState,
    OperationResult,
    Signal,
    from_basis_points,
    from_micro_units,
    to_basis_points,
    to_micro_units,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0

SUBMIT_PREDICTION_MUTATION = """
mutation SubmitPrediction(
  $timestamp: String!
  $action: Action!
  $predictedPriceMicro: String!
  $confidenceBps: Int!
  $reasoning: String!
) {
  submitPrediction(
    timestamp: $timestamp
    action: $action
    predictedPriceMicro: $predictedPriceMicro
    confidenceBps: $confidenceBps
    reasoning: $reasoning
  )
}
"""

RESOLVE_SIGNAL_MUTATION = """
mutation ResolveSignal($timestamp: String!, $actualPriceMicro: String!) {
  resolveSignal(timestamp: $timestamp, actualPriceMicro: $actualPriceMicro)
}
"""

BOT_STATE_QUERY = """
query GetBotState {
  botId
  latestSignal {
    timestamp
    action
    predictedPriceMicro
    confidenceBps
    reasoning
    actualPriceMicro
  }
  accuracy24H {
    rmseMicro
    directionalAccuracyBps
    totalPredictions
    correctPredictions
    lastUpdated
  }
  followerCount
}
"""


class LedgerConfig(BaseModel):
    """Connection settings for the ledger application."""

    model_config = ConfigDict(frozen=True)

    endpoint: str
    application_id: str
    chain_id: str
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)  # seconds

    @property
    def application_url(self) -> str:
        """Application-scoped GraphQL URL on a node service."""
        return (
            f"{self.endpoint.rstrip('/')}/chains/{self.chain_id}"
            f"/applications/{self.application_id}"
        )


@dataclass(frozen=True)
class StateQueryResult:
    """Outcome of a state query.

    ``state`` is None both when the ledger has no data yet (``error`` is None)
    and when the query failed (``error`` is set).
    """

    state: BotState | None = None
    error: str | None = None

    @property
    def found(self) -> bool:
        return self.state is not None

    @property
    def failed(self) -> bool:
        return self.error is not None


def _signal_from_wire(data: dict[str, Any]) -> Signal:
    actual = data.get("actualPriceMicro")
    return Signal(
        timestamp=int(data["timestamp"]),
        action=Action(data["action"]),
        predicted_price=from_micro_units(data["predictedPriceMicro"]),
        confidence=from_basis_points(int(data["confidenceBps"])),
        reasoning=data.get("reasoning") or "",
        actual_price=from_micro_units(actual) if actual else None,
    )


def _accuracy_from_wire(data: dict[str, Any]) -> AccuracyMetrics:
    return AccuracyMetrics(
        rmse=from_micro_units(data["rmseMicro"]),
        # basis points of a 0-1 fraction, reported here as a percentage
        directional_accuracy=from_basis_points(int(data["directionalAccuracyBps"])) * 100,
        total_predictions=int(data["totalPredictions"]),
        correct_predictions=int(data["correctPredictions"]),
        last_updated=int(data["lastUpdated"]),
    )


def bot_state_from_wire(data: dict[str, Any]) -> BotState:
    """Convert a GetBotState payload from ledger units to display units."""
    latest = data.get("latestSignal")
    return BotState(
        bot_id=data["botId"],
        latest_signal=_signal_from_wire(latest) if latest else None,
        accuracy_24h=_accuracy_from_wire(data["accuracy24H"]),
        follower_count=int(data.get("followerCount") or 0),
    )


class LedgerClient:
    """Submits signals to, and reads state from, the ledger GraphQL endpoint."""

    def __init__(self, config: LedgerConfig, client: httpx.AsyncClient | None = None):
        self._config = config
        self._client = client
        self._owns_client = client is None

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def get_config(self) -> LedgerConfig:
        """Return an independent copy of the current configuration."""
        return self._config.model_copy()

    def replace_config(self, config: LedgerConfig) -> None:
        """Replace the whole configuration."""
        self._config = config

    def update_config(self, **fields: Any) -> None:
        """Merge fields into the configuration (validated, swapped atomically)."""
        self._config = LedgerConfig.model_validate({**self._config.model_dump(), **fields})

    @property
    def timeout(self) -> float:
        return self._config.timeout

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self._config.timeout)
            self._owns_client = True
        return self._client

    async def close(self) -> None:
        if self._owns_client and self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _post(self, endpoint: str, body: bytes, timeout: float) -> httpx.Response:
        client = await self._get_client()
        return await client.post(
            endpoint,
            content=body,
            headers={"Content-Type": "application/json"},
            timeout=timeout,
        )

    async def _execute(self, query: str, variables: dict[str, Any]) -> dict[str, Any]:
        """POST a GraphQL document; raise LedgerError on any failure."""
        config = self._config
        body = orjson.dumps({"query": query, "variables": variables})

        try:
            response = await asyncio.wait_for(
                self._post(config.endpoint, body, config.timeout), timeout=config.timeout
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise LedgerError(f"Request timed out after {config.timeout}s") from e
        except httpx.HTTPError as e:
            raise LedgerError(f"Request failed: {e}") from e

        if not response.is_success:
            raise LedgerError(f"HTTP {response.status_code}: {response.reason_phrase}")

        try:
            result = orjson.loads(response.content)
        except orjson.JSONDecodeError as e:
            raise LedgerError(f"Invalid JSON response: {e}") from e

        if not isinstance(result, dict):
            raise LedgerError("Unexpected response shape")
        if result.get("errors") is not None:
            raise LedgerError(f"GraphQL errors: {orjson.dumps(result['errors']).decode()}")
        return result

    @staticmethod
    def _certificate(result: dict[str, Any]) -> str | None:
        if result.get("certificateHash"):
            return str(result["certificateHash"])
        # Node services return the transaction hash as the bare data value
        data = result.get("data")
        if isinstance(data, str):
            return data
        return None

    async def _mutate(self, label: str, query: str, variables: dict[str, Any]) -> OperationResult:
        try:
            result = await self._execute(query, variables)
        except LedgerError as e:
            logger.error("Ledger %s failed: %s", label, e)
            return OperationResult(success=False, error=str(e))
        return OperationResult(success=True, certificate_hash=self._certificate(result))

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def submit_prediction(self, signal: Signal) -> OperationResult:
        """Submit a signal; price in micro-USD, confidence in basis points."""
        variables = {
            "timestamp": str(signal.timestamp),
            "action": signal.action.value,
            "predictedPriceMicro": to_micro_units(signal.predicted_price),
            "confidenceBps": to_basis_points(signal.confidence),
            "reasoning": signal.reasoning,
        }
        return await self._mutate("submitPrediction", SUBMIT_PREDICTION_MUTATION, variables)

    async def resolve_signal(self, timestamp: int, actual_price: float) -> OperationResult:
        """Record the realized price for a previously submitted signal."""
        variables = {
            "timestamp": str(timestamp),
            "actualPriceMicro": to_micro_units(actual_price),
        }
        return await self._mutate("resolveSignal", RESOLVE_SIGNAL_MUTATION, variables)

    async def fetch_state(self) -> StateQueryResult:
        """Query bot state, distinguishing "no data yet" from "query failed"."""
        try:
            result = await self._execute(BOT_STATE_QUERY, {})
        except LedgerError as e:
            logger.error("Ledger state query failed: %s", e)
            return StateQueryResult(error=str(e))

        data = result.get("data")
        if data is not None and not isinstance(data, dict):
            logger.error("Ledger state payload invalid: %r", data)
            return StateQueryResult(
                error=f"Invalid state payload: expected an object, got {type(data).__name__}"
            )
        if not data or not data.get("botId") or not data.get("accuracy24H"):
            return StateQueryResult()

        try:
            return StateQueryResult(state=bot_state_from_wire(data))
        except (KeyError, TypeError, ValueError, ValidationError) as e:
            logger.error("Ledger state payload invalid: %s", e)
            return StateQueryResult(error=f"Invalid state payload: {e}")

    async def query_state(self) -> BotState | None:
        """Best-effort state read: the BotState, or None on any failure."""
        return (await self.fetch_state()).state
