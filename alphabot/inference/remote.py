"""Remote LLM strategy over an OpenAI-compatible chat-completion endpoint.

One parameterized component serves every backend: callers supply the model
id, an endpoint resolver and an auth provider. Prompt construction and
response parsing are shared (``alphacore.strategy.prompt``).
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable

import httpx

from alphabot.clients.http import INFERENCE_BASE_DELAY, Sleep, fetch_with_retry, request_json
from alphabot.errors import InferenceError
from alphabot.inference.auth import AuthProvider
from alphacore.models import MarketSnapshot, Signal
from alphacore.strategy import build_user_prompt, fallback_signal, parse_response, system_prompt

logger = logging.getLogger(__name__)

TEMPERATURE = 0.7
MAX_TOKENS = 1024
DEFAULT_TIMEOUT = 120.0


class RemoteInferenceStrategy:
    """Strategy that asks a remote chat model for the trading signal.

    Any failure (auth, network, empty reply) is absorbed into a HOLD
    fallback signal with confidence 0.1; ``predict`` never raises.
    """

    def __init__(
        self,
        name: str,
        model_id: str,
        endpoint_resolver: Callable[[], str],
        auth_provider: AuthProvider,
        *,
        asset: str = "ETH",
        content_fields: tuple[str, ...] = ("content",),
        client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        attempts: int = 3,
        base_delay: float = INFERENCE_BASE_DELAY,
        sleep: Sleep = asyncio.sleep,
    ):
        self._name = name
        self.model_id = model_id
        self._endpoint_resolver = endpoint_resolver
        self._auth = auth_provider
        self.asset = asset
        self._content_fields = content_fields
        self._client = client
        self._owns_client = client is None
        self._timeout = timeout
        self._attempts = attempts
        self._base_delay = base_delay
        self._sleep = sleep

    @property
    def name(self) -> str:
        return self._name

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self._timeout)
            self._owns_client = True
        return self._client

    async def close(self) -> None:
        if self._owns_client and self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    def build_request(self, snapshot: MarketSnapshot) -> dict[str, Any]:
        """Chat-completion payload for the snapshot."""
        return {
            "model": self.model_id,
            "messages": [
                {"role": "system", "content": system_prompt(self.asset)},
                {"role": "user", "content": build_user_prompt(snapshot, self.asset)},
            ],
            "temperature": TEMPERATURE,
            "max_tokens": MAX_TOKENS,
        }

    async def predict(self, snapshot: MarketSnapshot) -> Signal:
        payload = self.build_request(snapshot)
        logger.info(
            "[%s] model=%s bars=%d prompt_chars=%d",
            self.name,
            self.model_id,
            len(snapshot.price_history),
            len(payload["messages"][1]["content"]),
        )

        try:
            content = await self._complete(payload)
            logger.debug("[%s] Raw completion:\n%s", self.name, content)
            return parse_response(content, snapshot)
        except Exception as e:
            logger.error("[%s] Prediction error: %s", self.name, e)
            return fallback_signal(snapshot, e)

    async def _complete(self, payload: dict[str, Any]) -> str:
        token = await self._auth.get_token()
        url = self._endpoint_resolver()
        client = await self._get_client()
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {token}",
        }

        result = await fetch_with_retry(
            lambda: request_json(client, "POST", url, json=payload, headers=headers),
            attempts=self._attempts,
            base_delay=self._base_delay,
            description=f"{self.name} chat completion",
            sleep=self._sleep,
        )
        return self.extract_content(result)

    def extract_content(self, result: Any) -> str:
        """Pull the reply text out of a chat-completion response."""
        choices = result.get("choices") if isinstance(result, dict) else None
        if not isinstance(choices, list) or not choices:
            raise InferenceError(f"{self.name} returned no choices")

        message = choices[0].get("message") if isinstance(choices[0], dict) else None
        if not isinstance(message, dict):
            raise InferenceError(f"{self.name} returned no message")
        for field in self._content_fields:
            content = message.get(field)
            if isinstance(content, str) and content.strip():
                return content
        raise InferenceError(f"{self.name} returned empty content")
