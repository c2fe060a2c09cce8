"""Authentication providers for remote inference backends."""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol, runtime_checkable

import google.auth
import google.auth.transport.requests

from alphabot.errors import ConfigurationError, InferenceError

logger = logging.getLogger(__name__)

CLOUD_PLATFORM_SCOPE = "https://www.googleapis.com/auth/cloud-platform"


@runtime_checkable
class AuthProvider(Protocol):
    """Supplies the bearer token for one request."""

    async def get_token(self) -> str:
        ...


class BearerTokenAuth:
    """Static API key sent as a bearer token."""

    def __init__(self, api_key: str, key_name: str = "API key"):
        if not api_key:
            raise ConfigurationError(f"{key_name} is required")
        self._api_key = api_key

    async def get_token(self) -> str:
        return self._api_key


class GoogleCloudAuth:
    """Short-lived access token from Google Application Default Credentials.

    Credentials are resolved on first use and refreshed when expired. The
    google-auth refresh is blocking, so it runs in a worker thread.
    """

    def __init__(self, scopes: tuple[str, ...] = (CLOUD_PLATFORM_SCOPE,), credentials=None):
        self._scopes = list(scopes)
        self._credentials = credentials
        self._lock = asyncio.Lock()

    def _refresh(self) -> None:
        if self._credentials is None:
            self._credentials, project = google.auth.default(scopes=self._scopes)
            logger.info("Loaded Google default credentials (project=%s)", project)
        self._credentials.refresh(google.auth.transport.requests.Request())

    async def get_token(self) -> str:
        async with self._lock:
            if self._credentials is None or not self._credentials.valid:
                await asyncio.to_thread(self._refresh)
            token = getattr(self._credentials, "token", None)
        if not token:
            raise InferenceError("Failed to get GCP access token")
        return token
