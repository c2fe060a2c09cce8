"""Configured remote backends, registered in the strategy registry."""

from __future__ import annotations

import httpx

from alphabot.config import Settings
from alphabot.errors import ConfigurationError
from alphabot.inference.auth import BearerTokenAuth, GoogleCloudAuth
from alphabot.inference.remote import RemoteInferenceStrategy
from alphacore.strategy import register_strategy

DEEPSEEK_STRATEGY_NAME = "deepseek"
QWEN_VERTEX_STRATEGY_NAME = "qwen-vertex"
GPT_OSS_VERTEX_STRATEGY_NAME = "gpt-oss-vertex"

REMOTE_STRATEGY_NAMES = (
    DEEPSEEK_STRATEGY_NAME,
    QWEN_VERTEX_STRATEGY_NAME,
    GPT_OSS_VERTEX_STRATEGY_NAME,
)


def vertex_endpoint(project_id: str, domain: str, location: str) -> str:
    """Vertex AI OpenAI-compatible chat-completion URL.

    Regional endpoints use a regional domain and location path; the global
    endpoint uses the bare domain and ``global``.
    """
    return (
        f"https://{domain}/v1/projects/{project_id}/locations/{location}"
        "/endpoints/openapi/chat/completions"
    )


def _require_settings(settings: Settings | None, name: str) -> Settings:
    if settings is None:
        raise ConfigurationError(f"Strategy '{name}' requires settings")
    return settings


def _require_project(settings: Settings) -> str:
    if not settings.gcp_project_id:
        raise ConfigurationError("GCP_PROJECT_ID is required for Vertex AI strategies")
    return settings.gcp_project_id


@register_strategy(DEEPSEEK_STRATEGY_NAME)
def deepseek_strategy(
    settings: Settings | None = None,
    client: httpx.AsyncClient | None = None,
    **kwargs,
) -> RemoteInferenceStrategy:
    """DeepSeek chat API with a bearer API key."""
    settings = _require_settings(settings, DEEPSEEK_STRATEGY_NAME)
    auth = BearerTokenAuth(settings.deepseek_api_key, key_name="DEEPSEEK_API_KEY")
    base_url = settings.deepseek_base_url.rstrip("/")
    return RemoteInferenceStrategy(
        DEEPSEEK_STRATEGY_NAME,
        settings.deepseek_model,
        lambda: f"{base_url}/v1/chat/completions",
        auth,
        asset=settings.asset_label,
        client=client,
        **kwargs,
    )


@register_strategy(QWEN_VERTEX_STRATEGY_NAME)
def qwen_vertex_strategy(
    settings: Settings | None = None,
    client: httpx.AsyncClient | None = None,
    auth_provider=None,
    **kwargs,
) -> RemoteInferenceStrategy:
    """Qwen 3 Coder 480B on the us-south1 regional Vertex AI endpoint."""
    settings = _require_settings(settings, QWEN_VERTEX_STRATEGY_NAME)
    project_id = _require_project(settings)
    return RemoteInferenceStrategy(
        QWEN_VERTEX_STRATEGY_NAME,
        settings.gcp_qwen_model,
        lambda: vertex_endpoint(project_id, "us-south1-aiplatform.googleapis.com", "us-south1"),
        auth_provider or GoogleCloudAuth(),
        asset=settings.asset_label,
        client=client,
        **kwargs,
    )


@register_strategy(GPT_OSS_VERTEX_STRATEGY_NAME)
def gpt_oss_vertex_strategy(
    settings: Settings | None = None,
    client: httpx.AsyncClient | None = None,
    auth_provider=None,
    **kwargs,
) -> RemoteInferenceStrategy:
    """GPT OSS 120B on the global Vertex AI endpoint.

    This model may answer in ``reasoning_content`` with an empty ``content``.
    """
    settings = _require_settings(settings, GPT_OSS_VERTEX_STRATEGY_NAME)
    project_id = _require_project(settings)
    return RemoteInferenceStrategy(
        GPT_OSS_VERTEX_STRATEGY_NAME,
        settings.gcp_gpt_oss_model,
        lambda: vertex_endpoint(project_id, "aiplatform.googleapis.com", "global"),
        auth_provider or GoogleCloudAuth(),
        asset=settings.asset_label,
        content_fields=("content", "reasoning_content"),
        client=client,
        **kwargs,
    )
