"""Remote inference backends.

Importing this package registers the remote strategies
(deepseek, qwen-vertex, gpt-oss-vertex) in the strategy registry.
"""

from alphabot.inference.auth import (
    CLOUD_PLATFORM_SCOPE,
    AuthProvider,
    BearerTokenAuth,
    GoogleCloudAuth,
)
from alphabot.inference.remote import MAX_TOKENS, TEMPERATURE, RemoteInferenceStrategy
from alphabot.inference.backends import (
    DEEPSEEK_STRATEGY_NAME,
    GPT_OSS_VERTEX_STRATEGY_NAME,
    QWEN_VERTEX_STRATEGY_NAME,
    REMOTE_STRATEGY_NAMES,
    deepseek_strategy,
    gpt_oss_vertex_strategy,
    qwen_vertex_strategy,
    vertex_endpoint,
)

__all__ = [
    "AuthProvider",
    "BearerTokenAuth",
    "GoogleCloudAuth",
    "CLOUD_PLATFORM_SCOPE",
    "RemoteInferenceStrategy",
    "TEMPERATURE",
    "MAX_TOKENS",
    "DEEPSEEK_STRATEGY_NAME",
    "QWEN_VERTEX_STRATEGY_NAME",
    "GPT_OSS_VERTEX_STRATEGY_NAME",
    "REMOTE_STRATEGY_NAMES",
    "deepseek_strategy",
    "qwen_vertex_strategy",
    "gpt_oss_vertex_strategy",
    "vertex_endpoint",
]
