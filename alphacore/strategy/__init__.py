"""Strategy plugin system.

Public API:
- Strategy: Protocol that all strategies must implement
- register_strategy: Decorator to register a strategy class or factory
- create_strategy: Factory function to instantiate strategies by name
- list_strategies: Discover all registered strategies
- get_strategy_class: Get the registered factory without instantiating

Importing this package auto-registers the built-in local strategies.
Remote (LLM) strategies are registered by ``alphabot.inference``.
"""

from alphacore.strategy.protocol import SignalCallback, Strategy
from alphacore.strategy.registry import (
    create_strategy,
    get_strategy_class,
    list_strategies,
    register_strategy,
)
from alphacore.strategy.prompt import (
    build_user_prompt,
    fallback_signal,
    parse_response,
    system_prompt,
)

# Import built-in strategies to trigger auto-registration
from alphacore.strategy.simple_ma import (  # noqa: E402
    SIMPLE_MA_STRATEGY_NAME,
    SimpleMAConfig,
    SimpleMAStrategy,
)

__all__ = [
    "Strategy",
    "SignalCallback",
    "register_strategy",
    "create_strategy",
    "list_strategies",
    "get_strategy_class",
    "system_prompt",
    "build_user_prompt",
    "parse_response",
    "fallback_signal",
    "SimpleMAStrategy",
    "SimpleMAConfig",
    "SIMPLE_MA_STRATEGY_NAME",
]
