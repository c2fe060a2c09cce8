"""Strategy registry for discovering and instantiating strategies.

Usage:
    @register_strategy("my-strategy")
    class MyStrategy:
        ...

    strategy = create_strategy("my-strategy")
    names = list_strategies()
"""

from __future__ import annotations

import logging
from typing import Any, Callable

logger = logging.getLogger(__name__)

# Global registry: strategy_name -> class or factory
_REGISTRY: dict[str, Callable[..., Any]] = {}


def register_strategy(name: str):
    """Decorator to register a strategy class (or factory) under a name.

    Raises:
        ValueError: If a strategy with the same name is already registered.
    """

    def decorator(factory):
        if name in _REGISTRY:
            raise ValueError(
                f"Strategy '{name}' is already registered by {_REGISTRY[name].__name__}"
            )
        _REGISTRY[name] = factory
        logger.debug("Registered strategy: %s -> %s", name, factory.__name__)
        return factory

    return decorator


def get_strategy_class(name: str) -> Callable[..., Any]:
    """Get the registered class or factory by name (without instantiating).

    Raises:
        KeyError: If no strategy is registered under the given name.
    """
    factory = _REGISTRY.get(name)
    if factory is None:
        available = ", ".join(sorted(_REGISTRY.keys())) or "(none)"
        raise KeyError(f"Unknown strategy '{name}'. Available: {available}")
    return factory


def create_strategy(name: str, **kwargs: Any):
    """Create a strategy instance by name.

    Args:
        name: Registered strategy name.
        **kwargs: Arguments passed to the registered class or factory.

    Raises:
        KeyError: If no strategy is registered under the given name.
    """
    return get_strategy_class(name)(**kwargs)


def list_strategies() -> list[str]:
    """Return a sorted list of registered strategy names."""
    return sorted(_REGISTRY.keys())
