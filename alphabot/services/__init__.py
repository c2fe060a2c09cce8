"""Prediction pipeline services."""

from alphabot.services.factory import (
    MARKET_DATA_SOURCES,
    build_ledger_client,
    build_strategy,
    create_market_fetcher,
)
from alphabot.services.orchestrator import (
    DEFAULT_INTERVAL_SECONDS,
    Orchestrator,
    OrchestratorState,
    OrchestratorStatus,
)

__all__ = [
    "MARKET_DATA_SOURCES",
    "create_market_fetcher",
    "build_strategy",
    "build_ledger_client",
    "DEFAULT_INTERVAL_SECONDS",
    "Orchestrator",
    "OrchestratorState",
    "OrchestratorStatus",
]
