"""Data models."""

from alphacore.models.market import MarketSnapshot, PricePoint
from alphacore.models.signal import (
    MAX_REASONING_LENGTH,
    AccuracyMetrics,
    Action,
    BotState,
    OperationResult,
    Signal,
)
from alphacore.models.fixed_point import (
    BASIS_POINTS_MULTIPLIER,
    MICRO_MULTIPLIER,
    from_basis_points,
    from_micro_units,
    to_basis_points,
    to_micro_units,
)

__all__ = [
    # Market data
    "MarketSnapshot",
    "PricePoint",
    # Signals and ledger state
    "Action",
    "Signal",
    "AccuracyMetrics",
    "BotState",
    "OperationResult",
    "MAX_REASONING_LENGTH",
    # Fixed-point codec
    "MICRO_MULTIPLIER",
    "BASIS_POINTS_MULTIPLIER",
    "to_micro_units",
    "from_micro_units",
    "to_basis_points",
    "from_basis_points",
]
