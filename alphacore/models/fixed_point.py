"""Fixed-point conversions between display units and ledger units.

The ledger stores prices as integer micro-USD strings and fractions as
integer basis points. Conversion into ledger units truncates (floor);
it does not round.
"""

import math

MICRO_MULTIPLIER = 1_000_000
BASIS_POINTS_MULTIPLIER = 10_000


def to_micro_units(usd: float) -> str:
    """Convert a USD price to a micro-USD integer string.

    Args:
        usd: Price in USD (e.g., 3500.25)

    Returns:
        Micro-USD as a string (e.g., "3500250000")
    """
    return str(math.floor(usd * MICRO_MULTIPLIER))


def from_micro_units(micro: str | int) -> float:
    """Convert micro-USD (string or int) back to USD."""
    return int(micro) / MICRO_MULTIPLIER


def to_basis_points(fraction: float) -> int:
    """Convert a 0-1 fraction to basis points (0.85 -> 8500)."""
    return math.floor(fraction * BASIS_POINTS_MULTIPLIER)


def from_basis_points(bps: int) -> float:
    """Convert basis points back to a 0-1 fraction."""
    return bps / BASIS_POINTS_MULTIPLIER
