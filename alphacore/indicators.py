"""Technical indicators for strategies (pure math, no I/O)."""

from dataclasses import dataclass
from typing import Sequence

import numpy as np


def latest_sma(values: Sequence[float], period: int) -> float:
    """
    Average of the most recent ``period`` values.

    The window shrinks to the available length when the series is shorter
    than ``period``.

    Raises:
        ValueError: If ``values`` is empty or ``period`` is not positive.
    """
    if period <= 0:
        raise ValueError("period must be positive")
    if len(values) == 0:
        raise ValueError("cannot compute SMA of an empty series")
    window = min(period, len(values))
    arr = np.asarray(values[-window:], dtype=np.float64)
    return float(arr.mean())


@dataclass(frozen=True)
class PriceStats:
    """Summary statistics over a close series."""

    high: float
    low: float
    average: float


def price_stats(values: Sequence[float]) -> PriceStats:
    """Max/min/mean of a close series."""
    if len(values) == 0:
        raise ValueError("cannot summarize an empty series")
    arr = np.asarray(values, dtype=np.float64)
    return PriceStats(
        high=float(arr.max()),
        low=float(arr.min()),
        average=float(arr.mean()),
    )
