"""Strategy protocol defining the interface all strategies must implement.

A strategy maps one MarketSnapshot to one Signal. Local strategies compute
the signal directly; remote strategies delegate to an inference backend and
absorb backend failures into a conservative fallback signal.
"""

from __future__ import annotations

from typing import Awaitable, Callable, Protocol, runtime_checkable

from alphacore.models import MarketSnapshot, Signal

SignalCallback = Callable[[Signal], Awaitable[None]]


@runtime_checkable
class Strategy(Protocol):
    """Protocol that all prediction strategies must implement."""

    @property
    def name(self) -> str:
        """Unique strategy identifier (e.g., 'simple-ma')."""
        ...

    async def predict(self, snapshot: MarketSnapshot) -> Signal:
        """Produce a trading signal for the snapshot.

        Args:
            snapshot: Market data fetched for the current cycle.

        Returns:
            A validated Signal.
        """
        ...
