"""Shared fixtures."""

import pytest

from alphacore.models import MarketSnapshot, PricePoint

BASE_TS = 1_700_000_000_000
HOUR_MS = 3_600_000


def _make_snapshot(closes, current_price=None, volume_24h=1_250_000.0, change_24h=1.5):
    history = [
        PricePoint(
            timestamp=BASE_TS + i * HOUR_MS,
            open=close,
            high=close * 1.01,
            low=close * 0.99,
            close=close,
            volume=1_000.0,
        )
        for i, close in enumerate(closes)
    ]
    if current_price is None:
        current_price = closes[-1] if closes else 3500.0
    return MarketSnapshot(
        timestamp=BASE_TS + len(closes) * HOUR_MS,
        current_price=current_price,
        price_history=history,
        volume_24h=volume_24h,
        change_24h=change_24h,
    )


@pytest.fixture
def make_snapshot():
    """Factory for snapshots with one hourly candle per close."""
    return _make_snapshot


@pytest.fixture
def flat_snapshot() -> MarketSnapshot:
    return _make_snapshot([3500.0] * 50)


@pytest.fixture
def rising_snapshot() -> MarketSnapshot:
    """Last 20 closes average 5% above the prior 30."""
    return _make_snapshot([100.0] * 30 + [105.0] * 20)


@pytest.fixture
def snapshot() -> MarketSnapshot:
    return _make_snapshot([3400.0 + i for i in range(24)], current_price=3450.0)
