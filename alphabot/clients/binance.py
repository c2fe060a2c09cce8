"""Binance spot REST client producing market snapshots.

Endpoints:
- GET /api/v3/ticker/24hr?symbol=X -> 24h ticker (numeric fields as strings)
- GET /api/v3/klines?symbol=X&interval=I&limit=N -> 12-element kline rows
"""

import asyncio
import logging

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from alphabot.clients.market_data import CachedRestFetcher, now_ms
from alphabot.errors import ResponseValidationError
from alphacore.models import MarketSnapshot, PricePoint

logger = logging.getLogger(__name__)

TICKER_TTL_MS = 10_000  # spot price goes stale quickly
KLINES_TTL_MS = 60_000


class Binance24hrTicker(BaseModel):
    """Subset of the 24h ticker response."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    symbol: str
    last_price: float = Field(gt=0, alias="lastPrice")
    price_change_percent: float = Field(alias="priceChangePercent")
    quote_volume: float = Field(ge=0, alias="quoteVolume")


# [openTime, open, high, low, close, volume, closeTime, quoteVolume,
#  trades, takerBuyBase, takerBuyQuote, ignore]
BinanceKline = tuple[int, float, float, float, float, float, int, float, int, float, float, str]

_klines_adapter = TypeAdapter(list[BinanceKline])


def kline_to_price_point(kline: BinanceKline) -> PricePoint:
    """Map a kline row to a PricePoint carrying full OHLCV."""
    open_time, open_, high, low, close, volume = kline[:6]
    return PricePoint(
        timestamp=open_time,
        open=open_,
        high=high,
        low=low,
        close=close,
        price=close,
        volume=volume,
    )


class BinanceMarketFetcher(CachedRestFetcher):
    """Exchange-style fetcher: 24h ticker + hourly candles."""

    def __init__(
        self,
        base_url: str = "https://api.binance.com",
        symbol: str = "ETHUSDT",
        interval: str = "1h",
        limit: int = 200,
        **kwargs,
    ):
        super().__init__(base_url, headers={"Content-Type": "application/json"}, **kwargs)
        self.symbol = symbol
        self.interval = interval
        self.limit = limit

    async def get_ticker(self) -> Binance24hrTicker:
        """Fetch 24h ticker for the configured symbol."""
        return await self._cached(
            f"ticker:{self.symbol}",
            TICKER_TTL_MS,
            self._load_ticker,
        )

    async def _load_ticker(self) -> Binance24hrTicker:
        data = await self._get_json(
            "/api/v3/ticker/24hr",
            {"symbol": self.symbol},
            description=f"Binance ticker {self.symbol}",
        )
        try:
            return Binance24hrTicker.model_validate(data)
        except ValidationError as e:
            raise ResponseValidationError(f"Invalid Binance ticker response: {e}") from e

    async def get_klines(self, interval: str | None = None, limit: int | None = None) -> list[BinanceKline]:
        """
        Fetch historical candles.

        Args:
            interval: Kline interval (e.g., "1h"); defaults to the configured one
            limit: Number of candles (max 1000); defaults to the configured one
        """
        interval = interval or self.interval
        limit = limit or self.limit
        return await self._cached(
            f"klines:{self.symbol}:{interval}:{limit}",
            KLINES_TTL_MS,
            lambda: self._load_klines(interval, limit),
        )

    async def _load_klines(self, interval: str, limit: int) -> list[BinanceKline]:
        data = await self._get_json(
            "/api/v3/klines",
            {"symbol": self.symbol, "interval": interval, "limit": min(limit, 1000)},
            description=f"Binance klines {self.symbol} {interval}",
        )
        try:
            return _klines_adapter.validate_python(data)
        except ValidationError as e:
            raise ResponseValidationError(f"Invalid Binance klines response: {e}") from e

    async def get_market_snapshot(self) -> MarketSnapshot:
        """Fetch ticker and candles concurrently and normalize them."""
        ticker, klines = await asyncio.gather(self.get_ticker(), self.get_klines())

        try:
            return MarketSnapshot(
                timestamp=now_ms(),
                current_price=ticker.last_price,
                price_history=[kline_to_price_point(k) for k in klines],
                volume_24h=ticker.quote_volume,
                change_24h=ticker.price_change_percent,
            )
        except ValidationError as e:
            raise ResponseValidationError(f"Cannot build snapshot from Binance data: {e}") from e
