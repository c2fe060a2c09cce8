"""CoinGecko REST client producing market snapshots.

Endpoints:
- GET /simple/price?ids=X&vs_currencies=usd&include_market_cap=true&...
- GET /coins/{id}/market_chart?vs_currency=usd&days=D
"""

import asyncio
import logging

from pydantic import BaseModel, ConfigDict, ValidationError

from alphabot.clients.market_data import CachedRestFetcher, now_ms
from alphabot.errors import ResponseValidationError
from alphacore.models import MarketSnapshot, PricePoint

logger = logging.getLogger(__name__)

PRICE_TTL_MS = 60_000
HISTORY_TTL_MS = 300_000


class CoinGeckoQuote(BaseModel):
    """Price entry of a /simple/price response."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    usd: float
    usd_market_cap: float | None = None
    usd_24h_vol: float | None = None
    usd_24h_change: float | None = None


class CoinGeckoHistory(BaseModel):
    """A /market_chart response: [timestamp_ms, value] pairs."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    prices: list[tuple[float, float]]
    market_caps: list[tuple[float, float]] | None = None
    total_volumes: list[tuple[float, float]] | None = None


def history_to_price_points(history: CoinGeckoHistory) -> list[PricePoint]:
    """Map price pairs to PricePoints, joining volume by exact timestamp."""
    volumes = {int(ts): vol for ts, vol in (history.total_volumes or [])}
    points = [
        PricePoint(timestamp=int(ts), price=price, volume=volumes.get(int(ts)))
        for ts, price in history.prices
    ]
    points.sort(key=lambda p: p.timestamp)
    return points


class CoinGeckoMarketFetcher(CachedRestFetcher):
    """Aggregator-style fetcher: simple price + daily history."""

    def __init__(
        self,
        base_url: str = "https://api.coingecko.com/api/v3",
        api_key: str = "",
        coin_id: str = "ethereum",
        days: int = 7,
        **kwargs,
    ):
        headers = {"Content-Type": "application/json"}
        if api_key:
            headers["x-cg-demo-api-key"] = api_key
        super().__init__(base_url, headers=headers, **kwargs)
        self.coin_id = coin_id
        self.days = days

    async def get_current_price(self) -> CoinGeckoQuote:
        """Fetch current price with market cap, 24h volume and 24h change."""
        return await self._cached(
            f"price:{self.coin_id}",
            PRICE_TTL_MS,
            self._load_current_price,
        )

    async def _load_current_price(self) -> CoinGeckoQuote:
        data = await self._get_json(
            "/simple/price",
            {
                "ids": self.coin_id,
                "vs_currencies": "usd",
                "include_market_cap": "true",
                "include_24hr_vol": "true",
                "include_24hr_change": "true",
            },
            description=f"CoinGecko price {self.coin_id}",
        )
        if not isinstance(data, dict) or self.coin_id not in data:
            raise ResponseValidationError(
                f"CoinGecko price response missing '{self.coin_id}'"
            )
        try:
            return CoinGeckoQuote.model_validate(data[self.coin_id])
        except ValidationError as e:
            raise ResponseValidationError(f"Invalid CoinGecko price response: {e}") from e

    async def get_historical_prices(self, days: int | None = None) -> CoinGeckoHistory:
        """Fetch the price/volume series for the last ``days`` days."""
        days = days or self.days
        return await self._cached(
            f"history:{self.coin_id}:{days}",
            HISTORY_TTL_MS,
            lambda: self._load_history(days),
        )

    async def _load_history(self, days: int) -> CoinGeckoHistory:
        # interval is chosen by CoinGecko from the day count on the free tier
        data = await self._get_json(
            f"/coins/{self.coin_id}/market_chart",
            {"vs_currency": "usd", "days": str(days)},
            description=f"CoinGecko history {self.coin_id} {days}d",
        )
        try:
            return CoinGeckoHistory.model_validate(data)
        except ValidationError as e:
            raise ResponseValidationError(f"Invalid CoinGecko history response: {e}") from e

    async def get_market_snapshot(self) -> MarketSnapshot:
        """Fetch price and history concurrently and normalize them."""
        quote, history = await asyncio.gather(
            self.get_current_price(),
            self.get_historical_prices(),
        )

        try:
            return MarketSnapshot(
                timestamp=now_ms(),
                current_price=quote.usd,
                price_history=history_to_price_points(history),
                volume_24h=quote.usd_24h_vol or 0.0,
                change_24h=quote.usd_24h_change or 0.0,
                market_cap=quote.usd_market_cap or None,
            )
        except ValidationError as e:
            raise ResponseValidationError(f"Cannot build snapshot from CoinGecko data: {e}") from e
