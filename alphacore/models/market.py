"""Market data models consumed by strategies."""

from pydantic import BaseModel, ConfigDict, Field, model_validator


class PricePoint(BaseModel):
    """One historical sample (an OHLCV candle or a bare price)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    timestamp: int  # ms since epoch
    price: float = Field(gt=0)
    open: float | None = None
    high: float | None = None
    low: float | None = None
    close: float | None = None
    volume: float | None = Field(default=None, ge=0)

    @model_validator(mode="before")
    @classmethod
    def _alias_price_and_close(cls, data):
        """Accept either ``price`` or ``close`` and fill in the other."""
        if isinstance(data, dict):
            if data.get("price") is None and data.get("close") is not None:
                data = {**data, "price": data["close"]}
            elif data.get("close") is None and data.get("price") is not None:
                data = {**data, "close": data["price"]}
        return data

    @property
    def has_ohlc(self) -> bool:
        """True when the point carries a full candle."""
        return None not in (self.open, self.high, self.low, self.close)


class MarketSnapshot(BaseModel):
    """Normalized view of current and historical market data for one cycle."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    timestamp: int = Field(gt=0)  # ms since epoch
    current_price: float = Field(gt=0, alias="currentPrice")
    price_history: list[PricePoint] = Field(default_factory=list, alias="priceHistory")
    volume_24h: float = Field(default=0.0, ge=0, alias="volume24h")
    change_24h: float = Field(default=0.0, alias="change24h")
    market_cap: float | None = Field(default=None, gt=0, alias="marketCap")

    @model_validator(mode="after")
    def _check_history_order(self):
        timestamps = [p.timestamp for p in self.price_history]
        if any(b < a for a, b in zip(timestamps, timestamps[1:])):
            raise ValueError("price_history must be ordered by ascending timestamp")
        return self

    def get_closes(self) -> list[float]:
        """Get list of close prices (falls back to ``price``)."""
        return [p.close if p.close is not None else p.price for p in self.price_history]

    def __len__(self) -> int:
        return len(self.price_history)
