"""External service clients: market data fetchers and the ledger."""

from alphabot.clients.http import (
    DEFAULT_ATTEMPTS,
    INFERENCE_BASE_DELAY,
    MARKET_DATA_BASE_DELAY,
    backoff_delay,
    fetch_with_retry,
    request_json,
)
from alphabot.clients.market_data import CachedRestFetcher, MarketDataFetcher, now_ms
from alphabot.clients.binance import Binance24hrTicker, BinanceMarketFetcher, kline_to_price_point
from alphabot.clients.coingecko import (
    CoinGeckoHistory,
    CoinGeckoMarketFetcher,
    CoinGeckoQuote,
    history_to_price_points,
)
from alphabot.clients.ledger import (
    LedgerClient,
    LedgerConfig,
    StateQueryResult,
    bot_state_from_wire,
)

__all__ = [
    # Retrying HTTP
    "DEFAULT_ATTEMPTS",
    "MARKET_DATA_BASE_DELAY",
    "INFERENCE_BASE_DELAY",
    "backoff_delay",
    "fetch_with_retry",
    "request_json",
    # Market data
    "MarketDataFetcher",
    "CachedRestFetcher",
    "now_ms",
    "BinanceMarketFetcher",
    "Binance24hrTicker",
    "kline_to_price_point",
    "CoinGeckoMarketFetcher",
    "CoinGeckoQuote",
    "CoinGeckoHistory",
    "history_to_price_points",
    # Ledger
    "LedgerClient",
    "LedgerConfig",
    "StateQueryResult",
    "bot_state_from_wire",
]
