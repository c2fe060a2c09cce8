"""Build pipeline components from Settings."""

from __future__ import annotations

import logging

import httpx

from alphabot.clients import BinanceMarketFetcher, CoinGeckoMarketFetcher, LedgerClient, LedgerConfig
from alphabot.clients.market_data import MarketDataFetcher
from alphabot.config import Settings
from alphabot.errors import ConfigurationError
from alphabot.inference import REMOTE_STRATEGY_NAMES
from alphacore.strategy import Strategy, create_strategy

logger = logging.getLogger(__name__)

MARKET_DATA_SOURCES = ("binance", "coingecko")


def create_market_fetcher(
    settings: Settings,
    client: httpx.AsyncClient | None = None,
) -> MarketDataFetcher:
    """Create the market data fetcher selected by ``market_data_source``."""
    source = settings.market_data_source.lower()
    if source == "binance":
        return BinanceMarketFetcher(
            base_url=settings.binance_base_url,
            symbol=settings.binance_symbol,
            interval=settings.kline_interval,
            limit=settings.kline_limit,
            client=client,
        )
    if source == "coingecko":
        return CoinGeckoMarketFetcher(
            base_url=settings.coingecko_base_url,
            api_key=settings.coingecko_api_key,
            coin_id=settings.coingecko_coin_id,
            days=settings.history_days,
            client=client,
        )
    raise ConfigurationError(
        f"Unknown market data source '{settings.market_data_source}'. "
        f"Expected one of: {', '.join(MARKET_DATA_SOURCES)}"
    )


def build_strategy(
    name: str,
    settings: Settings,
    http_client: httpx.AsyncClient | None = None,
) -> Strategy:
    """Resolve a registered strategy name to a configured instance.

    Raises:
        KeyError: Unknown strategy name.
        ConfigurationError: A remote backend is missing its credentials.
    """
    if name in REMOTE_STRATEGY_NAMES:
        strategy = create_strategy(name, settings=settings, client=http_client)
    else:
        strategy = create_strategy(name)
    logger.info("Strategy: %s", strategy.name)
    return strategy


def build_ledger_client(
    settings: Settings,
    client: httpx.AsyncClient | None = None,
) -> LedgerClient | None:
    """Create the ledger client, or None when no endpoint is configured."""
    if not settings.linera_endpoint:
        logger.info("No ledger endpoint configured; submissions disabled")
        return None
    if not settings.linera_application_id or not settings.linera_chain_id:
        raise ConfigurationError(
            "LINERA_APPLICATION_ID and LINERA_CHAIN_ID are required when LINERA_ENDPOINT is set"
        )
    config = LedgerConfig(
        endpoint=settings.linera_endpoint,
        application_id=settings.linera_application_id,
        chain_id=settings.linera_chain_id,
        timeout=settings.linera_timeout_seconds,
    )
    logger.info("Ledger: %s (application %s)", config.endpoint, config.application_url)
    return LedgerClient(config, client=client)
