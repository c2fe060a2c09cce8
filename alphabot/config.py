"""Application configuration."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Market data
    market_data_source: str = "binance"  # "binance" or "coingecko"
    binance_base_url: str = "https://api.binance.com"
    binance_symbol: str = "ETHUSDT"
    kline_interval: str = "1h"
    kline_limit: int = 200
    coingecko_base_url: str = "https://api.coingecko.com/api/v3"
    coingecko_api_key: str = ""
    coingecko_coin_id: str = "ethereum"
    history_days: int = 7
    asset_label: str = "ETH"

    # Strategy
    strategy: str = "simple-ma"
    prediction_interval_seconds: float = 60.0
    allow_overlapping_cycles: bool = False

    # DeepSeek (bearer API key)
    deepseek_api_key: str = ""
    deepseek_base_url: str = "https://api.deepseek.com"
    deepseek_model: str = "deepseek-chat"

    # Google Cloud Vertex AI (application default credentials)
    gcp_project_id: str = ""
    gcp_qwen_model: str = "qwen/qwen3-coder-480b-a35b-instruct-maas"
    gcp_gpt_oss_model: str = "openai/gpt-oss-120b-maas"

    # Ledger (empty endpoint = submissions disabled)
    linera_endpoint: str = ""
    linera_application_id: str = ""
    linera_chain_id: str = ""
    linera_timeout_seconds: float = 30.0

    # Server
    host: str = "0.0.0.0"
    port: int = 3001
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
