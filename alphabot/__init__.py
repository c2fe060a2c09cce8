"""AlphaBot prediction service: fetchers, inference backends, ledger client, orchestrator."""

__version__ = "0.1.0"
