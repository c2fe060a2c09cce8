"""Tests for the process entry point."""

from unittest.mock import AsyncMock, patch

import orjson
import pytest

from alphabot.config import Settings
from alphabot.main import apply_overrides, build_components, parse_args, run_single_cycle


class TestCli:
    """Tests for argument handling."""

    def test_overrides(self):
        args = parse_args(["--interval", "5", "--strategy", "deepseek", "--no-api"])

        settings = apply_overrides(Settings(), args)

        assert args.no_api
        assert not args.once
        assert settings.prediction_interval_seconds == 5.0
        assert settings.strategy == "deepseek"

    def test_no_overrides_keeps_settings(self):
        settings = Settings()
        assert apply_overrides(settings, parse_args([])) is settings

    def test_interval_must_be_positive(self):
        with pytest.raises(SystemExit):
            apply_overrides(Settings(), parse_args(["--interval", "0"]))


class TestComponents:
    """Tests for component wiring."""

    def test_build_components(self):
        components = build_components(Settings(prediction_interval_seconds=30, allow_overlapping_cycles=True))

        assert components.ledger is None
        assert components.orchestrator.interval_seconds == 30
        assert components.orchestrator.allow_overlap is True
        assert components.strategy.name == "simple-ma"

    @pytest.mark.asyncio
    async def test_run_single_cycle(self, snapshot, capsys):
        with patch(
            "alphabot.clients.binance.BinanceMarketFetcher.get_market_snapshot",
            new=AsyncMock(return_value=snapshot),
        ):
            code = await run_single_cycle(Settings())

        assert code == 0
        printed = orjson.loads(capsys.readouterr().out)
        assert printed["timestamp"] == snapshot.timestamp

    @pytest.mark.asyncio
    async def test_run_single_cycle_failure(self):
        with patch(
            "alphabot.clients.binance.BinanceMarketFetcher.get_market_snapshot",
            new=AsyncMock(side_effect=RuntimeError("exchange down")),
        ):
            code = await run_single_cycle(Settings())

        assert code == 1
