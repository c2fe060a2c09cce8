"""Main application entry point."""

import argparse
import asyncio
import logging
import signal
import sys
from contextlib import asynccontextmanager
from dataclasses import dataclass

# Configure logging FIRST, before any other imports
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
)

# Reduce noise from third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("asyncio").setLevel(logging.WARNING)

import orjson
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse

from alphabot import __version__
from alphabot.api import SERVICE_NAME, router
from alphabot.api.routes import health
from alphabot.clients import LedgerClient
from alphabot.clients.market_data import MarketDataFetcher
from alphabot.config import Settings, get_settings
from alphabot.services import (
    Orchestrator,
    build_ledger_client,
    build_strategy,
    create_market_fetcher,
)
from alphacore.strategy import Strategy

logger = logging.getLogger(__name__)


@dataclass
class Components:
    """Pipeline components built from one Settings instance."""

    fetcher: MarketDataFetcher
    strategy: Strategy
    ledger: LedgerClient | None
    orchestrator: Orchestrator

    async def aclose(self) -> None:
        """Release every HTTP client the components own."""
        await self.fetcher.close()
        close = getattr(self.strategy, "close", None)
        if close is not None:
            await close()
        if self.ledger is not None:
            await self.ledger.close()


def build_components(settings: Settings) -> Components:
    """Wire fetcher, strategy, ledger and orchestrator from settings."""
    fetcher = create_market_fetcher(settings)
    strategy = build_strategy(settings.strategy, settings)
    ledger = build_ledger_client(settings)
    orchestrator = Orchestrator(
        fetcher,
        strategy,
        ledger,
        interval_seconds=settings.prediction_interval_seconds,
        allow_overlap=settings.allow_overlapping_cycles,
    )
    return Components(fetcher, strategy, ledger, orchestrator)


def create_app(settings: Settings | None = None, *, run_schedule: bool = True) -> FastAPI:
    """Create the FastAPI app.

    With ``run_schedule`` the lifespan builds the pipeline and starts the
    orchestrator; without it only the stateless routes are usable.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.settings = settings
        components: Components | None = None

        if run_schedule:
            logger.info("Starting AlphaBot prediction service...")
            components = build_components(settings)
            app.state.orchestrator = components.orchestrator
            components.orchestrator.start()

        yield

        if components is not None:
            logger.info("Shutting down...")
            await components.orchestrator.shutdown()
            await components.aclose()
            app.state.orchestrator = None
            logger.info("Shutdown complete")

    app = FastAPI(
        title="AlphaBot",
        description="Scheduled market prediction service",
        version=__version__,
        lifespan=lifespan,
        default_response_class=ORJSONResponse,
    )
    app.state.settings = settings
    app.state.orchestrator = None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router, prefix="/api/v1")
    app.get("/health")(health)

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "name": SERVICE_NAME,
            "version": __version__,
            "docs": "/docs",
            "strategy": settings.strategy,
        }

    return app


async def run_single_cycle(settings: Settings) -> int:
    """Run one cycle, print the signal as JSON and return an exit code."""
    components = build_components(settings)
    try:
        result = await components.orchestrator.run_once()
    except Exception:
        logger.exception("Prediction cycle failed")
        return 1
    finally:
        await components.aclose()

    print(orjson.dumps(result.model_dump(mode="json"), option=orjson.OPT_INDENT_2).decode())
    return 0


async def run_scheduler(settings: Settings) -> None:
    """Run the schedule without the HTTP server until SIGINT/SIGTERM."""
    components = build_components(settings)
    stop_event = asyncio.Event()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop_event.set)

    components.orchestrator.start()
    try:
        await stop_event.wait()
        logger.info("Received shutdown signal")
    finally:
        await components.orchestrator.shutdown()
        await components.aclose()
        logger.info("Shutdown complete")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="AlphaBot prediction service")
    parser.add_argument("--interval", type=float, help="Seconds between prediction cycles")
    parser.add_argument("--strategy", help="Strategy name (e.g. simple-ma, deepseek)")
    parser.add_argument("--once", action="store_true", help="Run a single cycle and exit")
    parser.add_argument("--no-api", action="store_true", help="Run the schedule without the HTTP server")
    return parser.parse_args(argv)


def apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """Return settings with command-line overrides applied."""
    overrides = {}
    if args.interval is not None:
        if args.interval <= 0:
            raise SystemExit("--interval must be positive")
        overrides["prediction_interval_seconds"] = args.interval
    if args.strategy:
        overrides["strategy"] = args.strategy
    return settings.model_copy(update=overrides) if overrides else settings


def main(argv: list[str] | None = None):
    """Run the application."""
    import uvicorn

    args = parse_args(argv)
    settings = apply_overrides(get_settings(), args)
    logging.getLogger().setLevel(settings.log_level.upper())

    if args.once:
        sys.exit(asyncio.run(run_single_cycle(settings)))

    if args.no_api:
        asyncio.run(run_scheduler(settings))
        return

    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
    )


if __name__ == "__main__":
    main()
