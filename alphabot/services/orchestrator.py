"""Prediction cycle orchestrator.

Runs fetch -> predict -> submit on a fixed interval. The first cycle starts
immediately on ``start()``; later cycles are triggered by the schedule.
Scheduled cycle failures are logged and never stop the schedule, while
``run_once()`` propagates them to the caller.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from enum import Enum

from alphabot.clients.http import Sleep
from alphabot.clients.ledger import LedgerClient
from alphabot.clients.market_data import MarketDataFetcher
from alphacore.models import OperationResult, Signal
from alphacore.strategy import SignalCallback, Strategy

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SECONDS = 60.0


class OrchestratorState(str, Enum):
    STOPPED = "stopped"
    RUNNING = "running"


@dataclass(frozen=True)
class OrchestratorStatus:
    """Read-only view of the orchestrator."""

    is_running: bool
    interval_ms: int

    def to_dict(self) -> dict:
        return {"isRunning": self.is_running, "intervalMs": self.interval_ms}


class Orchestrator:
    """Drives prediction cycles for one strategy.

    With ``allow_overlap=False`` a schedule tick that arrives while a cycle
    is still in flight is skipped. With ``allow_overlap=True`` every tick
    starts a new cycle regardless of the previous one.
    """

    def __init__(
        self,
        fetcher: MarketDataFetcher,
        strategy: Strategy,
        ledger: LedgerClient | None = None,
        *,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
        allow_overlap: bool = False,
        sleep: Sleep = asyncio.sleep,
    ):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self.fetcher = fetcher
        self.strategy = strategy
        self.ledger = ledger
        self.interval_seconds = interval_seconds
        self.allow_overlap = allow_overlap
        self._sleep = sleep

        self._state = OrchestratorState.STOPPED
        self._timer_task: asyncio.Task | None = None
        self._cycle_tasks: set[asyncio.Task] = set()
        self._cycles_in_flight = 0
        self._callbacks: list[SignalCallback] = []

        self.last_signal: Signal | None = None
        self.last_submission: OperationResult | None = None

    # ------------------------------------------------------------------
    # Callbacks
    # ------------------------------------------------------------------

    def on_signal(self, callback: SignalCallback) -> None:
        """Register callback for every produced signal."""
        self._callbacks.append(callback)

    def off_signal(self, callback: SignalCallback) -> None:
        """Unregister a signal callback (no-op if not registered)."""
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    async def _notify(self, signal: Signal) -> None:
        for callback in list(self._callbacks):
            try:
                await callback(signal)
            except Exception as e:
                logger.error("Signal callback error: %s", e)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def state(self) -> OrchestratorState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state is OrchestratorState.RUNNING

    @property
    def cycles_in_flight(self) -> int:
        return self._cycles_in_flight

    def start(self) -> None:
        """Start the schedule; the first cycle runs immediately.

        Must be called from inside a running event loop.
        """
        if self.is_running:
            logger.warning("Orchestrator already running")
            return

        logger.info(
            "Starting orchestrator: strategy=%s interval=%.1fs ledger=%s",
            self.strategy.name,
            self.interval_seconds,
            "enabled" if self.ledger else "disabled",
        )
        self._state = OrchestratorState.RUNNING
        self._timer_task = asyncio.create_task(self._schedule())

    def stop(self) -> None:
        """Cancel the schedule. In-flight cycles are left to finish."""
        if not self.is_running:
            logger.warning("Orchestrator not running")
            return

        self._state = OrchestratorState.STOPPED
        if self._timer_task:
            self._timer_task.cancel()
            self._timer_task = None
        logger.info("Orchestrator stopped")

    async def shutdown(self) -> None:
        """Stop the schedule and wait for in-flight cycles to finish."""
        timer = self._timer_task
        if self.is_running:
            self.stop()
        if timer is not None:
            try:
                await timer
            except asyncio.CancelledError:
                pass
        if self._cycle_tasks:
            logger.info("Waiting for %d in-flight cycle(s)", len(self._cycle_tasks))
            await asyncio.gather(*self._cycle_tasks, return_exceptions=True)

    def get_status(self) -> OrchestratorStatus:
        return OrchestratorStatus(
            is_running=self.is_running,
            interval_ms=int(self.interval_seconds * 1000),
        )

    # ------------------------------------------------------------------
    # Scheduling
    # ------------------------------------------------------------------

    async def _schedule(self) -> None:
        while True:
            self._trigger_cycle()
            await self._sleep(self.interval_seconds)

    def _trigger_cycle(self) -> None:
        if self._cycles_in_flight and not self.allow_overlap:
            logger.warning("Previous cycle still in flight; skipping this tick")
            return
        # Counted here so a tick arriving before the task runs still sees it
        self._cycles_in_flight += 1
        task = asyncio.create_task(self._scheduled_cycle())
        self._cycle_tasks.add(task)
        task.add_done_callback(self._cycle_tasks.discard)

    async def _scheduled_cycle(self) -> None:
        try:
            await self._execute_cycle()
        except Exception:
            logger.exception("Prediction cycle failed")
        finally:
            self._cycles_in_flight -= 1

    # ------------------------------------------------------------------
    # Cycle
    # ------------------------------------------------------------------

    async def run_once(self) -> Signal:
        """Run one cycle now and return its signal; failures propagate."""
        return await self._execute_cycle()

    async def _execute_cycle(self) -> Signal:
        started = time.perf_counter()
        logger.info("=== Prediction cycle (%s) ===", self.strategy.name)

        snapshot = await self.fetcher.get_market_snapshot()
        logger.info(
            "Current price: $%.2f (%+.2f%% 24h, %d bars)",
            snapshot.current_price,
            snapshot.change_24h,
            len(snapshot),
        )

        signal = await self.strategy.predict(snapshot)
        logger.info(
            "Signal: %s @ $%.2f (confidence %.0f%%) - %s",
            signal.action.value,
            signal.predicted_price,
            signal.confidence * 100,
            signal.reasoning,
        )
        self.last_signal = signal
        await self._notify(signal)

        if self.ledger is not None:
            result = await self.ledger.submit_prediction(signal)
            self.last_submission = result
            if result.success:
                logger.info("Submitted to ledger (certificate=%s)", result.certificate_hash)
            else:
                logger.error("Ledger submission failed: %s", result.error)
        else:
            self.last_submission = None
            logger.info("[SKIP] No ledger client configured")

        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info("=== Cycle complete in %.0fms ===", elapsed_ms)
        return signal
