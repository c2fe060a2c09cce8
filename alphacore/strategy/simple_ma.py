"""Simple moving average crossover strategy.

Compares a short and a long SMA over the close series:
- short SMA more than 2% above long SMA -> BUY
- short SMA more than 2% below long SMA -> SELL
- otherwise -> HOLD

This module is pure business logic with no I/O dependencies.
"""

import logging
from dataclasses import dataclass

from alphacore.indicators import latest_sma
from alphacore.models import Action, MarketSnapshot, Signal
from alphacore.strategy.registry import register_strategy

logger = logging.getLogger(__name__)

SIMPLE_MA_STRATEGY_NAME = "simple-ma"


@dataclass(frozen=True)
class SimpleMAConfig:
    """Parameters for the SMA crossover strategy."""

    short_period: int = 20
    long_period: int = 50
    spread_threshold: float = 0.02
    min_move: float = 0.01
    max_confidence: float = 0.9
    hold_confidence: float = 0.5


@register_strategy(SIMPLE_MA_STRATEGY_NAME)
class SimpleMAStrategy:
    """Deterministic SMA crossover baseline."""

    def __init__(self, config: SimpleMAConfig | None = None):
        self.config = config or SimpleMAConfig()

    @property
    def name(self) -> str:
        return SIMPLE_MA_STRATEGY_NAME

    async def predict(self, snapshot: MarketSnapshot) -> Signal:
        """Generate a signal from the snapshot's close series."""
        closes = snapshot.get_closes() or [snapshot.current_price]

        sma_short = latest_sma(closes, self.config.short_period)
        sma_long = latest_sma(closes, self.config.long_period)
        spread = (sma_short - sma_long) / sma_long

        action, confidence = self._determine_action(spread)
        predicted_price = self._predict_price(snapshot.current_price, spread, action)

        logger.debug(
            "%s: sma%d=%.2f sma%d=%.2f spread=%.4f -> %s",
            self.name,
            self.config.short_period,
            sma_short,
            self.config.long_period,
            sma_long,
            spread,
            action.value,
        )

        return Signal(
            timestamp=snapshot.timestamp,
            action=action,
            predicted_price=predicted_price,
            confidence=confidence,
            reasoning=self._reasoning(sma_short, sma_long, spread, action, snapshot.current_price),
        )

    def _determine_action(self, spread: float) -> tuple[Action, float]:
        cfg = self.config
        if spread > cfg.spread_threshold:
            return Action.BUY, min(0.5 + spread * 5, cfg.max_confidence)
        if spread < -cfg.spread_threshold:
            return Action.SELL, min(0.5 + abs(spread) * 5, cfg.max_confidence)
        return Action.HOLD, cfg.hold_confidence

    def _predict_price(self, current_price: float, spread: float, action: Action) -> float:
        if action == Action.BUY:
            return current_price * (1 + max(spread, self.config.min_move))
        if action == Action.SELL:
            return current_price * (1 + min(spread, -self.config.min_move))
        return current_price * (1 + spread * 0.5)

    def _reasoning(
        self,
        sma_short: float,
        sma_long: float,
        spread: float,
        action: Action,
        current_price: float,
    ) -> str:
        trend = {Action.BUY: "Bullish", Action.SELL: "Bearish"}.get(action, "Neutral")
        pct = spread * 100
        sign = "+" if pct > 0 else ""
        return (
            f"SMA{self.config.short_period}=${sma_short:.2f} vs "
            f"SMA{self.config.long_period}=${sma_long:.2f} ({sign}{pct:.2f}%). "
            f"{trend} trend. Current=${current_price:.2f}"
        )
