"""Prompt construction and tolerant response parsing for LLM strategies.

The user prompt embeds the full candle history plus summary statistics and
requires the model to end its reply with a fixed answer block::

    ACTION: BUY|SELL|HOLD
    PRICE: <usd>
    CONFIDENCE: <0-100>
    REASONING: <text>

Parsing never raises: fields missing or unparsable keep their defaults.
"""

from __future__ import annotations

import math
import re
from datetime import datetime, timezone

from alphacore.indicators import price_stats
from alphacore.models import MAX_REASONING_LENGTH, Action, MarketSnapshot, Signal

DEFAULT_CONFIDENCE = 0.5
FALLBACK_CONFIDENCE = 0.1
NO_REASONING = "No reasoning provided"

_LEADING_FLOAT = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
_CURRENCY_CHARS = re.compile(r"[$€£¥,]")


def system_prompt(asset: str = "ETH") -> str:
    """System instruction shared by all remote backends."""
    return (
        f"You are an expert cryptocurrency trader specializing in {asset} price predictions.\n"
        "Analyze market data using technical analysis and market psychology to provide "
        "clear trading signals.\n"
        "IMPORTANT: After your analysis, you MUST provide your final answer in the exact "
        "format specified."
    )


def _format_candle(index: int, total: int, point) -> str:
    hours_ago = total - index
    hhmm = datetime.fromtimestamp(point.timestamp / 1000, tz=timezone.utc).strftime("%H:%M")
    close = point.close if point.close is not None else point.price
    open_ = point.open if point.open is not None else close
    high = point.high if point.high is not None else close
    low = point.low if point.low is not None else close
    volume_k = (point.volume or 0.0) / 1000
    return (
        f"{hours_ago}h ago ({hhmm}): O=${open_:.2f} H=${high:.2f} "
        f"L=${low:.2f} C=${close:.2f} V={volume_k:.1f}k"
    )


def build_user_prompt(snapshot: MarketSnapshot, asset: str = "ETH") -> str:
    """Build the user prompt embedding the whole history of the snapshot."""
    history = snapshot.price_history
    total = len(history)
    candles = "\n".join(_format_candle(i, total, p) for i, p in enumerate(history))
    stats = price_stats(snapshot.get_closes() or [snapshot.current_price])

    return f"""
Current {asset} Market Data ({total} hourly candles):
- Current Price: ${snapshot.current_price:.2f}
- 24h Change: {snapshot.change_24h:.2f}%
- 24h Volume: ${snapshot.volume_24h:,.2f}

Statistics over {total}h period:
- High: ${stats.high:.2f}
- Low: ${stats.low:.2f}
- Average: ${stats.average:.2f}

Complete OHLC Candlesticks (all {total} hourly bars):
{candles}

Task: Predict {asset} price movement in the next hour based on technical analysis of the complete dataset above.

You may perform your analysis and reasoning first, then provide your final prediction.

At the END of your response, provide your final answer in this EXACT format:
ACTION: [BUY, SELL, or HOLD]
PRICE: [predicted price in USD, e.g., 3575.50]
CONFIDENCE: [0-100, e.g., 75]
REASONING: [max 200 chars explaining your technical analysis]

Example final answer:
ACTION: BUY
PRICE: 3575.50
CONFIDENCE: 78
REASONING: Bullish divergence on RSI, golden cross forming, strong support at $3550 with increasing volume. Targeting $3600 resistance.
"""


def _parse_float(text: str) -> float | None:
    """Parse the leading number of ``text``; None when absent or not finite."""
    match = _LEADING_FLOAT.match(text.strip())
    if match is None:
        return None
    value = float(match.group(0))
    return value if math.isfinite(value) else None


def parse_response(content: str, snapshot: MarketSnapshot) -> Signal:
    """Parse a free-text model reply into a Signal.

    Lines are scanned in order and the last matching line wins per field.
    """
    action = Action.HOLD
    predicted_price = snapshot.current_price
    confidence = DEFAULT_CONFIDENCE
    reasoning = NO_REASONING

    for raw_line in content.splitlines():
        line = raw_line.strip()
        if not line:
            continue
        label, sep, rest = line.partition(":")
        if not sep:
            continue
        rest = rest.strip()

        if label == "ACTION":
            upper = rest.upper()
            if "BUY" in upper:
                action = Action.BUY
            elif "SELL" in upper:
                action = Action.SELL
            else:
                action = Action.HOLD
        elif label == "PRICE":
            parsed = _parse_float(_CURRENCY_CHARS.sub("", rest))
            if parsed is not None and parsed > 0:
                predicted_price = parsed
        elif label == "CONFIDENCE":
            parsed = _parse_float(rest.replace("%", ""))
            if parsed is not None:
                confidence = min(max(parsed / 100, 0.0), 1.0)
        elif label == "REASONING":
            reasoning = rest[:MAX_REASONING_LENGTH]

    return Signal(
        timestamp=snapshot.timestamp,
        action=action,
        predicted_price=predicted_price,
        confidence=confidence,
        reasoning=reasoning,
    )


def fallback_signal(snapshot: MarketSnapshot, cause: BaseException | str) -> Signal:
    """Conservative HOLD signal used when a remote prediction fails."""
    message = str(cause) or type(cause).__name__
    return Signal(
        timestamp=snapshot.timestamp,
        action=Action.HOLD,
        predicted_price=snapshot.current_price,
        confidence=FALLBACK_CONFIDENCE,
        reasoning=f"Error during prediction: {message}"[:MAX_REASONING_LENGTH],
    )
