"""Signal and ledger state models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

MAX_REASONING_LENGTH = 512


class Action(str, Enum):
    """Trading action."""

    BUY = "BUY"
    SELL = "SELL"
    HOLD = "HOLD"


class Signal(BaseModel):
    """Trading signal produced by exactly one strategy invocation."""

    model_config = ConfigDict(frozen=True)

    timestamp: int = Field(gt=0)
    action: Action
    predicted_price: float = Field(gt=0)
    confidence: float = Field(ge=0, le=1)
    reasoning: str = Field(max_length=MAX_REASONING_LENGTH)
    actual_price: float | None = Field(default=None, gt=0)


class AccuracyMetrics(BaseModel):
    """Rolling accuracy aggregate computed by the ledger."""

    model_config = ConfigDict(frozen=True)

    rmse: float = Field(ge=0)
    directional_accuracy: float = Field(ge=0, le=100)
    total_predictions: int = Field(ge=0)
    correct_predictions: int = Field(ge=0)
    last_updated: int


class BotState(BaseModel):
    """Committed bot state read back from the ledger."""

    model_config = ConfigDict(frozen=True)

    bot_id: str
    latest_signal: Signal | None = None
    accuracy_24h: AccuracyMetrics
    follower_count: int = Field(default=0, ge=0)


class OperationResult(BaseModel):
    """Uniform result of a ledger mutation."""

    success: bool
    certificate_hash: str | None = None
    error: str | None = None
