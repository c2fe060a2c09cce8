"""REST API routes."""

import logging
import time

from fastapi import APIRouter, Request
from fastapi.responses import ORJSONResponse
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from alphabot.config import Settings, get_settings
from alphabot.services import Orchestrator, build_strategy
from alphacore.models import MarketSnapshot, Signal

logger = logging.getLogger(__name__)

SERVICE_NAME = "alphabot-bot-service"

router = APIRouter()


class PredictRequest(BaseModel):
    """Body of POST /api/v1/predict."""

    model_config = ConfigDict(populate_by_name=True)

    strategy: str = Field(min_length=1)
    market_data: MarketSnapshot = Field(alias="marketData")


def _error(status_code: int, error: str, **extra) -> ORJSONResponse:
    return ORJSONResponse(status_code=status_code, content={"error": error, **extra})


def _settings(request: Request) -> Settings:
    return getattr(request.app.state, "settings", None) or get_settings()


def _orchestrator(request: Request) -> Orchestrator | None:
    return getattr(request.app.state, "orchestrator", None)


def _now_ms() -> int:
    return int(time.time() * 1000)


@router.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "ok", "timestamp": _now_ms(), "service": SERVICE_NAME}


@router.post("/predict")
async def predict(request: Request):
    """Run one prediction with the named strategy on caller-supplied market data.

    Returns ``{signal, executionTimeMs}``.
    """
    try:
        body = await request.json()
    except ValueError:
        return _error(400, "Invalid request", details="Body must be JSON")

    try:
        payload = PredictRequest.model_validate(body)
    except ValidationError as e:
        logger.error("Predict validation error: %s", e)
        return _error(400, "Invalid request", details=e.errors(include_url=False, include_context=False))

    snapshot = payload.market_data
    logger.info(
        "Predict: strategy=%s price=$%.2f", payload.strategy, snapshot.current_price
    )

    try:
        strategy = build_strategy(payload.strategy, _settings(request))
    except KeyError as e:
        return _error(400, "Invalid request", details=str(e.args[0]) if e.args else str(e))
    except Exception as e:
        logger.error("Strategy construction failed: %s", e)
        return _error(500, "Internal server error", message=str(e))

    started = time.perf_counter()
    try:
        signal = await strategy.predict(snapshot)
    except Exception as e:
        logger.exception("Strategy %s failed", payload.strategy)
        return _error(500, "Internal server error", message=str(e))
    finally:
        close = getattr(strategy, "close", None)
        if close is not None:
            await close()
    execution_time_ms = round((time.perf_counter() - started) * 1000)

    try:
        signal = Signal.model_validate(
            signal.model_dump() if isinstance(signal, Signal) else signal
        )
    except ValidationError as e:
        logger.error("Strategy returned invalid signal: %s", e)
        return _error(
            500,
            "Strategy returned invalid signal",
            details=e.errors(include_url=False, include_context=False),
        )

    logger.info(
        "Predict: %s @ $%.2f (confidence %.1f%%) [%dms]",
        signal.action.value,
        signal.predicted_price,
        signal.confidence * 100,
        execution_time_ms,
    )
    return {"signal": signal.model_dump(mode="json"), "executionTimeMs": execution_time_ms}


@router.get("/status")
async def get_status(request: Request):
    """Orchestrator status."""
    orchestrator = _orchestrator(request)
    if orchestrator is None:
        return _error(503, "Orchestrator not available")
    return orchestrator.get_status().to_dict()


@router.post("/run-once")
async def run_once(request: Request):
    """Run one prediction cycle immediately and return its signal."""
    orchestrator = _orchestrator(request)
    if orchestrator is None:
        return _error(503, "Orchestrator not available")

    try:
        signal = await orchestrator.run_once()
    except Exception as e:
        logger.exception("Manual cycle failed")
        return _error(502, "Cycle failed", message=str(e))

    submission = orchestrator.last_submission
    return {
        "signal": signal.model_dump(mode="json"),
        "submission": submission.model_dump() if submission else None,
    }
