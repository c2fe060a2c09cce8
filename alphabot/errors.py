"""Error taxonomy for the prediction pipeline.

- TransientNetworkError: timeouts, connection failures, non-2xx responses.
  Retried up to the attempt bound, then surfaced to the caller.
- ResponseValidationError: upstream payload does not match its schema.
  Never retried.
- InferenceError: remote strategy failure; absorbed into a fallback signal.
- LedgerError: ledger mutation/query failure; surfaced as a result object.
"""


class AlphaBotError(Exception):
    """Base exception for the service."""


class ConfigurationError(AlphaBotError):
    """A required configuration field is missing or invalid."""


class TransientNetworkError(AlphaBotError):
    """Network call failed after all retry attempts."""

    def __init__(self, message: str, attempts: int = 1):
        super().__init__(message)
        self.attempts = attempts


class ResponseValidationError(AlphaBotError):
    """Upstream response does not match the expected shape."""


class InferenceError(AlphaBotError):
    """Remote inference call, authentication, or response extraction failed."""


class LedgerError(AlphaBotError):
    """Ledger request failed (HTTP status, protocol errors, or timeout)."""
