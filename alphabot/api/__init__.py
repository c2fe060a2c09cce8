"""API module."""

from alphabot.api.routes import SERVICE_NAME, router

__all__ = ["router", "SERVICE_NAME"]
