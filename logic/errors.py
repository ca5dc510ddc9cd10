"""Error taxonomy for the AI Dresser service."""

from __future__ import annotations

from datetime import datetime


class DresserError(Exception):
    """Base class for request-scoped AI Dresser failures."""

    code = "dresser_error"


class InsufficientCatalog(DresserError):
    """No look could be formed from the eligible products.

    The engine returns an empty result instead of raising; the agent reports
    this condition as ``not_found`` using ``code`` and the message.
    """

    code = "insufficient_catalog"

    def __init__(self, products_analyzed: int) -> None:
        super().__init__(f"No look could be assembled from {products_analyzed} products")
        self.products_analyzed = products_analyzed


class AccessDenied(DresserError):
    """Raised when the user has no free or bonus session left today."""

    code = "no_sessions_available"

    def __init__(self, user_id: str, reset_at: datetime, message: str | None = None) -> None:
        super().__init__(message or "No AI Dresser sessions left today")
        self.user_id = user_id
        self.reset_at = reset_at


class UnknownSession(AccessDenied):
    """Raised when a request names a session that was never granted to the user."""

    code = "invalid_session"

    def __init__(self, user_id: str, reset_at: datetime) -> None:
        super().__init__(user_id, reset_at, message="This AI Dresser session is not valid for your account")


class UpstreamUnavailable(DresserError):
    """Raised when a store or provider read/write fails."""

    code = "upstream_unavailable"

    def __init__(self, dependency: str, message: str | None = None) -> None:
        super().__init__(message or f"{dependency} is unavailable")
        self.dependency = dependency


__all__ = ["DresserError", "InsufficientCatalog", "AccessDenied", "UnknownSession", "UpstreamUnavailable"]
