"""Domain-specific exceptions for the dialer service.

API layers map these onto HTTP responses; ``detail`` is always safe to show to a client.
"""

from __future__ import annotations


class DialerError(Exception):
    """Failure that maps onto an HTTP status and a client-safe ``{"error": detail}`` body."""

    status_code: int = 500
    default_detail: str = "Dialer error"

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail or self.default_detail)
        self.detail = detail or self.default_detail


class ConfigurationError(DialerError):
    default_detail = "Missing required configuration."


class TokenSigningError(DialerError):
    status_code = 500
    default_detail = "Failed to generate token"
