"""Gate exception hierarchy."""

from __future__ import annotations

MISCONFIGURED_MESSAGE = (
    "Auth middleware misconfigured. Missing one of required Options (issuer, audience, algorithms)"
)


class GateError(Exception):
    """Base class for all gate-specific exceptions."""


class GateConfigurationError(GateError):
    """Raised when the gate is constructed without its required options."""

    def __init__(self, detail: str = MISCONFIGURED_MESSAGE) -> None:
        super().__init__(detail)
        self.detail = detail


class KeyFetchError(GateError):
    """Raised when an issuer's JWKS document cannot be retrieved."""

    def __init__(self, issuer: str, cause: str, status_code: int | None = None) -> None:
        """Initialize with the failing issuer and the underlying cause."""
        super().__init__(
            f"Failed to retrieve /.well-known/jwks.json from issuer: {issuer}\n{cause}"
        )
        self.issuer = issuer
        self.cause = cause
        self.status_code = status_code


class TokenVerificationError(GateError):
    """Raised when a token fails signature verification or a claim check.

    The reason code is for internal diagnostics only and never reaches the client.
    """

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class GateUnauthorizedError(GateError):
    """Raised from route dependencies when no verified token is attached."""
