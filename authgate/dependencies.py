"""FastAPI dependencies for reading the gate's verified claims."""

from __future__ import annotations

from typing import Any

from fastapi import Request

from authgate.exceptions import GateUnauthorizedError


def get_token_claims(request: Request) -> dict[str, Any]:
    """Return the verified token payload set by TokenAuthMiddleware.

    Raises GateUnauthorizedError, which ``register_exception_handlers`` turns
    into the fixed 401 body.
    """
    claims = getattr(request.state, "user", None)
    if not isinstance(claims, dict):
        raise GateUnauthorizedError("No verified token attached to request.")
    return claims
