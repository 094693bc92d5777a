"""Exception handlers enforcing the gate's rejection response contract."""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from authgate.exceptions import GateUnauthorizedError

UNAUTHORIZED_BODY = {"status": "unauthorized"}


def unauthorized_response() -> JSONResponse:
    """Build the fixed rejection payload shared by every authorization failure."""
    return JSONResponse(status_code=401, content=UNAUTHORIZED_BODY)


def register_exception_handlers(app: FastAPI) -> None:
    """Map gate authorization failures raised in routes to the fixed 401 body."""

    @app.exception_handler(GateUnauthorizedError)
    async def handle_unauthorized(request: Request, exc: GateUnauthorizedError) -> JSONResponse:
        del request, exc
        return unauthorized_response()
