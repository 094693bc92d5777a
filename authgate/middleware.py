"""Starlette middleware gating requests on a verified token."""

from __future__ import annotations

from collections.abc import Callable, Sequence

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from authgate.cache import KeyCache
from authgate.client import KeyFetcher
from authgate.config import DEFAULT_HEADER_NAME, DEFAULT_JWKS_TIMEOUT_SECONDS, AuthOptions
from authgate.error_handlers import unauthorized_response
from authgate.pipeline import Authorizer
from authgate.revocation import RevocationRegistry


def _extract_token(request: Request, header_name: str) -> str | None:
    """Return the raw token carried in ``header_name``, if any."""
    stripped = request.headers.get(header_name, "").strip()
    return stripped or None


class TokenAuthMiddleware(BaseHTTPMiddleware):
    """Verify the request token against the issuer's JWKS and inject its claims.

    Misconfiguration and unreachable issuers raise out of the middleware so the
    hosting application's error handling sees them; they never produce a 401.
    """

    def __init__(
        self,
        app,
        issuer: str | None = None,
        audience: str | None = None,
        algorithms: str | Sequence[str] | None = None,
        header_name: str = DEFAULT_HEADER_NAME,
        jwks_timeout_seconds: float = DEFAULT_JWKS_TIMEOUT_SECONDS,
        options: AuthOptions | None = None,
        key_fetcher: KeyFetcher | None = None,
        key_cache: KeyCache | None = None,
        revocation_registry: RevocationRegistry | None = None,
        now: Callable[[], float] | None = None,
    ) -> None:
        """Validate options and build the authorize pipeline."""
        super().__init__(app)
        self._options = options or AuthOptions.build(
            issuer=issuer,
            audience=audience,
            algorithms=algorithms,
            header_name=header_name,
            jwks_timeout_seconds=jwks_timeout_seconds,
        )
        if key_cache is None and key_fetcher is not None:
            key_cache = KeyCache(key_fetcher)
        self._authorizer = Authorizer(
            self._options,
            key_cache=key_cache,
            revocation_registry=revocation_registry,
            now=now,
        )

    async def dispatch(self, request: Request, call_next) -> Response:
        """Authorize the request and attach verified claims to request state."""
        token = _extract_token(request, self._options.header_name)
        decision = await self._authorizer.authorize(token)
        if not decision.authorized:
            return unauthorized_response()

        request.state.user = decision.claims
        return await call_next(request)
