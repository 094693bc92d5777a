"""Async HTTP client for issuer JWKS discovery endpoints."""

from __future__ import annotations

import asyncio
from typing import Any

import httpx
import structlog

from authgate.config import DEFAULT_JWKS_TIMEOUT_SECONDS
from authgate.exceptions import KeyFetchError
from authgate.types import KeySet

JWKS_PATH = "/.well-known/jwks.json"

logger = structlog.get_logger(__name__)


def jwks_url(issuer: str) -> str:
    """Return the well-known JWKS URL for an issuer."""
    return f"{issuer.rstrip('/')}{JWKS_PATH}"


class KeyFetcher:
    """Fetch an issuer's published key set with a bounded timeout."""

    def __init__(
        self,
        timeout: float | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Create fetcher with the default timeout and optional injected transport.

        ``timeout`` bounds the whole fetch, redirects and body included.
        """
        self._timeout = timeout or DEFAULT_JWKS_TIMEOUT_SECONDS
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=self._timeout,
            follow_redirects=True,
        )

    async def fetch_key_set(self, issuer: str) -> KeySet:
        """Fetch and validate the JWKS document published by ``issuer``."""
        url = jwks_url(issuer)
        try:
            async with asyncio.timeout(self._timeout):
                response = await self._client.get(url)
        except (TimeoutError, httpx.TimeoutException) as exc:
            logger.warning("jwks_fetch_failed", issuer=issuer, url=url, cause="timeout")
            raise KeyFetchError(issuer, f"Request timed out: {exc!r}") from exc
        except httpx.RequestError as exc:
            logger.warning("jwks_fetch_failed", issuer=issuer, url=url, cause="transport")
            raise KeyFetchError(issuer, f"Request failed: {exc!r}") from exc

        if response.status_code >= 300:
            logger.warning(
                "jwks_fetch_failed", issuer=issuer, url=url, status_code=response.status_code
            )
            raise KeyFetchError(
                issuer,
                f"Unexpected status {response.status_code} {response.reason_phrase}".rstrip(),
                response.status_code,
            )

        payload = self._json_object(issuer, response)
        keys = payload.get("keys")
        if not isinstance(keys, list):
            raise KeyFetchError(issuer, "Invalid JWKS response payload.", response.status_code)
        return {"keys": [key for key in keys if isinstance(key, dict)]}

    async def aclose(self) -> None:
        """Close underlying HTTP client if owned by this instance."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> KeyFetcher:
        """Enter async context manager."""
        return self

    async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        """Exit async context manager and close managed resources."""
        del exc_type, exc, tb
        await self.aclose()

    @staticmethod
    def _json_object(issuer: str, response: httpx.Response) -> dict[str, Any]:
        """Return response JSON as object."""
        try:
            payload = response.json()
        except ValueError as exc:
            raise KeyFetchError(
                issuer, "Issuer returned invalid JSON.", response.status_code
            ) from exc
        if not isinstance(payload, dict):
            raise KeyFetchError(
                issuer, "Issuer returned invalid JSON object.", response.status_code
            )
        return payload
