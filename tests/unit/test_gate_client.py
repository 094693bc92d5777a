"""Unit tests for the JWKS key fetcher."""

from __future__ import annotations

import asyncio
import time
from collections.abc import AsyncIterator

import httpx
import pytest

from authgate.client import KeyFetcher, jwks_url
from authgate.exceptions import KeyFetchError

ISSUER = "https://issuer.local"


def test_jwks_url_strips_trailing_slash() -> None:
    """Issuer trailing slash is dropped before appending the well-known path."""
    assert jwks_url("https://issuer.local/") == "https://issuer.local/.well-known/jwks.json"
    assert jwks_url("https://issuer.local/pool") == "https://issuer.local/pool/.well-known/jwks.json"


@pytest.mark.asyncio
async def test_fetch_key_set_returns_keys() -> None:
    """Fetcher requests the well-known path and returns the key list."""

    async def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/.well-known/jwks.json"
        return httpx.Response(
            status_code=200,
            json={"keys": [{"kid": "kid-1", "kty": "RSA", "n": "abc", "e": "AQAB"}]},
        )

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
        fetcher = KeyFetcher(http_client=http_client)
        key_set = await fetcher.fetch_key_set(f"{ISSUER}/")

    assert key_set["keys"][0]["kid"] == "kid-1"


@pytest.mark.asyncio
@pytest.mark.parametrize("status_code", [300, 404, 500])
async def test_fetch_key_set_rejects_non_success_status(status_code: int) -> None:
    """Any status of 300 or above is a fetch error naming the issuer."""

    async def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code=status_code)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
        fetcher = KeyFetcher(http_client=http_client)
        with pytest.raises(KeyFetchError) as exc_info:
            await fetcher.fetch_key_set(ISSUER)

    assert exc_info.value.issuer == ISSUER
    assert exc_info.value.status_code == status_code
    assert ISSUER in str(exc_info.value)


@pytest.mark.asyncio
async def test_fetch_key_set_wraps_timeout() -> None:
    """Timeouts surface as fetch errors rather than raw httpx exceptions."""

    async def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("too slow", request=request)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
        fetcher = KeyFetcher(http_client=http_client)
        with pytest.raises(KeyFetchError) as exc_info:
            await fetcher.fetch_key_set(ISSUER)

    assert "timed out" in exc_info.value.cause
    assert isinstance(exc_info.value.__cause__, httpx.ReadTimeout)


@pytest.mark.asyncio
async def test_fetch_key_set_wraps_network_error() -> None:
    """Connection failures surface as fetch errors."""

    async def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("network down", request=request)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
        fetcher = KeyFetcher(http_client=http_client)
        with pytest.raises(KeyFetchError):
            await fetcher.fetch_key_set(ISSUER)


@pytest.mark.asyncio
async def test_fetch_key_set_rejects_invalid_payload() -> None:
    """A body without a keys list is rejected."""

    async def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code=200, json={"not_keys": []})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
        fetcher = KeyFetcher(http_client=http_client)
        with pytest.raises(KeyFetchError):
            await fetcher.fetch_key_set(ISSUER)


@pytest.mark.asyncio
async def test_fetch_key_set_rejects_non_json_body() -> None:
    """A non-JSON body is rejected."""

    async def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code=200, text="<html></html>")

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
        fetcher = KeyFetcher(http_client=http_client)
        with pytest.raises(KeyFetchError):
            await fetcher.fetch_key_set(ISSUER)


@pytest.mark.asyncio
async def test_fetch_key_set_bounds_total_time_of_slow_body() -> None:
    """A body dripped slower than the overall limit fails even if each chunk is quick."""

    async def drip() -> AsyncIterator[bytes]:
        for chunk in (b'{"keys"', b": ", b"[", b"]", b"}"):
            await asyncio.sleep(0.1)
            yield chunk

    async def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code=200, content=drip())

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
        fetcher = KeyFetcher(timeout=0.25, http_client=http_client)
        started = time.monotonic()
        with pytest.raises(KeyFetchError) as exc_info:
            await fetcher.fetch_key_set(ISSUER)
        elapsed = time.monotonic() - started

    assert "timed out" in exc_info.value.cause
    assert elapsed < 0.45


@pytest.mark.asyncio
async def test_fetch_key_set_bounds_slow_response() -> None:
    """An issuer that never answers within the limit is a fetch error."""

    async def handler(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(5)
        return httpx.Response(status_code=200, json={"keys": []})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
        fetcher = KeyFetcher(timeout=0.1, http_client=http_client)
        with pytest.raises(KeyFetchError) as exc_info:
            await fetcher.fetch_key_set(ISSUER)

    assert exc_info.value.issuer == ISSUER
