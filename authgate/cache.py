"""Issuer-keyed JWKS cache."""

from __future__ import annotations

import asyncio

import structlog

from authgate.client import KeyFetcher
from authgate.types import KeySet

logger = structlog.get_logger(__name__)


class KeyCache:
    """Lazily fetch each issuer's key set once and keep it for the process lifetime.

    Entries are never replaced or evicted. A failed fetch leaves the cache
    untouched, so the next request for that issuer fetches again.
    """

    def __init__(self, key_fetcher: KeyFetcher | None = None) -> None:
        self._key_fetcher = key_fetcher or KeyFetcher()
        self._key_sets: dict[str, KeySet] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    def get(self, issuer: str) -> KeySet | None:
        """Return the cached key set for ``issuer`` without fetching."""
        return self._key_sets.get(issuer)

    def __contains__(self, issuer: object) -> bool:
        return issuer in self._key_sets

    async def ensure_keys(self, issuer: str) -> KeySet:
        """Return the key set for ``issuer``, fetching it on first use."""
        key_set = self._key_sets.get(issuer)
        if key_set is not None:
            return key_set

        # Misses are serialized per issuer, not across issuers.
        lock = self._locks.setdefault(issuer, asyncio.Lock())
        async with lock:
            key_set = self._key_sets.get(issuer)
            if key_set is not None:
                return key_set
            key_set = await self._key_fetcher.fetch_key_set(issuer)
            self._key_sets.setdefault(issuer, key_set)
            logger.info("jwks_cached", issuer=issuer, key_count=len(key_set["keys"]))
            return self._key_sets[issuer]

    async def aclose(self) -> None:
        """Release the underlying fetcher."""
        await self._key_fetcher.aclose()
