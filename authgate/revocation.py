"""Revoked-subject registries consulted before claim checks."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from typing import Protocol

from cachetools import TTLCache


class RevocationRegistry(Protocol):
    """Read-side interface the claim validator depends on."""

    def is_revoked(self, subject: str) -> bool:
        """Return True when tokens for ``subject`` must be rejected."""
        ...


class InMemoryRevocationRegistry:
    """Process-local set of revoked subjects.

    With ``ttl_seconds`` set, a revocation lapses once that many seconds have
    passed, which should be at least the issuer's longest token lifetime.
    """

    def __init__(
        self,
        ttl_seconds: float | None = None,
        maxsize: int = 10000,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        self._revoked: dict[str, bool] | TTLCache[str, bool] = (
            TTLCache(maxsize=maxsize, ttl=ttl_seconds, timer=timer)
            if ttl_seconds is not None
            else {}
        )
        self._lock = threading.Lock()

    def revoke(self, subject: str) -> None:
        """Mark ``subject`` as revoked."""
        with self._lock:
            self._revoked[subject] = True

    def restore(self, subject: str) -> None:
        """Remove a revocation for ``subject`` if one exists."""
        with self._lock:
            self._revoked.pop(subject, None)

    def is_revoked(self, subject: str) -> bool:
        with self._lock:
            return self._revoked.get(subject) is True

    def __len__(self) -> int:
        with self._lock:
            return len(self._revoked)
