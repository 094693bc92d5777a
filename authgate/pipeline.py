"""Authorize pipeline: key lookup, signature verification and claim checks."""

from __future__ import annotations

from collections.abc import Callable

import structlog

from authgate.cache import KeyCache
from authgate.claims import ClaimValidator
from authgate.client import KeyFetcher
from authgate.config import AuthOptions
from authgate.exceptions import TokenVerificationError
from authgate.revocation import RevocationRegistry
from authgate.types import AuthDecision
from authgate.verifier import SignatureVerifier

logger = structlog.get_logger(__name__)


class Authorizer:
    """Turn a raw credential into an authorization decision.

    Configuration errors are raised at construction and key fetch errors
    propagate from ``authorize``. Everything else collapses into a denied
    decision.
    """

    def __init__(
        self,
        options: AuthOptions,
        key_cache: KeyCache | None = None,
        revocation_registry: RevocationRegistry | None = None,
        now: Callable[[], float] | None = None,
    ) -> None:
        self._options = options
        self._key_cache = key_cache or KeyCache(
            KeyFetcher(timeout=options.jwks_timeout_seconds)
        )
        self._verifier = SignatureVerifier(options.algorithms)
        self._claim_validator = ClaimValidator(
            options, revocation_registry=revocation_registry, now=now
        )

    @property
    def options(self) -> AuthOptions:
        return self._options

    @property
    def key_cache(self) -> KeyCache:
        return self._key_cache

    async def authorize(self, token: str | None) -> AuthDecision:
        """Verify ``token`` and return the decision.

        Raises KeyFetchError when the issuer's keys cannot be loaded.
        """
        if not token:
            return self._deny("missing_token")

        key_set = await self._key_cache.ensure_keys(self._options.issuer)

        try:
            result = self._verifier.verify(token, key_set)
            claims = self._claim_validator.validate(result)
        except TokenVerificationError as exc:
            return self._deny(exc.reason)
        except Exception:
            logger.exception("token_verification_crashed", issuer=self._options.issuer)
            return AuthDecision.deny("internal_error")
        return AuthDecision.allow(claims)

    def _deny(self, reason: str) -> AuthDecision:
        logger.warning("token_rejected", issuer=self._options.issuer, reason=reason)
        return AuthDecision.deny(reason)
