"""Ordered semantic checks over a verified token payload."""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any

from authgate.config import AuthOptions
from authgate.exceptions import TokenVerificationError
from authgate.revocation import RevocationRegistry
from authgate.types import ALLOWED_TOKEN_USES, VerificationResult, VerifiedClaims


class ClaimValidator:
    """Run the claim checklist in a fixed order, stopping at the first failure.

    Order: payload shape, revocation, expiry and not-before, audience, issuer,
    token use.
    """

    def __init__(
        self,
        options: AuthOptions,
        revocation_registry: RevocationRegistry | None = None,
        now: Callable[[], float] | None = None,
    ) -> None:
        self._options = options
        self._revocation_registry = revocation_registry
        self._now = now or time.time

    def validate(self, result: VerificationResult) -> dict[str, Any]:
        """Return the claims when every check passes, else raise TokenVerificationError."""
        if not isinstance(result, VerifiedClaims) or "iss" not in result.claims:
            raise TokenVerificationError("malformed_payload")
        claims = result.claims

        if self._revocation_registry is not None:
            subject = claims.get("sub")
            if isinstance(subject, str) and self._revocation_registry.is_revoked(subject):
                raise TokenVerificationError("revoked")

        # A token whose exp equals the current second is still valid.
        expires_at = claims.get("exp")
        if isinstance(expires_at, bool) or not isinstance(expires_at, int | float):
            raise TokenVerificationError("expired")
        if expires_at < int(self._now()):
            raise TokenVerificationError("expired")

        not_before = claims.get("nbf")
        if not_before is not None:
            if isinstance(not_before, bool) or not isinstance(not_before, int | float):
                raise TokenVerificationError("not_yet_valid")
            if not_before > int(self._now()):
                raise TokenVerificationError("not_yet_valid")

        if claims.get("aud") != self._options.audience:
            raise TokenVerificationError("audience_mismatch")

        if claims.get("iss") != self._options.issuer:
            raise TokenVerificationError("issuer_mismatch")

        token_use = claims.get("token_use")
        if not isinstance(token_use, str) or token_use not in ALLOWED_TOKEN_USES:
            raise TokenVerificationError("invalid_token_use")

        return claims
