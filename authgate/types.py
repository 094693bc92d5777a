"""Gate data contract types."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, TypedDict

TokenUse = Literal["id", "access"]

ALLOWED_TOKEN_USES: frozenset[str] = frozenset({"id", "access"})


class RawKey(TypedDict, total=False):
    """Single JWK entry published by an issuer."""

    kid: str
    kty: str
    alg: str
    use: str
    n: str
    e: str
    crv: str
    x: str
    y: str


class KeySet(TypedDict):
    """JWKS payload published at an issuer's well-known endpoint."""

    keys: list[RawKey]


class TokenClaims(TypedDict, total=False):
    """Claims the gate inspects. Tokens may carry arbitrary extra claims."""

    sub: str
    iss: str
    aud: str
    exp: int
    token_use: TokenUse


@dataclass(frozen=True)
class VerifiedClaims:
    """Signed payload that decoded to a JSON object."""

    claims: dict[str, Any]


@dataclass(frozen=True)
class RawPayload:
    """Signed payload that is not a JSON object."""

    text: str


VerificationResult = VerifiedClaims | RawPayload


@dataclass(frozen=True)
class AuthDecision:
    """Outcome of running a token through the authorize pipeline."""

    authorized: bool
    claims: dict[str, Any] | None = None
    reason: str | None = None

    @classmethod
    def allow(cls, claims: dict[str, Any]) -> AuthDecision:
        """Build an authorized decision carrying the verified payload."""
        return cls(authorized=True, claims=claims)

    @classmethod
    def deny(cls, reason: str) -> AuthDecision:
        """Build an unauthorized decision with an internal reason code."""
        return cls(authorized=False, reason=reason)
