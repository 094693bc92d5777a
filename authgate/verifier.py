"""JWS signature verification against a selected issuer key."""

from __future__ import annotations

import json
from collections.abc import Iterable

import structlog
from jose import jws
from jose.exceptions import JOSEError

from authgate.exceptions import TokenVerificationError
from authgate.keys import convert_key, select_key
from authgate.types import KeySet, RawPayload, VerificationResult, VerifiedClaims

logger = structlog.get_logger(__name__)


class SignatureVerifier:
    """Verify token signatures with an allow-list of algorithms."""

    def __init__(self, algorithms: Iterable[str]) -> None:
        self._algorithms = sorted(set(algorithms))

    def verify(self, token: str, key_set: KeySet) -> VerificationResult:
        """Verify ``token`` against the matching key in ``key_set``.

        Every failure raises TokenVerificationError; the reason is never
        returned to the client.
        """
        try:
            header = jws.get_unverified_header(token)
        except JOSEError as exc:
            raise TokenVerificationError("malformed_token") from exc

        kid = header.get("kid")
        raw_key = select_key(kid if isinstance(kid, str) else None, key_set["keys"])
        if raw_key is None:
            logger.warning("token_kid_not_found", kid=kid)
            raise TokenVerificationError("unknown_kid")

        algorithm = str(header.get("alg", ""))
        if algorithm not in self._algorithms:
            raise TokenVerificationError("algorithm_not_allowed")

        pem = convert_key(raw_key, algorithm)
        try:
            payload = jws.verify(token, pem, algorithms=self._algorithms)
        except JOSEError as exc:
            raise TokenVerificationError("invalid_signature") from exc
        return self._parse_payload(payload)

    @staticmethod
    def _parse_payload(payload: bytes) -> VerificationResult:
        """Split verified payload bytes into structured claims or raw text."""
        text = payload.decode("utf-8", errors="replace")
        try:
            claims = json.loads(text)
        except ValueError:
            return RawPayload(text)
        if not isinstance(claims, dict):
            return RawPayload(text)
        return VerifiedClaims(claims)
