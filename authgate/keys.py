"""JWK selection and conversion."""

from __future__ import annotations

from collections.abc import Sequence

from jose import jwk
from jose.exceptions import JOSEError

from authgate.exceptions import TokenVerificationError
from authgate.types import RawKey


def select_key(kid: str | None, keys: Sequence[RawKey]) -> RawKey | None:
    """Return the first key whose ``kid`` matches, or None."""
    if not kid:
        return None
    for key in keys:
        if key.get("kid") == kid:
            return key
    return None


def convert_key(raw_key: RawKey, algorithm: str) -> str:
    """Convert a JWK into the PEM encoding expected by the JWS verifier."""
    try:
        pem = jwk.construct(dict(raw_key), algorithm=raw_key.get("alg") or algorithm).to_pem()
    except (JOSEError, AttributeError, KeyError, TypeError, ValueError) as exc:
        raise TokenVerificationError("key_conversion_failed") from exc
    return pem.decode("utf-8") if isinstance(pem, bytes) else pem
