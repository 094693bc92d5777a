"""Shared fixtures: RSA signing material, JWKS documents and signed tokens."""

from __future__ import annotations

import base64
import time
from collections.abc import Callable
from typing import Any

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from jose import jwt

ISSUER = "http://issuer.com"
AUDIENCE = "audience"
KID = "kid-1"


def _base64url_uint(value: int) -> str:
    """Encode integer in URL-safe base64 without padding."""
    raw = value.to_bytes((value.bit_length() + 7) // 8, "big")
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def generate_signing_material(kid: str = KID) -> tuple[str, dict[str, str]]:
    """Generate RSA private PEM and matching JWKS key entry."""
    private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("utf-8")
    public_numbers = private_key.public_key().public_numbers()
    jwk = {
        "kty": "RSA",
        "alg": "RS256",
        "use": "sig",
        "kid": kid,
        "n": _base64url_uint(public_numbers.n),
        "e": _base64url_uint(public_numbers.e),
    }
    return private_pem, jwk


@pytest.fixture(scope="session")
def signing_material() -> tuple[str, dict[str, str]]:
    """One RSA keypair shared across the test session."""
    return generate_signing_material()


@pytest.fixture
def jwks(signing_material: tuple[str, dict[str, str]]) -> dict[str, list[dict[str, str]]]:
    """JWKS document publishing the session signing key."""
    return {"keys": [signing_material[1]]}


@pytest.fixture
def valid_claims() -> dict[str, Any]:
    """Claims that pass every gate check."""
    return {
        "sub": "foo",
        "iss": ISSUER,
        "aud": AUDIENCE,
        "exp": int(time.time()) + 10,
        "token_use": "id",
    }


@pytest.fixture
def make_token(signing_material: tuple[str, dict[str, str]]) -> Callable[..., str]:
    """Return a factory signing claims with the session key."""
    private_pem, _ = signing_material

    def factory(claims: dict[str, Any], kid: str | None = KID, algorithm: str = "RS256") -> str:
        headers = {"kid": kid} if kid is not None else None
        return jwt.encode(claims, private_pem, algorithm=algorithm, headers=headers)

    return factory


@pytest.fixture
def signing_material_factory() -> Callable[[str], tuple[str, dict[str, str]]]:
    """Return a factory producing fresh RSA signing material."""
    return generate_signing_material
