"""Public gate exports."""

from authgate.cache import KeyCache
from authgate.client import KeyFetcher
from authgate.config import AuthOptions, GateSettings, configure_structlog
from authgate.dependencies import get_token_claims
from authgate.error_handlers import register_exception_handlers
from authgate.exceptions import (
    GateConfigurationError,
    GateError,
    GateUnauthorizedError,
    KeyFetchError,
    TokenVerificationError,
)
from authgate.middleware import TokenAuthMiddleware
from authgate.pipeline import Authorizer
from authgate.revocation import InMemoryRevocationRegistry, RevocationRegistry

__all__ = [
    "AuthOptions",
    "Authorizer",
    "GateConfigurationError",
    "GateError",
    "GateSettings",
    "GateUnauthorizedError",
    "InMemoryRevocationRegistry",
    "KeyCache",
    "KeyFetchError",
    "KeyFetcher",
    "RevocationRegistry",
    "TokenAuthMiddleware",
    "TokenVerificationError",
    "configure_structlog",
    "get_token_claims",
    "register_exception_handlers",
]
