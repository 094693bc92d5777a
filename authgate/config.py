"""Gate options, environment settings and logging configuration."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import UTC, datetime
from typing import Any, Literal

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from authgate.exceptions import GateConfigurationError

DEFAULT_HEADER_NAME = "authorizationinfo"
DEFAULT_JWKS_TIMEOUT_SECONDS = 2.0

_LOG_CONTEXT: dict[str, str] = {"service": "authgate"}


class AuthOptions(BaseModel):
    """Immutable options supplied once when the gate is constructed."""

    model_config = ConfigDict(frozen=True)

    issuer: str = Field(min_length=1)
    audience: str = Field(min_length=1)
    algorithms: frozenset[str] = Field(min_length=1)
    header_name: str = Field(default=DEFAULT_HEADER_NAME, min_length=1)
    jwks_timeout_seconds: float = Field(default=DEFAULT_JWKS_TIMEOUT_SECONDS, gt=0)

    @field_validator("algorithms", mode="before")
    @classmethod
    def normalize_algorithms(cls, value: Any) -> Any:
        """Accept a single algorithm identifier as well as a sequence of them."""
        if isinstance(value, str):
            value = [value]
        if isinstance(value, Sequence | set | frozenset):
            return frozenset(item for item in value if item)
        return value

    @field_validator("header_name")
    @classmethod
    def lowercase_header_name(cls, value: str) -> str:
        """Header lookups are case-insensitive; store the canonical lower-case form."""
        return value.lower()

    @classmethod
    def build(
        cls,
        issuer: str | None = None,
        audience: str | None = None,
        algorithms: str | Sequence[str] | None = None,
        **extra: Any,
    ) -> AuthOptions:
        """Validate raw options, mapping any failure to GateConfigurationError."""
        try:
            return cls(issuer=issuer, audience=audience, algorithms=algorithms, **extra)
        except ValidationError as exc:
            raise GateConfigurationError() from exc


class GateSettings(BaseSettings):
    """Optional environment-backed settings for applications embedding the gate."""

    model_config = SettingsConfigDict(
        env_prefix="AUTHGATE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    issuer: str = ""
    audience: str = ""
    algorithms: list[str] = Field(default_factory=lambda: ["RS256"])
    header_name: str = DEFAULT_HEADER_NAME
    jwks_timeout_seconds: float = DEFAULT_JWKS_TIMEOUT_SECONDS
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    def to_options(self) -> AuthOptions:
        """Build validated gate options from the loaded settings."""
        return AuthOptions.build(
            issuer=self.issuer,
            audience=self.audience,
            algorithms=self.algorithms,
            header_name=self.header_name,
            jwks_timeout_seconds=self.jwks_timeout_seconds,
        )


def _standard_log_fields(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Inject required structured logging fields."""
    event_dict.setdefault("service", _LOG_CONTEXT["service"])
    event_dict.setdefault("timestamp", datetime.now(UTC).isoformat())
    return event_dict


def configure_structlog(log_level: str = "INFO", service: str = "authgate") -> None:
    """Configure structlog for JSON output with required fields."""
    _LOG_CONTEXT["service"] = service

    level = getattr(logging, log_level, logging.INFO)
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            _standard_log_fields,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
