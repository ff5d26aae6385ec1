"""Configuration system for the validation components."""

from __future__ import annotations

import os
from collections.abc import Mapping, Sequence
from enum import Enum
from functools import lru_cache
from typing import Any

from pydantic import AnyHttpUrl, BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

# A relatively high number to give cold starts a chance to succeed.
DEFAULT_TIMEOUT_MS = 25_000


class Environment(str, Enum):
    """Deployment environments supported by the service."""

    DEV = "dev"
    STAGING = "staging"
    PROD = "prod"


class LoggingSettings(BaseModel):
    """Structured logging configuration."""

    level: str = Field(default="INFO", description="Log level for application output")
    scrub_fields: Sequence[str] = Field(
        default_factory=lambda: ["password", "token", "secret", "authorization"],
        description="Fields that should be redacted in logs",
    )


class MetricsSettings(BaseModel):
    """Prometheus metrics configuration."""

    enabled: bool = True


class ValidatorSettings(BaseModel):
    """Remote validation function configuration."""

    function_arn: str | None = Field(
        default=None, description="ARN or name of the validation Lambda function"
    )
    timeout_ms: int = Field(
        default=DEFAULT_TIMEOUT_MS,
        ge=1,
        description="Upper bound for a single synchronous invocation",
    )
    connect_timeout_seconds: float = Field(
        default=5.0, gt=0.0, description="Connection establishment timeout"
    )
    region: str | None = Field(default=None, description="AWS region of the function")
    endpoint_url: AnyHttpUrl | None = Field(
        default=None, description="Override endpoint, e.g. a local Lambda emulator"
    )

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000


class AppSettings(BaseSettings):
    """Top-level application settings."""

    environment: Environment = Environment.DEV
    service_name: str = "fhir-validation"
    validator: ValidatorSettings = Field(default_factory=ValidatorSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    metrics: MetricsSettings = Field(default_factory=MetricsSettings)

    model_config = SettingsConfigDict(env_prefix="FV_", env_nested_delimiter="__")


ENVIRONMENT_DEFAULTS: Mapping[Environment, dict[str, Any]] = {
    Environment.DEV: {
        "logging": {"level": "DEBUG"},
    },
    Environment.STAGING: {
        "logging": {"level": "INFO"},
    },
    Environment.PROD: {
        "logging": {"level": "WARNING"},
    },
}


def _deep_update(target: dict[str, Any], updates: Mapping[str, Any]) -> dict[str, Any]:
    for key, value in updates.items():
        current = target.get(key)
        if isinstance(current, dict) and isinstance(value, Mapping):
            target[key] = _deep_update(dict(current), value)
        else:
            target[key] = value
    return target


def load_settings(environment: str | None = None) -> AppSettings:
    """Load application settings with environment specific defaults applied.

    Values supplied through ``FV_*`` environment variables win over the
    environment defaults.
    """
    env_value = (environment or os.getenv("FV_ENV", "dev")).lower()
    env = Environment(env_value)
    try:
        base_settings = AppSettings()
    except ValidationError as err:
        raise RuntimeError(f"Invalid configuration: {err}") from err
    merged = _deep_update({}, ENVIRONMENT_DEFAULTS.get(env, {}))
    merged = _deep_update(merged, base_settings.model_dump(exclude_unset=True))
    merged["environment"] = env
    return AppSettings.model_validate(merged)


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """Cached accessor used by production code."""
    return load_settings()


__all__ = [
    "DEFAULT_TIMEOUT_MS",
    "AppSettings",
    "Environment",
    "LoggingSettings",
    "MetricsSettings",
    "ValidatorSettings",
    "get_settings",
    "load_settings",
]
