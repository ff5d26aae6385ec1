"""Lightweight configuration package exports."""

from __future__ import annotations

from .settings import (
    DEFAULT_TIMEOUT_MS,
    AppSettings,
    Environment,
    LoggingSettings,
    MetricsSettings,
    ValidatorSettings,
    get_settings,
    load_settings,
)

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
