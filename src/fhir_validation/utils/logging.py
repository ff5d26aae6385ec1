"""Logging configuration for validator processes.

Key Responsibilities:
    - Route stdlib ``logging`` records and Structlog events to stderr as JSON
    - Redact configured sensitive fields in both streams
    - Attach the per-run correlation identifier to every event

Collaborators:
    - Upstream: ``fhir-validate`` and host services call :func:`configure_logging`
      once and bind a correlation id per unit of work
    - Downstream: ``logging`` and ``structlog``

Thread Safety:
    - Correlation ids live in ``contextvars`` and are safe for async use
"""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Iterable, Mapping
from contextvars import ContextVar, Token
from typing import Any

import structlog

from fhir_validation.config.settings import LoggingSettings

_correlation_id: ContextVar[str | None] = ContextVar("correlation_id", default=None)

# Attributes every LogRecord carries; anything else arrived through ``extra=``.
_STANDARD_RECORD_ATTRS = frozenset(logging.makeLogRecord({}).__dict__) | {"message", "asctime"}

REDACTED = "***"


def _redact(value: Any, fields: frozenset[str]) -> Any:
    if isinstance(value, Mapping):
        return {
            key: REDACTED if str(key).lower() in fields else _redact(item, fields)
            for key, item in value.items()
        }
    if isinstance(value, list):
        return [_redact(item, fields) for item in value]
    return value


class JsonFormatter(logging.Formatter):
    """Render stdlib log records as one JSON object per line."""

    def __init__(self, *, scrub_fields: Iterable[str] | None = None) -> None:
        super().__init__(datefmt="%Y-%m-%dT%H:%M:%S%z")
        self._fields = frozenset(field.lower() for field in scrub_fields or ())

    def format(self, record: logging.LogRecord) -> str:
        extra = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _STANDARD_RECORD_ATTRS
        }
        payload: dict[str, Any] = {
            **_redact(extra, self._fields),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "time": self.formatTime(record, self.datefmt),
        }
        correlation_id = _correlation_id.get()
        if correlation_id:
            payload["correlation_id"] = correlation_id
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, sort_keys=True, default=str)


class _RedactProcessor:
    """Structlog processor applying the same redaction as :class:`JsonFormatter`."""

    def __init__(self, scrub_fields: Iterable[str] | None) -> None:
        self._fields = frozenset(field.lower() for field in scrub_fields or ())

    def __call__(self, _: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        return _redact(event_dict, self._fields)


def configure_logging(
    level: int | str | None = None,
    *,
    settings: LoggingSettings | None = None,
) -> None:
    """Configure stdlib logging and Structlog for the process.

    Args:
        level: Level or level name, ignored when ``settings`` is given.
        settings: Logging settings providing level and redacted fields.
    """
    scrub_fields: Iterable[str] | None = None
    if settings is not None:
        level = settings.level
        scrub_fields = settings.scrub_fields

    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        level_value = resolved if isinstance(resolved, int) else logging.INFO
    else:
        level_value = level if isinstance(level, int) else logging.INFO

    formatter = JsonFormatter(scrub_fields=scrub_fields)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    # pytest's capture handlers stay attached so caplog keeps working.
    kept = [
        existing
        for existing in logging.getLogger().handlers
        if type(existing).__module__.startswith("_pytest.")
    ]
    for existing in kept:
        existing.setFormatter(formatter)
    logging.basicConfig(level=level_value, handlers=[*kept, handler], force=True)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            _RedactProcessor(scrub_fields),
            structlog.processors.JSONRenderer(sort_keys=True, default=str),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level_value),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def bind_correlation_id(value: str) -> Token[str | None]:
    """Attach ``value`` to stdlib records and Structlog events of this context."""
    token = _correlation_id.set(value)
    structlog.contextvars.bind_contextvars(correlation_id=value)
    return token


def reset_correlation_id(token: Token[str | None]) -> None:
    """Undo :func:`bind_correlation_id`."""
    _correlation_id.reset(token)
    structlog.contextvars.unbind_contextvars("correlation_id")


__all__ = [
    "JsonFormatter",
    "bind_correlation_id",
    "configure_logging",
    "reset_correlation_id",
]
