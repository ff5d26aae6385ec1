from __future__ import annotations

import logging

import pytest
import structlog

from fhir_validation.config.settings import get_settings


@pytest.fixture(autouse=True)
def _isolate_settings(monkeypatch):
    monkeypatch.delenv("FV_ENV", raising=False)
    monkeypatch.delenv("FV_VALIDATOR__FUNCTION_ARN", raising=False)
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    # configure_logging binds handlers to the sys.stderr of the running test.
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
    for handler in list(logging.getLogger().handlers):
        if not type(handler).__module__.startswith("_pytest."):
            logging.getLogger().removeHandler(handler)
