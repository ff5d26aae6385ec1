"""Unit tests for validator factories."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from fhir_validation.config.settings import ValidatorSettings
from fhir_validation.validation.factory import create_lambda_invoker, create_remote_validator
from fhir_validation.validation.invoker import LambdaInvoker
from fhir_validation.validation.remote import RemoteValidator

FUNCTION_ARN = "arn:aws:lambda:us-east-1:123456789012:function:hapi-validator"


def test_create_remote_validator_from_settings() -> None:
    client = MagicMock()
    settings = ValidatorSettings(function_arn=FUNCTION_ARN)

    validator = create_remote_validator(settings, client=client)

    assert isinstance(validator, RemoteValidator)
    assert validator.function_name == FUNCTION_ARN


def test_create_remote_validator_requires_function_arn() -> None:
    with pytest.raises(ValueError, match="ARN"):
        create_remote_validator(ValidatorSettings(), client=MagicMock())


def test_create_remote_validator_reads_application_settings(monkeypatch) -> None:
    monkeypatch.setenv("FV_VALIDATOR__FUNCTION_ARN", FUNCTION_ARN)

    validator = create_remote_validator(client=MagicMock())

    assert validator.function_name == FUNCTION_ARN


def test_create_lambda_invoker_passes_client_options() -> None:
    settings = ValidatorSettings(
        function_arn=FUNCTION_ARN,
        timeout_ms=30_000,
        connect_timeout_seconds=2.0,
        region="eu-central-1",
        endpoint_url="http://localhost:9001",
    )

    with patch("fhir_validation.validation.invoker.boto3.client") as factory:
        invoker = create_lambda_invoker(settings)

    assert isinstance(invoker, LambdaInvoker)
    assert invoker.timeout_ms == 30_000
    kwargs = factory.call_args.kwargs
    assert kwargs["region_name"] == "eu-central-1"
    assert kwargs["endpoint_url"].startswith("http://localhost:9001")
    assert kwargs["config"].read_timeout == 30.0
    assert kwargs["config"].connect_timeout == 2.0
