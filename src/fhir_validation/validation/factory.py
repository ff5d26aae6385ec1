"""Factories wiring validators from application settings."""

from __future__ import annotations

from typing import Any

from fhir_validation.config.settings import ValidatorSettings, get_settings
from fhir_validation.validation.invoker import LambdaInvoker
from fhir_validation.validation.remote import RemoteValidator


def create_lambda_invoker(
    settings: ValidatorSettings, *, client: Any | None = None, logger: Any | None = None
) -> LambdaInvoker:
    """Create a Lambda invoker honouring the configured timeouts and endpoint."""
    return LambdaInvoker(
        client=client,
        timeout_ms=settings.timeout_ms,
        connect_timeout_seconds=settings.connect_timeout_seconds,
        region=settings.region,
        endpoint_url=str(settings.endpoint_url) if settings.endpoint_url else None,
        logger=logger,
    )


def create_remote_validator(
    settings: ValidatorSettings | None = None,
    *,
    client: Any | None = None,
    logger: Any | None = None,
) -> RemoteValidator:
    """Create a :class:`RemoteValidator` from settings.

    Args:
        settings: Validator settings, defaults to the application settings.
        client: Optional pre-built boto3 ``lambda`` client.
        logger: Optional logger shared by the invoker and the validator.

    Raises:
        ValueError: If no function ARN is configured.
    """
    resolved = settings or get_settings().validator
    if not resolved.function_arn:
        raise ValueError("A validation function ARN is required (FV_VALIDATOR__FUNCTION_ARN)")
    invoker = create_lambda_invoker(resolved, client=client, logger=logger)
    return RemoteValidator(resolved.function_arn, invoker, logger=logger)


__all__ = ["create_lambda_invoker", "create_remote_validator"]
