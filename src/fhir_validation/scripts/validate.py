"""Command line entrypoint validating a FHIR resource file remotely."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
import uuid
from collections.abc import Sequence
from pathlib import Path

import structlog
from botocore.exceptions import BotoCoreError
from pydantic import ValidationError

from fhir_validation.config.settings import AppSettings, get_settings
from fhir_validation.utils.logging import (
    bind_correlation_id,
    configure_logging,
    reset_correlation_id,
)
from fhir_validation.validation import (
    InvalidResourceError,
    InvocationFailureError,
    TypeOperation,
    ValidationParams,
    create_remote_validator,
)

logger = structlog.get_logger(__name__)

EXIT_VALID = 0
EXIT_INVALID = 1
EXIT_ERROR = 2


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Validate a FHIR resource with the remote validator")
    parser.add_argument("resource", type=Path, help="Path to a JSON encoded resource")
    parser.add_argument("--function-arn", help="Override the configured validation function")
    parser.add_argument("--tenant-id", help="Tenant the resource belongs to")
    parser.add_argument(
        "--type-operation",
        choices=[operation.value for operation in TypeOperation],
        help="FHIR interaction the resource is validated for",
    )
    parser.add_argument(
        "--correlation-id", help="Identifier attached to every log event of this run"
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    try:
        settings = get_settings()
    except (RuntimeError, ValueError) as exc:
        logger.error("validate.misconfigured", error=str(exc))
        return EXIT_ERROR
    configure_logging(settings=settings.logging)

    token = bind_correlation_id(args.correlation_id or uuid.uuid4().hex)
    try:
        return _run(args, settings)
    finally:
        reset_correlation_id(token)


def _run(args: argparse.Namespace, settings: AppSettings) -> int:
    try:
        resource = json.loads(args.resource.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        logger.error("validate.resource_unreadable", path=str(args.resource), error=str(exc))
        return EXIT_ERROR

    validator_settings = settings.validator
    if args.function_arn:
        validator_settings = validator_settings.model_copy(
            update={"function_arn": args.function_arn}
        )
    try:
        validator = create_remote_validator(validator_settings)
    except (ValueError, BotoCoreError) as exc:
        logger.error("validate.misconfigured", error=str(exc))
        return EXIT_ERROR

    params = ValidationParams(
        tenant_id=args.tenant_id,
        type_operation=TypeOperation(args.type_operation) if args.type_operation else None,
    )
    try:
        asyncio.run(validator.validate(resource, params))
    except InvalidResourceError as exc:
        print(exc.message, file=sys.stderr)
        return EXIT_INVALID
    except (InvocationFailureError, ValidationError) as exc:
        logger.error("validate.failed", error=str(exc), error_type=type(exc).__name__)
        return EXIT_ERROR
    except ValueError as exc:
        logger.error("validate.resource_unencodable", path=str(args.resource), error=str(exc))
        return EXIT_ERROR
    logger.info("validate.ok", path=str(args.resource))
    return EXIT_VALID


if __name__ == "__main__":  # pragma: no cover - CLI entrypoint
    sys.exit(main())
