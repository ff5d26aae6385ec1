"""FHIR resource validation delegated to a remote validation function.

The remote function (a HAPI FHIR validator deployed as an AWS Lambda
function) receives the resource, validates it and answers with a small JSON
envelope::

    {"successful": false, "errorMessages": [{"severity": "error", "msg": "..."}]}

This module encodes the request, distinguishes success, invalid resources and
crashed invocations, and surfaces each as the matching error type.

Thread Safety:
    Thread-safe: Validator instances hold no per-call state and may serve
    concurrent ``validate`` calls.

Example:
    >>> validator = RemoteValidator("arn:aws:lambda:us-east-1:123:function:hapi", invoker)
    >>> await validator.validate({"resourceType": "Patient"})
"""

from __future__ import annotations

# ==============================================================================
# IMPORTS
# ==============================================================================
import json
from typing import Any

import structlog
from pydantic import ValidationError

from fhir_validation.observability.metrics import (
    OUTCOME_INVALID,
    OUTCOME_INVOCATION_FAILED,
    OUTCOME_MALFORMED_RESPONSE,
    OUTCOME_VALID,
    observe_invocation,
    record_validation_outcome,
)
from fhir_validation.validation.base import ValidationParams, Validator
from fhir_validation.validation.errors import InvalidResourceError, InvocationFailureError
from fhir_validation.validation.invoker import FunctionInvoker
from fhir_validation.validation.models import ValidationOutcome

NO_PAYLOAD_MESSAGE = "No payload returned from lambda function"

# ==============================================================================
# HELPER FUNCTIONS
# ==============================================================================


def encode_payload(resource: Any) -> str:
    """Double-encode ``resource`` for the remote function.

    The function expects a JSON string whose content is the JSON text of the
    resource, so the compact JSON text is encoded a second time. Non-ASCII
    characters, lone surrogates included, are emitted as ``\\u`` escapes so the
    result is always valid UTF-8.

    Raises:
        TypeError: If ``resource`` is not JSON serialisable.
        ValueError: If ``resource`` contains ``NaN`` or infinite floats.
    """
    resource_json = json.dumps(resource, separators=(",", ":"), allow_nan=False)
    return json.dumps(resource_json)


# ==============================================================================
# VALIDATOR IMPLEMENTATION
# ==============================================================================


class RemoteValidator(Validator):
    """Validate resources by invoking a remote validation function."""

    def __init__(
        self,
        function_name: str,
        invoker: FunctionInvoker,
        *,
        logger: Any | None = None,
    ) -> None:
        """Initialise the validator.

        Args:
            function_name: Endpoint identifier of the remote function (ARN or name).
            invoker: Invocation client carrying the fixed timeout.
            logger: Optional logger exposing ``error(event, **context)``.
        """
        self._function_name = function_name
        self._invoker = invoker
        self._logger = logger or structlog.get_logger(__name__)

    @property
    def function_name(self) -> str:
        return self._function_name

    async def validate(self, resource: Any, params: ValidationParams | None = None) -> None:
        """Validate ``resource`` remotely.

        ``params`` is accepted for interface compatibility; the remote function
        does not receive it.

        Raises:
            InvalidResourceError: The function reported the resource as invalid.
            InvocationFailureError: The function crashed, timed out or returned
                no payload.
            pydantic.ValidationError: The function answered with a payload that
                is not a validation envelope.
        """
        payload = encode_payload(resource)

        try:
            with observe_invocation():
                result = await self._invoker.invoke(self._function_name, payload)
        except InvocationFailureError:
            record_validation_outcome(OUTCOME_INVOCATION_FAILED)
            raise

        if result.function_error:
            # The function crashed; this says nothing about the resource itself.
            msg = f"The execution of {self._function_name} lambda function failed"
            self._logger.error(msg, function_name=self._function_name, **result.as_log_context())
            record_validation_outcome(OUTCOME_INVOCATION_FAILED)
            raise InvocationFailureError(msg, function_name=self._function_name)

        if not result.payload:
            self._logger.error(
                NO_PAYLOAD_MESSAGE, function_name=self._function_name, **result.as_log_context()
            )
            record_validation_outcome(OUTCOME_INVOCATION_FAILED)
            raise InvocationFailureError(NO_PAYLOAD_MESSAGE, function_name=self._function_name)

        try:
            outcome = ValidationOutcome.model_validate_json(result.payload)
        except ValidationError:
            record_validation_outcome(OUTCOME_MALFORMED_RESPONSE)
            raise

        if outcome.successful:
            record_validation_outcome(OUTCOME_VALID)
            return

        record_validation_outcome(OUTCOME_INVALID)
        raise InvalidResourceError(outcome.error_summary())


# ==============================================================================
# EXPORTS
# ==============================================================================

__all__ = ["NO_PAYLOAD_MESSAGE", "RemoteValidator", "encode_payload"]
