"""Error taxonomy raised by resource validators."""

from __future__ import annotations

from fhir_validation.utils.errors import FoundationError


class InvalidResourceError(FoundationError):
    """Raised when a resource fails structural or semantic validation.

    The message is the newline separated list of error-severity messages
    reported by the validator. It may be empty.
    """

    status = 400
    problem_type = "urn:fhir-validation:invalid-resource"


class InvocationFailureError(FoundationError):
    """Raised when the remote validation function could not be executed."""

    status = 502
    problem_type = "urn:fhir-validation:invocation-failure"

    def __init__(self, message: str, *, function_name: str | None = None) -> None:
        super().__init__(
            message,
            extra={"function_name": function_name} if function_name else None,
        )
        self.function_name = function_name


__all__ = ["InvalidResourceError", "InvocationFailureError"]
