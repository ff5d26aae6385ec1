"""Remote FHIR resource validation.

Key Responsibilities:
    - Expose the ``Validator`` capability and its remote (AWS Lambda) implementation
    - Provide the error taxonomy raised by validators

Collaborators:
    - Upstream: Record-processing pipelines call :meth:`RemoteValidator.validate`
    - Downstream: A remotely deployed HAPI FHIR validation function

Example:
    >>> from fhir_validation import create_remote_validator
    >>> validator = create_remote_validator()
"""

from .validation import (
    InvalidResourceError,
    InvocationFailureError,
    RemoteValidator,
    ValidationParams,
    Validator,
    create_remote_validator,
)

__all__ = [
    "InvalidResourceError",
    "InvocationFailureError",
    "RemoteValidator",
    "ValidationParams",
    "Validator",
    "create_remote_validator",
]
