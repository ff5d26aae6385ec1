"""Validators for FHIR resources."""

from .base import TypeOperation, ValidationParams, Validator
from .errors import InvalidResourceError, InvocationFailureError
from .factory import create_lambda_invoker, create_remote_validator
from .invoker import FunctionInvoker, InvocationResult, LambdaInvoker
from .models import ErrorMessage, ValidationOutcome
from .remote import RemoteValidator, encode_payload

__all__ = [
    "ErrorMessage",
    "FunctionInvoker",
    "InvalidResourceError",
    "InvocationFailureError",
    "InvocationResult",
    "LambdaInvoker",
    "RemoteValidator",
    "TypeOperation",
    "ValidationOutcome",
    "ValidationParams",
    "Validator",
    "create_lambda_invoker",
    "create_remote_validator",
    "encode_payload",
]
