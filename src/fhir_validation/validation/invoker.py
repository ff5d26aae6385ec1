"""Remote function invocation boundary.

This module isolates the AWS SDK from response interpretation so validators
can be exercised against any :class:`FunctionInvoker` implementation.

The module provides:
- ``InvocationResult`` describing the raw outcome of a synchronous invocation
- ``FunctionInvoker`` interface
- ``LambdaInvoker`` backed by a boto3 ``lambda`` client

Thread Safety:
    Thread-safe: boto3 clients can be shared across threads and the invoker
    keeps no per-call state.

Performance:
    Each invocation blocks a worker thread for up to the configured timeout
    (25 seconds by default, sized for cold starts of the remote function).
"""

# ==============================================================================
# IMPORTS
# ==============================================================================

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import boto3
import structlog
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from fhir_validation.config.settings import DEFAULT_TIMEOUT_MS
from fhir_validation.validation.errors import InvocationFailureError


REQUEST_RESPONSE = "RequestResponse"

# ==============================================================================
# DATA MODELS
# ==============================================================================


@dataclass(frozen=True)
class InvocationResult:
    """Raw result of a synchronous function invocation.

    Attributes:
        status_code: HTTP status code reported by the invocation API.
        function_error: Set when the function itself raised or aborted,
            ``None`` when it returned normally.
        payload: Response body, ``None`` when nothing was returned.
        executed_version: Function version that handled the request.
        log_result: Base64 encoded tail of the execution log, when requested.
    """

    status_code: int
    function_error: str | None = None
    payload: bytes | None = None
    executed_version: str | None = None
    log_result: str | None = None

    @classmethod
    def from_response(cls, response: Mapping[str, Any]) -> InvocationResult:
        """Build a result from a boto3 ``invoke`` response, draining the body."""
        body = response.get("Payload")
        payload = body.read() if body is not None else None
        return cls(
            status_code=int(response.get("StatusCode", 0)),
            function_error=response.get("FunctionError") or None,
            payload=payload,
            executed_version=response.get("ExecutedVersion"),
            log_result=response.get("LogResult"),
        )

    def payload_text(self) -> str | None:
        """Decode the payload as UTF-8 text."""
        if self.payload is None:
            return None
        return self.payload.decode("utf-8")

    def as_log_context(self) -> dict[str, Any]:
        """Return the result as structured logging context."""
        return {
            "status_code": self.status_code,
            "function_error": self.function_error,
            "executed_version": self.executed_version,
            "payload": (
                self.payload.decode("utf-8", errors="replace")
                if self.payload is not None
                else None
            ),
        }


# ==============================================================================
# INTERFACES
# ==============================================================================


class FunctionInvoker(ABC):
    """Interface for synchronous remote function invocation."""

    @abstractmethod
    async def invoke(self, function_name: str, payload: str) -> InvocationResult:
        """Invoke ``function_name`` with ``payload`` and wait for its response.

        Args:
            function_name: Endpoint identifier (function name or ARN).
            payload: Text payload handed to the function unchanged.

        Returns:
            Raw invocation result.

        Raises:
            InvocationFailureError: If the call could not be completed,
                including when the timeout expires.
        """
        raise NotImplementedError


# ==============================================================================
# IMPLEMENTATIONS
# ==============================================================================


def build_client_config(
    timeout_ms: int = DEFAULT_TIMEOUT_MS, *, connect_timeout_seconds: float = 5.0
) -> Config:
    """Return a botocore config bounding a single, non-retried invocation."""
    return Config(
        read_timeout=timeout_ms / 1000,
        connect_timeout=connect_timeout_seconds,
        retries={"total_max_attempts": 1, "mode": "standard"},
    )


class LambdaInvoker(FunctionInvoker):
    """Invoke AWS Lambda functions with ``RequestResponse`` semantics."""

    def __init__(
        self,
        *,
        client: Any | None = None,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        connect_timeout_seconds: float = 5.0,
        region: str | None = None,
        endpoint_url: str | None = None,
        logger: Any | None = None,
    ) -> None:
        self._timeout_ms = timeout_ms
        self._logger = logger or structlog.get_logger(__name__)
        self._client = client or boto3.client(
            "lambda",
            region_name=region,
            endpoint_url=endpoint_url,
            config=build_client_config(
                timeout_ms, connect_timeout_seconds=connect_timeout_seconds
            ),
        )

    @property
    def timeout_ms(self) -> int:
        return self._timeout_ms

    @property
    def client(self) -> Any:  # pragma: no cover - convenience accessor
        return self._client

    async def invoke(self, function_name: str, payload: str) -> InvocationResult:
        try:
            return await asyncio.to_thread(self._invoke_sync, function_name, payload)
        except (BotoCoreError, ClientError) as exc:
            msg = f"The invocation of {function_name} lambda function failed"
            self._logger.error(
                "validation.lambda.invoke_failed",
                function_name=function_name,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            raise InvocationFailureError(msg, function_name=function_name) from exc

    def _invoke_sync(self, function_name: str, payload: str) -> InvocationResult:
        response = self._client.invoke(
            FunctionName=function_name,
            InvocationType=REQUEST_RESPONSE,
            Payload=payload.encode("utf-8"),
        )
        return InvocationResult.from_response(response)


# ==============================================================================
# EXPORTS
# ==============================================================================

__all__ = [
    "REQUEST_RESPONSE",
    "FunctionInvoker",
    "InvocationResult",
    "LambdaInvoker",
    "build_client_config",
]
