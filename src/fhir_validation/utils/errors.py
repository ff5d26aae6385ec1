"""Problem detail helpers for consistent error reporting across validators.

Key Responsibilities:
    - Provide RFC 7807 compliant data structures that outer layers can turn
      into API responses when a validation call fails
    - Supply a base exception that carries problem details

Collaborators:
    - Upstream: Validator implementations raise subclasses of ``FoundationError``
    - Downstream: Routing layers serialise :class:`ProblemDetail` instances

Side Effects:
    - None; helpers are pure data containers

Thread Safety:
    - Thread-safe; instances are not shared between calls
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Mapping

# ==============================================================================
# TYPE DEFINITIONS
# ==============================================================================

__all__ = ["ProblemDetail", "FoundationError"]


@dataclass(slots=True)
class ProblemDetail:
    """Lightweight problem details object compliant with RFC 7807."""

    title: str
    status: int
    detail: str | None = None
    type: str = "about:blank"
    instance: str | None = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    def model_dump(self) -> dict[str, Any]:
        """Return a dictionary representation with empty optional fields dropped."""
        payload = {key: value for key, value in asdict(self).items() if value is not None}
        if not payload.get("extra"):
            payload.pop("extra", None)
        return payload

    def to_response(self) -> dict[str, Any]:
        """Alias for :meth:`model_dump` used by response mappers."""
        return self.model_dump()


class FoundationError(RuntimeError):
    """Base exception that carries a :class:`ProblemDetail` instance."""

    status: int = 500
    problem_type: str = "about:blank"

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        detail: str | None = None,
        type: str | None = None,
        instance: str | None = None,
        extra: Mapping[str, Any] | None = None,
    ) -> None:
        """Initialise the exception with structured problem detail attributes.

        Args:
            message: Human readable error summary. ``str(error)`` returns it
                unchanged.
            status: HTTP status code associated with the problem. Defaults to
                the class level ``status``.
            detail: Optional detailed description of the failure.
            type: Problem type URI, defaults to the class level ``problem_type``.
            instance: Optional URI reference identifying the specific occurrence.
            extra: Additional attributes included in the serialized payload.
        """
        super().__init__(message)
        self.message = message
        self.problem = ProblemDetail(
            title=message,
            status=status if status is not None else self.status,
            detail=detail,
            type=type or self.problem_type,
            instance=instance,
            extra=extra or {},
        )
