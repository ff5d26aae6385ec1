"""Abstract validator interfaces.

This module defines the contract that every resource validator plugged into
the record-processing pipeline implements.

The module provides:
- ``Validator`` interface for asynchronous resource validation
- ``TypeOperation`` values describing the FHIR interaction in progress
- ``ValidationParams`` carrying optional request context

Thread Safety:
    Thread-safe: Abstract interfaces with no shared state.

Example:
    >>> class AlwaysValid(Validator):
    ...     async def validate(self, resource, params=None) -> None:
    ...         return None
"""

# ==============================================================================
# IMPORTS
# ==============================================================================

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any

# ==============================================================================
# TYPE DEFINITIONS
# ==============================================================================


class TypeOperation(str, Enum):
    """FHIR interactions a resource can be validated for."""

    CREATE = "create"
    READ = "read"
    VREAD = "vread"
    UPDATE = "update"
    DELETE = "delete"
    PATCH = "patch"
    HISTORY_TYPE = "history-type"
    HISTORY_INSTANCE = "history-instance"
    SEARCH_TYPE = "search-type"


# ==============================================================================
# DATA MODELS
# ==============================================================================


@dataclass(frozen=True)
class ValidationParams:
    """Optional context supplied alongside a resource.

    Attributes:
        tenant_id: Tenant the resource belongs to in multi-tenant deployments.
        type_operation: Interaction that produced the resource.
    """

    tenant_id: str | None = None
    type_operation: TypeOperation | None = None


# ==============================================================================
# INTERFACES
# ==============================================================================


class Validator(ABC):
    """Interface for resource validators.

    Implementations return ``None`` when the resource is valid and raise when
    it is not, or when validation could not be carried out.
    """

    @abstractmethod
    async def validate(self, resource: Any, params: ValidationParams | None = None) -> None:
        """Validate a resource.

        Args:
            resource: Resource payload to validate.
            params: Optional request context.

        Raises:
            InvalidResourceError: If the resource is invalid.
            InvocationFailureError: If validation could not be performed.
        """
        raise NotImplementedError


# ==============================================================================
# EXPORTS
# ==============================================================================

__all__ = ["TypeOperation", "ValidationParams", "Validator"]
