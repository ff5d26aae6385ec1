"""Observability helpers (metrics) for the validation components."""

from .metrics import observe_invocation, record_validation_outcome

__all__ = ["observe_invocation", "record_validation_outcome"]
