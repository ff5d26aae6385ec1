"""Utility modules shared by the validation components."""

from .errors import FoundationError, ProblemDetail


__all__ = ["FoundationError", "ProblemDetail"]
