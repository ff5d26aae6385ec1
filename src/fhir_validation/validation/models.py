"""Wire models exchanged with the remote validation function."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

ERROR_SEVERITY = "error"


class ErrorMessage(BaseModel):
    """Single message reported by the remote validator."""

    severity: str
    message: str = Field(alias="msg")

    model_config = ConfigDict(populate_by_name=True, frozen=True)


class ValidationOutcome(BaseModel):
    """Parsed response envelope of the remote validation function."""

    successful: bool
    error_messages: list[ErrorMessage] = Field(default_factory=list, alias="errorMessages")

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    def error_summary(self) -> str:
        """Join error-severity messages with newlines, preserving order."""
        return "\n".join(
            entry.message for entry in self.error_messages if entry.severity == ERROR_SEVERITY
        )


__all__ = ["ERROR_SEVERITY", "ErrorMessage", "ValidationOutcome"]
