"""
Custom exception classes for the check-in application.

Provides structured error handling with user-friendly messages and proper
error categorization for different failure scenarios.
"""

from __future__ import annotations

from typing import Any


class CheckInAppError(Exception):
    """Base exception for all application errors."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        user_message: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.user_message = user_message or self._get_default_user_message()

    def _get_default_user_message(self) -> str:
        """Provide a user-friendly version of the error message."""
        return "An unexpected error occurred. Please try again."

    def __str__(self) -> str:
        return f"{self.__class__.__name__}: {self.message}"


class ValidationError(CheckInAppError):
    """Raised when input validation fails."""

    def __init__(
        self, field: str, message: str, value: Any = None, details: dict[str, Any] | None = None
    ):
        self.field = field
        self.value = value
        super().__init__(
            message=f"Validation failed for field '{field}': {message}",
            details=details or {"field": field, "value": value},
            user_message=f"Invalid {field.replace('_', ' ')}: {message}",
        )

    def _get_default_user_message(self) -> str:
        return f"Please check your input for {self.field.replace('_', ' ')} and try again."


class MultipleValidationError(CheckInAppError):
    """Raised when multiple validation errors occur."""

    def __init__(self, errors: list[ValidationError]):
        self.validation_errors = errors
        messages = [f"{e.field}: {e.message}" for e in errors]
        super().__init__(
            message=f"Multiple validation errors: {'; '.join(messages)}",
            details={
                "errors": [
                    {"field": e.field, "message": e.message, "value": e.value} for e in errors
                ]
            },
            user_message="Please correct the following errors and try again.",
        )

    def _get_default_user_message(self) -> str:
        return f"Please correct {len(self.validation_errors)} validation errors and try again."


class CheckInStateError(CheckInAppError):
    """Raised when a check-in action is not valid for the current stage."""

    def __init__(self, action: str, stage: str, details: dict[str, Any] | None = None):
        self.action = action
        self.stage = stage
        super().__init__(
            message=f"Cannot {action} while check-in is '{stage}'",
            details=details or {"action": action, "stage": stage},
        )

    def _get_default_user_message(self) -> str:
        return "That step isn't available right now. Please start the check-in again."


class TokenDecodeError(CheckInAppError):
    """Raised when a shared result link cannot be read."""

    def __init__(self, token: str | None = None, details: dict[str, Any] | None = None):
        self.token = token
        super().__init__(
            message="Shared token is malformed",
            details=details or {"token_length": len(token or "")},
        )

    def _get_default_user_message(self) -> str:
        return "That partner link couldn't be read. Ask your partner to copy it again."


class FeedbackStoreError(CheckInAppError):
    """Raised when the feedback file cannot be read or written."""

    def __init__(self, message: str, operation: str, details: dict[str, Any] | None = None):
        self.operation = operation
        super().__init__(
            message=f"Feedback store error during {operation}: {message}",
            details=details or {"operation": operation},
        )

    def _get_default_user_message(self) -> str:
        return "We couldn't save your feedback. Please try again in a moment."


class ConfigurationError(CheckInAppError):
    """Raised when configuration is invalid."""

    def __init__(
        self,
        message: str,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.config_key = config_key
        super().__init__(
            message=message,
            details=details or {"config_key": config_key},
            user_message="Configuration error. Please check your settings.",
        )


class ExportError(CheckInAppError):
    """Raised when feedback export fails."""

    def __init__(
        self,
        message: str,
        export_format: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.export_format = export_format
        super().__init__(
            message=message,
            details=details or {"export_format": export_format},
            user_message="Export failed. Please try again or choose a different format.",
        )


def create_user_friendly_error_message(error: Exception) -> str:
    """
    Create a user-friendly error message from any exception.

    Args:
        error: The exception to convert

    Returns:
        User-friendly error message

    Example:
        >>> error = ValidationError("answer", "must be between 1 and 5")
        >>> create_user_friendly_error_message(error)
        'Invalid answer: must be between 1 and 5'
    """
    if isinstance(error, CheckInAppError):
        return error.user_message

    error_type = type(error).__name__
    messages = {
        "ValueError": "Invalid input provided. Please check your data and try again.",
        "KeyError": "Required information is missing. Please check your input.",
        "TypeError": "Incorrect data type provided. Please check your input format.",
    }
    return messages.get(
        error_type, "An unexpected error occurred. Please try again or contact support."
    )


def log_error_details(error: Exception, context: dict[str, Any] | None = None) -> dict[str, Any]:
    """
    Create structured error details for logging.

    Args:
        error: The exception to log
        context: Additional context information

    Returns:
        Dictionary with structured error details
    """
    details = {
        "error_type": type(error).__name__,
        "error_message": str(error),
        "context": context or {},
    }

    if isinstance(error, CheckInAppError):
        details.update({"user_message": error.user_message, "error_details": error.details})

    return details
