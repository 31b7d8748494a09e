"""Custom exceptions for hubshift.

This module defines typed exceptions used throughout the application. Only
run-level and phase-level failures travel as exceptions; per-item failures
during move, revert and export are recorded in the action log instead.
"""

from typing import Any


class HubShiftError(Exception):
    """Base exception for all hubshift errors.

    All custom exceptions should inherit from this base class to allow
    for broad exception handling when needed.
    """

    pass


class ConfigurationError(HubShiftError):
    """Raised when credentials or hub settings are missing or unreadable."""

    pass


class LogLoadError(HubShiftError):
    """Raised when an action log file cannot be opened for reading.

    Attributes:
        path: Path of the log that failed to load
        reason: Human-readable reason from the underlying OS error
    """

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Could not load log file '{path}': {reason}")


class ApiError(HubShiftError):
    """Raised when the content management API rejects or fails a request.

    Attributes:
        operation: Name of the client operation (e.g. 'content_items.get')
        status_code: HTTP status code, if a response was received
        detail: Optional response body or transport error text
    """

    def __init__(
        self,
        operation: str,
        status_code: int | None = None,
        detail: str | None = None,
    ) -> None:
        """Initialize ApiError.

        Args:
            operation: Client operation that failed
            status_code: HTTP status code (optional)
            detail: Response body or error text (optional)
        """
        self.operation = operation
        self.status_code = status_code
        self.detail = detail

        message = f"{operation} failed"
        if status_code is not None:
            message += f" with status {status_code}"
        if detail:
            message += f": {detail}"

        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for structured log events."""
        result: dict[str, Any] = {
            "error": "api_error",
            "operation": self.operation,
        }

        if self.status_code is not None:
            result["status_code"] = self.status_code

        if self.detail is not None:
            result["detail"] = self.detail

        return result

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(operation={self.operation!r}, "
            f"status_code={self.status_code!r})"
        )


class NotFoundError(ApiError):
    """Raised when a requested entity does not exist (HTTP 404)."""

    def __init__(self, operation: str, entity_id: str) -> None:
        self.entity_id = entity_id
        super().__init__(operation, status_code=404, detail=f"{entity_id} not found")
