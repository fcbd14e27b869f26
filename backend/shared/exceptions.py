"""
Base exception classes for the PLPG backend.

Each module should define its own exceptions that inherit from these bases.
The API layer maps each base to a single HTTP status code.
"""

from typing import Optional, Any


class PlpgError(Exception):
    """
    Base exception for all PLPG errors.

    All custom exceptions should inherit from this class.
    """

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(PlpgError):
    """Input validation failed."""

    status_code = 400


class AuthenticationError(PlpgError):
    """Authentication failed (invalid or missing credentials)."""

    status_code = 401


class ForbiddenError(PlpgError):
    """Authenticated, but not allowed to perform the operation."""

    status_code = 403


class NotFoundError(PlpgError):
    """Resource not found."""

    status_code = 404


class ConflictError(PlpgError):
    """A unique resource already exists."""

    status_code = 409


class RateLimitError(PlpgError):
    """Too many requests from one client within a window."""

    status_code = 429

    def __init__(self, message: str, retry_after: int):
        super().__init__(
            message,
            code="RATE_LIMITED",
            details={"retryAfter": retry_after},
        )
        self.retry_after = retry_after


class ExternalServiceError(PlpgError):
    """Error communicating with an external service."""

    status_code = 502

    def __init__(
        self,
        message: str,
        service: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, code, details)
        self.service = service
        self.details["service"] = service
