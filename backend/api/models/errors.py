"""
Error response models.

Standardized error responses for the API.
"""

from typing import Any

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error response format."""

    error: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable message")
    details: dict[str, Any] = Field(default_factory=dict)


class ValidationErrorResponse(ErrorResponse):
    """Validation error response format. details maps field path to message."""

    error: str = "VALIDATION_ERROR"
    message: str = "Validation failed"
