"""
Password reset module.

Single-use, hashed, one-hour reset tokens delivered by email.
"""

from .interfaces import IPasswordResetService
from .models import (
    ForgotPasswordRequest,
    ResetPasswordRequest,
    PasswordResetResponse,
    ValidateResetTokenResponse,
)
from .exceptions import (
    InvalidResetTokenError,
    ResetTokenExpiredError,
    ResetTokenUsedError,
    PasswordResetFailedError,
)

__all__ = [
    "IPasswordResetService",
    "ForgotPasswordRequest",
    "ResetPasswordRequest",
    "PasswordResetResponse",
    "ValidateResetTokenResponse",
    "InvalidResetTokenError",
    "ResetTokenExpiredError",
    "ResetTokenUsedError",
    "PasswordResetFailedError",
]
