"""
Password reset module exceptions.

All of them are validation errors (400). The reset-password page shows
their messages; forgot-password never raises them.
"""

from shared.exceptions import ValidationError


class InvalidResetTokenError(ValidationError):
    """Raised when no stored token matches the submitted one."""

    def __init__(self):
        super().__init__(
            "Invalid or expired reset token",
            code="INVALID_RESET_TOKEN",
            details={"token": "Invalid or expired reset token"},
        )


class ResetTokenExpiredError(ValidationError):
    """Raised when the token exists but is past its expiry."""

    def __init__(self):
        super().__init__(
            "Reset token has expired. Please request a new one.",
            code="RESET_TOKEN_EXPIRED",
            details={"token": "Token expired"},
        )


class ResetTokenUsedError(ValidationError):
    """Raised when the token has already been consumed."""

    def __init__(self):
        super().__init__(
            "This reset token has already been used",
            code="RESET_TOKEN_USED",
            details={"token": "Token already used"},
        )


class PasswordResetFailedError(ValidationError):
    """Raised in place of any unexpected failure during a reset."""

    def __init__(self):
        super().__init__(
            "An error occurred while resetting your password. Please try again.",
            code="PASSWORD_RESET_FAILED",
            details={"error": "Reset failed"},
        )
