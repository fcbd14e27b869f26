"""
Password reset module data models.
"""

from pydantic import Field

from shared.models import CamelModel
from shared.validation import NormalizedEmail, StrongPassword

GENERIC_REQUEST_MESSAGE = (
    "If an account exists with this email, you will receive a password reset link shortly."
)
RESET_SUCCESS_MESSAGE = (
    "Your password has been reset successfully. You can now sign in with your new password."
)


class ForgotPasswordRequest(CamelModel):
    """Body of POST /auth/forgot-password."""

    email: NormalizedEmail


class ResetPasswordRequest(CamelModel):
    """Body of POST /auth/reset-password."""

    token: str = Field(..., min_length=1)
    password: StrongPassword


class PasswordResetResponse(CamelModel):
    """Outcome of a forgot-password or reset-password request."""

    success: bool = True
    message: str


class ValidateResetTokenResponse(CamelModel):
    """Whether a reset link is still usable."""

    valid: bool
