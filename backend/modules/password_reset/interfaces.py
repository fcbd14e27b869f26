"""
Password reset module interface.
"""

from typing import Protocol, runtime_checkable

from .models import PasswordResetResponse


@runtime_checkable
class IPasswordResetService(Protocol):
    """
    Interface for the forgot/reset password flow.

    request_reset() answers the same way whether or not the account
    exists, so callers learn nothing about registered emails.
    """

    async def request_reset(self, email: str) -> PasswordResetResponse:
        """Email a single-use reset link if the account exists."""
        ...

    async def validate_token(self, token: str) -> bool:
        """True if the raw token is known, unused and unexpired. Does not consume it."""
        ...

    async def reset_password(self, token: str, new_password: str) -> PasswordResetResponse:
        """
        Consume the token and set a new password.

        All of the user's refresh tokens are revoked.

        Raises:
            ValidationError: Token unknown, expired or already used
        """
        ...

    async def cleanup_expired_tokens(self) -> int:
        """Delete expired and used tokens. Returns the number removed."""
        ...
