"""
Email module interface.
"""

from typing import Protocol, runtime_checkable

from .models import EmailMessage, EmailResult


@runtime_checkable
class IEmailService(Protocol):
    """Outbound email. Implementations report failures in the result."""

    async def send_email(self, message: EmailMessage) -> EmailResult:
        ...

    async def send_password_reset_email(self, email: str, reset_url: str) -> EmailResult:
        """Send the reset link. The link is valid for one hour."""
        ...
