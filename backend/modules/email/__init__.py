"""
Email module.

Outbound transactional email (password reset links).
"""

from .interfaces import IEmailService
from .models import EmailMessage, EmailResult

__all__ = [
    "IEmailService",
    "EmailMessage",
    "EmailResult",
]
