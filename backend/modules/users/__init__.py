"""
Users module.

Profile reads and partial updates for the signed-in user.
"""

from .interfaces import IUserService
from .models import UserProfile, UpdateProfileRequest
from .exceptions import UserNotFoundError

__all__ = [
    "IUserService",
    "UserProfile",
    "UpdateProfileRequest",
    "UserNotFoundError",
]
