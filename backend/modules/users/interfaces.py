"""
User module interface.
"""

from typing import Protocol, runtime_checkable

from .models import UpdateProfileRequest, UserProfile


@runtime_checkable
class IUserService(Protocol):
    """Interface for profile reads and updates."""

    async def get_profile(self, user_id: str) -> UserProfile:
        """
        Raises:
            NotFoundError: If the user doesn't exist
        """
        ...

    async def update_profile(self, user_id: str, data: UpdateProfileRequest) -> UserProfile:
        """
        Apply the fields present in data.

        Raises:
            NotFoundError: If the user doesn't exist
        """
        ...
