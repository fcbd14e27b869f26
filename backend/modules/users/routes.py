"""
User-related endpoints.

Provides endpoints for user profile management.
"""

from fastapi import APIRouter, Depends

from api.dependencies import get_user_service
from api.middleware.auth import require_auth
from shared.models import AuthenticatedUser

from .interfaces import IUserService
from .models import UpdateProfileRequest, UserProfile

router = APIRouter()


@router.get("/profile", response_model=UserProfile)
async def get_profile(
    user: AuthenticatedUser = Depends(require_auth),
    service: IUserService = Depends(get_user_service),
) -> UserProfile:
    """
    Get the current user's profile.

    Requires authentication.
    """
    return await service.get_profile(user.id)


@router.patch("/profile", response_model=UserProfile)
async def update_profile(
    request: UpdateProfileRequest,
    user: AuthenticatedUser = Depends(require_auth),
    service: IUserService = Depends(get_user_service),
) -> UserProfile:
    """
    Update the current user's name and/or avatar.

    Requires authentication.
    """
    return await service.update_profile(user.id, request)
