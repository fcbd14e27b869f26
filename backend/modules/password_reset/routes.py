"""
Password reset API endpoints.

Mounted under /auth next to the auth routes.
"""

from fastapi import APIRouter, Depends

from api.dependencies import get_password_reset_service
from api.middleware.rate_limit import password_reset_rate_limit

from .interfaces import IPasswordResetService
from .models import (
    ForgotPasswordRequest,
    PasswordResetResponse,
    ResetPasswordRequest,
    ValidateResetTokenResponse,
)

router = APIRouter()


@router.post(
    "/forgot-password",
    response_model=PasswordResetResponse,
    dependencies=[Depends(password_reset_rate_limit)],
)
async def forgot_password(
    request: ForgotPasswordRequest,
    service: IPasswordResetService = Depends(get_password_reset_service),
) -> PasswordResetResponse:
    """
    Request a password reset link.

    Always answers with the same message, whether or not the email is registered.
    """
    return await service.request_reset(request.email)


@router.post(
    "/reset-password",
    response_model=PasswordResetResponse,
    dependencies=[Depends(password_reset_rate_limit)],
)
async def reset_password(
    request: ResetPasswordRequest,
    service: IPasswordResetService = Depends(get_password_reset_service),
) -> PasswordResetResponse:
    """Set a new password using the token from the reset link."""
    return await service.reset_password(request.token, request.password)


@router.get("/validate-reset-token/{token}", response_model=ValidateResetTokenResponse)
async def validate_reset_token(
    token: str,
    service: IPasswordResetService = Depends(get_password_reset_service),
) -> ValidateResetTokenResponse:
    """Check whether a reset link can still be used."""
    return ValidateResetTokenResponse(valid=await service.validate_token(token))
