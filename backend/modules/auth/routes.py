"""
Auth API endpoints.

Registration, login, token refresh, session lookup and logout.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request

from api.dependencies import get_auth_service
from api.middleware.auth import require_auth
from api.middleware.rate_limit import auth_rate_limit
from shared.models import AuthenticatedUser
from shared.validation import Err, parse_payload

from .exceptions import InvalidCredentialsError
from .interfaces import IAuthService
from .models import (
    AuthResponse,
    LoginRequest,
    LoginResponse,
    LogoutRequest,
    LogoutResponse,
    RefreshRequest,
    RegisterRequest,
    SessionResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=201,
    dependencies=[Depends(auth_rate_limit)],
)
async def register(
    request: RegisterRequest,
    service: IAuthService = Depends(get_auth_service),
) -> AuthResponse:
    """
    Create an account and sign in.

    New accounts start on a free plan with a trial window.
    """
    return await service.register(request.email, request.password, request.name)


@router.post(
    "/login",
    response_model=LoginResponse,
    dependencies=[Depends(auth_rate_limit)],
)
async def login(
    request: Request,
    service: IAuthService = Depends(get_auth_service),
) -> LoginResponse:
    """
    Sign in with email and password.

    Every failure, including a malformed body, gets the same 401.
    """
    try:
        data = await request.json()
    except ValueError:
        data = None

    parsed = parse_payload(LoginRequest, data)
    if isinstance(parsed, Err):
        logger.debug("Rejected login payload: %s", parsed.field_errors)
        raise InvalidCredentialsError()

    credentials = parsed.value
    result = await service.login(credentials.email, credentials.password)
    if result is None:
        raise InvalidCredentialsError()
    return result


@router.post(
    "/refresh",
    response_model=AuthResponse,
    dependencies=[Depends(auth_rate_limit)],
)
async def refresh(
    request: RefreshRequest,
    service: IAuthService = Depends(get_auth_service),
) -> AuthResponse:
    """
    Exchange a refresh token for a new token pair.

    The presented refresh token is revoked.
    """
    return await service.refresh(request.refresh_token)


@router.get("/me", response_model=SessionResponse)
async def me(
    user: AuthenticatedUser = Depends(require_auth),
    service: IAuthService = Depends(get_auth_service),
) -> SessionResponse:
    """Get the current session."""
    return service.get_current_session(user)


@router.post("/logout", response_model=LogoutResponse)
async def logout(
    request: Optional[LogoutRequest] = None,
    user: AuthenticatedUser = Depends(require_auth),
    service: IAuthService = Depends(get_auth_service),
) -> LogoutResponse:
    """
    Log out.

    Send refreshToken to revoke that session, or logoutAll to revoke
    every session. With neither, only the client forgets its tokens.
    """
    request = request or LogoutRequest()
    return await service.logout(
        user,
        refresh_token=request.refresh_token,
        logout_all=request.logout_all,
    )
