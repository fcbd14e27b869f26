"""
JWT Authentication middleware.

Validates access tokens and loads the user behind them. The resolved
user is returned from the dependency and passed to handlers explicitly.
"""

import logging
from typing import Callable, Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from modules.auth.exceptions import (
    InvalidPhaseError,
    MissingTokenError,
    ProSubscriptionRequiredError,
)
from modules.auth.interfaces import IAuthService
from modules.auth.subscription import is_pro
from modules.auth.tokens import verify_access_token
from shared.exceptions import AuthenticationError
from shared.models import AuthenticatedUser

from ..dependencies import get_auth_service

logger = logging.getLogger(__name__)

# Bearer token extractor
bearer_scheme = HTTPBearer(auto_error=False)

# Learning phases in order. Phase 1 is free, later phases need Pro.
PHASE_ORDER = ("foundation", "core_ml", "deep_learning")
FREE_PHASES = 1


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    auth_service: IAuthService = Depends(get_auth_service),
) -> Optional[AuthenticatedUser]:
    """
    Dependency that optionally extracts user if authenticated.

    Never raises: a missing or bad token, or a user that no longer
    exists, all leave the request anonymous.

    Usage:
        @router.get("/public")
        async def public_route(user: Optional[AuthenticatedUser] = Depends(get_optional_user)):
            if user:
                return {"message": f"Hello, {user.email}"}
            return {"message": "Hello, anonymous"}
    """
    if credentials is None:
        return None

    try:
        payload = verify_access_token(credentials.credentials)
    except AuthenticationError as e:
        logger.debug("Ignoring bearer token: %s", e.message)
        return None

    user = await auth_service.get_user_by_id(payload.user_id)
    if user is None:
        logger.debug("Token subject %s no longer exists", payload.user_id)
    return user


async def require_auth(
    user: Optional[AuthenticatedUser] = Depends(get_optional_user),
) -> AuthenticatedUser:
    """
    Dependency that requires authentication.

    Use this for endpoints that require a logged-in user.

    Usage:
        @router.get("/protected")
        async def protected_route(user: AuthenticatedUser = Depends(require_auth)):
            return {"user_id": user.id}
    """
    if user is None:
        raise MissingTokenError("Authentication required")
    return user


async def require_pro(
    user: AuthenticatedUser = Depends(require_auth),
) -> AuthenticatedUser:
    """Dependency that requires an admin or an active Pro subscription."""
    if not is_pro(user):
        raise ProSubscriptionRequiredError()
    return user


def _check_phase(user: AuthenticatedUser, phase_number: int) -> None:
    if not 1 <= phase_number <= len(PHASE_ORDER):
        raise InvalidPhaseError(phase_number)
    if phase_number > FREE_PHASES and not is_pro(user):
        raise ProSubscriptionRequiredError(
            f"Pro subscription required to access {PHASE_ORDER[phase_number - 1]} phase"
        )


def require_phase_access(phase_number: int) -> Callable:
    """
    Build a dependency gating a route on a learning phase (1-based).

    Usage:
        @router.get("/phases/2/content")
        async def content(user: AuthenticatedUser = Depends(require_phase_access(2))):
            ...
    """

    async def dependency(
        user: AuthenticatedUser = Depends(require_auth),
    ) -> AuthenticatedUser:
        _check_phase(user, phase_number)
        return user

    return dependency


def require_phase_access_by_name(phase: str) -> Callable:
    """Same as require_phase_access, with the phase given by name."""

    async def dependency(
        user: AuthenticatedUser = Depends(require_auth),
    ) -> AuthenticatedUser:
        if phase not in PHASE_ORDER:
            raise InvalidPhaseError(phase)
        _check_phase(user, PHASE_ORDER.index(phase) + 1)
        return user

    return dependency


# Type aliases for cleaner route definitions
RequireAuth = Depends(require_auth)
RequirePro = Depends(require_pro)
OptionalAuth = Depends(get_optional_user)
