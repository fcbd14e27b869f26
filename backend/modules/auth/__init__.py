"""
Authentication module.

Handles credentials, JWT issuing/verification, refresh token storage,
subscription status and the register/login/logout flows.

Public API:
- IAuthService: Interface for auth operations
- CredentialHasher: bcrypt password hashing
- Token helpers: issue_access_token, verify_access_token, ...
- Status resolver: determine_status, get_subscription_status, is_pro
- Auth exceptions: InvalidTokenError, ExpiredTokenError, etc.
"""

from .interfaces import IAuthService
from .models import (
    PlanState,
    RegisterRequest,
    LoginRequest,
    LogoutRequest,
    AuthResponse,
    LoginResponse,
    SessionResponse,
    LogoutResponse,
    AccessTokenPayload,
    RefreshTokenPayload,
)
from .passwords import CredentialHasher
from .tokens import (
    ACCESS_TOKEN_EXPIRY,
    REFRESH_TOKEN_EXPIRY,
    REFRESH_TOKEN_EXPIRY_MS,
    issue_access_token,
    issue_refresh_token,
    verify_access_token,
    verify_refresh_token,
)
from .subscription import (
    determine_status,
    get_subscription_status,
    get_trial_ends_at,
    is_pro,
)
from .exceptions import (
    InvalidTokenError,
    ExpiredTokenError,
    TokenVerificationError,
    MissingTokenError,
    InvalidCredentialsError,
    EmailAlreadyRegisteredError,
    ProSubscriptionRequiredError,
    InvalidPhaseError,
)

__all__ = [
    # Interface
    "IAuthService",
    # Models
    "PlanState",
    "RegisterRequest",
    "LoginRequest",
    "LogoutRequest",
    "AuthResponse",
    "LoginResponse",
    "SessionResponse",
    "LogoutResponse",
    "AccessTokenPayload",
    "RefreshTokenPayload",
    # Credentials and tokens
    "CredentialHasher",
    "ACCESS_TOKEN_EXPIRY",
    "REFRESH_TOKEN_EXPIRY",
    "REFRESH_TOKEN_EXPIRY_MS",
    "issue_access_token",
    "issue_refresh_token",
    "verify_access_token",
    "verify_refresh_token",
    # Status resolver
    "determine_status",
    "get_subscription_status",
    "get_trial_ends_at",
    "is_pro",
    # Exceptions
    "InvalidTokenError",
    "ExpiredTokenError",
    "TokenVerificationError",
    "MissingTokenError",
    "InvalidCredentialsError",
    "EmailAlreadyRegisteredError",
    "ProSubscriptionRequiredError",
    "InvalidPhaseError",
]
