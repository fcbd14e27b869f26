"""
Authentication module data models.

Request bodies, response shapes and decoded token claims. Everything
crossing the HTTP boundary speaks camelCase (accessToken, logoutAll, ...).
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from shared.models import CamelModel, SubscriptionStatus, UserRole
from shared.validation import NormalizedEmail, StrongPassword


class PlanState(str, Enum):
    """Effective plan derived at login time."""

    FREE = "free"
    TRIAL = "trial"
    PRO = "pro"


class LogoutMethod(str, Enum):
    """How a logout was carried out, as reported to analytics."""

    ALL_SESSIONS = "all_sessions"
    SINGLE_SESSION = "single_session"
    CLIENT_ONLY = "client_only"


# -----------------------------------------------------------------------------
# Requests
# -----------------------------------------------------------------------------


class RegisterRequest(CamelModel):
    """Body of POST /auth/register."""

    email: NormalizedEmail
    password: StrongPassword
    name: str = Field(..., min_length=1, max_length=100)

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, value):
        return value.strip() if isinstance(value, str) else value


class LoginRequest(CamelModel):
    """Body of POST /auth/login. Password strength is not rechecked here."""

    email: NormalizedEmail
    password: str = Field(..., min_length=1)


class RefreshRequest(CamelModel):
    """Body of POST /auth/refresh."""

    refresh_token: str = Field(..., min_length=1)


class LogoutRequest(CamelModel):
    """Body of POST /auth/logout. Both fields are optional."""

    refresh_token: Optional[str] = None
    logout_all: bool = False


# -----------------------------------------------------------------------------
# Responses
# -----------------------------------------------------------------------------


class UserResponse(CamelModel):
    """A user as exposed to clients. Never carries the password hash."""

    id: str
    email: str
    name: Optional[str] = None
    avatar_url: Optional[str] = None
    role: UserRole = UserRole.FREE
    email_verified: bool = False
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AuthResponse(CamelModel):
    """Returned by registration and token refresh."""

    user: UserResponse
    access_token: str
    refresh_token: str


class LoginResponse(AuthResponse):
    """Returned by login, with the plan state derived at login time."""

    subscription_status: PlanState


class SessionResponse(CamelModel):
    """Returned by GET /auth/me."""

    user_id: str
    email: str
    name: Optional[str] = None
    avatar_url: Optional[str] = None
    subscription_status: SubscriptionStatus
    trial_ends_at: Optional[datetime] = None
    is_verified: bool
    role: UserRole
    created_at: datetime


class LogoutResponse(CamelModel):
    """Returned by POST /auth/logout."""

    success: bool = True
    message: str


# -----------------------------------------------------------------------------
# Token claims
# -----------------------------------------------------------------------------


class AccessTokenPayload(BaseModel):
    """Verified claims of an access token."""

    sub: str = Field(..., description="Subject (user ID)")
    email: str = Field(..., description="User's email")
    role: UserRole = Field(default=UserRole.FREE, description="User role")
    iat: int = Field(..., description="Issued at timestamp")
    exp: int = Field(..., description="Expiration timestamp")

    @property
    def user_id(self) -> str:
        return self.sub


class RefreshTokenPayload(BaseModel):
    """Verified claims of a refresh token."""

    sub: str = Field(..., description="Subject (user ID)")
    jti: str = Field(..., description="Token ID, matches the stored row")
    iat: int = Field(..., description="Issued at timestamp")
    exp: int = Field(..., description="Expiration timestamp")

    @property
    def user_id(self) -> str:
        return self.sub

    @property
    def token_id(self) -> str:
        return self.jti


class IssuedTokens(BaseModel):
    """An access/refresh pair handed out together."""

    access_token: str
    refresh_token: str
