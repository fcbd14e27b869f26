"""
JWT issuing and verification.

Access tokens are short-lived and carry the user's id, email and role.
Refresh tokens live for a week and carry only the user id and a token id
(`jti`) that must match a stored RefreshToken row. The two kinds are
signed with different secrets, so one can never pass as the other.
"""

import logging
import secrets
from datetime import datetime, timedelta
from typing import Any, Optional

import jwt
from pydantic import ValidationError as PydanticValidationError

from shared.config import Settings, get_settings
from shared.database import utcnow
from shared.models import UserRole

from .exceptions import ExpiredTokenError, InvalidTokenError, TokenVerificationError
from .models import AccessTokenPayload, RefreshTokenPayload

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"

ACCESS_TOKEN_EXPIRY = timedelta(minutes=15)
REFRESH_TOKEN_EXPIRY = timedelta(days=7)
REFRESH_TOKEN_EXPIRY_MS = int(REFRESH_TOKEN_EXPIRY.total_seconds() * 1000)


def new_token_id() -> str:
    """Random id for a refresh token row."""
    return secrets.token_urlsafe(32)


def refresh_token_expires_at(now: Optional[datetime] = None) -> datetime:
    """When a refresh token issued now stops being valid."""
    return (now or utcnow()) + REFRESH_TOKEN_EXPIRY


def _encode(
    claims: dict[str, Any],
    secret: str,
    lifetime: timedelta,
    settings: Settings,
) -> str:
    now = utcnow()
    payload = {
        **claims,
        "iat": int(now.timestamp()),
        "exp": int((now + lifetime).timestamp()),
        "iss": settings.jwt_issuer,
        "aud": settings.jwt_audience,
    }
    return jwt.encode(payload, secret, algorithm=ALGORITHM)


def _decode(
    token: str,
    secret: str,
    settings: Settings,
    verify_exp: bool = True,
) -> dict[str, Any]:
    return jwt.decode(
        token,
        secret,
        algorithms=[ALGORITHM],
        issuer=settings.jwt_issuer,
        audience=settings.jwt_audience,
        options={"require": ["sub", "iat", "exp"], "verify_exp": verify_exp},
    )


def issue_access_token(
    user_id: str,
    email: str,
    role: UserRole | str,
    settings: Optional[Settings] = None,
) -> str:
    """Sign a 15 minute access token."""
    settings = settings or get_settings()
    role_value = role.value if isinstance(role, UserRole) else role
    return _encode(
        {"sub": user_id, "email": email, "role": role_value},
        settings.jwt_secret,
        ACCESS_TOKEN_EXPIRY,
        settings,
    )


def issue_refresh_token(
    user_id: str,
    token_id: str,
    settings: Optional[Settings] = None,
) -> str:
    """Sign a 7 day refresh token bound to a stored token id."""
    settings = settings or get_settings()
    return _encode(
        {"sub": user_id, "jti": token_id},
        settings.jwt_refresh_secret,
        REFRESH_TOKEN_EXPIRY,
        settings,
    )


def verify_access_token(
    token: str,
    settings: Optional[Settings] = None,
) -> AccessTokenPayload:
    """
    Verify an access token's signature, issuer, audience and expiry.

    Raises:
        ExpiredTokenError: Token is past its expiry
        InvalidTokenError: Signature, issuer, audience or format is wrong
        TokenVerificationError: Claims are missing or malformed
    """
    settings = settings or get_settings()
    try:
        claims = _decode(token, settings.jwt_secret, settings)
        return AccessTokenPayload.model_validate(claims)
    except jwt.ExpiredSignatureError:
        raise ExpiredTokenError()
    except jwt.InvalidTokenError as e:
        logger.debug("Access token rejected: %s", e)
        raise InvalidTokenError()
    except PydanticValidationError as e:
        logger.debug("Access token claims malformed: %s", e)
        raise TokenVerificationError()


def verify_refresh_token(
    token: str,
    settings: Optional[Settings] = None,
) -> RefreshTokenPayload:
    """
    Verify a refresh token. Same checks as verify_access_token, with the
    refresh secret.

    This only proves the token was issued by us. Whether it has been
    revoked is decided by the stored row.
    """
    settings = settings or get_settings()
    try:
        claims = _decode(token, settings.jwt_refresh_secret, settings)
        return RefreshTokenPayload.model_validate(claims)
    except jwt.ExpiredSignatureError:
        raise ExpiredTokenError("Refresh token has expired")
    except jwt.InvalidTokenError as e:
        logger.debug("Refresh token rejected: %s", e)
        raise InvalidTokenError("Invalid refresh token")
    except PydanticValidationError as e:
        logger.debug("Refresh token claims malformed: %s", e)
        raise TokenVerificationError("Refresh token verification failed")


def read_refresh_token_for_revocation(
    token: str,
    settings: Optional[Settings] = None,
) -> Optional[RefreshTokenPayload]:
    """
    Decode a refresh token for logout.

    The signature must be valid, but an expired token may still be
    revoked. Returns None for anything that isn't one of our tokens.
    """
    settings = settings or get_settings()
    try:
        claims = _decode(token, settings.jwt_refresh_secret, settings, verify_exp=False)
        return RefreshTokenPayload.model_validate(claims)
    except (jwt.InvalidTokenError, PydanticValidationError):
        return None
