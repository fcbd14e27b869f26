"""
Password reset service implementation.

Reset links carry a random token; only its SHA-256 digest is stored.
A token is good for one hour and one use. Consuming it changes the
password and revokes every refresh token of the user in one transaction.
"""

import hashlib
import logging
import secrets
from datetime import timedelta
from typing import TYPE_CHECKING, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from modules.auth.passwords import CredentialHasher
from modules.auth.refresh_tokens import RefreshTokenStore
from modules.auth.repository import UserRepository
from shared.config import Settings, get_settings
from shared.database import as_utc, get_session_factory, utcnow
from shared.exceptions import PlpgError

from .exceptions import (
    InvalidResetTokenError,
    PasswordResetFailedError,
    ResetTokenExpiredError,
    ResetTokenUsedError,
)
from .interfaces import IPasswordResetService
from .models import GENERIC_REQUEST_MESSAGE, RESET_SUCCESS_MESSAGE, PasswordResetResponse
from .repository import PasswordResetRepository

if TYPE_CHECKING:
    from modules.email.interfaces import IEmailService

logger = logging.getLogger(__name__)

RESET_TOKEN_BYTES = 32
RESET_TOKEN_EXPIRY = timedelta(hours=1)


def generate_reset_token() -> str:
    """64 hex characters of randomness."""
    return secrets.token_hex(RESET_TOKEN_BYTES)


def hash_reset_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


class PasswordResetService(IPasswordResetService):
    """Implementation of the forgot/reset password flow."""

    def __init__(
        self,
        email_service: "IEmailService",
        session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
        hasher: Optional[CredentialHasher] = None,
        settings: Optional[Settings] = None,
    ):
        self._settings = settings or get_settings()
        self._email = email_service
        self._session_factory = session_factory or get_session_factory()
        self._hasher = hasher or CredentialHasher(self._settings.bcrypt_rounds)

    def build_reset_url(self, token: str) -> str:
        return f"{self._settings.frontend_url.rstrip('/')}/reset-password/{token}"

    async def request_reset(self, email: str) -> PasswordResetResponse:
        generic = PasswordResetResponse(success=True, message=GENERIC_REQUEST_MESSAGE)
        email = email.strip().lower()

        try:
            async with self._session_factory() as session:
                async with session.begin():
                    user = await UserRepository(session).get_by_email(email)
                    if user is None:
                        logger.debug("Password reset requested for unknown email")
                        return generic

                    tokens = PasswordResetRepository(session)
                    await tokens.delete_unused_for_user(user.id)
                    raw_token = generate_reset_token()
                    await tokens.create(
                        user_id=user.id,
                        email=user.email,
                        token_hash=hash_reset_token(raw_token),
                        expires_at=utcnow() + RESET_TOKEN_EXPIRY,
                    )

            result = await self._email.send_password_reset_email(
                user.email, self.build_reset_url(raw_token)
            )
            if not result.success:
                logger.error("Password reset email to user %s failed: %s", user.id, result.error)
            else:
                logger.info("Password reset email sent to user %s", user.id)
        except Exception:
            logger.exception("Password reset request failed")

        return generic

    async def validate_token(self, token: str) -> bool:
        async with self._session_factory() as session:
            row = await PasswordResetRepository(session).get_by_hash(hash_reset_token(token))

        if row is None or row.used_at is not None:
            return False
        return as_utc(row.expires_at) > utcnow()

    async def reset_password(self, token: str, new_password: str) -> PasswordResetResponse:
        try:
            return await self._reset_password(token, new_password)
        except PlpgError:
            raise
        except Exception:
            logger.exception("Password reset failed")
            raise PasswordResetFailedError()

    async def _reset_password(self, token: str, new_password: str) -> PasswordResetResponse:
        token_hash = hash_reset_token(token)

        async with self._session_factory() as session:
            async with session.begin():
                tokens = PasswordResetRepository(session)
                row = await tokens.get_by_hash(token_hash)
                if row is None:
                    raise InvalidResetTokenError()

                if as_utc(row.expires_at) <= utcnow():
                    await tokens.delete_by_id(row.id)
                    expired = True
                else:
                    expired = False

            if expired:
                raise ResetTokenExpiredError()
            if row.used_at is not None:
                raise ResetTokenUsedError()

            password_hash = await self._hasher.hash(new_password)

            async with session.begin():
                tokens = PasswordResetRepository(session)
                if not await tokens.mark_used(row.id):
                    if as_utc(row.expires_at) <= utcnow():
                        raise ResetTokenExpiredError()
                    raise ResetTokenUsedError()
                await UserRepository(session).update_password(row.user_id, password_hash)
                revoked = await RefreshTokenStore(session, self._settings).revoke_all(row.user_id)

        logger.info(
            "Password reset for user %s, revoked %d refresh token(s)", row.user_id, revoked
        )
        return PasswordResetResponse(success=True, message=RESET_SUCCESS_MESSAGE)

    async def cleanup_expired_tokens(self) -> int:
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    count = await PasswordResetRepository(session).delete_expired_or_used()
        except Exception:
            logger.exception("Password reset token cleanup failed")
            return 0

        logger.info("Cleaned up %d password reset token(s)", count)
        return count

