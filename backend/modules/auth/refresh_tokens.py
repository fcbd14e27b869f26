"""
Refresh token store.

Every refresh token handed out has a row keyed by its token id (the JWT's
`jti` claim). Deleting the row revokes the token: a refresh token is only
honored while its row exists and is unexpired.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from shared.config import Settings, get_settings
from shared.database import as_utc, utcnow
from shared.repository import BaseRepository
from shared.tables import RefreshToken

from .tokens import (
    issue_refresh_token,
    new_token_id,
    read_refresh_token_for_revocation,
    refresh_token_expires_at,
)


@dataclass(frozen=True)
class IssuedRefreshToken:
    """A freshly stored refresh token."""

    token_id: str
    token: str
    expires_at: datetime


class RefreshTokenStore(BaseRepository[RefreshToken]):
    """
    Persistent allow-list of refresh tokens.

    Runs inside the caller's session so token writes commit or roll back
    with the rest of the operation.
    """

    def __init__(self, session: AsyncSession, settings: Optional[Settings] = None) -> None:
        super().__init__(session)
        self._settings = settings or get_settings()

    async def create(self, user_id: str) -> IssuedRefreshToken:
        """Store a new token id for the user and sign a token for it."""
        token_id = new_token_id()
        expires_at = refresh_token_expires_at()
        self._session.add(
            RefreshToken(token=token_id, user_id=user_id, expires_at=expires_at)
        )
        await self._session.flush()
        return IssuedRefreshToken(
            token_id=token_id,
            token=issue_refresh_token(user_id, token_id, self._settings),
            expires_at=expires_at,
        )

    async def find_active(
        self,
        token_id: str,
        user_id: str,
        now: Optional[datetime] = None,
    ) -> Optional[RefreshToken]:
        """The user's row for this token id, if present and unexpired."""
        result = await self._session.execute(
            select(RefreshToken).where(
                RefreshToken.token == token_id,
                RefreshToken.user_id == user_id,
            )
        )
        row = result.scalar_one_or_none()
        if row is None or as_utc(row.expires_at) <= (now or utcnow()):
            return None
        return row

    async def revoke(self, token: str, user_id: Optional[str] = None) -> int:
        """
        Revoke one signed refresh token.

        Unknown, foreign or unparseable tokens are ignored. Expired tokens
        can still be revoked. Returns the number of rows deleted.
        """
        payload = read_refresh_token_for_revocation(token, self._settings)
        if payload is None:
            return 0
        if user_id is not None and payload.user_id != user_id:
            return 0
        return await self.revoke_token_id(payload.token_id, payload.user_id)

    async def revoke_token_id(self, token_id: str, user_id: str) -> int:
        result = await self._session.execute(
            delete(RefreshToken).where(
                RefreshToken.token == token_id,
                RefreshToken.user_id == user_id,
            )
        )
        return result.rowcount or 0

    async def revoke_all(self, user_id: str) -> int:
        """Delete every refresh token the user holds."""
        result = await self._session.execute(
            delete(RefreshToken).where(RefreshToken.user_id == user_id)
        )
        return result.rowcount or 0

    async def delete_expired(self, now: Optional[datetime] = None) -> int:
        """Garbage-collect rows past their expiry."""
        result = await self._session.execute(
            delete(RefreshToken).where(RefreshToken.expires_at < (now or utcnow()))
        )
        return result.rowcount or 0

    async def count_for_user(self, user_id: str) -> int:
        result = await self._session.execute(
            select(RefreshToken.id).where(RefreshToken.user_id == user_id)
        )
        return len(result.all())
