"""
Password reset token repository.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import delete, or_, select, update

from shared.database import utcnow
from shared.repository import BaseRepository
from shared.tables import PasswordResetToken


class PasswordResetRepository(BaseRepository[PasswordResetToken]):
    """Rows are looked up by the SHA-256 of the raw token only."""

    async def create(
        self,
        user_id: str,
        email: str,
        token_hash: str,
        expires_at: datetime,
    ) -> PasswordResetToken:
        row = PasswordResetToken(
            user_id=user_id,
            email=email,
            token_hash=token_hash,
            expires_at=expires_at,
        )
        self._session.add(row)
        await self._session.flush()
        return row

    async def get_by_hash(self, token_hash: str) -> Optional[PasswordResetToken]:
        result = await self._session.execute(
            select(PasswordResetToken).where(PasswordResetToken.token_hash == token_hash)
        )
        return result.scalar_one_or_none()

    async def delete_unused_for_user(self, user_id: str) -> int:
        result = await self._session.execute(
            delete(PasswordResetToken).where(
                PasswordResetToken.user_id == user_id,
                PasswordResetToken.used_at.is_(None),
            )
        )
        return result.rowcount or 0

    async def delete_by_id(self, token_id: str) -> None:
        await self._session.execute(
            delete(PasswordResetToken).where(PasswordResetToken.id == token_id)
        )

    async def mark_used(self, token_id: str, now: Optional[datetime] = None) -> bool:
        """
        Stamp used_at if the token is still unused and unexpired.

        Returns False when another request consumed the token first or it
        expired in the meantime.
        """
        now = now or utcnow()
        result = await self._session.execute(
            update(PasswordResetToken)
            .where(
                PasswordResetToken.id == token_id,
                PasswordResetToken.used_at.is_(None),
                PasswordResetToken.expires_at > now,
            )
            .values(used_at=now)
        )
        return (result.rowcount or 0) == 1

    async def delete_expired_or_used(self, now: Optional[datetime] = None) -> int:
        result = await self._session.execute(
            delete(PasswordResetToken).where(
                or_(
                    PasswordResetToken.expires_at < (now or utcnow()),
                    PasswordResetToken.used_at.is_not(None),
                )
            )
        )
        return result.rowcount or 0
