"""
Onboarding repository for database access.
"""

from typing import Any, Optional

from sqlalchemy import select

from shared.database import utcnow
from shared.repository import BaseRepository
from shared.tables import OnboardingResponse


class OnboardingRepository(BaseRepository[OnboardingResponse]):
    """At most one onboarding row per user."""

    async def get_by_user(self, user_id: str) -> Optional[OnboardingResponse]:
        result = await self._session.execute(
            select(OnboardingResponse).where(OnboardingResponse.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def create(self, user_id: str, fields: dict[str, Any]) -> OnboardingResponse:
        row = OnboardingResponse(user_id=user_id, **{"skills_to_skip": [], **fields})
        self._session.add(row)
        await self._session.flush()
        return row

    async def update(self, row: OnboardingResponse, fields: dict[str, Any]) -> OnboardingResponse:
        # JSON columns must be reassigned, not mutated, to be persisted
        for key, value in fields.items():
            setattr(row, key, list(value) if isinstance(value, list) else value)
        row.updated_at = utcnow()
        await self._session.flush()
        return row

    async def upsert(self, user_id: str, fields: dict[str, Any]) -> OnboardingResponse:
        row = await self.get_by_user(user_id)
        if row is None:
            return await self.create(user_id, fields)
        return await self.update(row, fields)
