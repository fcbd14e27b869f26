"""
User profile service implementation.
"""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from modules.auth.repository import UserRepository
from shared.database import get_session_factory

from .exceptions import UserNotFoundError
from .interfaces import IUserService
from .models import UpdateProfileRequest, UserProfile

logger = logging.getLogger(__name__)


class UserService(IUserService):
    """Reads and updates profiles through the auth module's user repository."""

    def __init__(self, session_factory: Optional[async_sessionmaker[AsyncSession]] = None):
        self._session_factory = session_factory or get_session_factory()

    async def get_profile(self, user_id: str) -> UserProfile:
        async with self._session_factory() as session:
            user = await UserRepository(session).get_by_id(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return UserProfile.model_validate(user, from_attributes=True)

    async def update_profile(self, user_id: str, data: UpdateProfileRequest) -> UserProfile:
        changes = data.changes()
        async with self._session_factory() as session:
            async with session.begin():
                users = UserRepository(session)
                user = await users.get_by_id(user_id)
                if user is None:
                    raise UserNotFoundError(user_id)
                if changes:
                    user = await users.update_fields(user, changes)

        logger.info("Profile updated for user %s (%s)", user_id, ", ".join(sorted(changes)) or "no changes")
        return UserProfile.model_validate(user, from_attributes=True)
