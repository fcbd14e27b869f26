"""
User repository for database access.

Encapsulates queries against the users and subscriptions tables.
"""

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import select, update
from sqlalchemy.orm.attributes import set_committed_value

from shared.database import utcnow
from shared.models import SubscriptionPlan, SubscriptionStatus, UserRole
from shared.repository import BaseRepository
from shared.tables import Subscription, User


class UserRepository(BaseRepository[User]):
    """
    Repository for user accounts.

    The subscription relationship is eager-loaded, so users returned here
    can be passed straight to the status resolver.
    """

    async def get_by_id(self, user_id: str) -> Optional[User]:
        return await self._session.get(User, user_id)

    async def get_by_email(self, email: str) -> Optional[User]:
        """Look up by email. Callers pass the normalized (lowercased) address."""
        result = await self._session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def email_exists(self, email: str) -> bool:
        result = await self._session.execute(select(User.id).where(User.email == email))
        return result.first() is not None

    async def create_user(
        self,
        email: str,
        password_hash: str,
        name: Optional[str],
    ) -> User:
        """Insert a free, unverified user. Flushes so the id is available."""
        user = User(
            email=email,
            password_hash=password_hash,
            name=name,
            avatar_url=None,
            role=UserRole.FREE.value,
            email_verified=False,
        )
        self._session.add(user)
        await self._session.flush()
        return user

    async def create_subscription(self, user: User, expires_at: datetime) -> Subscription:
        """Attach an active free-plan subscription that ends with the trial."""
        subscription = Subscription(
            user_id=user.id,
            plan=SubscriptionPlan.FREE.value,
            status=SubscriptionStatus.ACTIVE.value,
            expires_at=expires_at,
        )
        self._session.add(subscription)
        await self._session.flush()
        # Populate the relationship without triggering a lazy load
        set_committed_value(user, "subscription", subscription)
        return subscription

    async def update_password(self, user_id: str, password_hash: str) -> int:
        result = await self._session.execute(
            update(User)
            .where(User.id == user_id)
            .values(password_hash=password_hash, updated_at=utcnow())
        )
        return result.rowcount or 0

    async def update_fields(self, user: User, fields: dict[str, Any]) -> User:
        """Apply a partial update to a loaded user."""
        for key, value in fields.items():
            setattr(user, key, value)
        user.updated_at = utcnow()
        await self._session.flush()
        return user
