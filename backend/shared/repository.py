"""
Base repository class for database access.

Provides a common abstraction layer for all repositories, encapsulating
session access so services can compose several repositories inside a
single transaction.
"""

from typing import TypeVar, Generic

from sqlalchemy.ext.asyncio import AsyncSession


T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    Base class for all repositories.

    Provides common functionality for database operations:
    - AsyncSession access via self._session
    - Generic type parameter for model type hints

    Repositories never commit. The calling service owns the transaction,
    which is what lets several writes succeed or fail together.

    Example:
        class UserRepository(BaseRepository[User]):
            async def get_by_id(self, user_id: str) -> Optional[User]:
                return await self._session.get(User, user_id)
    """

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize the repository with an async session.

        Args:
            session: AsyncSession bound to the caller's transaction.
        """
        self._session = session
