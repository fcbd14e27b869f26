"""
Password hashing with bcrypt.

bcrypt is CPU-bound, so both operations run in a worker thread to keep
the event loop responsive.
"""

import asyncio
import logging
from typing import Optional

import bcrypt

from shared.config import get_settings

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes of its input
BCRYPT_MAX_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


class CredentialHasher:
    """Hashes and verifies passwords with a configurable bcrypt cost."""

    def __init__(self, rounds: Optional[int] = None):
        self._rounds = rounds if rounds is not None else get_settings().bcrypt_rounds
        self._dummy_hash: Optional[str] = None

    @property
    def rounds(self) -> int:
        return self._rounds

    def hash_sync(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self._rounds)
        return bcrypt.hashpw(_encode(password), salt).decode("utf-8")

    def verify_sync(self, password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(_encode(password), password_hash.encode("utf-8"))
        except (ValueError, TypeError):
            logger.warning("Stored password hash could not be parsed")
            return False

    async def hash(self, password: str) -> str:
        """Hash a password. Repeated calls give different hashes."""
        return await asyncio.to_thread(self.hash_sync, password)

    async def verify(self, password: str, password_hash: str) -> bool:
        """
        Check a password against a stored hash.

        Returns False for a wrong password and for a corrupt hash alike.
        """
        return await asyncio.to_thread(self.verify_sync, password, password_hash)

    async def verify_dummy(self, password: str) -> bool:
        """
        Run one verification against a throwaway hash.

        Used when the account doesn't exist so the response takes as long
        as a real password check. Always returns False.
        """
        if self._dummy_hash is None:
            self._dummy_hash = await self.hash("dummy-password-for-timing")
        await self.verify(password, self._dummy_hash)
        return False
