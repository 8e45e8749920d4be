"""Credential Store — SQL implementation of the UserRepository protocol.

Invariants:
    - Username uniqueness enforced at write time: a lost insert race is still ConflictError
    - Users are write-once; there is no update or delete path
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from loantracker.core.errors import ConflictError
from loantracker.models.user import User

logger = logging.getLogger(__name__)


class SqlUserRepository:
    def __init__(self, db: AsyncSession):
        self._db = db

    async def get_by_username(self, username: str) -> User | None:
        result = await self._db.execute(
            select(User).where(User.username == username),
        )
        return result.scalar_one_or_none()

    async def create(self, username: str, password_hash: str) -> User:
        if await self.get_by_username(username) is not None:
            raise ConflictError("Username already taken")
        user = User(username=username, password_hash=password_hash)
        self._db.add(user)
        try:
            await self._db.commit()
        except IntegrityError:
            await self._db.rollback()
            logger.info(f"Concurrent registration lost race for '{username}'")
            raise ConflictError("Username already taken")
        await self._db.refresh(user)
        return user
