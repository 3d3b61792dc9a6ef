"""
Repository for users.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import desc, or_, select

from database.columns import LIKE_ESCAPE, contains_pattern, utc_now
from database.models import UserRecord


class UserRepository:
    """
    Repository for user accounts.
    Note: Methods do NOT commit - caller must manage transaction boundaries.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_user_or_none(self, user_id: str) -> Optional[UserRecord]:
        result = await self.session.execute(select(UserRecord).where(UserRecord.id == user_id))
        return result.scalar_one_or_none()

    async def get_user_by_handle(self, handle: str) -> Optional[UserRecord]:
        result = await self.session.execute(select(UserRecord).where(UserRecord.handle == handle))
        return result.scalars().first()

    async def get_user_by_goon_username(self, goon_username: str) -> Optional[UserRecord]:
        result = await self.session.execute(
            select(UserRecord).where(UserRecord.goon_username == goon_username)
        )
        return result.scalar_one_or_none()

    async def get_users_by_ids(self, user_ids: List[str]) -> List[UserRecord]:
        if not user_ids:
            return []
        result = await self.session.execute(select(UserRecord).where(UserRecord.id.in_(user_ids)))
        return list(result.scalars())

    async def get_all_users(self) -> List[UserRecord]:
        result = await self.session.execute(select(UserRecord).order_by(desc(UserRecord.created_at)))
        return list(result.scalars())

    async def search_users(self, query: str, limit: int) -> List[UserRecord]:
        pattern = contains_pattern(query)
        result = await self.session.execute(
            select(UserRecord)
            .where(
                or_(
                    UserRecord.handle.ilike(pattern, escape=LIKE_ESCAPE),
                    UserRecord.goon_username.ilike(pattern, escape=LIKE_ESCAPE),
                    UserRecord.bio.ilike(pattern, escape=LIKE_ESCAPE),
                )
            )
            .limit(limit)
        )
        return list(result.scalars())

    async def create_user_without_commit(self, values: Dict[str, Any]) -> UserRecord:
        """
        Create a user.
        Must be called within a transaction context - does NOT commit.
        """
        user = UserRecord(**values)
        self.session.add(user)
        await self.session.flush()
        return user

    async def update_user_without_commit(
        self, user_id: str, values: Dict[str, Any]
    ) -> Optional[UserRecord]:
        user = await self.get_user_or_none(user_id)
        if not user:
            return None
        for key, value in values.items():
            setattr(user, key, value)
        await self.session.flush()
        return user

    async def touch_last_active_without_commit(self, user_id: str) -> Optional[UserRecord]:
        result = await self.session.execute(
            update(UserRecord).where(UserRecord.id == user_id).values(last_active=utc_now())
        )
        if result.rowcount == 0:
            return None
        return await self._reload(user_id)

    async def _reload(self, user_id: str) -> Optional[UserRecord]:
        result = await self.session.execute(
            select(UserRecord)
            .where(UserRecord.id == user_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()
