"""
Repositories for the follow graph and the activity feed.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy import delete, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import and_, desc, func, or_, select

from database.models import ActivityRecord, FollowRecord, UserRecord


class FollowRepository:
    """
    Repository for follow edges.
    Note: Methods do NOT commit - caller must manage transaction boundaries.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_follow_or_none(self, follower_id: str, following_id: str) -> Optional[FollowRecord]:
        result = await self.session.execute(
            select(FollowRecord).where(
                and_(
                    FollowRecord.follower_id == follower_id,
                    FollowRecord.following_id == following_id,
                )
            )
        )
        return result.scalar_one_or_none()

    async def create_follow_without_commit(self, follower_id: str, following_id: str) -> FollowRecord:
        """Raises IntegrityError if the edge already exists."""
        follow = FollowRecord(follower_id=follower_id, following_id=following_id)
        self.session.add(follow)
        await self.session.flush()
        return follow

    async def delete_follow_without_commit(self, follower_id: str, following_id: str) -> bool:
        result = await self.session.execute(
            delete(FollowRecord).where(
                and_(
                    FollowRecord.follower_id == follower_id,
                    FollowRecord.following_id == following_id,
                )
            )
        )
        return result.rowcount > 0

    async def get_follower_ids(self, user_id: str) -> List[str]:
        result = await self.session.execute(
            select(FollowRecord.follower_id)
            .where(FollowRecord.following_id == user_id)
            .order_by(FollowRecord.created_at)
        )
        return list(result.scalars())

    async def get_followers(self, user_id: str) -> List[UserRecord]:
        result = await self.session.execute(
            select(UserRecord)
            .join(FollowRecord, FollowRecord.follower_id == UserRecord.id)
            .where(FollowRecord.following_id == user_id)
            .order_by(FollowRecord.created_at)
        )
        return list(result.scalars())

    async def get_following(self, user_id: str) -> List[UserRecord]:
        result = await self.session.execute(
            select(UserRecord)
            .join(FollowRecord, FollowRecord.following_id == UserRecord.id)
            .where(FollowRecord.follower_id == user_id)
            .order_by(FollowRecord.created_at)
        )
        return list(result.scalars())

    async def count_followers(self, user_id: str) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(FollowRecord).where(FollowRecord.following_id == user_id)
        )
        return result.scalar_one()

    async def count_following(self, user_id: str) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(FollowRecord).where(FollowRecord.follower_id == user_id)
        )
        return result.scalar_one()


class ActivityRepository:
    """
    Repository for activity feed entries.
    Note: Methods do NOT commit - caller must manage transaction boundaries.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    @staticmethod
    def _visible_to(user_id: Optional[str]):
        if user_id is None:
            return ActivityRecord.user_id.is_(None)
        return or_(
            ActivityRecord.user_id.is_(None),
            ActivityRecord.user_id == user_id,
            ActivityRecord.target_user_id == user_id,
        )

    async def get_activities(self, user_id: Optional[str], limit: int) -> List[ActivityRecord]:
        result = await self.session.execute(
            select(ActivityRecord)
            .where(self._visible_to(user_id))
            .order_by(desc(ActivityRecord.created_at))
            .limit(limit)
        )
        return list(result.scalars())

    async def count_unread(self, user_id: str) -> int:
        result = await self.session.execute(
            select(func.count())
            .select_from(ActivityRecord)
            .where(and_(self._visible_to(user_id), ActivityRecord.is_read.is_(False)))
        )
        return result.scalar_one()

    async def create_activities_without_commit(
        self, values: List[Dict[str, Any]]
    ) -> List[ActivityRecord]:
        """Insert a batch in one flush."""
        records = [ActivityRecord(**v) for v in values]
        self.session.add_all(records)
        await self.session.flush()
        return records

    async def mark_read_without_commit(self, activity_id: str) -> Optional[ActivityRecord]:
        result = await self.session.execute(
            update(ActivityRecord)
            .where(ActivityRecord.id == activity_id)
            .values(is_read=True)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            return None
        reloaded = await self.session.execute(
            select(ActivityRecord)
            .where(ActivityRecord.id == activity_id)
            .execution_options(populate_existing=True)
        )
        return reloaded.scalar_one()
