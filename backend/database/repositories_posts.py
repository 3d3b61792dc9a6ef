"""
Repository for posts and likes.
"""

import json
from typing import Any, Dict, List, Optional

from sqlalchemy import String, case, cast, delete, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import and_, desc, func, or_, select

from database.columns import LIKE_ESCAPE, contains_pattern
from database.models import PostLikeRecord, PostRecord
from enums import PostSort, PostStatus
from models.schemas import PostFilters


class PostRepository:
    """
    Repository for posts and their like edges.
    Note: Methods do NOT commit - caller must manage transaction boundaries.
    Counter changes are single UPDATE statements so concurrent writers never lose increments.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_post_or_none(self, post_id: str) -> Optional[PostRecord]:
        result = await self.session.execute(
            select(PostRecord)
            .where(PostRecord.id == post_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_posts(self, filters: PostFilters) -> List[PostRecord]:
        query = select(PostRecord)
        if not filters.include_unpublished:
            query = query.where(PostRecord.status == PostStatus.PUBLISHED)
        if filters.creator_id:
            query = query.where(PostRecord.creator_id == filters.creator_id)
        if filters.category:
            # Exact tag match against the serialized JSON array
            pattern = contains_pattern(json.dumps(filters.category))
            query = query.where(_tags_text().ilike(pattern, escape=LIKE_ESCAPE))
        if filters.media_type:
            url = func.lower(PostRecord.media_url)
            query = query.where(or_(*[url.contains(ext) for ext in filters.media_type.extensions()]))

        if filters.sort == PostSort.TRENDING:
            query = query.order_by(desc(PostRecord.likes + PostRecord.views), desc(PostRecord.created_at))
        else:
            query = query.order_by(desc(PostRecord.created_at))

        result = await self.session.execute(query)
        return list(result.scalars())

    async def search_posts(self, query: str, limit: int) -> List[PostRecord]:
        pattern = contains_pattern(query)
        result = await self.session.execute(
            select(PostRecord)
            .where(
                and_(
                    PostRecord.status == PostStatus.PUBLISHED,
                    or_(
                        PostRecord.caption.ilike(pattern, escape=LIKE_ESCAPE),
                        _tags_text().ilike(pattern, escape=LIKE_ESCAPE),
                    ),
                )
            )
            .order_by(desc(PostRecord.created_at))
            .limit(limit)
        )
        return list(result.scalars())

    async def create_post_without_commit(self, values: Dict[str, Any]) -> PostRecord:
        post = PostRecord(**values)
        self.session.add(post)
        await self.session.flush()
        return post

    async def update_post_without_commit(
        self, post_id: str, values: Dict[str, Any]
    ) -> Optional[PostRecord]:
        post = await self.get_post_or_none(post_id)
        if not post:
            return None
        for key, value in values.items():
            setattr(post, key, value)
        await self.session.flush()
        return post

    async def increment_views_without_commit(self, post_id: str) -> bool:
        result = await self.session.execute(
            update(PostRecord)
            .where(PostRecord.id == post_id)
            .values(views=PostRecord.views + 1)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0

    async def get_like_or_none(self, post_id: str, user_id: str) -> Optional[PostLikeRecord]:
        result = await self.session.execute(
            select(PostLikeRecord).where(
                and_(PostLikeRecord.post_id == post_id, PostLikeRecord.user_id == user_id)
            )
        )
        return result.scalar_one_or_none()

    async def add_like_without_commit(self, post_id: str, user_id: str) -> PostLikeRecord:
        """Insert the like edge and bump the counter. Raises IntegrityError on a repeat pair."""
        like = PostLikeRecord(post_id=post_id, user_id=user_id)
        self.session.add(like)
        await self.session.flush()
        await self.session.execute(
            update(PostRecord)
            .where(PostRecord.id == post_id)
            .values(likes=PostRecord.likes + 1)
            .execution_options(synchronize_session=False)
        )
        return like

    async def remove_like_without_commit(self, post_id: str, user_id: str) -> bool:
        """Delete the like edge and drop the counter, never below zero."""
        result = await self.session.execute(
            delete(PostLikeRecord).where(
                and_(PostLikeRecord.post_id == post_id, PostLikeRecord.user_id == user_id)
            )
        )
        if result.rowcount == 0:
            return False
        await self.session.execute(
            update(PostRecord)
            .where(PostRecord.id == post_id)
            .values(likes=case((PostRecord.likes > 0, PostRecord.likes - 1), else_=0))
            .execution_options(synchronize_session=False)
        )
        return True


def _tags_text():
    return cast(PostRecord.tags, String)
