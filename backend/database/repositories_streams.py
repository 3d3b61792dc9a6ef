"""
Repositories for live streams and live chat.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy import case, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import desc, select

from database.columns import utc_now
from database.models import LiveChatMessageRecord, LiveStreamRecord
from enums import StreamStatus


class LiveStreamRepository:
    """
    Repository for live streams.
    Note: Methods do NOT commit - caller must manage transaction boundaries.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_stream_or_none(self, stream_id: str) -> Optional[LiveStreamRecord]:
        result = await self.session.execute(
            select(LiveStreamRecord)
            .where(LiveStreamRecord.id == stream_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_streams(
        self, creator_id: Optional[str] = None, status: Optional[str] = None
    ) -> List[LiveStreamRecord]:
        query = select(LiveStreamRecord)
        if creator_id:
            query = query.where(LiveStreamRecord.creator_id == creator_id)
        if status:
            query = query.where(LiveStreamRecord.status == StreamStatus(status))
        result = await self.session.execute(query.order_by(desc(LiveStreamRecord.created_at)))
        return list(result.scalars())

    async def create_stream_without_commit(self, values: Dict[str, Any]) -> LiveStreamRecord:
        stream = LiveStreamRecord(**values)
        self.session.add(stream)
        await self.session.flush()
        return stream

    async def update_stream_without_commit(
        self, stream_id: str, values: Dict[str, Any]
    ) -> Optional[LiveStreamRecord]:
        stream = await self.get_stream_or_none(stream_id)
        if not stream:
            return None
        for key, value in values.items():
            setattr(stream, key, value)
        await self.session.flush()
        return stream

    async def end_stream_without_commit(self, stream_id: str) -> Optional[LiveStreamRecord]:
        """Ending is terminal; ending again re-stamps ended_at."""
        return await self._update_and_reload(
            stream_id, status=StreamStatus.ENDED, ended_at=utc_now()
        )

    async def set_viewer_count_without_commit(
        self, stream_id: str, viewer_count: int
    ) -> Optional[LiveStreamRecord]:
        """Set the current count and raise max_viewers in the same statement."""
        return await self._update_and_reload(
            stream_id,
            viewer_count=viewer_count,
            max_viewers=case(
                (LiveStreamRecord.max_viewers < viewer_count, viewer_count),
                else_=LiveStreamRecord.max_viewers,
            ),
        )

    async def _update_and_reload(self, stream_id: str, **values) -> Optional[LiveStreamRecord]:
        result = await self.session.execute(
            update(LiveStreamRecord)
            .where(LiveStreamRecord.id == stream_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            return None
        return await self.get_stream_or_none(stream_id)


class LiveChatRepository:
    """Note: write methods do NOT commit. Caller manages transaction."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_messages(self, stream_id: str, limit: int, offset: int) -> List[LiveChatMessageRecord]:
        """Page of messages, oldest first"""
        result = await self.session.execute(
            select(LiveChatMessageRecord)
            .where(LiveChatMessageRecord.stream_id == stream_id)
            .order_by(LiveChatMessageRecord.created_at)
            .offset(offset)
            .limit(limit)
        )
        return list(result.scalars())

    async def create_message_without_commit(self, values: Dict[str, Any]) -> LiveChatMessageRecord:
        message = LiveChatMessageRecord(**values)
        self.session.add(message)
        await self.session.flush()
        return message
