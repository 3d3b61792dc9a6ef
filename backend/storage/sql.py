"""
Relational storage backend on SQLAlchemy async sessions.

Targets Postgres (Supabase) through asyncpg in production and SQLite through
aiosqlite in tests. Each method runs in its own transaction; driver failures
surface as StorageError and uniqueness violations as DuplicateRecordError.
"""

import logging
from contextlib import asynccontextmanager
from typing import List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from database import create_engine_for_url, create_session_factory, get_db_transaction, init_db
from database.models import ActivityRecord, LiveChatMessageRecord, LiveStreamRecord
from database.repositories import (
    ActivityRepository,
    ChatRepository,
    FollowRepository,
    LiveChatRepository,
    LiveStreamRepository,
    PersonaRepository,
    PostRepository,
    PurchaseRepository,
    TipRepository,
    TokenRepository,
    UserRepository,
)
from models.schemas import (
    Activity,
    AiPersona,
    ChatMessage,
    Follow,
    LiveChatMessage,
    LiveStream,
    LiveStreamUpdate,
    NewActivity,
    NewAiPersona,
    NewChatMessage,
    NewLiveChatMessage,
    NewLiveStream,
    NewPost,
    NewPurchase,
    NewTip,
    NewToken,
    NewUser,
    Post,
    PostFilters,
    PostUpdate,
    Purchase,
    Tip,
    Token,
    User,
    UserUpdate,
)
from storage.base import Storage
from storage.errors import DuplicateRecordError, StorageError

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION_SQLSTATE = "23505"


def _activity(record: ActivityRecord) -> Activity:
    return Activity(
        id=record.id,
        type=record.type,
        user_id=record.user_id,
        target_user_id=record.target_user_id,
        post_id=record.post_id,
        title=record.title,
        description=record.description,
        metadata=record.extra_data or {},
        is_read=record.is_read,
        created_at=record.created_at,
    )


def _activity_values(activity: NewActivity) -> dict:
    values = activity.model_dump(exclude={"metadata"})
    values["extra_data"] = activity.metadata
    return values


def _stream(record: LiveStreamRecord) -> LiveStream:
    return LiveStream(
        id=record.id,
        creator_id=record.creator_id,
        title=record.title,
        description=record.description,
        status=record.status,
        stream_key=record.stream_key,
        viewer_count=record.viewer_count,
        max_viewers=record.max_viewers,
        duration=record.duration,
        metadata=record.extra_data or {},
        created_at=record.created_at,
        ended_at=record.ended_at,
    )


def _live_chat(record: LiveChatMessageRecord) -> LiveChatMessage:
    return LiveChatMessage(
        id=record.id,
        stream_id=record.stream_id,
        user_id=record.user_id,
        message=record.message,
        type=record.type,
        metadata=record.extra_data or {},
        created_at=record.created_at,
    )


def _metadata_to_extra(values: dict) -> dict:
    if "metadata" in values:
        values["extra_data"] = values.pop("metadata")
    return values


def _is_unique_violation(err: IntegrityError) -> bool:
    """True when the driver reports a unique or primary key violation."""
    orig = err.orig
    # asyncpg errors arrive wrapped; the sqlstate sits on the wrapper or its cause
    for candidate in (orig, getattr(orig, "__cause__", None)):
        if getattr(candidate, "sqlstate", None) == UNIQUE_VIOLATION_SQLSTATE:
            return True
    return "UNIQUE constraint failed" in str(orig)


class SqlStorage(Storage):
    def __init__(self, database_url: str) -> None:
        self._engine = create_engine_for_url(database_url)
        self._session_factory = create_session_factory(self._engine)

    async def initialize(self) -> None:
        await init_db(self._engine)
        logger.info("SQL storage ready (%s)", self._engine.url.get_backend_name())

    async def close(self) -> None:
        await self._engine.dispose()

    @asynccontextmanager
    async def _transaction(self, action: str):
        try:
            async with get_db_transaction(self._session_factory) as session:
                yield session
        except IntegrityError as err:
            if _is_unique_violation(err):
                raise DuplicateRecordError(f"Failed to {action}: {err.orig}") from err
            # Foreign key, NOT NULL and CHECK failures are not duplicates
            logger.error("Integrity failure during %s: %s", action, err.orig)
            raise StorageError(f"Failed to {action}: {err.orig}") from err
        except SQLAlchemyError as err:
            logger.error("Storage failure during %s: %s", action, err)
            raise StorageError(f"Failed to {action}: {err}") from err

    # Users
    async def get_user(self, user_id: str) -> Optional[User]:
        async with self._transaction("get user") as session:
            record = await UserRepository(session).get_user_or_none(user_id)
            return User.model_validate(record, from_attributes=True) if record else None

    async def get_user_by_handle(self, handle: str) -> Optional[User]:
        async with self._transaction("get user by handle") as session:
            record = await UserRepository(session).get_user_by_handle(handle)
            return User.model_validate(record, from_attributes=True) if record else None

    async def get_user_by_goon_username(self, goon_username: str) -> Optional[User]:
        async with self._transaction("get user by goon username") as session:
            record = await UserRepository(session).get_user_by_goon_username(goon_username)
            return User.model_validate(record, from_attributes=True) if record else None

    async def get_all_users(self) -> List[User]:
        async with self._transaction("list users") as session:
            records = await UserRepository(session).get_all_users()
            return [User.model_validate(r, from_attributes=True) for r in records]

    async def create_user(self, user: NewUser) -> User:
        async with self._transaction("create user") as session:
            record = await UserRepository(session).create_user_without_commit(user.model_dump())
            return User.model_validate(record, from_attributes=True)

    async def update_user(self, user_id: str, updates: UserUpdate) -> Optional[User]:
        async with self._transaction("update user") as session:
            record = await UserRepository(session).update_user_without_commit(
                user_id, updates.model_dump(exclude_unset=True)
            )
            return User.model_validate(record, from_attributes=True) if record else None

    async def update_user_last_active(self, user_id: str) -> Optional[User]:
        async with self._transaction("update last active") as session:
            record = await UserRepository(session).touch_last_active_without_commit(user_id)
            return User.model_validate(record, from_attributes=True) if record else None

    async def search_users(self, query: str, limit: int) -> List[User]:
        async with self._transaction("search users") as session:
            records = await UserRepository(session).search_users(query, limit)
            return [User.model_validate(r, from_attributes=True) for r in records]

    # Posts
    async def get_posts(self, filters: Optional[PostFilters] = None) -> List[Post]:
        async with self._transaction("list posts") as session:
            records = await PostRepository(session).get_posts(filters or PostFilters())
            return [Post.model_validate(r, from_attributes=True) for r in records]

    async def get_post(self, post_id: str) -> Optional[Post]:
        async with self._transaction("get post") as session:
            record = await PostRepository(session).get_post_or_none(post_id)
            return Post.model_validate(record, from_attributes=True) if record else None

    async def create_post(self, post: NewPost) -> Post:
        async with self._transaction("create post") as session:
            record = await PostRepository(session).create_post_without_commit(post.model_dump())
            return Post.model_validate(record, from_attributes=True)

    async def update_post(self, post_id: str, updates: PostUpdate) -> Optional[Post]:
        async with self._transaction("update post") as session:
            record = await PostRepository(session).update_post_without_commit(
                post_id, updates.model_dump(exclude_unset=True)
            )
            return Post.model_validate(record, from_attributes=True) if record else None

    async def increment_post_views(self, post_id: str) -> Optional[Post]:
        async with self._transaction("increment post views") as session:
            repo = PostRepository(session)
            if not await repo.increment_views_without_commit(post_id):
                return None
            record = await repo.get_post_or_none(post_id)
            return Post.model_validate(record, from_attributes=True)

    async def like_post(self, post_id: str, user_id: str) -> bool:
        try:
            async with self._transaction("like post") as session:
                repo = PostRepository(session)
                if not await repo.get_post_or_none(post_id):
                    return False
                if await repo.get_like_or_none(post_id, user_id):
                    return True
                await repo.add_like_without_commit(post_id, user_id)
        except DuplicateRecordError:
            # A concurrent like for the same pair won the insert
            logger.debug("Like for post %s by %s already recorded", post_id, user_id)
        return True

    async def unlike_post(self, post_id: str, user_id: str) -> bool:
        async with self._transaction("unlike post") as session:
            return await PostRepository(session).remove_like_without_commit(post_id, user_id)

    async def is_post_liked(self, post_id: str, user_id: str) -> bool:
        async with self._transaction("check like") as session:
            return await PostRepository(session).get_like_or_none(post_id, user_id) is not None

    async def search_posts(self, query: str, limit: int) -> List[Post]:
        async with self._transaction("search posts") as session:
            records = await PostRepository(session).search_posts(query, limit)
            return [Post.model_validate(r, from_attributes=True) for r in records]

    # Tokens
    async def get_tokens(self, creator_id: Optional[str] = None) -> List[Token]:
        async with self._transaction("list tokens") as session:
            records = await TokenRepository(session).get_tokens(creator_id)
            return [Token.model_validate(r, from_attributes=True) for r in records]

    async def get_token(self, token_id: str) -> Optional[Token]:
        async with self._transaction("get token") as session:
            record = await TokenRepository(session).get_token_or_none(token_id)
            return Token.model_validate(record, from_attributes=True) if record else None

    async def create_token(self, token: NewToken) -> Token:
        async with self._transaction("create token") as session:
            record = await TokenRepository(session).create_token_without_commit(token.model_dump())
            return Token.model_validate(record, from_attributes=True)

    async def search_tokens(self, query: str, limit: int) -> List[Token]:
        async with self._transaction("search tokens") as session:
            records = await TokenRepository(session).search_tokens(query, limit)
            return [Token.model_validate(r, from_attributes=True) for r in records]

    # Purchases
    async def has_purchased(self, user_id: str, post_id: str) -> bool:
        async with self._transaction("check purchase") as session:
            return await PurchaseRepository(session).has_purchased(user_id, post_id)

    async def create_purchase(self, purchase: NewPurchase) -> Purchase:
        async with self._transaction("create purchase") as session:
            record = await PurchaseRepository(session).create_purchase_without_commit(
                purchase.model_dump()
            )
            return Purchase.model_validate(record, from_attributes=True)

    async def get_purchases(
        self, user_id: Optional[str] = None, post_ids: Optional[List[str]] = None
    ) -> List[Purchase]:
        async with self._transaction("list purchases") as session:
            records = await PurchaseRepository(session).get_purchases(user_id, post_ids)
            return [Purchase.model_validate(r, from_attributes=True) for r in records]

    # Tips
    async def create_tip(self, tip: NewTip) -> Tip:
        async with self._transaction("create tip") as session:
            record = await TipRepository(session).create_tip_without_commit(tip.model_dump())
            return Tip.model_validate(record, from_attributes=True)

    async def get_tips(self, user_id: str) -> List[Tip]:
        async with self._transaction("list tips") as session:
            records = await TipRepository(session).get_tips_for_user(user_id)
            return [Tip.model_validate(r, from_attributes=True) for r in records]

    # AI personas
    async def get_persona(self, creator_id: str) -> Optional[AiPersona]:
        async with self._transaction("get persona") as session:
            record = await PersonaRepository(session).get_persona_or_none(creator_id)
            return AiPersona.model_validate(record, from_attributes=True) if record else None

    async def upsert_persona(self, persona: NewAiPersona) -> AiPersona:
        async with self._transaction("upsert persona") as session:
            record = await PersonaRepository(session).upsert_persona_without_commit(
                persona.model_dump()
            )
            return AiPersona.model_validate(record, from_attributes=True)

    # Persona chat
    async def get_chat_messages(self, user_id: str, creator_id: str) -> List[ChatMessage]:
        async with self._transaction("list chat messages") as session:
            records = await ChatRepository(session).get_conversation(user_id, creator_id)
            return [ChatMessage.model_validate(r, from_attributes=True) for r in records]

    async def create_chat_message(self, message: NewChatMessage) -> ChatMessage:
        async with self._transaction("create chat message") as session:
            record = await ChatRepository(session).create_message_without_commit(
                message.model_dump()
            )
            return ChatMessage.model_validate(record, from_attributes=True)

    # Follows
    async def follow_user(self, follower_id: str, following_id: str) -> Follow:
        try:
            async with self._transaction("follow user") as session:
                repo = FollowRepository(session)
                record = await repo.get_follow_or_none(follower_id, following_id)
                if not record:
                    record = await repo.create_follow_without_commit(follower_id, following_id)
                return Follow.model_validate(record, from_attributes=True)
        except DuplicateRecordError:
            # Lost an insert race; the winner's edge is the one to return
            async with self._transaction("follow user") as session:
                record = await FollowRepository(session).get_follow_or_none(
                    follower_id, following_id
                )
                return Follow.model_validate(record, from_attributes=True)

    async def unfollow_user(self, follower_id: str, following_id: str) -> bool:
        async with self._transaction("unfollow user") as session:
            return await FollowRepository(session).delete_follow_without_commit(
                follower_id, following_id
            )

    async def is_following(self, follower_id: str, following_id: str) -> bool:
        async with self._transaction("check follow") as session:
            record = await FollowRepository(session).get_follow_or_none(follower_id, following_id)
            return record is not None

    async def get_follower_ids(self, user_id: str) -> List[str]:
        async with self._transaction("list follower ids") as session:
            return await FollowRepository(session).get_follower_ids(user_id)

    async def get_followers(self, user_id: str) -> List[User]:
        async with self._transaction("list followers") as session:
            records = await FollowRepository(session).get_followers(user_id)
            return [User.model_validate(r, from_attributes=True) for r in records]

    async def get_following(self, user_id: str) -> List[User]:
        async with self._transaction("list following") as session:
            records = await FollowRepository(session).get_following(user_id)
            return [User.model_validate(r, from_attributes=True) for r in records]

    async def get_follower_count(self, user_id: str) -> int:
        async with self._transaction("count followers") as session:
            return await FollowRepository(session).count_followers(user_id)

    async def get_following_count(self, user_id: str) -> int:
        async with self._transaction("count following") as session:
            return await FollowRepository(session).count_following(user_id)

    # Activities
    async def get_activities(
        self, user_id: Optional[str] = None, limit: int = 50
    ) -> List[Activity]:
        async with self._transaction("list activities") as session:
            records = await ActivityRepository(session).get_activities(user_id, limit)
            return [_activity(r) for r in records]

    async def create_activity(self, activity: NewActivity) -> Activity:
        created = await self.create_activities([activity])
        return created[0]

    async def create_activities(self, activities: List[NewActivity]) -> List[Activity]:
        if not activities:
            return []
        async with self._transaction("create activities") as session:
            records = await ActivityRepository(session).create_activities_without_commit(
                [_activity_values(a) for a in activities]
            )
            return [_activity(r) for r in records]

    async def mark_activity_as_read(self, activity_id: str) -> Optional[Activity]:
        async with self._transaction("mark activity read") as session:
            record = await ActivityRepository(session).mark_read_without_commit(activity_id)
            return _activity(record) if record else None

    async def get_unread_activity_count(self, user_id: str) -> int:
        async with self._transaction("count unread activities") as session:
            return await ActivityRepository(session).count_unread(user_id)

    # Live streams
    async def get_live_streams(
        self, creator_id: Optional[str] = None, status: Optional[str] = None
    ) -> List[LiveStream]:
        async with self._transaction("list live streams") as session:
            records = await LiveStreamRepository(session).get_streams(creator_id, status)
            return [_stream(r) for r in records]

    async def get_live_stream(self, stream_id: str) -> Optional[LiveStream]:
        async with self._transaction("get live stream") as session:
            record = await LiveStreamRepository(session).get_stream_or_none(stream_id)
            return _stream(record) if record else None

    async def create_live_stream(self, stream: NewLiveStream) -> LiveStream:
        async with self._transaction("create live stream") as session:
            record = await LiveStreamRepository(session).create_stream_without_commit(
                _metadata_to_extra(stream.model_dump())
            )
            return _stream(record)

    async def update_live_stream(
        self, stream_id: str, updates: LiveStreamUpdate
    ) -> Optional[LiveStream]:
        async with self._transaction("update live stream") as session:
            record = await LiveStreamRepository(session).update_stream_without_commit(
                stream_id, _metadata_to_extra(updates.model_dump(exclude_unset=True))
            )
            return _stream(record) if record else None

    async def end_live_stream(self, stream_id: str) -> Optional[LiveStream]:
        async with self._transaction("end live stream") as session:
            record = await LiveStreamRepository(session).end_stream_without_commit(stream_id)
            return _stream(record) if record else None

    async def get_active_streams(self) -> List[LiveStream]:
        return await self.get_live_streams(status="live")

    async def update_stream_viewer_count(
        self, stream_id: str, viewer_count: int
    ) -> Optional[LiveStream]:
        async with self._transaction("update viewer count") as session:
            record = await LiveStreamRepository(session).set_viewer_count_without_commit(
                stream_id, viewer_count
            )
            return _stream(record) if record else None

    # Live chat
    async def get_live_chat_messages(
        self, stream_id: str, limit: int, offset: int
    ) -> List[LiveChatMessage]:
        async with self._transaction("list live chat") as session:
            records = await LiveChatRepository(session).get_messages(stream_id, limit, offset)
            return [_live_chat(r) for r in records]

    async def create_live_chat_message(self, message: NewLiveChatMessage) -> LiveChatMessage:
        async with self._transaction("create live chat message") as session:
            record = await LiveChatRepository(session).create_message_without_commit(
                _metadata_to_extra(message.model_dump())
            )
            return _live_chat(record)
