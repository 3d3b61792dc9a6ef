"""
In-process storage backend backed by dicts.

Every method runs to completion without awaiting in between, so on a single
event loop each read-modify-write (view counts, like counters, viewer
watermarks) is atomic without locks.
"""

import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from enums import PostSort, PostStatus, StreamStatus
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
    PostLike,
    PostUpdate,
    Purchase,
    Tip,
    Token,
    User,
    UserUpdate,
)
from storage.base import Storage
from storage.errors import DuplicateRecordError


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


def _contains(haystack: Optional[str], needle: str) -> bool:
    return bool(haystack) and needle in haystack.lower()


def _newest_first(items):
    return sorted(items, key=lambda item: item.created_at, reverse=True)


def _matches_filters(post: Post, filters: PostFilters) -> bool:
    if not filters.include_unpublished and post.status != PostStatus.PUBLISHED:
        return False
    if filters.creator_id and post.creator_id != filters.creator_id:
        return False
    if filters.category and filters.category.lower() not in (t.lower() for t in post.tags):
        return False
    if filters.media_type:
        url = post.media_url.lower()
        if not any(ext in url for ext in filters.media_type.extensions()):
            return False
    return True


class MemStorage(Storage):
    def __init__(self) -> None:
        self.users: Dict[str, User] = {}
        self.posts: Dict[str, Post] = {}
        self.likes: Dict[Tuple[str, str], PostLike] = {}  # (post_id, user_id)
        self.tokens: Dict[str, Token] = {}
        self.purchases: Dict[Tuple[str, str], Purchase] = {}  # (user_id, post_id)
        self.tips: Dict[str, Tip] = {}
        self.personas: Dict[str, AiPersona] = {}  # creator_id
        self.chat_messages: List[ChatMessage] = []
        self.follows: Dict[Tuple[str, str], Follow] = {}  # (follower_id, following_id)
        self.activities: Dict[str, Activity] = {}
        self.live_streams: Dict[str, LiveStream] = {}
        self.live_chat_messages: List[LiveChatMessage] = []

    # Users
    async def get_user(self, user_id: str) -> Optional[User]:
        return self.users.get(user_id)

    async def get_user_by_handle(self, handle: str) -> Optional[User]:
        return next((u for u in self.users.values() if u.handle == handle), None)

    async def get_user_by_goon_username(self, goon_username: str) -> Optional[User]:
        return next((u for u in self.users.values() if u.goon_username == goon_username), None)

    async def get_all_users(self) -> List[User]:
        return _newest_first(self.users.values())

    async def create_user(self, user: NewUser) -> User:
        if user.id in self.users:
            raise DuplicateRecordError(f"Failed to create user: {user.id} already exists")
        now = _now()
        created = User(**user.model_dump(), created_at=now, last_active=now)
        self.users[created.id] = created
        return created

    async def update_user(self, user_id: str, updates: UserUpdate) -> Optional[User]:
        user = self.users.get(user_id)
        if not user:
            return None
        updated = user.model_copy(update=updates.model_dump(exclude_unset=True))
        self.users[user_id] = updated
        return updated

    async def update_user_last_active(self, user_id: str) -> Optional[User]:
        user = self.users.get(user_id)
        if not user:
            return None
        updated = user.model_copy(update={"last_active": _now()})
        self.users[user_id] = updated
        return updated

    async def search_users(self, query: str, limit: int) -> List[User]:
        needle = query.lower()
        matches = [
            u
            for u in self.users.values()
            if _contains(u.handle, needle)
            or _contains(u.goon_username, needle)
            or _contains(u.bio, needle)
        ]
        return matches[:limit]

    # Posts
    async def get_posts(self, filters: Optional[PostFilters] = None) -> List[Post]:
        filters = filters or PostFilters()
        posts = [p for p in self.posts.values() if _matches_filters(p, filters)]
        if filters.sort == PostSort.TRENDING:
            return sorted(posts, key=lambda p: p.likes + p.views, reverse=True)
        return _newest_first(posts)

    async def get_post(self, post_id: str) -> Optional[Post]:
        return self.posts.get(post_id)

    async def create_post(self, post: NewPost) -> Post:
        created = Post(**post.model_dump(), id=_new_id(), created_at=_now())
        self.posts[created.id] = created
        return created

    async def update_post(self, post_id: str, updates: PostUpdate) -> Optional[Post]:
        post = self.posts.get(post_id)
        if not post:
            return None
        updated = post.model_copy(update=updates.model_dump(exclude_unset=True))
        self.posts[post_id] = updated
        return updated

    async def increment_post_views(self, post_id: str) -> Optional[Post]:
        post = self.posts.get(post_id)
        if not post:
            return None
        updated = post.model_copy(update={"views": post.views + 1})
        self.posts[post_id] = updated
        return updated

    async def like_post(self, post_id: str, user_id: str) -> bool:
        post = self.posts.get(post_id)
        if not post:
            return False
        key = (post_id, user_id)
        if key in self.likes:
            return True
        self.likes[key] = PostLike(id=_new_id(), post_id=post_id, user_id=user_id, created_at=_now())
        self.posts[post_id] = post.model_copy(update={"likes": post.likes + 1})
        return True

    async def unlike_post(self, post_id: str, user_id: str) -> bool:
        post = self.posts.get(post_id)
        if not post or self.likes.pop((post_id, user_id), None) is None:
            return False
        self.posts[post_id] = post.model_copy(update={"likes": max(0, post.likes - 1)})
        return True

    async def is_post_liked(self, post_id: str, user_id: str) -> bool:
        return (post_id, user_id) in self.likes

    async def search_posts(self, query: str, limit: int) -> List[Post]:
        needle = query.lower()
        matches = [
            p
            for p in _newest_first(self.posts.values())
            if p.status == PostStatus.PUBLISHED
            and (_contains(p.caption, needle) or any(needle in t.lower() for t in p.tags))
        ]
        return matches[:limit]

    # Tokens
    async def get_tokens(self, creator_id: Optional[str] = None) -> List[Token]:
        tokens = [t for t in self.tokens.values() if not creator_id or t.creator_id == creator_id]
        return _newest_first(tokens)

    async def get_token(self, token_id: str) -> Optional[Token]:
        return self.tokens.get(token_id)

    async def create_token(self, token: NewToken) -> Token:
        created = Token(**token.model_dump(), id=_new_id(), created_at=_now())
        self.tokens[created.id] = created
        return created

    async def search_tokens(self, query: str, limit: int) -> List[Token]:
        needle = query.lower()
        matches = [
            t for t in self.tokens.values() if _contains(t.name, needle) or _contains(t.symbol, needle)
        ]
        return matches[:limit]

    # Purchases
    async def has_purchased(self, user_id: str, post_id: str) -> bool:
        return (user_id, post_id) in self.purchases

    async def create_purchase(self, purchase: NewPurchase) -> Purchase:
        key = (purchase.user_id, purchase.post_id)
        if key in self.purchases:
            raise DuplicateRecordError(
                f"Failed to create purchase: {purchase.user_id} already owns {purchase.post_id}"
            )
        created = Purchase(**purchase.model_dump(), id=_new_id(), created_at=_now())
        self.purchases[key] = created
        return created

    async def get_purchases(
        self, user_id: Optional[str] = None, post_ids: Optional[List[str]] = None
    ) -> List[Purchase]:
        purchases = [
            p
            for p in self.purchases.values()
            if (user_id is None or p.user_id == user_id)
            and (post_ids is None or p.post_id in post_ids)
        ]
        return _newest_first(purchases)

    # Tips
    async def create_tip(self, tip: NewTip) -> Tip:
        created = Tip(**tip.model_dump(), id=_new_id(), created_at=_now())
        self.tips[created.id] = created
        return created

    async def get_tips(self, user_id: str) -> List[Tip]:
        tips = [t for t in self.tips.values() if user_id in (t.from_user, t.to_user)]
        return _newest_first(tips)

    # AI personas
    async def get_persona(self, creator_id: str) -> Optional[AiPersona]:
        return self.personas.get(creator_id)

    async def upsert_persona(self, persona: NewAiPersona) -> AiPersona:
        existing = self.personas.get(persona.creator_id)
        if existing:
            stored = existing.model_copy(update=persona.model_dump())
        else:
            stored = AiPersona(**persona.model_dump(), created_at=_now())
        self.personas[persona.creator_id] = stored
        return stored

    # Persona chat
    async def get_chat_messages(self, user_id: str, creator_id: str) -> List[ChatMessage]:
        conversation = [
            m for m in self.chat_messages if m.user_id == user_id and m.creator_id == creator_id
        ]
        return sorted(conversation, key=lambda m: m.created_at)

    async def create_chat_message(self, message: NewChatMessage) -> ChatMessage:
        created = ChatMessage(**message.model_dump(), id=_new_id(), created_at=_now())
        self.chat_messages.append(created)
        return created

    # Follows
    async def follow_user(self, follower_id: str, following_id: str) -> Follow:
        key = (follower_id, following_id)
        existing = self.follows.get(key)
        if existing:
            return existing
        follow = Follow(
            id=_new_id(), follower_id=follower_id, following_id=following_id, created_at=_now()
        )
        self.follows[key] = follow
        return follow

    async def unfollow_user(self, follower_id: str, following_id: str) -> bool:
        return self.follows.pop((follower_id, following_id), None) is not None

    async def is_following(self, follower_id: str, following_id: str) -> bool:
        return (follower_id, following_id) in self.follows

    async def get_follower_ids(self, user_id: str) -> List[str]:
        return [f.follower_id for f in self.follows.values() if f.following_id == user_id]

    async def get_followers(self, user_id: str) -> List[User]:
        ids = await self.get_follower_ids(user_id)
        return [self.users[i] for i in ids if i in self.users]

    async def get_following(self, user_id: str) -> List[User]:
        ids = [f.following_id for f in self.follows.values() if f.follower_id == user_id]
        return [self.users[i] for i in ids if i in self.users]

    async def get_follower_count(self, user_id: str) -> int:
        return sum(1 for f in self.follows.values() if f.following_id == user_id)

    async def get_following_count(self, user_id: str) -> int:
        return sum(1 for f in self.follows.values() if f.follower_id == user_id)

    # Activities
    def _visible_activities(self, user_id: Optional[str]) -> List[Activity]:
        return [
            a
            for a in self.activities.values()
            if a.user_id is None
            or (user_id is not None and user_id in (a.user_id, a.target_user_id))
        ]

    async def get_activities(
        self, user_id: Optional[str] = None, limit: int = 50
    ) -> List[Activity]:
        return _newest_first(self._visible_activities(user_id))[:limit]

    async def create_activity(self, activity: NewActivity) -> Activity:
        created = Activity(**activity.model_dump(), id=_new_id(), created_at=_now())
        self.activities[created.id] = created
        return created

    async def create_activities(self, activities: List[NewActivity]) -> List[Activity]:
        return [await self.create_activity(a) for a in activities]

    async def mark_activity_as_read(self, activity_id: str) -> Optional[Activity]:
        activity = self.activities.get(activity_id)
        if not activity:
            return None
        updated = activity.model_copy(update={"is_read": True})
        self.activities[activity_id] = updated
        return updated

    async def get_unread_activity_count(self, user_id: str) -> int:
        return sum(1 for a in self._visible_activities(user_id) if not a.is_read)

    # Live streams
    async def get_live_streams(
        self, creator_id: Optional[str] = None, status: Optional[str] = None
    ) -> List[LiveStream]:
        streams = [
            s
            for s in self.live_streams.values()
            if (not creator_id or s.creator_id == creator_id) and (not status or s.status == status)
        ]
        return _newest_first(streams)

    async def get_live_stream(self, stream_id: str) -> Optional[LiveStream]:
        return self.live_streams.get(stream_id)

    async def create_live_stream(self, stream: NewLiveStream) -> LiveStream:
        created = LiveStream(**stream.model_dump(), id=_new_id(), created_at=_now())
        self.live_streams[created.id] = created
        return created

    async def update_live_stream(
        self, stream_id: str, updates: LiveStreamUpdate
    ) -> Optional[LiveStream]:
        stream = self.live_streams.get(stream_id)
        if not stream:
            return None
        updated = stream.model_copy(update=updates.model_dump(exclude_unset=True))
        self.live_streams[stream_id] = updated
        return updated

    async def end_live_stream(self, stream_id: str) -> Optional[LiveStream]:
        stream = self.live_streams.get(stream_id)
        if not stream:
            return None
        ended = stream.model_copy(update={"status": StreamStatus.ENDED, "ended_at": _now()})
        self.live_streams[stream_id] = ended
        return ended

    async def get_active_streams(self) -> List[LiveStream]:
        return await self.get_live_streams(status=StreamStatus.LIVE.value)

    async def update_stream_viewer_count(
        self, stream_id: str, viewer_count: int
    ) -> Optional[LiveStream]:
        stream = self.live_streams.get(stream_id)
        if not stream:
            return None
        updated = stream.model_copy(
            update={
                "viewer_count": viewer_count,
                "max_viewers": max(stream.max_viewers, viewer_count),
            }
        )
        self.live_streams[stream_id] = updated
        return updated

    # Live chat
    async def get_live_chat_messages(
        self, stream_id: str, limit: int, offset: int
    ) -> List[LiveChatMessage]:
        messages = [m for m in self.live_chat_messages if m.stream_id == stream_id]
        return sorted(messages, key=lambda m: m.created_at)[offset : offset + limit]

    async def create_live_chat_message(self, message: NewLiveChatMessage) -> LiveChatMessage:
        created = LiveChatMessage(**message.model_dump(), id=_new_id(), created_at=_now())
        self.live_chat_messages.append(created)
        return created
