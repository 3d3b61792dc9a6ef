"""
Repository interface implemented by every storage backend.

Contract:
- get_* returns the entity or None; absence never raises.
- create_* takes a validated insert shape and returns the full entity.
- update_* takes a partial patch and returns the merged entity, or None
  for an unknown id.
- Counter mutations are a single atomic read-modify-write.
- Backend failures raise StorageError.

Backends persist only. Notifications and other side effects of writes
belong to the service layer.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

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
    SearchResults,
    Tip,
    Token,
    User,
    UserUpdate,
)


class Storage(ABC):
    # Lifecycle
    async def initialize(self) -> None:
        """Prepare the backend (create tables, open pools)."""

    async def close(self) -> None:
        """Release backend resources."""

    # Users
    @abstractmethod
    async def get_user(self, user_id: str) -> Optional[User]: ...

    @abstractmethod
    async def get_user_by_handle(self, handle: str) -> Optional[User]: ...

    @abstractmethod
    async def get_user_by_goon_username(self, goon_username: str) -> Optional[User]: ...

    @abstractmethod
    async def get_all_users(self) -> List[User]: ...

    @abstractmethod
    async def create_user(self, user: NewUser) -> User: ...

    @abstractmethod
    async def update_user(self, user_id: str, updates: UserUpdate) -> Optional[User]: ...

    async def update_user_solana_address(
        self, user_id: str, solana_address: str
    ) -> Optional[User]:
        return await self.update_user(user_id, UserUpdate(solana_address=solana_address))

    @abstractmethod
    async def update_user_last_active(self, user_id: str) -> Optional[User]: ...

    @abstractmethod
    async def search_users(self, query: str, limit: int) -> List[User]: ...

    # Posts
    @abstractmethod
    async def get_posts(self, filters: Optional[PostFilters] = None) -> List[Post]: ...

    @abstractmethod
    async def get_post(self, post_id: str) -> Optional[Post]: ...

    @abstractmethod
    async def create_post(self, post: NewPost) -> Post: ...

    @abstractmethod
    async def update_post(self, post_id: str, updates: PostUpdate) -> Optional[Post]: ...

    @abstractmethod
    async def increment_post_views(self, post_id: str) -> Optional[Post]: ...

    @abstractmethod
    async def like_post(self, post_id: str, user_id: str) -> bool:
        """Add a like edge and bump the counter. False if the post does not exist.
        Liking twice is a no-op that still returns True."""

    @abstractmethod
    async def unlike_post(self, post_id: str, user_id: str) -> bool:
        """Remove the like edge and drop the counter. False if there was no edge."""

    @abstractmethod
    async def is_post_liked(self, post_id: str, user_id: str) -> bool: ...

    @abstractmethod
    async def search_posts(self, query: str, limit: int) -> List[Post]: ...

    # Tokens
    @abstractmethod
    async def get_tokens(self, creator_id: Optional[str] = None) -> List[Token]: ...

    @abstractmethod
    async def get_token(self, token_id: str) -> Optional[Token]: ...

    @abstractmethod
    async def create_token(self, token: NewToken) -> Token: ...

    # Purchases
    @abstractmethod
    async def has_purchased(self, user_id: str, post_id: str) -> bool: ...

    @abstractmethod
    async def create_purchase(self, purchase: NewPurchase) -> Purchase:
        """Raises DuplicateRecordError if (user_id, post_id) already exists."""

    @abstractmethod
    async def get_purchases(
        self, user_id: Optional[str] = None, post_ids: Optional[List[str]] = None
    ) -> List[Purchase]: ...

    # Tips
    @abstractmethod
    async def create_tip(self, tip: NewTip) -> Tip: ...

    @abstractmethod
    async def get_tips(self, user_id: str) -> List[Tip]:
        """Tips sent or received by user_id, newest first."""

    # AI personas
    @abstractmethod
    async def get_persona(self, creator_id: str) -> Optional[AiPersona]: ...

    @abstractmethod
    async def upsert_persona(self, persona: NewAiPersona) -> AiPersona: ...

    # Persona chat
    @abstractmethod
    async def get_chat_messages(self, user_id: str, creator_id: str) -> List[ChatMessage]:
        """Conversation for the (user, creator) pair, oldest first."""

    @abstractmethod
    async def create_chat_message(self, message: NewChatMessage) -> ChatMessage: ...

    # Follows
    @abstractmethod
    async def follow_user(self, follower_id: str, following_id: str) -> Follow:
        """Idempotent; an existing edge is returned unchanged."""

    @abstractmethod
    async def unfollow_user(self, follower_id: str, following_id: str) -> bool: ...

    @abstractmethod
    async def is_following(self, follower_id: str, following_id: str) -> bool: ...

    @abstractmethod
    async def get_follower_ids(self, user_id: str) -> List[str]: ...

    @abstractmethod
    async def get_followers(self, user_id: str) -> List[User]: ...

    @abstractmethod
    async def get_following(self, user_id: str) -> List[User]: ...

    @abstractmethod
    async def get_follower_count(self, user_id: str) -> int: ...

    @abstractmethod
    async def get_following_count(self, user_id: str) -> int: ...

    # Activities
    @abstractmethod
    async def get_activities(
        self, user_id: Optional[str] = None, limit: int = 50
    ) -> List[Activity]:
        """Global, owned and targeted activities for user_id, newest first.
        Without a user only global activities are returned."""

    @abstractmethod
    async def create_activity(self, activity: NewActivity) -> Activity: ...

    @abstractmethod
    async def create_activities(self, activities: List[NewActivity]) -> List[Activity]: ...

    @abstractmethod
    async def mark_activity_as_read(self, activity_id: str) -> Optional[Activity]: ...

    @abstractmethod
    async def get_unread_activity_count(self, user_id: str) -> int: ...

    # Live streams
    @abstractmethod
    async def get_live_streams(
        self, creator_id: Optional[str] = None, status: Optional[str] = None
    ) -> List[LiveStream]: ...

    @abstractmethod
    async def get_live_stream(self, stream_id: str) -> Optional[LiveStream]: ...

    @abstractmethod
    async def create_live_stream(self, stream: NewLiveStream) -> LiveStream: ...

    @abstractmethod
    async def update_live_stream(
        self, stream_id: str, updates: LiveStreamUpdate
    ) -> Optional[LiveStream]: ...

    @abstractmethod
    async def end_live_stream(self, stream_id: str) -> Optional[LiveStream]: ...

    @abstractmethod
    async def get_active_streams(self) -> List[LiveStream]: ...

    @abstractmethod
    async def update_stream_viewer_count(
        self, stream_id: str, viewer_count: int
    ) -> Optional[LiveStream]:
        """Set viewer_count and raise max_viewers to the running maximum."""

    # Live chat
    @abstractmethod
    async def get_live_chat_messages(
        self, stream_id: str, limit: int, offset: int
    ) -> List[LiveChatMessage]: ...

    @abstractmethod
    async def create_live_chat_message(self, message: NewLiveChatMessage) -> LiveChatMessage: ...

    # Search
    async def search_all(self, query: str, limit: int) -> SearchResults:
        return SearchResults(
            users=await self.search_users(query, limit),
            posts=await self.search_posts(query, limit),
            tokens=await self.search_tokens(query, limit),
        )

    @abstractmethod
    async def search_tokens(self, query: str, limit: int) -> List[Token]: ...
