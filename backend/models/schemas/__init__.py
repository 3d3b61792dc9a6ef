"""
Domain entities and insert shapes shared by every storage backend
"""

from models.schemas.activities import Activity, AnnouncementRequest, NewActivity
from models.schemas.chat import AiPersona, ChatMessage, NewAiPersona, NewChatMessage
from models.schemas.commerce import NewTip, NewToken, Tip, Token
from models.schemas.posts import (
    NewPost,
    NewPurchase,
    Post,
    PostFilters,
    PostLike,
    PostUpdate,
    Purchase,
)
from models.schemas.search import SearchResults
from models.schemas.streams import (
    LiveChatMessage,
    LiveStream,
    LiveStreamUpdate,
    NewLiveChatMessage,
    NewLiveStream,
)
from models.schemas.users import Follow, NewUser, User, UserUpdate

__all__ = [
    # Users
    "NewUser",
    "User",
    "UserUpdate",
    "Follow",
    # Posts
    "NewPost",
    "Post",
    "PostUpdate",
    "PostFilters",
    "PostLike",
    "NewPurchase",
    "Purchase",
    # Commerce
    "NewToken",
    "Token",
    "NewTip",
    "Tip",
    # Personas and chat
    "NewAiPersona",
    "AiPersona",
    "NewChatMessage",
    "ChatMessage",
    # Activities
    "NewActivity",
    "Activity",
    "AnnouncementRequest",
    # Streams
    "NewLiveStream",
    "LiveStream",
    "LiveStreamUpdate",
    "NewLiveChatMessage",
    "LiveChatMessage",
    # Search
    "SearchResults",
]
