"""
Response models for services and APIs
"""

from models.responses.activities import UnreadCount
from models.responses.chat import AiReply, ChatMessageView, ChatSendResult
from models.responses.commerce import TipStats, TipVerification
from models.responses.common import ErrorResponse, OffsetPagination, PagePagination, SuccessResult
from models.responses.discovery import (
    DiscoverResponse,
    SearchResponse,
    Suggestion,
    SuggestionsResponse,
    TrendingResponse,
)
from models.responses.posts import ContentAnalytics, FeedResponse, LikeStatus, PostView, ViewResult
from models.responses.streams import LiveChatPage, LiveChatView, StreamsPage, StreamView
from models.responses.users import (
    CreatorsPage,
    CreatorView,
    FollowersPage,
    FollowingPage,
    FollowStatus,
    ProfileView,
)

__all__ = [
    # Common
    "PagePagination",
    "OffsetPagination",
    "SuccessResult",
    "ErrorResponse",
    # Posts
    "PostView",
    "FeedResponse",
    "ViewResult",
    "LikeStatus",
    "ContentAnalytics",
    # Users and creators
    "CreatorView",
    "CreatorsPage",
    "ProfileView",
    "FollowersPage",
    "FollowingPage",
    "FollowStatus",
    # Commerce
    "TipStats",
    "TipVerification",
    # Chat
    "ChatMessageView",
    "ChatSendResult",
    "AiReply",
    # Discovery
    "SearchResponse",
    "Suggestion",
    "SuggestionsResponse",
    "TrendingResponse",
    "DiscoverResponse",
    # Activities
    "UnreadCount",
    # Streams
    "StreamView",
    "StreamsPage",
    "LiveChatView",
    "LiveChatPage",
]
