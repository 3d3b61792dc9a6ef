"""
Centralized enums to avoid circular imports
"""

from enum import Enum


class PostVisibility(str, Enum):
    """Who may see a post's media"""

    PUBLIC = "public"
    SUBSCRIBERS = "subscribers"
    GOON_GATED = "goon-gated"  # Requires token or purchase ownership


class PostStatus(str, Enum):
    """Post lifecycle states"""

    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class MediaType(str, Enum):
    """Media type filter, inferred from the media URL extension"""

    PHOTO = "photo"
    VIDEO = "video"

    def extensions(self) -> tuple[str, ...]:
        if self == MediaType.PHOTO:
            return (".jpg", ".jpeg", ".png", ".gif", ".webp")
        return (".mp4", ".webm", ".mov", ".avi")


class PostSort(str, Enum):
    LATEST = "latest"
    TRENDING = "trending"  # likes + views


class ChatRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class ActivityType(str, Enum):
    """Kinds of activity feed entries"""

    CORE_UPDATE = "core_update"  # Team announcements
    NEW_LAUNCH = "new_launch"
    CONTENT_UPDATE = "content_update"  # New post by a followed creator
    NEW_FOLLOWER = "new_follower"


class StreamStatus(str, Enum):
    """Live stream states; ENDED is terminal"""

    SCHEDULED = "scheduled"
    LIVE = "live"
    ENDED = "ended"


class LiveChatMessageType(str, Enum):
    MESSAGE = "message"
    TIP = "tip"
    REACTION = "reaction"


class TipDirection(str, Enum):
    ALL = "all"
    SENT = "sent"
    RECEIVED = "received"


class StorageBackend(str, Enum):
    MEMORY = "memory"
    SQL = "sql"


class ModelProvider(str, Enum):
    """OpenAI-compatible chat completion providers"""

    XAI = "xai"
    OPENAI = "openai"

    def base_url(self) -> str | None:
        if self == ModelProvider.XAI:
            return "https://api.x.ai/v1"
        return None


# Export all enums
__all__ = [
    "PostVisibility",
    "PostStatus",
    "MediaType",
    "PostSort",
    "ChatRole",
    "ActivityType",
    "StreamStatus",
    "LiveChatMessageType",
    "TipDirection",
    "StorageBackend",
    "ModelProvider",
]
