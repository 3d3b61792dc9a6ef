"""
Database models re-exported from separate model files
"""

from database.models_chat import ChatMessageRecord, PersonaRecord
from database.models_content import (
    PostLikeRecord,
    PostRecord,
    PurchaseRecord,
    TipRecord,
    TokenRecord,
)
from database.models_social import ActivityRecord, FollowRecord
from database.models_streams import LiveChatMessageRecord, LiveStreamRecord
from database.models_users import UserRecord

__all__ = [
    # Users
    "UserRecord",
    # Content
    "PostRecord",
    "PostLikeRecord",
    "PurchaseRecord",
    "TokenRecord",
    "TipRecord",
    # Social
    "FollowRecord",
    "ActivityRecord",
    # Personas and chat
    "PersonaRecord",
    "ChatMessageRecord",
    # Streams
    "LiveStreamRecord",
    "LiveChatMessageRecord",
]
