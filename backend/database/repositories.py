"""
Database repositories re-exported from separate files.
"""

from .repositories_chat import ChatRepository, PersonaRepository
from .repositories_commerce import PurchaseRepository, TipRepository, TokenRepository
from .repositories_posts import PostRepository
from .repositories_social import ActivityRepository, FollowRepository
from .repositories_streams import LiveChatRepository, LiveStreamRepository
from .repositories_users import UserRepository

__all__ = [
    "UserRepository",
    "PostRepository",
    "PurchaseRepository",
    "TokenRepository",
    "TipRepository",
    "PersonaRepository",
    "ChatRepository",
    "FollowRepository",
    "ActivityRepository",
    "LiveStreamRepository",
    "LiveChatRepository",
]
