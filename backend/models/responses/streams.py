from typing import List, Optional

from pydantic import BaseModel

from models.responses.common import OffsetPagination
from models.schemas import LiveChatMessage, LiveStream, User


class StreamView(LiveStream):
    creator: Optional[User] = None


class StreamsPage(BaseModel):
    streams: List[StreamView]
    pagination: OffsetPagination


class LiveChatView(LiveChatMessage):
    user: Optional[User] = None


class LiveChatPage(BaseModel):
    messages: List[LiveChatView]
    pagination: OffsetPagination
