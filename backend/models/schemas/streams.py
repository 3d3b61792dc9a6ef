"""
Pydantic schemas for live streams and live chat
"""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from enums import LiveChatMessageType, StreamStatus


class NewLiveStream(BaseModel):
    creator_id: str = Field(min_length=1)
    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    status: StreamStatus = StreamStatus.LIVE
    stream_key: str
    viewer_count: int = Field(default=0, ge=0)
    max_viewers: int = Field(default=0, ge=0)
    duration: int = Field(default=0, ge=0)  # seconds
    metadata: Dict[str, Any] = Field(default_factory=dict)


class LiveStream(NewLiveStream):
    id: str
    created_at: datetime
    ended_at: Optional[datetime] = None


class LiveStreamUpdate(BaseModel):
    """Partial patch. Status and viewer counters have dedicated operations."""

    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    stream_key: Optional[str] = None
    duration: Optional[int] = Field(default=None, ge=0)
    metadata: Optional[Dict[str, Any]] = None


class NewLiveChatMessage(BaseModel):
    stream_id: str = Field(min_length=1)
    user_id: str = Field(min_length=1)
    message: str = Field(min_length=1, max_length=1000)
    type: LiveChatMessageType = LiveChatMessageType.MESSAGE
    metadata: Dict[str, Any] = Field(default_factory=dict)


class LiveChatMessage(NewLiveChatMessage):
    id: str
    created_at: datetime


# Request models
class CreateStreamRequest(BaseModel):
    creator_id: str = Field(min_length=1)
    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    stream_key: Optional[str] = None


class ViewerCountRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    viewer_count: int = Field(alias="viewerCount", ge=0, strict=True)


class SendLiveChatRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(alias="userId", min_length=1)
    message: str = Field(min_length=1, max_length=1000)
    type: LiveChatMessageType = LiveChatMessageType.MESSAGE
    metadata: Dict[str, Any] = Field(default_factory=dict)
