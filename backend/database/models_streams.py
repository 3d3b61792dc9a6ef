"""
Live stream and live chat SQLModel database models
"""

from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import JSON, Column, ForeignKey, Integer, String, Text, func
from sqlmodel import Field, SQLModel

from database.columns import UtcDateTime, enum_column_type, new_id, utc_now
from enums import LiveChatMessageType, StreamStatus


class LiveStreamRecord(SQLModel, table=True):
    __tablename__ = "live_streams"

    id: str = Field(default_factory=new_id, sa_column=Column(String(64), primary_key=True))
    creator_id: str = Field(sa_column=Column(String(64), nullable=False, index=True))
    title: str = Field(sa_column=Column(String(200), nullable=False))
    description: Optional[str] = Field(default=None, sa_column=Column(Text))
    status: StreamStatus = Field(
        default=StreamStatus.LIVE,
        sa_column=Column(enum_column_type(StreamStatus, 16), nullable=False, index=True),
    )
    stream_key: str = Field(sa_column=Column(String(128), nullable=False))
    viewer_count: int = Field(default=0, sa_column=Column(Integer, nullable=False))
    max_viewers: int = Field(default=0, sa_column=Column(Integer, nullable=False))
    duration: int = Field(default=0, sa_column=Column(Integer, nullable=False))
    extra_data: Dict[str, Any] = Field(
        default_factory=dict, sa_column=Column("metadata", JSON, nullable=False)
    )

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(UtcDateTime, server_default=func.now(), index=True),
    )
    ended_at: Optional[datetime] = Field(default=None, sa_column=Column(UtcDateTime))


class LiveChatMessageRecord(SQLModel, table=True):
    __tablename__ = "live_chat_messages"

    id: str = Field(default_factory=new_id, sa_column=Column(String(64), primary_key=True))
    stream_id: str = Field(
        sa_column=Column(String(64), ForeignKey("live_streams.id"), nullable=False, index=True)
    )
    user_id: str = Field(sa_column=Column(String(64), nullable=False))
    message: str = Field(sa_column=Column(String(1000), nullable=False))
    type: LiveChatMessageType = Field(
        default=LiveChatMessageType.MESSAGE,
        sa_column=Column(enum_column_type(LiveChatMessageType, 16), nullable=False),
    )
    extra_data: Dict[str, Any] = Field(
        default_factory=dict, sa_column=Column("metadata", JSON, nullable=False)
    )

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(UtcDateTime, server_default=func.now(), index=True),
    )
