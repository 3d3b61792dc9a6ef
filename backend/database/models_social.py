"""
Follow graph and activity feed SQLModel database models
"""

from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import JSON, Boolean, Column, String, Text, UniqueConstraint, func
from sqlmodel import Field, SQLModel

from database.columns import UtcDateTime, enum_column_type, new_id, utc_now
from enums import ActivityType


class FollowRecord(SQLModel, table=True):
    """follower_id follows following_id (unique per pair)."""

    __tablename__ = "follows"
    __table_args__ = (
        UniqueConstraint("follower_id", "following_id", name="uq_follows_follower_following"),
    )

    id: str = Field(default_factory=new_id, sa_column=Column(String(64), primary_key=True))
    follower_id: str = Field(sa_column=Column(String(64), nullable=False, index=True))
    following_id: str = Field(sa_column=Column(String(64), nullable=False, index=True))

    created_at: datetime = Field(
        default_factory=utc_now, sa_column=Column(UtcDateTime, server_default=func.now())
    )


class ActivityRecord(SQLModel, table=True):
    """Activity feed entry. A NULL user_id makes the entry global."""

    __tablename__ = "activities"

    id: str = Field(default_factory=new_id, sa_column=Column(String(64), primary_key=True))
    type: ActivityType = Field(sa_column=Column(enum_column_type(ActivityType), nullable=False))
    user_id: Optional[str] = Field(default=None, sa_column=Column(String(64), index=True))
    target_user_id: Optional[str] = Field(default=None, sa_column=Column(String(64), index=True))
    post_id: Optional[str] = Field(default=None, sa_column=Column(String(64)))
    title: str = Field(sa_column=Column(String(200), nullable=False))
    description: str = Field(sa_column=Column(Text, nullable=False))
    # "metadata" is reserved on declarative classes
    extra_data: Dict[str, Any] = Field(
        default_factory=dict, sa_column=Column("metadata", JSON, nullable=False)
    )
    is_read: bool = Field(default=False, sa_column=Column(Boolean, nullable=False))

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(UtcDateTime, server_default=func.now(), index=True),
    )
