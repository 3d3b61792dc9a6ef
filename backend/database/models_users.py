"""
User SQLModel database models
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, Column, String, Text, func
from sqlmodel import Field, SQLModel

from database.columns import UtcDateTime, utc_now


class UserRecord(SQLModel, table=True):
    """A wallet-keyed account; creators are users with is_creator set."""

    __tablename__ = "users"

    id: str = Field(sa_column=Column(String(64), primary_key=True))
    goon_username: Optional[str] = Field(
        default=None, sa_column=Column(String(50), unique=True, nullable=True)
    )
    handle: Optional[str] = Field(default=None, sa_column=Column(String(64), index=True))
    avatar_url: Optional[str] = Field(default=None, sa_column=Column(String))
    banner_url: Optional[str] = Field(default=None, sa_column=Column(String))
    bio: Optional[str] = Field(default=None, sa_column=Column(Text))
    is_creator: bool = Field(default=False, sa_column=Column(Boolean, nullable=False))
    age_verified: bool = Field(default=False, sa_column=Column(Boolean, nullable=False))
    solana_address: Optional[str] = Field(default=None, sa_column=Column(String(64)))

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(UtcDateTime, server_default=func.now(), index=True),
    )
    last_active: Optional[datetime] = Field(
        default_factory=utc_now, sa_column=Column(UtcDateTime, nullable=True)
    )
