"""
Post, like, purchase, token and tip SQLModel database models
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import (
    JSON,
    BigInteger,
    Boolean,
    Column,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlmodel import Field, SQLModel

from database.columns import UtcDateTime, enum_column_type, new_id, utc_now
from enums import PostStatus, PostVisibility


class PostRecord(SQLModel, table=True):
    __tablename__ = "posts"

    id: str = Field(default_factory=new_id, sa_column=Column(String(64), primary_key=True))
    creator_id: str = Field(sa_column=Column(String(64), nullable=False, index=True))
    media_url: str = Field(sa_column=Column(String, nullable=False))
    thumb_url: str = Field(sa_column=Column(String, nullable=False))
    caption: str = Field(default="", sa_column=Column(Text, nullable=False))
    price_lamports: int = Field(default=0, sa_column=Column(BigInteger, nullable=False))
    visibility: PostVisibility = Field(
        default=PostVisibility.PUBLIC,
        sa_column=Column(enum_column_type(PostVisibility), nullable=False),
    )
    status: PostStatus = Field(
        default=PostStatus.PUBLISHED,
        sa_column=Column(enum_column_type(PostStatus), nullable=False, index=True),
    )
    tags: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    solana_address: Optional[str] = Field(default=None, sa_column=Column(String(64)))
    is_live: bool = Field(default=False, sa_column=Column(Boolean, nullable=False))
    views: int = Field(default=0, sa_column=Column(Integer, nullable=False))
    likes: int = Field(default=0, sa_column=Column(Integer, nullable=False))

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(UtcDateTime, server_default=func.now(), index=True),
    )


class PostLikeRecord(SQLModel, table=True):
    """A like on a post (unique per user/post)."""

    __tablename__ = "post_likes"
    __table_args__ = (UniqueConstraint("post_id", "user_id", name="uq_post_likes_post_user"),)

    id: str = Field(default_factory=new_id, sa_column=Column(String(64), primary_key=True))
    post_id: str = Field(
        sa_column=Column(String(64), ForeignKey("posts.id"), nullable=False, index=True)
    )
    user_id: str = Field(sa_column=Column(String(64), nullable=False))

    created_at: datetime = Field(
        default_factory=utc_now, sa_column=Column(UtcDateTime, server_default=func.now())
    )


class PurchaseRecord(SQLModel, table=True):
    """Unlock of a priced post (unique per user/post)."""

    __tablename__ = "purchases"
    __table_args__ = (UniqueConstraint("user_id", "post_id", name="uq_purchases_user_post"),)

    id: str = Field(default_factory=new_id, sa_column=Column(String(64), primary_key=True))
    user_id: str = Field(sa_column=Column(String(64), nullable=False, index=True))
    post_id: str = Field(
        sa_column=Column(String(64), ForeignKey("posts.id"), nullable=False, index=True)
    )
    amount_lamports: int = Field(sa_column=Column(BigInteger, nullable=False))
    txn_sig: str = Field(sa_column=Column(String(128), nullable=False))

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(UtcDateTime, server_default=func.now(), index=True),
    )


class TokenRecord(SQLModel, table=True):
    __tablename__ = "tokens"

    id: str = Field(default_factory=new_id, sa_column=Column(String(64), primary_key=True))
    creator_id: Optional[str] = Field(default=None, sa_column=Column(String(64), index=True))
    mint_address: str = Field(sa_column=Column(String(64), nullable=False))
    name: str = Field(sa_column=Column(String(64), nullable=False))
    symbol: str = Field(sa_column=Column(String(16), nullable=False))
    supply: int = Field(sa_column=Column(BigInteger, nullable=False))
    image_url: Optional[str] = Field(default=None, sa_column=Column(String))
    description: Optional[str] = Field(default=None, sa_column=Column(Text))

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(UtcDateTime, server_default=func.now(), index=True),
    )


class TipRecord(SQLModel, table=True):
    __tablename__ = "tips"

    id: str = Field(default_factory=new_id, sa_column=Column(String(64), primary_key=True))
    from_user: str = Field(sa_column=Column(String(64), nullable=False, index=True))
    to_user: str = Field(sa_column=Column(String(64), nullable=False, index=True))
    amount_lamports: int = Field(sa_column=Column(BigInteger, nullable=False))
    message: Optional[str] = Field(default=None, sa_column=Column(String(500)))
    txn_sig: str = Field(sa_column=Column(String(128), nullable=False))

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(UtcDateTime, server_default=func.now(), index=True),
    )
