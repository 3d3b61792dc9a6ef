"""
Pydantic schemas for posts, likes and purchases
"""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from enums import MediaType, PostSort, PostStatus, PostVisibility


class NewPost(BaseModel):
    """Insert shape for a post"""

    creator_id: str = Field(min_length=1)
    media_url: str = Field(min_length=1)
    thumb_url: str = Field(min_length=1)
    caption: str = ""
    price_lamports: int = Field(default=0, ge=0)
    visibility: PostVisibility = PostVisibility.PUBLIC
    status: PostStatus = PostStatus.PUBLISHED
    tags: List[str] = Field(default_factory=list)
    solana_address: Optional[str] = None
    is_live: bool = False


class Post(NewPost):
    id: str
    views: int = 0
    likes: int = 0
    created_at: datetime

    @property
    def is_priced(self) -> bool:
        return self.price_lamports > 0


class PostUpdate(BaseModel):
    """Partial patch for a post. Counters are not patchable."""

    media_url: Optional[str] = None
    thumb_url: Optional[str] = None
    caption: Optional[str] = None
    price_lamports: Optional[int] = Field(default=None, ge=0)
    visibility: Optional[PostVisibility] = None
    status: Optional[PostStatus] = None
    tags: Optional[List[str]] = None
    is_live: Optional[bool] = None


@dataclass(frozen=True)
class PostFilters:
    creator_id: Optional[str] = None
    category: Optional[str] = None  # Matched case-insensitively against tags
    media_type: Optional[MediaType] = None
    sort: PostSort = PostSort.LATEST
    include_unpublished: bool = False


class PostLike(BaseModel):
    id: str
    post_id: str
    user_id: str
    created_at: datetime


class NewPurchase(BaseModel):
    user_id: str = Field(min_length=1)
    post_id: str = Field(min_length=1)
    amount_lamports: int = Field(ge=0)
    txn_sig: str


class Purchase(NewPurchase):
    id: str
    created_at: datetime


# Request models
class LikeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(alias="userId", min_length=1)


class UnlockPostRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    post_id: str = Field(alias="postId", min_length=1)
    user_pubkey: str = Field(alias="userPubkey", min_length=1)
    txn_sig: Optional[str] = Field(default=None, alias="txnSig")
