"""
Pydantic schemas for users and the follow graph
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class NewUser(BaseModel):
    """Insert shape for a user. The id is usually a wallet public key."""

    id: str = Field(min_length=1)
    goon_username: Optional[str] = None
    handle: Optional[str] = None
    avatar_url: Optional[str] = None
    banner_url: Optional[str] = None
    bio: Optional[str] = None
    is_creator: bool = False
    age_verified: bool = False
    solana_address: Optional[str] = None


class User(NewUser):
    created_at: datetime
    last_active: Optional[datetime] = None


class UserUpdate(BaseModel):
    """Partial patch for a user; unset fields are left alone"""

    goon_username: Optional[str] = None
    handle: Optional[str] = None
    avatar_url: Optional[str] = None
    banner_url: Optional[str] = None
    bio: Optional[str] = None
    is_creator: Optional[bool] = None
    age_verified: Optional[bool] = None
    solana_address: Optional[str] = None


class Follow(BaseModel):
    """Directed edge: follower_id follows following_id"""

    id: str
    follower_id: str
    following_id: str
    created_at: datetime


# Request models
class CreateGoonUserRequest(BaseModel):
    goon_username: str = Field(min_length=1, max_length=50)
    solana_address: Optional[str] = None


class UpdateSolanaAddressRequest(BaseModel):
    solana_address: str = Field(min_length=1)


class ProfileUpdateRequest(UserUpdate):
    model_config = ConfigDict(populate_by_name=True)

    wallet_address: str = Field(alias="walletAddress", min_length=1)


class FollowRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    follower_id: str = Field(alias="followerId", min_length=1)
    following_id: str = Field(alias="followingId", min_length=1)
