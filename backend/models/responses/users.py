from typing import List

from pydantic import BaseModel, ConfigDict, Field

from models.responses.common import PagePagination
from models.schemas import Post, Token, User


class CreatorView(User):
    model_config = ConfigDict(populate_by_name=True)

    posts: List[Post]
    tokens: List[Token]
    follower_count: int = Field(alias="followerCount")
    post_count: int = Field(alias="postCount")


class CreatorsPage(BaseModel):
    creators: List[CreatorView]
    pagination: PagePagination


class ProfileView(User):
    model_config = ConfigDict(populate_by_name=True)

    follower_count: int = Field(alias="followerCount")
    following_count: int = Field(alias="followingCount")
    post_count: int = Field(alias="postCount")
    total_views: int = Field(alias="totalViews")
    total_earnings: int = Field(alias="totalEarnings")  # lamports


class FollowersPage(BaseModel):
    followers: List[User]
    pagination: PagePagination


class FollowingPage(BaseModel):
    following: List[User]
    pagination: PagePagination


class FollowStatus(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    is_following: bool = Field(alias="isFollowing")
