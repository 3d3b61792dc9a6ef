from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from models.responses.common import OffsetPagination
from models.schemas import Post, User


class PostView(Post):
    """Post as served to a viewer. Locked posts carry the preview in media_url."""

    locked: bool = False
    creator: Optional[User] = None


class FeedResponse(BaseModel):
    posts: List[PostView]
    pagination: OffsetPagination


class ViewResult(BaseModel):
    success: bool
    views: int


class LikeStatus(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    is_liked: bool = Field(alias="isLiked")


class ContentAnalytics(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_views: int = Field(alias="totalViews")
    total_likes: int = Field(alias="totalLikes")
    total_posts: int = Field(alias="totalPosts")
    engagement_rate: float = Field(alias="engagementRate")
    recent_posts: int = Field(alias="recentPosts")
    top_post: Optional[Post] = Field(default=None, alias="topPost")
