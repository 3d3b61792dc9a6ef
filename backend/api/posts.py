"""
Feed, post, like, unlock and content analytics endpoints
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from api.deps import (
    MAX_PAGE_SIZE,
    get_activity_service,
    get_ai_client,
    get_payment_verifier,
    get_storage,
    handle_route_errors,
    require_param,
)
from enums import MediaType, PostSort
from models.responses import (
    ContentAnalytics,
    FeedResponse,
    LikeStatus,
    OffsetPagination,
    PostView,
    SuccessResult,
    ViewResult,
)
from models.schemas import NewPost, Post, PostFilters
from models.schemas.posts import LikeRequest, UnlockPostRequest
from services import content
from services.activity import ActivityService
from services.ai_chat import AiChatClient
from services.payments import PaymentRequiredError, PaymentVerifier
from storage import Storage

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/feed", response_model=FeedResponse)
async def get_feed(
    type: Optional[MediaType] = None,
    limit: int = Query(default=20, ge=1),
    offset: int = Query(default=0, ge=0),
    user_id: Optional[str] = Query(default=None, alias="userId"),
    storage: Storage = Depends(get_storage),
):
    """Latest published posts, paginated, with creators embedded."""
    limit = min(limit, MAX_PAGE_SIZE)
    with handle_route_errors("Failed to fetch feed"):
        posts = await storage.get_posts(PostFilters(media_type=type, sort=PostSort.LATEST))
        page = posts[offset : offset + limit]
        return FeedResponse(
            posts=await content.present_posts(storage, page, user_id),
            pagination=OffsetPagination(
                limit=limit,
                offset=offset,
                total=len(posts),
                has_more=offset + limit < len(posts),
            ),
        )


@router.get("/posts", response_model=List[PostView])
async def get_posts(
    category: Optional[str] = None,
    creator: Optional[str] = None,
    type: Optional[MediaType] = None,
    sort: PostSort = PostSort.LATEST,
    user_id: Optional[str] = Query(default=None, alias="userId"),
    storage: Storage = Depends(get_storage),
):
    with handle_route_errors("Failed to fetch posts"):
        posts = await storage.get_posts(
            PostFilters(creator_id=creator, category=category, media_type=type, sort=sort)
        )
        return await content.present_posts(storage, posts, user_id)


@router.get("/posts/my", response_model=List[Post])
async def get_my_posts(
    creator_id: Optional[str] = Query(default=None, alias="creatorId"),
    storage: Storage = Depends(get_storage),
):
    """Creator studio listing, drafts and archived posts included."""
    creator_id = require_param(creator_id, "Creator ID required")
    with handle_route_errors("Failed to fetch posts"):
        return await storage.get_posts(
            PostFilters(creator_id=creator_id, include_unpublished=True)
        )


@router.get("/analytics/content", response_model=ContentAnalytics)
async def get_content_analytics(
    creator_id: Optional[str] = Query(default=None, alias="creatorId"),
    storage: Storage = Depends(get_storage),
):
    creator_id = require_param(creator_id, "Creator ID required")
    with handle_route_errors("Failed to fetch analytics"):
        posts = await storage.get_posts(PostFilters(creator_id=creator_id))
        total_views = sum(p.views for p in posts)
        total_likes = sum(p.likes for p in posts)
        engagement = (total_likes / total_views) * 100 if total_views > 0 else 0.0
        week_ago = datetime.now(timezone.utc) - timedelta(days=7)

        return ContentAnalytics(
            total_views=total_views,
            total_likes=total_likes,
            total_posts=len(posts),
            engagement_rate=round(engagement, 2),
            recent_posts=sum(1 for p in posts if p.created_at > week_ago),
            top_post=max(posts, key=lambda p: p.views) if posts else None,
        )


@router.post("/posts/unlock", response_model=SuccessResult, response_model_exclude_none=True)
async def unlock_post(
    body: UnlockPostRequest,
    storage: Storage = Depends(get_storage),
    verifier: PaymentVerifier = Depends(get_payment_verifier),
):
    with handle_route_errors("Failed to unlock post"):
        post = await storage.get_post(body.post_id)
        if not post:
            raise HTTPException(status_code=404, detail="Post not found")
        try:
            result = await content.unlock_post(
                storage, verifier, post, body.user_pubkey, body.txn_sig
            )
        except PaymentRequiredError as e:
            raise HTTPException(status_code=402, detail="Payment could not be verified") from e
        return SuccessResult(success=result.success, message=result.message)


@router.get("/posts/{post_id}", response_model=PostView)
async def get_post(
    post_id: str,
    user_id: Optional[str] = Query(default=None, alias="userId"),
    storage: Storage = Depends(get_storage),
):
    """Single post with its creator. Priced media is masked unless userId may see it."""
    with handle_route_errors("Failed to fetch post"):
        post = await storage.get_post(post_id)
        if not post:
            raise HTTPException(status_code=404, detail="Post not found")
        views = await content.present_posts(storage, [post], user_id)
        return views[0]


@router.post("/posts/{post_id}/view", response_model=ViewResult)
async def track_view(post_id: str, storage: Storage = Depends(get_storage)):
    with handle_route_errors("Failed to track post view"):
        post = await storage.increment_post_views(post_id)
        if not post:
            raise HTTPException(status_code=404, detail="Post not found")
        return ViewResult(success=True, views=post.views)


@router.post("/posts/{post_id}/like", response_model=SuccessResult, response_model_exclude_none=True)
async def like_post(post_id: str, body: LikeRequest, storage: Storage = Depends(get_storage)):
    with handle_route_errors("Failed to like post"):
        if not await storage.like_post(post_id, body.user_id):
            raise HTTPException(status_code=404, detail="Post not found")
        return SuccessResult(success=True)


@router.delete(
    "/posts/{post_id}/like", response_model=SuccessResult, response_model_exclude_none=True
)
async def unlike_post(post_id: str, body: LikeRequest, storage: Storage = Depends(get_storage)):
    with handle_route_errors("Failed to unlike post"):
        if not await storage.unlike_post(post_id, body.user_id):
            raise HTTPException(status_code=404, detail="Like not found")
        return SuccessResult(success=True)


@router.get("/posts/{post_id}/like", response_model=LikeStatus)
async def get_like_status(
    post_id: str,
    user_id: Optional[str] = Query(default=None, alias="userId"),
    storage: Storage = Depends(get_storage),
):
    user_id = require_param(user_id, "User ID is required")
    with handle_route_errors("Failed to check like status"):
        return LikeStatus(is_liked=await storage.is_post_liked(post_id, user_id))


@router.post("/posts", response_model=Post)
async def create_post(
    body: NewPost,
    storage: Storage = Depends(get_storage),
    activities: ActivityService = Depends(get_activity_service),
    ai_client: AiChatClient = Depends(get_ai_client),
):
    """Create a post and notify the creator's followers."""
    with handle_route_errors("Failed to create post"):
        if body.caption:
            verdict = await ai_client.moderate_content(body.caption)
            if not verdict.is_appropriate:
                raise HTTPException(
                    status_code=400,
                    detail={"error": "Content rejected by moderation", "details": verdict.reason},
                )
        return await content.create_post(storage, activities, body)
