"""
Search, trending and discovery endpoints
"""

import random
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from api.deps import MAX_PAGE_SIZE, get_storage, handle_route_errors
from enums import MediaType, PostSort
from models.responses import (
    DiscoverResponse,
    OffsetPagination,
    SearchResponse,
    Suggestion,
    SuggestionsResponse,
    TrendingResponse,
)
from models.schemas import PostFilters
from services import content
from storage import Storage

router = APIRouter()

MAX_SEARCH_RESULTS = 50
MAX_SUGGESTIONS = 10
LIVE_TAGS = ("live", "streaming")


def _truncate(text: str, length: int = 50) -> str:
    return text[:length] + ("..." if len(text) > length else "")


@router.get("/search", response_model=SearchResponse)
async def search(
    q: Optional[str] = None,
    type: Optional[str] = None,
    limit: int = Query(default=10, ge=1),
    offset: int = Query(default=0, ge=0),
    user_id: Optional[str] = Query(default=None, alias="userId"),
    storage: Storage = Depends(get_storage),
):
    """Search users, posts and tokens. type narrows to "users" or "posts"."""
    if not q:
        raise HTTPException(status_code=400, detail="Search query is required")
    limit = min(limit, MAX_SEARCH_RESULTS)

    with handle_route_errors("Failed to search"):
        if type == "users":
            response = SearchResponse(
                users=await storage.search_users(q, limit),
                pagination=OffsetPagination(limit=limit, offset=offset, has_more=False),
            )
        elif type == "posts":
            posts = await storage.search_posts(q, limit)
            response = SearchResponse(
                posts=await content.present_posts(storage, posts, user_id),
                pagination=OffsetPagination(limit=limit, offset=offset, has_more=False),
            )
        else:
            results = await storage.search_all(q, limit)
            response = SearchResponse(
                users=results.users,
                posts=await content.present_posts(storage, results.posts, user_id),
                tokens=results.tokens,
                pagination=OffsetPagination(limit=limit, offset=offset, has_more=False),
            )

        total = len(response.users) + len(response.posts) + len(response.tokens)
        response.pagination.total = total
        response.pagination.has_more = total == limit
        return response


@router.get("/search/suggestions", response_model=SuggestionsResponse)
async def search_suggestions(
    q: Optional[str] = None,
    limit: int = Query(default=5, ge=1),
    storage: Storage = Depends(get_storage),
):
    if not q or len(q) < 2:
        return SuggestionsResponse(suggestions=[])
    limit = min(limit, MAX_SUGGESTIONS)

    with handle_route_errors("Failed to get search suggestions"):
        users = await storage.search_users(q, limit)
        posts = await storage.search_posts(q, limit)
        suggestions = [
            Suggestion(
                type="user",
                id=u.id,
                title=u.goon_username or u.handle or u.id,
                subtitle=u.bio,
                avatar=u.avatar_url,
            )
            for u in users
        ] + [
            Suggestion(
                type="post",
                id=p.id,
                title=_truncate(p.caption),
                subtitle=", ".join(p.tags),
                thumbnail=p.thumb_url,
            )
            for p in posts
        ]
        return SuggestionsResponse(suggestions=suggestions[:limit])


@router.get("/trending", response_model=TrendingResponse)
async def get_trending(
    type: str = "all",
    timeframe: str = "24h",
    limit: int = Query(default=20, ge=1),
    user_id: Optional[str] = Query(default=None, alias="userId"),
    storage: Storage = Depends(get_storage),
):
    """Posts ranked by likes plus views. type is all, videos, photos or live."""
    limit = min(limit, MAX_PAGE_SIZE)
    with handle_route_errors("Failed to fetch trending content"):
        if type == "videos":
            filters = PostFilters(media_type=MediaType.VIDEO, sort=PostSort.TRENDING)
        elif type == "photos":
            filters = PostFilters(media_type=MediaType.PHOTO, sort=PostSort.TRENDING)
        else:
            filters = PostFilters(sort=PostSort.TRENDING)

        posts = await storage.get_posts(filters)
        if type == "live":
            posts = [p for p in posts if p.is_live or any(t in LIVE_TAGS for t in p.tags)]

        return TrendingResponse(
            posts=await content.present_posts(storage, posts[:limit], user_id),
            timeframe=timeframe,
            type=type,
            total=len(posts),
        )


@router.get("/discover", response_model=DiscoverResponse)
async def discover(
    limit: int = Query(default=20, ge=1),
    offset: int = Query(default=0, ge=0),
    user_id: Optional[str] = Query(default=None, alias="userId"),
    storage: Storage = Depends(get_storage),
):
    """A shuffled mix of trending posts, recent posts and live streams."""
    limit = min(limit, MAX_PAGE_SIZE)
    with handle_route_errors("Failed to fetch discovery content"):
        trending = await storage.get_posts(PostFilters(sort=PostSort.TRENDING))
        recent = await storage.get_posts(PostFilters(sort=PostSort.LATEST))
        live = await storage.get_active_streams()

        posts = await content.present_posts(storage, trending[:5] + recent[:5], user_id)
        items = [p.model_dump(mode="json") for p in posts]
        for stream in live[:3]:
            creator = await storage.get_user(stream.creator_id)
            items.append(
                {
                    **stream.model_dump(mode="json"),
                    "creator": creator.model_dump(mode="json") if creator else None,
                }
            )
        random.shuffle(items)

        return DiscoverResponse(
            content=items[offset : offset + limit],
            pagination=OffsetPagination(
                limit=limit,
                offset=offset,
                total=len(items),
                has_more=offset + limit < len(items),
            ),
        )
