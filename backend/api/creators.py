"""
Creator directory endpoints
"""

from fastapi import APIRouter, Depends, HTTPException, Query

from api.deps import get_storage, handle_route_errors, page_bounds
from models.responses import CreatorsPage, CreatorView, PagePagination
from models.schemas import PostFilters, User
from storage import Storage

router = APIRouter()


async def _with_stats(storage: Storage, creator: User) -> CreatorView:
    posts = await storage.get_posts(PostFilters(creator_id=creator.id))
    tokens = await storage.get_tokens(creator.id)
    return CreatorView(
        **creator.model_dump(),
        posts=posts,
        tokens=tokens,
        follower_count=await storage.get_follower_count(creator.id),
        post_count=len(posts),
    )


@router.get("", response_model=CreatorsPage)
async def get_creators(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1),
    storage: Storage = Depends(get_storage),
):
    offset, limit = page_bounds(page, limit)
    with handle_route_errors("Failed to fetch creators"):
        creators = [u for u in await storage.get_all_users() if u.is_creator]
        return CreatorsPage(
            creators=[await _with_stats(storage, c) for c in creators[offset : offset + limit]],
            pagination=PagePagination.for_slice(page, limit, len(creators)),
        )


@router.get("/{handle}", response_model=CreatorView)
async def get_creator(handle: str, storage: Storage = Depends(get_storage)):
    with handle_route_errors("Failed to fetch creator"):
        creator = await storage.get_user_by_handle(handle)
        if not creator:
            raise HTTPException(status_code=404, detail="Creator not found")
        return await _with_stats(storage, creator)
