"""
Profile and follow graph endpoints
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from api.deps import (
    get_activity_service,
    get_storage,
    handle_route_errors,
    page_bounds,
    require_param,
)
from models.responses import (
    FollowersPage,
    FollowingPage,
    FollowStatus,
    PagePagination,
    ProfileView,
    SuccessResult,
)
from models.schemas import Follow, NewUser, PostFilters, User, UserUpdate
from models.schemas.users import FollowRequest, ProfileUpdateRequest
from services.activity import ActivityService
from storage import DuplicateRecordError, Storage

logger = logging.getLogger(__name__)

router = APIRouter()


async def _get_or_create_user(
    storage: Storage, wallet: str, updates: Optional[UserUpdate] = None
) -> User:
    user = await storage.get_user(wallet)
    if user:
        return user

    fields = updates.model_dump(exclude_none=True) if updates else {}
    try:
        user = await storage.create_user(
            NewUser(id=wallet, **{"goon_username": f"User{wallet[:8]}", **fields})
        )
    except DuplicateRecordError:
        # Created by a concurrent request
        user = await storage.get_user(wallet)
        if not user:
            raise
    logger.info("Created profile for %s", wallet)
    return user


async def _total_earnings(storage: Storage, wallet: str, post_ids: list) -> int:
    """Lamports from unlocks of the user's posts plus tips received."""
    purchases = await storage.get_purchases(post_ids=post_ids) if post_ids else []
    tips = await storage.get_tips(wallet)
    return sum(p.amount_lamports for p in purchases) + sum(
        t.amount_lamports for t in tips if t.to_user == wallet
    )


@router.get("/is-following", response_model=FollowStatus)
async def is_following(
    follower_id: Optional[str] = Query(default=None, alias="followerId"),
    following_id: Optional[str] = Query(default=None, alias="followingId"),
    storage: Storage = Depends(get_storage),
):
    if not follower_id or not following_id:
        raise HTTPException(status_code=400, detail="Both followerId and followingId are required")
    with handle_route_errors("Failed to check follow status"):
        return FollowStatus(is_following=await storage.is_following(follower_id, following_id))


@router.get("/followers/{wallet_address}", response_model=FollowersPage)
async def get_followers(
    wallet_address: str,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1),
    storage: Storage = Depends(get_storage),
):
    offset, limit = page_bounds(page, limit)
    with handle_route_errors("Failed to fetch followers"):
        followers = await storage.get_followers(wallet_address)
        return FollowersPage(
            followers=followers[offset : offset + limit],
            pagination=PagePagination.for_slice(page, limit, len(followers)),
        )


@router.get("/following/{wallet_address}", response_model=FollowingPage)
async def get_following(
    wallet_address: str,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1),
    storage: Storage = Depends(get_storage),
):
    offset, limit = page_bounds(page, limit)
    with handle_route_errors("Failed to fetch following"):
        following = await storage.get_following(wallet_address)
        return FollowingPage(
            following=following[offset : offset + limit],
            pagination=PagePagination.for_slice(page, limit, len(following)),
        )


@router.post("/follow", response_model=Follow)
async def follow(
    body: FollowRequest, activities: ActivityService = Depends(get_activity_service)
):
    if body.follower_id == body.following_id:
        raise HTTPException(status_code=400, detail="Cannot follow yourself")
    with handle_route_errors("Failed to follow user"):
        return await activities.follow(body.follower_id, body.following_id)


@router.delete("/follow", response_model=SuccessResult, response_model_exclude_none=True)
async def unfollow(
    body: FollowRequest, activities: ActivityService = Depends(get_activity_service)
):
    with handle_route_errors("Failed to unfollow user"):
        return SuccessResult(success=await activities.unfollow(body.follower_id, body.following_id))


@router.get("/{wallet_address}", response_model=ProfileView)
async def get_profile(wallet_address: str, storage: Storage = Depends(get_storage)):
    """Profile with follow and content stats; unknown wallets get a fresh profile."""
    with handle_route_errors("Failed to fetch profile"):
        user = await _get_or_create_user(storage, wallet_address)
        posts = await storage.get_posts(PostFilters(creator_id=wallet_address))
        return ProfileView(
            **user.model_dump(),
            follower_count=await storage.get_follower_count(wallet_address),
            following_count=await storage.get_following_count(wallet_address),
            post_count=len(posts),
            total_views=sum(p.views for p in posts),
            total_earnings=await _total_earnings(
                storage, wallet_address, [p.id for p in posts]
            ),
        )


@router.put("", response_model=User)
async def update_profile(body: ProfileUpdateRequest, storage: Storage = Depends(get_storage)):
    updates = UserUpdate(**body.model_dump(exclude={"wallet_address"}, exclude_unset=True))
    with handle_route_errors("Failed to update profile"):
        existing = await storage.get_user(body.wallet_address)
        if not existing:
            return await _get_or_create_user(storage, body.wallet_address, updates)

        user = await storage.update_user(body.wallet_address, updates)
        if not user:
            raise HTTPException(status_code=500, detail="Failed to update profile")
        return user
