"""
Post creation, unlocks and priced-media gating.
"""

import logging
import time
from dataclasses import dataclass
from typing import List, Optional, Set

from models.responses import PostView
from models.schemas import NewPost, NewPurchase, Post, User
from services.activity import ActivityService
from services.payments import PaymentRequiredError, PaymentVerifier
from storage import DuplicateRecordError, Storage

logger = logging.getLogger(__name__)

ALREADY_UNLOCKED = "Already unlocked"


@dataclass
class UnlockResult:
    success: bool
    message: Optional[str] = None


async def create_post(storage: Storage, activities: ActivityService, new_post: NewPost) -> Post:
    """Persist a post, then notify the creator's followers.

    Args:
        storage: Storage backend
        activities: Activity service used for the follower fan-out
        new_post: Validated insert shape

    Returns:
        The stored post
    """
    post = await storage.create_post(new_post)
    await activities.notify_new_post(post)
    return post


async def unlock_post(
    storage: Storage,
    verifier: PaymentVerifier,
    post: Post,
    user_pubkey: str,
    txn_sig: Optional[str] = None,
) -> UnlockResult:
    """Record a purchase of post by user_pubkey.

    Repeat unlocks are idempotent. The unique (user, post) pair is the source
    of truth: losing an insert race also reports "Already unlocked".

    Raises:
        PaymentRequiredError: If payment verification is on and the transaction does not pay
    """
    if await storage.has_purchased(user_pubkey, post.id):
        return UnlockResult(success=True, message=ALREADY_UNLOCKED)

    recipient = post.solana_address
    if not recipient:
        creator = await storage.get_user(post.creator_id)
        recipient = creator.solana_address if creator else None

    if not await verifier.verify(txn_sig, user_pubkey, recipient, post.price_lamports):
        raise PaymentRequiredError(f"Payment for post {post.id} could not be verified")

    try:
        await storage.create_purchase(
            NewPurchase(
                user_id=user_pubkey,
                post_id=post.id,
                amount_lamports=post.price_lamports,
                txn_sig=txn_sig or f"txn_{int(time.time() * 1000)}",
            )
        )
    except DuplicateRecordError:
        logger.info("Concurrent unlock of %s by %s", post.id, user_pubkey)
        return UnlockResult(success=True, message=ALREADY_UNLOCKED)

    logger.info("Post %s unlocked by %s", post.id, user_pubkey)
    return UnlockResult(success=True)


async def unlocked_post_ids(
    storage: Storage, posts: List[Post], viewer_id: Optional[str]
) -> Set[str]:
    """Ids of priced posts whose media viewer_id may see (own posts or purchased)."""
    priced = [p for p in posts if p.is_priced]
    if not viewer_id or not priced:
        return set()
    unlocked = {p.id for p in priced if p.creator_id == viewer_id}
    purchases = await storage.get_purchases(user_id=viewer_id, post_ids=[p.id for p in priced])
    unlocked.update(purchase.post_id for purchase in purchases)
    return unlocked


def gate_media(post: Post, unlocked: bool, creator: Optional[User] = None) -> PostView:
    """Build the viewer-facing post, swapping priced media for its preview when locked."""
    locked = post.is_priced and not unlocked
    view = PostView(**post.model_dump(), locked=locked, creator=creator)
    if locked:
        view.media_url = post.thumb_url
    return view


async def present_posts(
    storage: Storage, posts: List[Post], viewer_id: Optional[str] = None
) -> List[PostView]:
    """Gate media for viewer_id and embed each post's creator."""
    unlocked = await unlocked_post_ids(storage, posts, viewer_id)
    creators = {}
    for creator_id in {p.creator_id for p in posts}:
        creators[creator_id] = await storage.get_user(creator_id)
    return [gate_media(p, p.id in unlocked, creators[p.creator_id]) for p in posts]
