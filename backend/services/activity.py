"""
Domain events written to the activity feed.

Backends only persist; every notification is emitted here so both storage
backends produce the same feed for the same sequence of operations.
"""

import logging
from typing import Any, Dict, List, Optional

from enums import ActivityType
from models.schemas import Activity, Follow, NewActivity, Post, User
from storage import Storage

logger = logging.getLogger(__name__)


def display_name(user: Optional[User], fallback: str) -> str:
    if not user:
        return fallback
    return user.handle or user.goon_username or user.id


class ActivityService:
    def __init__(self, storage: Storage, fanout_warn_threshold: int = 1000):
        self.storage = storage
        self.fanout_warn_threshold = fanout_warn_threshold

    async def follow(self, follower_id: str, following_id: str) -> Follow:
        """Create the follow edge and notify the followed user once.

        A repeat follow returns the existing edge and emits nothing. Two
        concurrent first follows can both pass the check and notify twice;
        the edge itself stays unique.
        """
        already_following = await self.storage.is_following(follower_id, following_id)
        follow = await self.storage.follow_user(follower_id, following_id)
        if already_following:
            return follow

        follower = await self.storage.get_user(follower_id)
        await self.storage.create_activity(
            NewActivity(
                type=ActivityType.NEW_FOLLOWER,
                user_id=following_id,
                title="New follower",
                description=f"{display_name(follower, follower_id)} started following you",
                metadata={"follower_id": follower_id},
            )
        )
        return follow

    async def unfollow(self, follower_id: str, following_id: str) -> bool:
        return await self.storage.unfollow_user(follower_id, following_id)

    async def notify_new_post(self, post: Post) -> List[Activity]:
        """Write one content_update entry per current follower, in a single batch."""
        follower_ids = await self.storage.get_follower_ids(post.creator_id)
        if not follower_ids:
            return []
        if len(follower_ids) > self.fanout_warn_threshold:
            logger.warning(
                "Large fan-out for post %s: %d followers of %s",
                post.id,
                len(follower_ids),
                post.creator_id,
            )

        creator = await self.storage.get_user(post.creator_id)
        name = display_name(creator, post.creator_id)
        activities = [
            NewActivity(
                type=ActivityType.CONTENT_UPDATE,
                user_id=follower_id,
                post_id=post.id,
                title="New post",
                description=f"{name} shared new content",
                metadata={"creator_id": post.creator_id, "post_id": post.id},
            )
            for follower_id in follower_ids
        ]
        created = await self.storage.create_activities(activities)
        logger.info("Fan-out for post %s wrote %d activities", post.id, len(created))
        return created

    async def announce(
        self,
        title: str,
        description: str,
        activity_type: ActivityType = ActivityType.CORE_UPDATE,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Activity:
        """Global entry visible to every user"""
        return await self.storage.create_activity(
            NewActivity(
                type=activity_type,
                title=title,
                description=description,
                metadata=metadata or {},
            )
        )
