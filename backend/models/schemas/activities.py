from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from enums import ActivityType


class NewActivity(BaseModel):
    """Insert shape for an activity feed entry.

    user_id is the owner (recipient); None makes the entry global.
    target_user_id addresses an entry at one more user.
    """

    type: ActivityType
    user_id: Optional[str] = None
    target_user_id: Optional[str] = None
    post_id: Optional[str] = None
    title: str = Field(min_length=1)
    description: str
    metadata: Dict[str, Any] = Field(default_factory=dict)
    is_read: bool = False


class Activity(NewActivity):
    id: str
    created_at: datetime


class AnnouncementRequest(BaseModel):
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    type: ActivityType = ActivityType.CORE_UPDATE
    metadata: Dict[str, Any] = Field(default_factory=dict)
