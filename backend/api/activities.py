"""
Activity feed endpoints
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from api.deps import get_activity_service, get_storage, handle_route_errors, require_param
from models.responses import UnreadCount
from models.schemas import Activity, AnnouncementRequest, NewActivity
from services.activity import ActivityService
from storage import Storage

router = APIRouter()


@router.get("", response_model=List[Activity])
async def get_activities(
    user_id: Optional[str] = Query(default=None, alias="userId"),
    limit: int = Query(default=50, ge=1, le=200),
    storage: Storage = Depends(get_storage),
):
    """Global, owned and targeted entries for userId, newest first."""
    with handle_route_errors("Failed to fetch activities"):
        return await storage.get_activities(user_id, limit)


@router.post("", response_model=Activity)
async def create_activity(body: NewActivity, storage: Storage = Depends(get_storage)):
    with handle_route_errors("Failed to create activity"):
        return await storage.create_activity(body)


@router.get("/unread-count", response_model=UnreadCount)
async def get_unread_count(
    user_id: Optional[str] = Query(default=None, alias="userId"),
    storage: Storage = Depends(get_storage),
):
    user_id = require_param(user_id, "userId is required")
    with handle_route_errors("Failed to get unread activity count"):
        return UnreadCount(count=await storage.get_unread_activity_count(user_id))


@router.put("/{activity_id}/read", response_model=Activity)
async def mark_as_read(activity_id: str, storage: Storage = Depends(get_storage)):
    with handle_route_errors("Failed to mark activity as read"):
        activity = await storage.mark_activity_as_read(activity_id)
        if not activity:
            raise HTTPException(status_code=404, detail="Activity not found")
        return activity


@router.post("/announcement", response_model=Activity)
async def create_announcement(
    body: AnnouncementRequest, activities: ActivityService = Depends(get_activity_service)
):
    """Core team announcement shown to every user"""
    with handle_route_errors("Failed to create announcement"):
        return await activities.announce(body.title, body.description, body.type, body.metadata)
