"""
Live stream and live chat endpoints
"""

import time
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from api.deps import MAX_PAGE_SIZE, get_storage, handle_route_errors
from enums import StreamStatus
from models.responses import LiveChatPage, LiveChatView, OffsetPagination, StreamsPage, StreamView
from models.schemas import LiveStream, LiveStreamUpdate, NewLiveChatMessage, NewLiveStream
from models.schemas.streams import CreateStreamRequest, SendLiveChatRequest, ViewerCountRequest
from storage import Storage

router = APIRouter()


@router.get("/streams", response_model=StreamsPage)
async def get_streams(
    creator_id: Optional[str] = Query(default=None, alias="creatorId"),
    status: Optional[StreamStatus] = None,
    limit: int = Query(default=20, ge=1),
    offset: int = Query(default=0, ge=0),
    storage: Storage = Depends(get_storage),
):
    limit = min(limit, MAX_PAGE_SIZE)
    with handle_route_errors("Failed to fetch live streams"):
        streams = await storage.get_live_streams(creator_id, status.value if status else None)
        page = [
            StreamView(**s.model_dump(), creator=await storage.get_user(s.creator_id))
            for s in streams[offset : offset + limit]
        ]
        return StreamsPage(
            streams=page,
            pagination=OffsetPagination(
                limit=limit,
                offset=offset,
                total=len(streams),
                has_more=offset + limit < len(streams),
            ),
        )


@router.get("/streams/active", response_model=List[LiveStream])
async def get_active_streams(storage: Storage = Depends(get_storage)):
    with handle_route_errors("Failed to fetch active streams"):
        return await storage.get_active_streams()


@router.get("/streams/{stream_id}", response_model=LiveStream)
async def get_stream(stream_id: str, storage: Storage = Depends(get_storage)):
    with handle_route_errors("Failed to fetch stream"):
        stream = await storage.get_live_stream(stream_id)
        if not stream:
            raise HTTPException(status_code=404, detail="Stream not found")
        return stream


@router.post("/streams", response_model=LiveStream)
async def create_stream(body: CreateStreamRequest, storage: Storage = Depends(get_storage)):
    """Go live. Streams start in the live state."""
    with handle_route_errors("Failed to create live stream"):
        return await storage.create_live_stream(
            NewLiveStream(
                creator_id=body.creator_id,
                title=body.title,
                description=body.description,
                stream_key=body.stream_key or f"stream_{int(time.time() * 1000)}",
                status=StreamStatus.LIVE,
                metadata={
                    "is_muted": False,
                    "is_camera_on": True,
                    "start_time": datetime.now(timezone.utc).isoformat(),
                },
            )
        )


@router.put("/streams/{stream_id}", response_model=LiveStream)
async def update_stream(
    stream_id: str, body: LiveStreamUpdate, storage: Storage = Depends(get_storage)
):
    with handle_route_errors("Failed to update stream"):
        stream = await storage.update_live_stream(stream_id, body)
        if not stream:
            raise HTTPException(status_code=404, detail="Stream not found")
        return stream


@router.put("/streams/{stream_id}/end", response_model=LiveStream)
async def end_stream(stream_id: str, storage: Storage = Depends(get_storage)):
    with handle_route_errors("Failed to end stream"):
        stream = await storage.end_live_stream(stream_id)
        if not stream:
            raise HTTPException(status_code=404, detail="Stream not found")
        return stream


@router.put("/streams/{stream_id}/viewers", response_model=LiveStream)
async def update_viewer_count(
    stream_id: str, body: ViewerCountRequest, storage: Storage = Depends(get_storage)
):
    with handle_route_errors("Failed to update viewer count"):
        stream = await storage.update_stream_viewer_count(stream_id, body.viewer_count)
        if not stream:
            raise HTTPException(status_code=404, detail="Stream not found")
        return stream


@router.get("/chat/live/{stream_id}", response_model=LiveChatPage)
async def get_live_chat(
    stream_id: str,
    limit: int = Query(default=50, ge=1),
    offset: int = Query(default=0, ge=0),
    storage: Storage = Depends(get_storage),
):
    limit = min(limit, MAX_PAGE_SIZE)
    with handle_route_errors("Failed to fetch live chat messages"):
        messages = await storage.get_live_chat_messages(stream_id, limit, offset)
        return LiveChatPage(
            messages=[
                LiveChatView(**m.model_dump(), user=await storage.get_user(m.user_id))
                for m in messages
            ],
            pagination=OffsetPagination(
                limit=limit, offset=offset, has_more=len(messages) == limit
            ),
        )


@router.post("/chat/live/{stream_id}", response_model=LiveChatView)
async def send_live_chat(
    stream_id: str, body: SendLiveChatRequest, storage: Storage = Depends(get_storage)
):
    with handle_route_errors("Failed to send live chat message"):
        if not await storage.get_live_stream(stream_id):
            raise HTTPException(status_code=404, detail="Stream not found")
        message = await storage.create_live_chat_message(
            NewLiveChatMessage(
                stream_id=stream_id,
                user_id=body.user_id,
                message=body.message,
                type=body.type,
                metadata=body.metadata,
            )
        )
        return LiveChatView(**message.model_dump(), user=await storage.get_user(body.user_id))
