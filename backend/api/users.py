"""
User account endpoints
"""

import time
import uuid

from fastapi import APIRouter, Depends, HTTPException

from api.deps import get_storage, handle_route_errors
from models.schemas import NewUser, User
from models.schemas.users import CreateGoonUserRequest, UpdateSolanaAddressRequest
from services.solana import validate_solana_address
from storage import DuplicateRecordError, Storage

router = APIRouter()


@router.post("/goon", response_model=User)
async def create_goon_user(body: CreateGoonUserRequest, storage: Storage = Depends(get_storage)):
    """Create a goon user, or return the one already holding this username."""
    with handle_route_errors("Failed to create user"):
        existing = await storage.get_user_by_goon_username(body.goon_username)
        if existing:
            return existing

        new_user = NewUser(
            id=f"goon_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}",
            goon_username=body.goon_username,
            solana_address=body.solana_address,
        )
        try:
            return await storage.create_user(new_user)
        except DuplicateRecordError:
            # Same username registered concurrently
            existing = await storage.get_user_by_goon_username(body.goon_username)
            if not existing:
                raise
            return existing


@router.get("/goon/{username}", response_model=User)
async def get_goon_user(username: str, storage: Storage = Depends(get_storage)):
    with handle_route_errors("Failed to fetch user"):
        user = await storage.get_user_by_goon_username(username)
        if not user:
            raise HTTPException(status_code=404, detail="User not found")
        return user


@router.put("/{user_id}/solana", response_model=User)
async def update_solana_address(
    user_id: str, body: UpdateSolanaAddressRequest, storage: Storage = Depends(get_storage)
):
    if not validate_solana_address(body.solana_address):
        raise HTTPException(status_code=400, detail="Invalid Solana address")
    with handle_route_errors("Failed to update solana address"):
        user = await storage.update_user_solana_address(user_id, body.solana_address)
        if not user:
            raise HTTPException(status_code=404, detail="User not found")
        return user


@router.put("/{user_id}/active", response_model=User)
async def update_last_active(user_id: str, storage: Storage = Depends(get_storage)):
    with handle_route_errors("Failed to update last active"):
        user = await storage.update_user_last_active(user_id)
        if not user:
            raise HTTPException(status_code=404, detail="User not found")
        return user
