"""
GOON token launch endpoints
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import ValidationError

from api.deps import get_storage, handle_route_errors, require_param
from models.schemas import NewToken, Token
from models.schemas.commerce import LaunchTokenRequest
from services.solana import generate_goon_token
from storage import Storage

logger = logging.getLogger(__name__)

router = APIRouter()


def _first_error(err: ValidationError) -> str:
    message = err.errors()[0]["msg"]
    return message.removeprefix("Value error, ")


@router.post("/launch", response_model=Token)
async def launch_token(body: LaunchTokenRequest, storage: Storage = Depends(get_storage)):
    """Launch a GOON token on a vanity mint address. Name and symbol rules are
    enforced by NewToken."""
    try:
        new_token = NewToken(
            creator_id=body.creator_id,
            mint_address=generate_goon_token(),
            name=body.name,
            symbol=body.symbol,
            supply=body.supply,
            image_url=body.image_url,
            description=body.description,
        )
    except ValidationError as err:
        raise HTTPException(status_code=400, detail=_first_error(err)) from err

    with handle_route_errors("Failed to launch token"):
        token = await storage.create_token(new_token)
        logger.info("Token %s launched at %s", token.name, token.mint_address)
        return token


@router.get("/my", response_model=List[Token])
async def get_my_tokens(
    creator_id: Optional[str] = Query(default=None, alias="creatorId"),
    storage: Storage = Depends(get_storage),
):
    creator_id = require_param(creator_id, "Creator ID required")
    with handle_route_errors("Failed to fetch tokens"):
        return await storage.get_tokens(creator_id)
