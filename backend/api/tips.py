"""
Solana tip endpoints
"""

from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from api.deps import get_payment_verifier, get_storage, handle_route_errors, require_param
from enums import TipDirection
from models.responses import TipStats, TipVerification
from models.schemas import NewTip, Tip
from models.schemas.commerce import VerifyTransactionRequest
from services.payments import PaymentVerifier
from storage import Storage

router = APIRouter()


@router.post("/send", response_model=Tip)
async def send_tip(
    body: NewTip,
    storage: Storage = Depends(get_storage),
    verifier: PaymentVerifier = Depends(get_payment_verifier),
):
    with handle_route_errors("Failed to send tip"):
        recipient = await storage.get_user(body.to_user)
        recipient_address = (recipient.solana_address if recipient else None) or body.to_user
        if not await verifier.verify(
            body.txn_sig, body.from_user, recipient_address, body.amount_lamports
        ):
            raise HTTPException(status_code=402, detail="Payment could not be verified")
        return await storage.create_tip(body)


@router.get("/history", response_model=List[Tip])
async def get_tip_history(
    user_id: Optional[str] = Query(default=None, alias="userId"),
    type: TipDirection = TipDirection.ALL,
    storage: Storage = Depends(get_storage),
):
    user_id = require_param(user_id, "User ID is required")
    with handle_route_errors("Failed to fetch tip history"):
        tips = await storage.get_tips(user_id)
        if type == TipDirection.SENT:
            return [t for t in tips if t.from_user == user_id]
        if type == TipDirection.RECEIVED:
            return [t for t in tips if t.to_user == user_id]
        return tips


@router.get("/stats/{user_id}", response_model=TipStats)
async def get_tip_stats(user_id: str, storage: Storage = Depends(get_storage)):
    with handle_route_errors("Failed to fetch tip stats"):
        tips = await storage.get_tips(user_id)
        return TipStats(
            total_received=sum(t.amount_lamports for t in tips if t.to_user == user_id),
            total_sent=sum(t.amount_lamports for t in tips if t.from_user == user_id),
            total_tips=len(tips),
            recent_tips=tips[:10],
        )


@router.post("/verify", response_model=TipVerification)
async def verify_tip_transaction(
    body: VerifyTransactionRequest,
    verifier: PaymentVerifier = Depends(get_payment_verifier),
):
    """Check a transfer on chain. Always verified while payment verification is disabled."""
    with handle_route_errors("Failed to verify transaction"):
        verified = await verifier.verify(
            body.transaction_signature, body.from_address, body.to_address, body.amount
        )
        return TipVerification(
            verified=verified,
            transaction_signature=body.transaction_signature,
            from_address=body.from_address,
            to_address=body.to_address,
            amount=body.amount,
            timestamp=datetime.now(timezone.utc),
        )
