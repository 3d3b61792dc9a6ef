"""
AI persona and persona chat endpoints
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from api.deps import (
    get_ai_client,
    get_payment_verifier,
    get_storage,
    handle_route_errors,
    require_param,
)
from models.responses import AiReply, ChatMessageView, ChatSendResult
from models.schemas import AiPersona, NewAiPersona
from models.schemas.chat import DirectAiChatRequest, SendChatMessageRequest, UpsertPersonaRequest
from services.ai_chat import AiChatClient
from services.chat import PersonaUnavailableError, send_chat_message
from services.payments import PaymentRequiredError, PaymentVerifier
from storage import Storage

router = APIRouter()


@router.get("/personas/{creator_handle}", response_model=AiPersona)
async def get_persona(creator_handle: str, storage: Storage = Depends(get_storage)):
    with handle_route_errors("Failed to fetch persona"):
        creator = await storage.get_user_by_handle(creator_handle)
        if not creator:
            raise HTTPException(status_code=404, detail="Creator not found")
        persona = await storage.get_persona(creator.id)
        if not persona:
            raise HTTPException(status_code=404, detail="AI persona not found")
        return persona


@router.post("/personas", response_model=AiPersona)
async def upsert_persona(
    body: UpsertPersonaRequest,
    storage: Storage = Depends(get_storage),
    ai_client: AiChatClient = Depends(get_ai_client),
):
    """Create or replace a creator's persona. creator_id is the creator's handle;
    without a system prompt one is generated from the creator's bio."""
    with handle_route_errors("Failed to create/update persona"):
        creator = await storage.get_user_by_handle(body.creator_id)
        if not creator:
            raise HTTPException(status_code=404, detail="Creator not found")

        system_prompt = body.system_prompt or await ai_client.generate_persona_prompt(
            creator.bio or "", body.creator_id
        )
        persona = NewAiPersona(creator_id=creator.id, system_prompt=system_prompt, is_active=True)
        if body.price_per_message:
            persona.price_per_message = body.price_per_message
        return await storage.upsert_persona(persona)


@router.get("/chat/messages/{creator_handle}", response_model=List[ChatMessageView])
async def get_chat_messages(
    creator_handle: str,
    user_id: Optional[str] = Query(default=None, alias="userId"),
    storage: Storage = Depends(get_storage),
):
    """Conversation between userId and the creator, oldest first."""
    user_id = require_param(user_id, "User ID required")
    with handle_route_errors("Failed to fetch chat messages"):
        creator = await storage.get_user_by_handle(creator_handle)
        if not creator:
            raise HTTPException(status_code=404, detail="Creator not found")

        messages = await storage.get_chat_messages(user_id, creator.id)
        user = await storage.get_user(user_id)
        return [ChatMessageView(**m.model_dump(), user=user) for m in messages]


@router.post("/chat/send", response_model=ChatSendResult)
async def send_message(
    body: SendChatMessageRequest,
    storage: Storage = Depends(get_storage),
    ai_client: AiChatClient = Depends(get_ai_client),
    verifier: PaymentVerifier = Depends(get_payment_verifier),
):
    with handle_route_errors("Failed to send chat message"):
        try:
            reply = await send_chat_message(
                storage,
                ai_client,
                verifier,
                creator_ref=body.creator_id,
                user_pubkey=body.user_pubkey,
                content=body.content,
                txn_sig=body.txn_sig,
            )
        except PersonaUnavailableError as e:
            raise HTTPException(status_code=404, detail="AI persona not available") from e
        except PaymentRequiredError as e:
            raise HTTPException(status_code=402, detail="Payment could not be verified") from e
        return ChatSendResult(success=True, response=reply)


@router.post("/chat/ai", response_model=AiReply)
async def direct_ai_chat(
    body: DirectAiChatRequest, ai_client: AiChatClient = Depends(get_ai_client)
):
    with handle_route_errors("Failed to get AI response"):
        return AiReply(response=await ai_client.chat_with_ai(body.message, body.system_prompt))
