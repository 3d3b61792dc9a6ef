"""
Pydantic schemas for AI personas and persona chat
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from config import DEFAULT_PRICE_PER_MESSAGE_LAMPORTS
from enums import ChatRole


class NewAiPersona(BaseModel):
    creator_id: str = Field(min_length=1)
    system_prompt: str = Field(min_length=1, max_length=5000)
    price_per_message: int = Field(default=DEFAULT_PRICE_PER_MESSAGE_LAMPORTS, ge=0)
    is_active: bool = True


class AiPersona(NewAiPersona):
    """One persona per creator; creator_id is the key"""

    created_at: datetime


class NewChatMessage(BaseModel):
    user_id: str = Field(min_length=1)
    creator_id: str = Field(min_length=1)
    role: ChatRole
    content: str
    txn_sig: Optional[str] = None


class ChatMessage(NewChatMessage):
    id: str
    created_at: datetime


# Request models
class UpsertPersonaRequest(BaseModel):
    creator_id: str = Field(min_length=1, description="Creator handle")
    system_prompt: Optional[str] = Field(default=None, max_length=5000)
    price_per_message: Optional[int] = Field(default=None, ge=0)


class SendChatMessageRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    creator_id: str = Field(alias="creatorId", min_length=1)
    content: str = Field(min_length=1, max_length=4000)
    user_pubkey: str = Field(alias="userPubkey", min_length=1)
    txn_sig: Optional[str] = Field(default=None, alias="txnSig")


class DirectAiChatRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str = Field(min_length=1)
    system_prompt: str = Field(alias="systemPrompt", min_length=1)
