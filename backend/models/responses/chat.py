from typing import Optional

from pydantic import BaseModel

from models.schemas import ChatMessage, User


class ChatMessageView(ChatMessage):
    user: Optional[User] = None


class ChatSendResult(BaseModel):
    success: bool
    response: str


class AiReply(BaseModel):
    response: str
