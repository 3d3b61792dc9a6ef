"""
AI persona and persona chat SQLModel database models
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import BigInteger, Boolean, Column, Index, String, Text, func
from sqlmodel import Field, SQLModel

from config import DEFAULT_PRICE_PER_MESSAGE_LAMPORTS
from database.columns import UtcDateTime, enum_column_type, new_id, utc_now
from enums import ChatRole


class PersonaRecord(SQLModel, table=True):
    """One persona per creator."""

    __tablename__ = "ai_personas"

    creator_id: str = Field(sa_column=Column(String(64), primary_key=True))
    system_prompt: str = Field(sa_column=Column(Text, nullable=False))
    price_per_message: int = Field(
        default=DEFAULT_PRICE_PER_MESSAGE_LAMPORTS, sa_column=Column(BigInteger, nullable=False)
    )
    is_active: bool = Field(default=True, sa_column=Column(Boolean, nullable=False))

    created_at: datetime = Field(
        default_factory=utc_now, sa_column=Column(UtcDateTime, server_default=func.now())
    )


class ChatMessageRecord(SQLModel, table=True):
    __tablename__ = "chat_messages"
    __table_args__ = (Index("ix_chat_messages_user_creator", "user_id", "creator_id"),)

    id: str = Field(default_factory=new_id, sa_column=Column(String(64), primary_key=True))
    user_id: str = Field(sa_column=Column(String(64), nullable=False))
    creator_id: str = Field(sa_column=Column(String(64), nullable=False))
    role: ChatRole = Field(sa_column=Column(enum_column_type(ChatRole, 16), nullable=False))
    content: str = Field(sa_column=Column(Text, nullable=False))
    txn_sig: Optional[str] = Field(default=None, sa_column=Column(String(128)))

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=Column(UtcDateTime, server_default=func.now(), index=True),
    )
