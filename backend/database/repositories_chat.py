"""
Repositories for AI personas and persona chat history.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import and_, select

from database.models import ChatMessageRecord, PersonaRecord


class PersonaRepository:
    """Note: write methods do NOT commit. Caller manages transaction."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_persona_or_none(self, creator_id: str) -> Optional[PersonaRecord]:
        result = await self.session.execute(
            select(PersonaRecord).where(PersonaRecord.creator_id == creator_id)
        )
        return result.scalar_one_or_none()

    async def upsert_persona_without_commit(self, values: Dict[str, Any]) -> PersonaRecord:
        """Insert, or overwrite the persona keyed by creator_id. created_at survives updates."""
        persona = await self.get_persona_or_none(values["creator_id"])
        if persona:
            for key, value in values.items():
                setattr(persona, key, value)
        else:
            persona = PersonaRecord(**values)
            self.session.add(persona)
        await self.session.flush()
        return persona


class ChatRepository:
    """Note: write methods do NOT commit. Caller manages transaction."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_conversation(self, user_id: str, creator_id: str) -> List[ChatMessageRecord]:
        """Messages for the pair, oldest first"""
        result = await self.session.execute(
            select(ChatMessageRecord)
            .where(
                and_(
                    ChatMessageRecord.user_id == user_id,
                    ChatMessageRecord.creator_id == creator_id,
                )
            )
            .order_by(ChatMessageRecord.created_at)
        )
        return list(result.scalars())

    async def create_message_without_commit(self, values: Dict[str, Any]) -> ChatMessageRecord:
        message = ChatMessageRecord(**values)
        self.session.add(message)
        await self.session.flush()
        return message
