"""
Repositories for purchases, tokens and tips.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import and_, desc, or_, select

from database.columns import LIKE_ESCAPE, contains_pattern
from database.models import PurchaseRecord, TipRecord, TokenRecord


class PurchaseRepository:
    """Note: write methods do NOT commit. Caller manages transaction."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def has_purchased(self, user_id: str, post_id: str) -> bool:
        result = await self.session.execute(
            select(PurchaseRecord.id).where(
                and_(PurchaseRecord.user_id == user_id, PurchaseRecord.post_id == post_id)
            )
        )
        return result.first() is not None

    async def get_purchases(
        self, user_id: Optional[str] = None, post_ids: Optional[List[str]] = None
    ) -> List[PurchaseRecord]:
        query = select(PurchaseRecord)
        if user_id is not None:
            query = query.where(PurchaseRecord.user_id == user_id)
        if post_ids is not None:
            if not post_ids:
                return []
            query = query.where(PurchaseRecord.post_id.in_(post_ids))
        result = await self.session.execute(query.order_by(desc(PurchaseRecord.created_at)))
        return list(result.scalars())

    async def create_purchase_without_commit(self, values: Dict[str, Any]) -> PurchaseRecord:
        """Raises IntegrityError if the (user_id, post_id) pair already exists."""
        purchase = PurchaseRecord(**values)
        self.session.add(purchase)
        await self.session.flush()
        return purchase


class TokenRepository:
    """Note: write methods do NOT commit. Caller manages transaction."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_token_or_none(self, token_id: str) -> Optional[TokenRecord]:
        result = await self.session.execute(select(TokenRecord).where(TokenRecord.id == token_id))
        return result.scalar_one_or_none()

    async def get_tokens(self, creator_id: Optional[str] = None) -> List[TokenRecord]:
        query = select(TokenRecord)
        if creator_id:
            query = query.where(TokenRecord.creator_id == creator_id)
        result = await self.session.execute(query.order_by(desc(TokenRecord.created_at)))
        return list(result.scalars())

    async def search_tokens(self, query: str, limit: int) -> List[TokenRecord]:
        pattern = contains_pattern(query)
        result = await self.session.execute(
            select(TokenRecord)
            .where(
                or_(
                    TokenRecord.name.ilike(pattern, escape=LIKE_ESCAPE),
                    TokenRecord.symbol.ilike(pattern, escape=LIKE_ESCAPE),
                )
            )
            .limit(limit)
        )
        return list(result.scalars())

    async def create_token_without_commit(self, values: Dict[str, Any]) -> TokenRecord:
        token = TokenRecord(**values)
        self.session.add(token)
        await self.session.flush()
        return token


class TipRepository:
    """Note: write methods do NOT commit. Caller manages transaction."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_tips_for_user(self, user_id: str) -> List[TipRecord]:
        """Tips sent or received, newest first"""
        result = await self.session.execute(
            select(TipRecord)
            .where(or_(TipRecord.from_user == user_id, TipRecord.to_user == user_id))
            .order_by(desc(TipRecord.created_at))
        )
        return list(result.scalars())

    async def create_tip_without_commit(self, values: Dict[str, Any]) -> TipRecord:
        tip = TipRecord(**values)
        self.session.add(tip)
        await self.session.flush()
        return tip
