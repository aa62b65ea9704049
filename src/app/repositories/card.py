"""Card repository with user-scoped queries."""
from decimal import Decimal
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.card import Card
from app.repositories.base import BaseRepository


class CardRepository(BaseRepository[Card]):
    """Repository for Card model with user-scoped security."""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Card)

    async def get_all_by_user(self, user_id: UUID) -> list[Card]:
        """Get all cards for a user, default card first."""
        result = await self.db.execute(
            select(Card)
            .where(Card.user_id == user_id)
            .order_by(Card.is_default.desc(), Card.created_at)
        )
        return list(result.scalars().all())

    async def count_by_user(self, user_id: UUID) -> int:
        result = await self.db.execute(select(func.count(Card.id)).where(Card.user_id == user_id))
        return int(result.scalar_one())

    async def set_default(self, user_id: UUID, card_id: UUID) -> None:
        """Make one card the default: unset all, then set one, in one commit."""
        await self.db.execute(
            update(Card)
            .where(Card.user_id == user_id)
            .values(is_default=False)
            .execution_options(synchronize_session=False)
        )
        await self.db.execute(
            update(Card)
            .where(Card.id == card_id, Card.user_id == user_id)
            .values(is_default=True)
            .execution_options(synchronize_session=False)
        )
        await self.db.commit()

    async def adjust_balance(self, user_id: UUID, card_id: UUID, amount: Decimal) -> bool:
        """Add a signed amount to a card balance (not committed)."""
        result = await self.db.execute(
            update(Card)
            .where(Card.id == card_id, Card.user_id == user_id)
            .values(balance=Card.balance + amount)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def debit_if_covered(self, user_id: UUID, card_id: UUID, amount: Decimal) -> bool:
        """Subtract amount only if the balance covers it (not committed).

        The balance check and the debit are one statement, so two concurrent
        transfers cannot both spend the same funds.
        """
        result = await self.db.execute(
            update(Card)
            .where(Card.id == card_id, Card.user_id == user_id, Card.balance >= amount)
            .values(balance=Card.balance - amount)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1
