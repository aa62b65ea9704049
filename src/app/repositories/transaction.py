"""Transaction repository."""
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.transaction import Transaction
from app.repositories.base import BaseRepository


class TransactionRepository(BaseRepository[Transaction]):
    def __init__(self, db: AsyncSession):
        super().__init__(db, Transaction)

    async def get_by_user(self, user_id: UUID) -> list[Transaction]:
        """Get all transactions for a user, newest first."""
        result = await self.db.execute(
            select(Transaction)
            .where(Transaction.user_id == user_id)
            .order_by(Transaction.txn_date.desc(), Transaction.created_at.desc())
        )
        return list(result.scalars().all())
