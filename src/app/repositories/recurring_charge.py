"""Recurring charge repository."""
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.recurring_charge import RecurringCharge
from app.repositories.base import BaseRepository


class RecurringChargeRepository(BaseRepository[RecurringCharge]):
    def __init__(self, db: AsyncSession):
        super().__init__(db, RecurringCharge)

    async def get_by_user(self, user_id: UUID) -> list[RecurringCharge]:
        result = await self.db.execute(
            select(RecurringCharge)
            .where(RecurringCharge.user_id == user_id)
            .order_by(RecurringCharge.next_due_date)
        )
        return list(result.scalars().all())
