"""Budget goal repository with per-category upsert."""
from decimal import Decimal
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.budget_goal import BudgetGoal
from app.repositories.base import BaseRepository


class BudgetGoalRepository(BaseRepository[BudgetGoal]):
    def __init__(self, db: AsyncSession):
        super().__init__(db, BudgetGoal)

    async def get_by_user(self, user_id: UUID) -> list[BudgetGoal]:
        result = await self.db.execute(
            select(BudgetGoal).where(BudgetGoal.user_id == user_id).order_by(BudgetGoal.category)
        )
        return list(result.scalars().all())

    async def get_by_category(self, user_id: UUID, category: str) -> BudgetGoal | None:
        result = await self.db.execute(
            select(BudgetGoal).where(BudgetGoal.user_id == user_id, BudgetGoal.category == category)
        )
        return result.scalar_one_or_none()

    async def upsert(self, user_id: UUID, category: str, amount_limit: Decimal, period: str) -> BudgetGoal:
        """Create the goal, or overwrite the limit of the existing one.

        The period of an existing goal is left unchanged.
        """
        goal = await self.get_by_category(user_id, category)
        if goal is not None:
            goal.amount_limit = amount_limit
            await self.db.commit()
            await self.db.refresh(goal)
            return goal

        try:
            return await self.create(
                BudgetGoal(user_id=user_id, category=category, amount_limit=amount_limit, period=period)
            )
        except IntegrityError:
            # Lost an insert race on (user_id, category); update the winner.
            await self.db.rollback()
            goal = await self.get_by_category(user_id, category)
            goal.amount_limit = amount_limit
            await self.db.commit()
            await self.db.refresh(goal)
            return goal
