"""Per-category spending limits."""
from decimal import Decimal
from uuid import UUID

from sqlalchemy import ForeignKey, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import BaseModel


class BudgetGoal(BaseModel):
    """Spending limit for one category. At most one row per (user, category)."""

    __tablename__ = "budget_goals"
    __table_args__ = (UniqueConstraint("user_id", "category", name="uq_budget_user_category"),)

    user_id: Mapped[UUID] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    category: Mapped[str] = mapped_column(String(50), nullable=False)
    amount_limit: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    period: Mapped[str] = mapped_column(String(20), nullable=False, default="monthly")

    def __repr__(self) -> str:
        return f"<BudgetGoal(user_id={self.user_id}, category={self.category}, limit={self.amount_limit})>"
