"""Recurring charge model (subscriptions, salary, rent)."""
from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import Boolean, Date, ForeignKey, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import BaseModel


class RecurringCharge(BaseModel):
    __tablename__ = "recurring_charges"

    user_id: Mapped[UUID] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    category: Mapped[str] = mapped_column(String(30), nullable=False, default="other")
    frequency: Mapped[str] = mapped_column(String(20), nullable=False, default="monthly")
    next_due_date: Mapped[date] = mapped_column(Date, nullable=False)
    icon: Mapped[str] = mapped_column(String(50), nullable=False, default="circle")
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    def __repr__(self) -> str:
        return f"<RecurringCharge(id={self.id}, title={self.title}, frequency={self.frequency})>"
