"""Payment model: outgoing payments and transfers."""
from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import Date, ForeignKey, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import BaseModel


class Payment(BaseModel):
    __tablename__ = "payments"

    user_id: Mapped[UUID] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    card_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("cards.id", ondelete="CASCADE"), nullable=True, index=True
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    recipient: Mapped[str] = mapped_column(String(200), nullable=False)
    payment_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    reference: Mapped[str] = mapped_column(String(32), nullable=False, index=True)

    card: Mapped["Card"] = relationship("Card", back_populates="payments")

    def __repr__(self) -> str:
        return f"<Payment(id={self.id}, reference={self.reference}, amount={self.amount})>"
