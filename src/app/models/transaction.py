"""Transaction model: one signed entry in a user's ledger."""
from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import Date, ForeignKey, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import BaseModel


class Transaction(BaseModel):
    """Ledger entry. Negative amounts are expenses, positive are income."""

    __tablename__ = "transactions"

    user_id: Mapped[UUID] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    card_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("cards.id", ondelete="CASCADE"), nullable=True, index=True
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    txn_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    category: Mapped[str] = mapped_column(String(30), nullable=False, default="other")
    icon: Mapped[str] = mapped_column(String(50), nullable=False, default="circle")

    __table_args__ = (
        Index("ix_transactions_user_id_txn_date", "user_id", "txn_date"),
    )

    # Relationships
    card: Mapped["Card"] = relationship("Card", back_populates="transactions")

    def __repr__(self) -> str:
        return f"<Transaction(id={self.id}, title={self.title}, amount={self.amount})>"
