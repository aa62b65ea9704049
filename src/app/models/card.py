"""Card model representing payment cards owned by users."""
from decimal import Decimal
from uuid import UUID

from sqlalchemy import Boolean, ForeignKey, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import BaseModel


class Card(BaseModel):
    """Card model with a locally tracked ledger balance."""

    __tablename__ = "cards"

    user_id: Mapped[UUID] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    holder_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_four: Mapped[str] = mapped_column(String(4), nullable=False)
    expiry: Mapped[str] = mapped_column(String(5), nullable=False, default="")
    balance: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False, default=Decimal("0"))
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="USD")
    brand: Mapped[str] = mapped_column(String(20), nullable=False, default="visa")
    is_default: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="cards")
    # Deleting a card removes its ledger entries.
    transactions: Mapped[list["Transaction"]] = relationship(
        "Transaction", back_populates="card", cascade="all, delete-orphan"
    )
    payments: Mapped[list["Payment"]] = relationship(
        "Payment", back_populates="card", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Card(id={self.id}, brand={self.brand}, last_four={self.last_four})>"
