"""Long-lived reauthentication tokens ("remember me")."""
from datetime import datetime
from uuid import UUID

from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import BaseModel


class RememberToken(BaseModel):
    """Stores only the SHA-256 digest of the token handed to the client."""

    __tablename__ = "remember_tokens"

    user_id: Mapped[UUID] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    token_hash: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    user: Mapped["User"] = relationship("User", back_populates="remember_tokens")

    def __repr__(self) -> str:
        return f"<RememberToken(id={self.id}, user_id={self.user_id}, expires_at={self.expires_at})>"
