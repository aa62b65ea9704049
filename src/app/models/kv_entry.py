"""Backing table for the database key-value store."""
from datetime import datetime

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base


class KeyValueEntry(Base):
    """One key in the shared state store (sessions, throttle, rate limits).

    ``value`` holds canonical JSON (sorted keys) so compare-and-set can match
    on the stored text.
    """

    __tablename__ = "kv_entries"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    expires_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True, index=True)

    def __repr__(self) -> str:
        return f"<KeyValueEntry(key={self.key}, expires_at={self.expires_at})>"
