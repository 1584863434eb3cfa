"""Owner-blocked date window."""
from __future__ import annotations

from datetime import date, datetime
import enum
from typing import TYPE_CHECKING

from sqlalchemy import Date, DateTime, Enum, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, new_id, utcnow

if TYPE_CHECKING:
    from .property import Property


class BlockReason(str, enum.Enum):
    PERSONAL = "Personal use"
    MAINTENANCE = "Maintenance"
    RENOVATION = "Renovation"
    OTHER = "Other"


class BlockedDate(Base):
    """Inclusive range of days a property is unavailable, independent of bookings."""

    __tablename__ = "blocked_dates"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=new_id)
    property_id: Mapped[str] = mapped_column(ForeignKey("properties.id", ondelete="CASCADE"), nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    reason: Mapped[BlockReason | None] = mapped_column(Enum(BlockReason, name="block_reason"))
    notes: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    # Keep last; the name shadows the builtin ``property`` for the rest of the class body.
    property: Mapped["Property"] = relationship("Property", back_populates="blocked_dates")
