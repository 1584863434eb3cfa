"""Transaction model covering bookings (income) and expenses."""
from __future__ import annotations

from datetime import date, datetime, timedelta
from decimal import Decimal
import enum
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Date, DateTime, Enum, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, new_id, utcnow

if TYPE_CHECKING:
    from .property import Property


class Platform(str, enum.Enum):
    """Channel an income booking came through."""

    AIRBNB = "Airbnb"
    BOOKING = "Booking"
    VRBO = "VRBO"
    DIRECT = "Direct"
    OTHER = "Other"

    @classmethod
    def from_label(cls, label: str | None) -> "Platform":
        """Parse a free-text label; blank means a direct booking, unknown means other."""

        if label is None or not label.strip():
            return cls.DIRECT
        cleaned = label.strip().lower()
        if cleaned in {"booking.com", "bookingcom"}:
            return cls.BOOKING
        for member in cls:
            if member.value.lower() == cleaned:
                return member
        return cls.OTHER


class ExpenseCategory(str, enum.Enum):
    CLEANING = "cleaning"
    REPAIRS = "repairs"
    MARKETING = "marketing"
    SUPPLIES = "supplies"
    UTILITIES = "utilities"
    OTHER = "other"

    @classmethod
    def from_label(cls, label: str | None) -> "ExpenseCategory":
        if label:
            cleaned = label.strip().lower()
            for member in cls:
                if member.value == cleaned:
                    return member
        return cls.OTHER


class Transaction(Base):
    """Income booking or expense recorded against a property."""

    __tablename__ = "transactions"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=new_id)
    property_id: Mapped[str] = mapped_column(ForeignKey("properties.id", ondelete="CASCADE"), nullable=False)
    is_income: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    name: Mapped[str | None] = mapped_column(String)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"), nullable=False)
    start_date: Mapped[date | None] = mapped_column(Date, index=True)
    end_date: Mapped[date | None] = mapped_column(Date)
    platform: Mapped[Platform | None] = mapped_column(Enum(Platform, name="income_platform"))
    category: Mapped[ExpenseCategory | None] = mapped_column(Enum(ExpenseCategory, name="expense_category"))
    detail: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    @property
    def nights(self) -> int:
        if self.start_date is None or self.end_date is None:
            return 0
        return max(0, (self.end_date - self.start_date).days)

    @property
    def checkout(self) -> date | None:
        """Day after the last night; a booking without a later end date holds one night."""

        if self.start_date is None:
            return None
        if self.end_date is not None and self.end_date > self.start_date:
            return self.end_date
        return self.start_date + timedelta(days=1)

    @property
    def platform_label(self) -> Platform:
        return self.platform or Platform.DIRECT

    @property
    def magnitude(self) -> Decimal:
        """Unsigned amount; direction comes from ``is_income``."""

        return abs(Decimal(self.amount or 0))

    def covers(self, day: date, *, open_end: date | None = None) -> bool:
        """Return True if the inclusive booking range contains ``day``.

        ``open_end`` replaces a missing end date; without it the booking lasts
        only its start day.
        """

        if self.start_date is None:
            return False
        end = self.end_date or open_end or self.start_date
        return self.start_date <= day <= end

    # Declared last: the attribute name shadows the builtin used by the decorators above.
    property: Mapped["Property"] = relationship("Property", back_populates="transactions")
