"""Property model."""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
import enum
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Enum, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, new_id, utcnow

if TYPE_CHECKING:
    from .blocked_date import BlockedDate
    from .transaction import Transaction


class PropertyType(str, enum.Enum):
    SHORT_TERM = "short-term"
    LONG_TERM = "long-term"

    @property
    def rate_period(self) -> str:
        return "/night" if self is PropertyType.SHORT_TERM else "/month"


class BookingSource(str, enum.Enum):
    AIRBNB = "Airbnb"
    DIRECT = "Direct"
    VRBO = "VRBO"


class Property(Base):
    """A rental the owner manages, short-term or leased."""

    __tablename__ = "properties"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=new_id)
    name: Mapped[str | None] = mapped_column(String)
    address: Mapped[str | None] = mapped_column(String)
    city: Mapped[str | None] = mapped_column(String)
    state: Mapped[str | None] = mapped_column(String)
    property_type: Mapped[PropertyType] = mapped_column(
        Enum(PropertyType, name="property_type"), default=PropertyType.SHORT_TERM, nullable=False
    )
    booking_source: Mapped[BookingSource] = mapped_column(
        Enum(BookingSource, name="booking_source"), default=BookingSource.AIRBNB, nullable=False
    )
    # Nightly for short-term rentals, monthly for long-term ones.
    nightly_rate: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"), nullable=False)
    bedrooms: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    bathrooms: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    max_guests: Mapped[int] = mapped_column(Integer, default=2, nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    illustration_index: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    cover_image_name: Mapped[str | None] = mapped_column(String)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    transactions: Mapped[list["Transaction"]] = relationship(
        "Transaction",
        back_populates="property",
        cascade="all, delete-orphan",
        order_by="Transaction.start_date",
    )
    blocked_dates: Mapped[list["BlockedDate"]] = relationship(
        "BlockedDate",
        back_populates="property",
        cascade="all, delete-orphan",
        order_by="BlockedDate.start_date",
    )

    @property
    def display_name(self) -> str:
        return self.name or "Untitled"

    @property
    def display_address(self) -> str:
        return ", ".join(part for part in (self.address, self.city, self.state) if part)

    @property
    def short_address(self) -> str:
        return ", ".join(part for part in (self.city, self.state) if part)

    @property
    def income_transactions(self) -> list["Transaction"]:
        return [tx for tx in self.transactions if tx.is_income]
