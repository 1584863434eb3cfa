"""Schemas for calendar snapshots."""
from __future__ import annotations

from datetime import date

from pydantic import BaseModel, Field

from ..models.blocked_date import BlockReason
from ..models.transaction import Platform


class PropertyOption(BaseModel):
    id: str
    name: str


class BookingCard(BaseModel):
    id: str
    property_id: str
    property_name: str
    guest_name: str | None = None
    platform: Platform
    start_date: date | None = None
    end_date: date | None = None
    nights: int = 0
    amount: float = 0.0


class BlockedWindow(BaseModel):
    id: str
    property_id: str
    start_date: date
    end_date: date
    reason: BlockReason | None = None
    notes: str | None = None


class CalendarDay(BaseModel):
    day: int
    platforms: list[Platform] = Field(default_factory=list)
    booking_count: int = 0
    is_blocked: bool = False
    blocked: BlockedWindow | None = None


class CalendarResponse(BaseModel):
    title: str
    year: int
    month: int
    days_in_month: int
    first_weekday_offset: int
    today_day: int | None = None
    selected_property_id: str | None = None
    properties: list[PropertyOption] = Field(default_factory=list)
    days: list[CalendarDay] = Field(default_factory=list)
    selected_day: int | None = None
    selected_day_bookings: list[BookingCard] = Field(default_factory=list)
    upcoming_bookings: list[BookingCard] = Field(default_factory=list)
