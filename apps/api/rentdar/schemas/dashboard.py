"""Schemas for dashboard snapshots and booking conflicts."""
from __future__ import annotations

from datetime import date

from pydantic import BaseModel, Field

from ..models.property import PropertyType
from ..services.dashboard import (
    LongTermStatusFilter,
    PropertyStatus,
    RentalTypeFilter,
    ShortTermStatusFilter,
)
from .calendar import BookingCard


class PropertyCard(BaseModel):
    id: str
    name: str
    address: str
    short_address: str
    property_type: PropertyType
    rate: float
    rate_period: str
    status: PropertyStatus
    current_platform: str | None = None


class FilterCountsModel(BaseModel):
    short_term: int
    long_term: int
    short_term_booked: int
    short_term_available: int
    long_term_occupied: int
    long_term_vacant: int
    booked_tonight: int


class DashboardStats(BaseModel):
    total_revenue: float
    formatted_revenue: str
    revenue_trend: int
    total_bookings: int
    total_nights: int
    occupancy_rate: int


class DashboardResponse(BaseModel):
    greeting: str
    user_name: str
    rental_type: RentalTypeFilter
    short_term_status: ShortTermStatusFilter
    long_term_status: LongTermStatusFilter
    counts: FilterCountsModel
    stats: DashboardStats
    properties: list[PropertyCard] = Field(default_factory=list)
    has_conflicts: bool = False


class ConflictCard(BaseModel):
    key: str
    property_id: str
    property_name: str
    first: BookingCard
    second: BookingCard
    overlap_start: date
    overlap_end: date
    overlap_nights: int


class ResolveConflictRequest(BaseModel):
    key: str = Field(min_length=1)


class ResolveConflictResponse(BaseModel):
    status: str
