"""Build calendar and dashboard snapshots for the HTTP layer."""
from __future__ import annotations

import logging

from fastapi import HTTPException, status

from ..core.context import AppContext
from ..db.store import RecordStore, StoreError
from ..models.blocked_date import BlockedDate
from ..models.property import Property
from ..models.transaction import Transaction
from ..repositories import blocked_dates as blocked_dates_repo
from ..repositories import properties as properties_repo
from ..schemas import calendar as calendar_schemas
from ..schemas import dashboard as dashboard_schemas
from .bucketing import Month
from .calendar import CalendarAggregator, property_name_for
from .conflicts import BookingConflict
from .dashboard import DashboardEngine, LongTermStatusFilter, RentalTypeFilter, ShortTermStatusFilter

logger = logging.getLogger(__name__)


def calendar_snapshot(
    store: RecordStore,
    context: AppContext,
    *,
    month: Month | None = None,
    property_id: str | None = None,
    day: int | None = None,
) -> calendar_schemas.CalendarResponse:
    """Return the month grid, the selected day's bookings and upcoming bookings."""

    selected = _find_property(store, property_id) if property_id else None
    aggregator = CalendarAggregator(store, context, month=month, selected_property=selected)
    if day is not None:
        if not 1 <= day <= aggregator.days_in_month:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Day outside month")
        aggregator.toggle_day(day)

    days = []
    for number in range(1, aggregator.days_in_month + 1):
        blocked = aggregator.blocked_record_for(number)
        days.append(
            calendar_schemas.CalendarDay(
                day=number,
                platforms=aggregator.platform_labels_for_day(number),
                booking_count=len(aggregator.day_bookings.get(number, [])),
                is_blocked=aggregator.is_blocked(number),
                blocked=_blocked_window(blocked) if blocked is not None else None,
            )
        )

    return calendar_schemas.CalendarResponse(
        title=aggregator.month_title,
        year=aggregator.month.year,
        month=aggregator.month.month,
        days_in_month=aggregator.days_in_month,
        first_weekday_offset=aggregator.first_weekday_offset,
        today_day=aggregator.today_day,
        selected_property_id=selected.id if selected is not None else None,
        properties=[
            calendar_schemas.PropertyOption(id=prop.id, name=prop.display_name)
            for prop in aggregator.properties
        ],
        days=days,
        selected_day=aggregator.selected_day,
        selected_day_bookings=[_booking_card(tx) for tx in aggregator.bookings_for_selected_day()],
        upcoming_bookings=[_booking_card(tx) for tx in aggregator.upcoming_bookings()],
    )


def delete_blocked_date(store: RecordStore, blocked_id: str) -> None:
    """Delete a blocked window, mapping store rejection to 503."""

    try:
        blocked = blocked_dates_repo.get_blocked_date(store, blocked_id)
    except StoreError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Store unavailable") from exc
    if blocked is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Blocked date not found")

    try:
        blocked_dates_repo.delete_blocked_date(store, blocked)
    except StoreError as exc:
        logger.exception("Failed to delete blocked date %s", blocked_id)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Blocked date could not be deleted"
        ) from exc


def dashboard_snapshot(
    store: RecordStore,
    context: AppContext,
    *,
    rental_type: RentalTypeFilter = RentalTypeFilter.ALL,
    short_term_status: ShortTermStatusFilter = ShortTermStatusFilter.ALL,
    long_term_status: LongTermStatusFilter = LongTermStatusFilter.ALL,
) -> dashboard_schemas.DashboardResponse:
    """Return filtered property cards with badge counts and portfolio stats."""

    engine = DashboardEngine(context)
    engine.select_rental_type(rental_type)
    engine.select_short_term_status(short_term_status)
    engine.select_long_term_status(long_term_status)

    properties = _load_properties(store)
    counts = engine.filter_counts(properties)

    return dashboard_schemas.DashboardResponse(
        greeting=engine.greeting(),
        user_name=engine.user_name,
        rental_type=engine.rental_type_filter,
        short_term_status=engine.short_term_status_filter,
        long_term_status=engine.long_term_status_filter,
        counts=dashboard_schemas.FilterCountsModel(
            short_term=counts.short_term,
            long_term=counts.long_term,
            short_term_booked=counts.short_term_booked,
            short_term_available=counts.short_term_available,
            long_term_occupied=counts.long_term_occupied,
            long_term_vacant=counts.long_term_vacant,
            booked_tonight=counts.booked_tonight,
        ),
        stats=dashboard_schemas.DashboardStats(
            total_revenue=float(engine.total_revenue(properties)),
            formatted_revenue=engine.formatted_revenue(properties),
            revenue_trend=engine.revenue_trend(properties),
            total_bookings=engine.total_bookings(properties),
            total_nights=engine.total_nights(properties),
            occupancy_rate=engine.occupancy_rate(properties),
        ),
        properties=[
            dashboard_schemas.PropertyCard(
                id=prop.id,
                name=prop.display_name,
                address=prop.display_address,
                short_address=prop.short_address,
                property_type=prop.property_type,
                rate=float(prop.nightly_rate or 0),
                rate_period=prop.property_type.rate_period,
                status=engine.property_status(prop),
                current_platform=engine.current_booking_platform(prop),
            )
            for prop in engine.filtered_properties(properties)
        ],
        has_conflicts=engine.has_conflicts(properties),
    )


def list_conflicts(store: RecordStore, context: AppContext) -> list[dashboard_schemas.ConflictCard]:
    engine = DashboardEngine(context)
    return [_conflict_card(conflict) for conflict in engine.find_conflicts(_load_properties(store))]


def resolve_conflict(
    store: RecordStore,
    context: AppContext,
    payload: dashboard_schemas.ResolveConflictRequest,
) -> dashboard_schemas.ResolveConflictResponse:
    engine = DashboardEngine(context)
    try:
        properties = properties_repo.list_properties(store)
    except StoreError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Store unavailable") from exc
    match = next((c for c in engine.find_conflicts(properties) if c.key == payload.key), None)
    if match is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Conflict not found")

    try:
        engine.mark_conflict_resolved(match)
    except StoreError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Conflict could not be saved"
        ) from exc

    return dashboard_schemas.ResolveConflictResponse(status="resolved")


def _load_properties(store: RecordStore) -> list[Property]:
    try:
        return properties_repo.list_properties(store)
    except StoreError as exc:
        logger.warning("Failed to load properties for dashboard; showing none: %s", exc)
        return []


def _find_property(store: RecordStore, property_id: str) -> Property | None:
    """Look up the calendar filter; an unreadable store drops the filter instead of failing."""

    try:
        prop = properties_repo.get_property(store, property_id)
    except StoreError as exc:
        logger.warning("Failed to load property %s for calendar; showing all: %s", property_id, exc)
        return None
    if prop is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Property not found")
    return prop


def _booking_card(tx: Transaction) -> calendar_schemas.BookingCard:
    return calendar_schemas.BookingCard(
        id=tx.id,
        property_id=tx.property_id,
        property_name=property_name_for(tx),
        guest_name=tx.name,
        platform=tx.platform_label,
        start_date=tx.start_date,
        end_date=tx.end_date,
        nights=tx.nights,
        amount=float(tx.magnitude),
    )


def _blocked_window(blocked: BlockedDate) -> calendar_schemas.BlockedWindow:
    return calendar_schemas.BlockedWindow(
        id=blocked.id,
        property_id=blocked.property_id,
        start_date=blocked.start_date,
        end_date=blocked.end_date,
        reason=blocked.reason,
        notes=blocked.notes,
    )


def _conflict_card(conflict: BookingConflict) -> dashboard_schemas.ConflictCard:
    return dashboard_schemas.ConflictCard(
        key=conflict.key,
        property_id=conflict.property.id,
        property_name=conflict.property.display_name,
        first=_booking_card(conflict.first),
        second=_booking_card(conflict.second),
        overlap_start=conflict.overlap_start,
        overlap_end=conflict.overlap_end,
        overlap_nights=conflict.overlap_nights,
    )
