"""Calendar state: month navigation, property filter and per-day occupancy maps."""
from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date
from typing import TypeVar

from ..core.context import AppContext
from ..db.store import RecordStore, StoreError
from ..models.blocked_date import BlockedDate
from ..models.property import Property
from ..models.transaction import Platform, Transaction
from ..repositories import blocked_dates as blocked_dates_repo
from ..repositories import properties as properties_repo
from ..repositories import transactions as transactions_repo
from .bucketing import Month, bucket_by_day

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _start_key(record: Transaction) -> date:
    return record.start_date or date.min


def _identity(record: object) -> object:
    record_id = getattr(record, "id", None)
    return record_id if record_id is not None else id(record)


def property_name_for(booking: Transaction) -> str:
    prop = booking.property
    return prop.display_name if prop is not None else "Unknown"


class CalendarAggregator:
    """Owns the displayed month and property filter and derives day maps from the store.

    Every mutation re-runs the bucketing for the affected lists, so the day maps
    always describe ``month`` for the current filter. Reads that fail degrade to
    empty lists; the only write, :meth:`delete_blocked_date`, reports failure and
    leaves state untouched.
    """

    def __init__(
        self,
        store: RecordStore,
        context: AppContext | None = None,
        *,
        month: Month | None = None,
        selected_property: Property | None = None,
    ) -> None:
        self.store = store
        self.context = context or AppContext()
        self.month = month or Month.containing(self.context.today())
        self.selected_property = selected_property
        self.properties: list[Property] = []
        self.bookings: list[Transaction] = []
        self.blocked_dates: list[BlockedDate] = []
        self.day_bookings: dict[int, list[Transaction]] = {}
        self.day_blocked: dict[int, list[BlockedDate]] = {}
        self.selected_day: int | None = None
        self.refresh()

    # Data

    def refresh(self) -> None:
        """Reload properties, bookings and blocked dates and rebuild both maps."""

        self.properties = self._safe_fetch(
            "properties", lambda: properties_repo.list_properties(self.store)
        )
        self._fetch_bookings()
        self._fetch_blocked_dates()
        self._rebuild_bookings()
        self._rebuild_blocked()

    def _safe_fetch(self, label: str, fetch: Callable[[], list[T]]) -> list[T]:
        try:
            return fetch()
        except StoreError as exc:
            logger.warning("Failed to load %s for calendar; showing none: %s", label, exc)
            return []

    @property
    def _property_id(self) -> str | None:
        return self.selected_property.id if self.selected_property is not None else None

    def _fetch_bookings(self) -> None:
        self.bookings = self._safe_fetch(
            "bookings",
            lambda: transactions_repo.list_bookings(self.store, property_id=self._property_id),
        )

    def _fetch_blocked_dates(self) -> None:
        self.blocked_dates = self._safe_fetch(
            "blocked dates",
            lambda: blocked_dates_repo.list_blocked_dates(self.store, property_id=self._property_id),
        )

    def _rebuild_bookings(self) -> None:
        self.day_bookings = bucket_by_day(self.month, self.bookings)

    def _rebuild_blocked(self) -> None:
        self.day_blocked = bucket_by_day(self.month, self.blocked_dates)

    # Navigation and filtering

    def set_month(self, delta: int) -> None:
        self.month = self.month.shift(delta)
        self.selected_day = None
        self._rebuild_bookings()
        self._rebuild_blocked()

    def set_property_filter(self, selected: Property | None) -> None:
        self.selected_property = selected
        self._fetch_bookings()
        self._fetch_blocked_dates()
        self._rebuild_bookings()
        self._rebuild_blocked()

    def toggle_day(self, day: int) -> None:
        self.selected_day = None if self.selected_day == day else day

    # Month presentation

    @property
    def days_in_month(self) -> int:
        return self.month.days

    @property
    def month_title(self) -> str:
        return self.month.title

    @property
    def first_weekday_offset(self) -> int:
        return self.month.first_weekday_offset(self.context.settings.first_weekday)

    @property
    def today_day(self) -> int | None:
        today = self.context.today()
        if not self.month.contains(today):
            return None
        return today.day

    # Day queries

    def is_blocked(self, day: int) -> bool:
        return bool(self.day_blocked.get(day))

    def blocked_record_for(self, day: int) -> BlockedDate | None:
        records = self.day_blocked.get(day)
        return records[0] if records else None

    def bookings_for_selected_day(self) -> list[Transaction]:
        if self.selected_day is None:
            return []
        unique: dict[object, Transaction] = {}
        for booking in self.day_bookings.get(self.selected_day, []):
            unique.setdefault(_identity(booking), booking)
        return sorted(unique.values(), key=_start_key)

    def platform_labels_for_day(self, day: int) -> list[Platform]:
        platforms: list[Platform] = []
        for booking in self.day_bookings.get(day, []):
            platform = booking.platform_label
            if platform not in platforms:
                platforms.append(platform)
        return platforms

    def upcoming_bookings(self) -> list[Transaction]:
        today = self.context.today()
        upcoming = [booking for booking in self.bookings if _start_key(booking) >= today]
        return sorted(upcoming, key=_start_key)

    def property_name_for(self, booking: Transaction) -> str:
        return property_name_for(booking)

    # Mutations

    def delete_blocked_date(self, blocked: BlockedDate) -> bool:
        """Delete a blocked window; return False and keep state if the store refuses."""

        try:
            blocked_dates_repo.delete_blocked_date(self.store, blocked)
        except StoreError:
            logger.exception("Failed to delete blocked date %s", getattr(blocked, "id", None))
            return False

        self._fetch_blocked_dates()
        self._rebuild_blocked()
        return True
