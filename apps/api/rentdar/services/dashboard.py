"""Dashboard filters, per-property status and portfolio statistics."""
from __future__ import annotations

import enum
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from dateutil.relativedelta import relativedelta

from ..core.config import Settings
from ..core.context import AppContext
from ..db.store import StoreError
from ..models.property import Property, PropertyType
from ..models.transaction import Transaction
from .conflicts import RESOLVED_PREFIX, BookingConflict, find_conflicts

logger = logging.getLogger(__name__)


class RentalTypeFilter(str, enum.Enum):
    ALL = "All"
    SHORT_TERM = "Short-term"
    LONG_TERM = "Long-term"

    @property
    def property_type(self) -> PropertyType | None:
        if self is RentalTypeFilter.SHORT_TERM:
            return PropertyType.SHORT_TERM
        if self is RentalTypeFilter.LONG_TERM:
            return PropertyType.LONG_TERM
        return None


class ShortTermStatusFilter(str, enum.Enum):
    ALL = "All"
    BOOKED = "Booked"
    AVAILABLE = "Available"


class LongTermStatusFilter(str, enum.Enum):
    ALL = "All"
    OCCUPIED = "Occupied"
    VACANT = "Vacant"


class PropertyStatus(str, enum.Enum):
    BOOKED_TONIGHT = "Booked tonight"
    OCCUPIED = "Occupied"
    AVAILABLE = "Available"


@dataclass(frozen=True, slots=True)
class FallbackStats:
    """Stand-in figures shown until real revenue and occupancy analytics exist."""

    revenue_projection_nights: int = 20
    bookings: int = 4
    nights: int = 8
    occupancy_rate: int = 86
    revenue_trend: int = 12

    @classmethod
    def from_settings(cls, settings: Settings) -> "FallbackStats":
        return cls(
            revenue_projection_nights=settings.revenue_projection_nights,
            bookings=settings.fallback_bookings,
            nights=settings.fallback_nights,
            occupancy_rate=settings.placeholder_occupancy_rate,
            revenue_trend=settings.placeholder_revenue_trend,
        )


@dataclass(frozen=True, slots=True)
class FilterCounts:
    short_term: int
    long_term: int
    short_term_booked: int
    short_term_available: int
    long_term_occupied: int
    long_term_vacant: int
    booked_tonight: int


class DashboardEngine:
    """Two-level property filter plus status predicates and summary stats.

    The secondary filter that applies depends on the primary rental type;
    changing the primary resets both secondaries.
    """

    def __init__(self, context: AppContext | None = None, *, fallbacks: FallbackStats | None = None) -> None:
        self.context = context or AppContext()
        self.fallbacks = fallbacks or FallbackStats.from_settings(self.context.settings)
        self.rental_type_filter = RentalTypeFilter.ALL
        self.short_term_status_filter = ShortTermStatusFilter.ALL
        self.long_term_status_filter = LongTermStatusFilter.ALL

    # Filter selection

    def select_rental_type(self, rental_type: RentalTypeFilter) -> None:
        self.rental_type_filter = rental_type
        self.short_term_status_filter = ShortTermStatusFilter.ALL
        self.long_term_status_filter = LongTermStatusFilter.ALL

    def select_short_term_status(self, status: ShortTermStatusFilter) -> None:
        self.short_term_status_filter = status

    def select_long_term_status(self, status: LongTermStatusFilter) -> None:
        self.long_term_status_filter = status

    def filtered_properties(self, properties: Sequence[Property]) -> list[Property]:
        wanted_type = self.rental_type_filter.property_type
        result = list(properties)
        if wanted_type is not None:
            result = [prop for prop in result if prop.property_type == wanted_type]

        if self.rental_type_filter is RentalTypeFilter.SHORT_TERM:
            if self.short_term_status_filter is ShortTermStatusFilter.BOOKED:
                result = [prop for prop in result if self.is_booked_tonight(prop)]
            elif self.short_term_status_filter is ShortTermStatusFilter.AVAILABLE:
                result = [prop for prop in result if not self.is_booked_tonight(prop)]
        elif self.rental_type_filter is RentalTypeFilter.LONG_TERM:
            if self.long_term_status_filter is LongTermStatusFilter.OCCUPIED:
                result = [prop for prop in result if self.has_active_tenant(prop)]
            elif self.long_term_status_filter is LongTermStatusFilter.VACANT:
                result = [prop for prop in result if not self.has_active_tenant(prop)]

        return result

    # Counts, always over the unfiltered list

    def _count(self, properties: Sequence[Property], predicate: Callable[[Property], bool]) -> int:
        return sum(1 for prop in properties if predicate(prop))

    def short_term_count(self, properties: Sequence[Property]) -> int:
        return self._count(properties, lambda p: p.property_type == PropertyType.SHORT_TERM)

    def long_term_count(self, properties: Sequence[Property]) -> int:
        return self._count(properties, lambda p: p.property_type == PropertyType.LONG_TERM)

    def short_term_booked_count(self, properties: Sequence[Property]) -> int:
        return self._count(
            properties, lambda p: p.property_type == PropertyType.SHORT_TERM and self.is_booked_tonight(p)
        )

    def short_term_available_count(self, properties: Sequence[Property]) -> int:
        return self._count(
            properties, lambda p: p.property_type == PropertyType.SHORT_TERM and not self.is_booked_tonight(p)
        )

    def long_term_occupied_count(self, properties: Sequence[Property]) -> int:
        return self._count(
            properties, lambda p: p.property_type == PropertyType.LONG_TERM and self.has_active_tenant(p)
        )

    def long_term_vacant_count(self, properties: Sequence[Property]) -> int:
        return self._count(
            properties, lambda p: p.property_type == PropertyType.LONG_TERM and not self.has_active_tenant(p)
        )

    def booked_tonight_count(self, properties: Sequence[Property]) -> int:
        return self._count(properties, self.is_booked_tonight)

    def filter_counts(self, properties: Sequence[Property]) -> FilterCounts:
        return FilterCounts(
            short_term=self.short_term_count(properties),
            long_term=self.long_term_count(properties),
            short_term_booked=self.short_term_booked_count(properties),
            short_term_available=self.short_term_available_count(properties),
            long_term_occupied=self.long_term_occupied_count(properties),
            long_term_vacant=self.long_term_vacant_count(properties),
            booked_tonight=self.booked_tonight_count(properties),
        )

    # Stats

    def total_revenue(self, properties: Sequence[Property]) -> Decimal:
        """Sum booked income per property, projecting from the rate when a property has none."""

        total = Decimal("0")
        for prop in properties:
            income = prop.income_transactions
            if income:
                total += sum((tx.magnitude for tx in income), Decimal("0"))
            else:
                rate = Decimal(prop.nightly_rate or 0)
                total += rate * self.fallbacks.revenue_projection_nights
        return total

    def formatted_revenue(self, properties: Sequence[Property]) -> str:
        return self.context.format_money(self.total_revenue(properties))

    def revenue_trend(self, properties: Sequence[Property]) -> int:
        # TODO: compare against the previous month's income once monthly rollups exist.
        return self.fallbacks.revenue_trend

    def total_bookings(self, properties: Sequence[Property]) -> int:
        count = 0
        for prop in properties:
            income = prop.income_transactions
            count += len(income) if income else self.fallbacks.bookings
        return count

    def total_nights(self, properties: Sequence[Property]) -> int:
        nights = 0
        for prop in properties:
            booked = sum(tx.nights for tx in prop.income_transactions)
            nights += booked if booked > 0 else self.fallbacks.nights
        return nights

    def occupancy_rate(self, properties: Sequence[Property]) -> int:
        if not properties:
            return 0
        return self.fallbacks.occupancy_rate

    # Status

    def _booked_tonight_transaction(self, prop: Property) -> Transaction | None:
        today = self.context.today()
        for tx in prop.income_transactions:
            if tx.covers(today):
                return tx
        return None

    def is_booked_tonight(self, prop: Property) -> bool:
        return self._booked_tonight_transaction(prop) is not None

    def has_active_tenant(self, prop: Property) -> bool:
        """True if a lease covers today; an open-ended lease runs one month from its start."""

        today = self.context.today()
        for tx in prop.income_transactions:
            if tx.start_date is None:
                continue
            if tx.covers(today, open_end=tx.start_date + relativedelta(months=1)):
                return True
        return False

    def current_booking_platform(self, prop: Property) -> str | None:
        """Upper-cased platform of tonight's booking.

        Only the parsed enum is stored, so a label that parsed to ``Platform.OTHER``
        comes back as "OTHER" rather than its original text.
        """

        tx = self._booked_tonight_transaction(prop)
        if tx is None or tx.platform is None:
            return None
        return tx.platform.value.upper()

    def property_status(self, prop: Property) -> PropertyStatus:
        if prop.property_type == PropertyType.LONG_TERM:
            return PropertyStatus.OCCUPIED if self.has_active_tenant(prop) else PropertyStatus.AVAILABLE
        return PropertyStatus.BOOKED_TONIGHT if self.is_booked_tonight(prop) else PropertyStatus.AVAILABLE

    def greeting(self, now: datetime | None = None) -> str:
        hour = (now or self.context.now()).hour
        if 5 <= hour < 12:
            return "Good morning"
        if 12 <= hour < 17:
            return "Good afternoon"
        if 17 <= hour < 21:
            return "Good evening"
        return "Good night"

    @property
    def user_name(self) -> str:
        return self.context.settings.user_name or "User"

    # Conflicts

    def _resolved_conflicts(self) -> set[str]:
        flags = self.context.flags
        if flags is None:
            return set()
        try:
            return flags.keys_with_prefix(RESOLVED_PREFIX)
        except StoreError as exc:
            logger.warning("Failed to load resolved conflicts; showing all: %s", exc)
            return set()

    def find_conflicts(self, properties: Sequence[Property]) -> list[BookingConflict]:
        return find_conflicts(properties, resolved=self._resolved_conflicts())

    def has_conflicts(self, properties: Sequence[Property]) -> bool:
        return bool(self.find_conflicts(properties))

    def mark_conflict_resolved(self, conflict: BookingConflict) -> None:
        """Persist that the owner resolved ``conflict``; raises StoreError if the write fails."""

        if self.context.flags is None:
            raise RuntimeError("No flag store configured for conflict resolution")
        self.context.flags.set(conflict.key, True)
