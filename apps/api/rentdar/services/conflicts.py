"""Double-booking detection across a property's income bookings."""
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date

from ..models.property import Property
from ..models.transaction import Transaction

RESOLVED_PREFIX = "conflict_resolved:"


@dataclass(frozen=True, slots=True)
class BookingConflict:
    """Two income bookings of one property that share at least one night.

    ``overlap_end`` is the checkout of the shared stretch, so the shared nights
    run from ``overlap_start`` up to but not including it.
    """

    property: Property
    first: Transaction
    second: Transaction
    overlap_start: date
    overlap_end: date

    @property
    def overlap_nights(self) -> int:
        return (self.overlap_end - self.overlap_start).days

    @property
    def key(self) -> str:
        low, high = sorted((str(self.first.id), str(self.second.id)))
        return f"{RESOLVED_PREFIX}{low}:{high}"


def find_property_conflicts(prop: Property) -> list[BookingConflict]:
    """Return every pair of dated income bookings sharing a night, earliest first.

    A checkout on the same day as the next check-in is not a conflict.
    """

    bookings = sorted(
        (tx for tx in prop.income_transactions if tx.start_date is not None),
        key=lambda tx: (tx.start_date, tx.checkout),
    )
    conflicts: list[BookingConflict] = []
    for index, first in enumerate(bookings):
        for second in bookings[index + 1:]:
            if second.start_date >= first.checkout:
                # Sorted by start, so no later booking can overlap ``first`` either.
                break
            conflicts.append(
                BookingConflict(
                    property=prop,
                    first=first,
                    second=second,
                    overlap_start=second.start_date,
                    overlap_end=min(first.checkout, second.checkout),
                )
            )
    return conflicts


def find_conflicts(properties: Iterable[Property], *, resolved: set[str] | None = None) -> list[BookingConflict]:
    resolved = resolved or set()
    conflicts: list[BookingConflict] = []
    for prop in properties:
        conflicts.extend(c for c in find_property_conflicts(prop) if c.key not in resolved)
    return conflicts
