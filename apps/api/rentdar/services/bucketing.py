"""Month arithmetic and day bucketing for ranged records."""
from __future__ import annotations

import calendar
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Protocol, TypeVar


class Ranged(Protocol):
    start_date: date | None
    end_date: date | None


RangedT = TypeVar("RangedT", bound=Ranged)


@dataclass(frozen=True, slots=True, order=True)
class Month:
    """A calendar month, e.g. ``Month(2026, 2)``."""

    year: int
    month: int

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise ValueError(f"month must be in 1..12, got {self.month}")

    @classmethod
    def containing(cls, day: date) -> "Month":
        return cls(day.year, day.month)

    @property
    def days(self) -> int:
        return calendar.monthrange(self.year, self.month)[1]

    @property
    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def last_day(self) -> date:
        return date(self.year, self.month, self.days)

    @property
    def title(self) -> str:
        return f"{calendar.month_name[self.month]} {self.year}"

    def shift(self, delta: int) -> "Month":
        index = self.year * 12 + (self.month - 1) + delta
        return Month(index // 12, index % 12 + 1)

    def contains(self, day: date) -> bool:
        return day.year == self.year and day.month == self.month

    def first_weekday_offset(self, first_weekday: int = 1) -> int:
        """Number of blank grid cells before day 1.

        ``first_weekday`` uses 1 = Sunday ... 7 = Saturday.
        """

        # date.isoweekday(): Monday = 1 ... Sunday = 7; shift to Sunday = 1.
        weekday = self.first_day.isoweekday() % 7 + 1
        return (weekday - first_weekday + 7) % 7


def bucket_by_day(month: Month, records: Iterable[RangedT]) -> dict[int, list[RangedT]]:
    """Map each day of ``month`` to the records whose inclusive range covers it.

    Ranges are clipped to the month; a missing end date means a single day and
    records without a start date are skipped. Within a day, records keep their
    input order. Days without records are absent from the result.
    """

    month_start = month.first_day
    month_end = month.last_day
    buckets: dict[int, list[RangedT]] = {}

    for record in records:
        start = record.start_date
        if start is None:
            continue
        end = record.end_date or start

        range_start = max(start, month_start)
        range_end = min(end, month_end)
        if range_start > range_end:
            continue

        current = range_start
        while current <= range_end:
            buckets.setdefault(current.day, []).append(record)
            current += timedelta(days=1)

    return buckets
