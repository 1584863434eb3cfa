"""Tests for calendar month navigation, filtering and day maps."""
from __future__ import annotations

from datetime import date, timedelta
from unittest.mock import MagicMock

import pytest

from factories import TODAY, make_blocked, make_booking, make_property
from rentdar.db.store import StoreError
from rentdar.models.blocked_date import BlockReason
from rentdar.models.transaction import Platform, Transaction
from rentdar.services.bucketing import Month
from rentdar.services.calendar import CalendarAggregator, property_name_for


@pytest.fixture
def portfolio(session):
    studio = make_property("Beach Studio", created_offset=1)
    cabin = make_property("Mountain Cabin", created_offset=2)

    studio.transactions.extend(
        [
            make_booking(date(2026, 1, 30), date(2026, 2, 2), name="Sarah", platform=Platform.AIRBNB),
            make_booking(date(2026, 2, 14), date(2026, 2, 16), name="James", platform=Platform.BOOKING),
            make_booking(date(2026, 2, 16), None, name="Walk-in", platform=None),
            Transaction(is_income=False, name="Cleaning", amount=45, start_date=date(2026, 2, 15)),
        ]
    )
    cabin.transactions.append(
        make_booking(date(2026, 2, 15), date(2026, 2, 18), name="Lena", platform=Platform.VRBO)
    )
    studio.blocked_dates.append(
        make_blocked(date(2026, 2, 1), date(2026, 2, 28), reason=BlockReason.RENOVATION)
    )
    cabin.blocked_dates.append(
        make_blocked(date(2026, 2, 20), date(2026, 2, 21), reason=BlockReason.PERSONAL)
    )

    session.add_all([studio, cabin])
    session.commit()
    return {"studio": studio, "cabin": cabin}


def build(store, context, **kwargs) -> CalendarAggregator:
    kwargs.setdefault("month", Month(2026, 2))
    return CalendarAggregator(store, context, **kwargs)


def test_initial_load_buckets_income_only(store, context, portfolio):
    calendar = build(store, context)

    assert [p.name for p in calendar.properties] == ["Mountain Cabin", "Beach Studio"]
    assert all(tx.is_income for tx in calendar.bookings)
    assert [b.name for b in calendar.day_bookings[1]] == ["Sarah"]
    assert 31 not in calendar.day_bookings
    assert [b.name for b in calendar.day_bookings[15]] == ["James", "Lena"]
    assert [b.name for b in calendar.day_bookings[16]] == ["James", "Lena", "Walk-in"]


def test_defaults_to_current_month(store, context, portfolio):
    calendar = CalendarAggregator(store, context)

    assert calendar.month == Month.containing(TODAY)
    assert calendar.today_day == TODAY.day
    assert calendar.month_title == "February 2026"
    assert calendar.days_in_month == 28
    assert calendar.first_weekday_offset == 0


def test_full_month_block_is_independent_of_bookings(store, context, portfolio):
    calendar = build(store, context, selected_property=portfolio["studio"])

    assert all(calendar.is_blocked(day) for day in range(1, 29))
    assert calendar.blocked_record_for(5).reason is BlockReason.RENOVATION
    assert [b.name for b in calendar.day_bookings[14]] == ["James"]
    assert 5 not in calendar.day_bookings


def test_blocked_record_for_returns_first_in_start_order(store, context, portfolio):
    calendar = build(store, context)

    assert calendar.blocked_record_for(20).reason is BlockReason.RENOVATION
    assert len(calendar.day_blocked[20]) == 2
    assert calendar.blocked_record_for(30) is None


def test_property_filter_scopes_bookings_and_blocks(store, context, portfolio):
    calendar = build(store, context)

    calendar.set_property_filter(portfolio["cabin"])

    assert [b.name for b in calendar.bookings] == ["Lena"]
    assert not calendar.is_blocked(5)
    assert calendar.is_blocked(20)

    calendar.set_property_filter(None)
    assert len(calendar.bookings) == 4
    assert calendar.is_blocked(5)


def test_set_month_clears_selection_and_rebuckets(store, context, portfolio):
    calendar = build(store, context)
    calendar.toggle_day(15)

    calendar.set_month(-1)

    assert calendar.month == Month(2026, 1)
    assert calendar.selected_day is None
    assert [b.name for b in calendar.day_bookings[30]] == ["Sarah"]
    assert set(calendar.day_bookings) == {30, 31}
    assert calendar.day_blocked == {}
    assert calendar.today_day is None


def test_toggle_day_is_single_select(store, context, portfolio):
    calendar = build(store, context)

    calendar.toggle_day(3)
    assert calendar.selected_day == 3
    calendar.toggle_day(4)
    assert calendar.selected_day == 4
    calendar.toggle_day(4)
    assert calendar.selected_day is None


def test_selected_day_bookings_are_deduplicated_and_sorted(store, context, portfolio):
    calendar = build(store, context)
    assert calendar.bookings_for_selected_day() == []

    calendar.toggle_day(16)
    lena = calendar.day_bookings[16][1]
    calendar.day_bookings[16].append(lena)

    selected = calendar.bookings_for_selected_day()

    assert [b.name for b in selected] == ["James", "Lena", "Walk-in"]


def test_selected_day_sorts_undated_first():
    undated = make_booking(None, name="undated", id="b-1")
    dated = make_booking(date(2026, 2, 3), name="dated", id="b-2")
    calendar = CalendarAggregator.__new__(CalendarAggregator)
    calendar.selected_day = 3
    calendar.day_bookings = {3: [dated, undated]}

    assert [b.name for b in calendar.bookings_for_selected_day()] == ["undated", "dated"]


def test_platform_labels_are_distinct_in_first_seen_order(store, context, portfolio):
    calendar = build(store, context)

    assert calendar.platform_labels_for_day(15) == [Platform.BOOKING, Platform.VRBO]
    assert calendar.platform_labels_for_day(16) == [Platform.BOOKING, Platform.VRBO, Platform.DIRECT]
    assert calendar.platform_labels_for_day(27) == []


def test_upcoming_bookings_start_today_or_later(session, store, context):
    prop = make_property("Loft")
    prop.transactions.extend(
        [
            make_booking(TODAY + timedelta(days=1), name="tomorrow"),
            make_booking(TODAY - timedelta(days=1), TODAY + timedelta(days=2), name="yesterday"),
            make_booking(TODAY, name="today"),
        ]
    )
    session.add(prop)
    session.commit()

    calendar = CalendarAggregator(store, context)

    assert [b.name for b in calendar.upcoming_bookings()] == ["today", "tomorrow"]


def test_property_name_for_booking(store, context, portfolio):
    calendar = build(store, context)

    assert calendar.property_name_for(calendar.day_bookings[18][0]) == "Mountain Cabin"
    assert calendar.property_name_for(make_booking(TODAY)) == "Unknown"


def test_delete_blocked_date_rebuilds_map(store, context, portfolio):
    calendar = build(store, context)
    renovation = calendar.blocked_record_for(5)

    assert calendar.delete_blocked_date(renovation) is True

    assert not calendar.is_blocked(5)
    assert calendar.is_blocked(20)
    assert len(calendar.blocked_dates) == 1


def test_rejected_delete_leaves_state_unchanged(store, context, portfolio, monkeypatch):
    calendar = build(store, context)
    renovation = calendar.blocked_record_for(5)
    before = dict(calendar.day_blocked)

    def failing_save():
        raise StoreError("disk full")

    monkeypatch.setattr(store, "save", failing_save)

    assert calendar.delete_blocked_date(renovation) is False
    assert calendar.is_blocked(5)
    assert calendar.day_blocked == before
    assert renovation in calendar.blocked_dates


def test_fetch_failures_degrade_to_empty(context):
    store = MagicMock()
    store.fetch.side_effect = StoreError("database is locked")

    calendar = CalendarAggregator(store, context, month=Month(2026, 2))

    assert calendar.properties == []
    assert calendar.bookings == []
    assert calendar.blocked_dates == []
    assert calendar.day_bookings == {}
    assert not calendar.is_blocked(1)


def test_module_level_property_name_matches_aggregator():
    prop = make_property("Loft")
    booking = make_booking(TODAY)
    prop.transactions.append(booking)

    assert property_name_for(booking) == "Loft"
    assert property_name_for(make_booking(TODAY)) == "Unknown"
