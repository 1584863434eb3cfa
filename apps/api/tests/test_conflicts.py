"""Tests for double-booking detection and resolution flags."""
from __future__ import annotations

from datetime import date
from unittest.mock import MagicMock

import pytest

from factories import make_booking, make_property
from rentdar.core.config import Settings
from rentdar.core.context import AppContext
from rentdar.db.store import StoreError
from rentdar.models.transaction import Platform
from rentdar.services.conflicts import find_conflicts, find_property_conflicts
from rentdar.services.dashboard import DashboardEngine


def beach_studio():
    prop = make_property("Beach Studio", id="prop-1")
    prop.transactions.extend(
        [
            make_booking(date(2026, 2, 20), date(2026, 2, 23), platform=Platform.AIRBNB, id="tx-a"),
            make_booking(date(2026, 2, 21), date(2026, 2, 25), platform=Platform.BOOKING, id="tx-b"),
            make_booking(date(2026, 3, 1), date(2026, 3, 3), id="tx-c"),
        ]
    )
    return prop


def test_overlap_window_and_nights():
    conflicts = find_property_conflicts(beach_studio())

    assert len(conflicts) == 1
    conflict = conflicts[0]
    assert (conflict.first.id, conflict.second.id) == ("tx-a", "tx-b")
    assert conflict.overlap_start == date(2026, 2, 21)
    assert conflict.overlap_end == date(2026, 2, 23)
    assert conflict.overlap_nights == 2
    assert conflict.key == "conflict_resolved:tx-a:tx-b"


def test_back_to_back_bookings_do_not_conflict():
    prop = make_property("Cabin", id="prop-2")
    prop.transactions.extend(
        [
            make_booking(date(2026, 2, 1), date(2026, 2, 4), id="tx-1"),
            make_booking(date(2026, 2, 4), date(2026, 2, 6), id="tx-2"),
            make_booking(date(2026, 2, 6), None, id="tx-3"),
            make_booking(None, None, id="tx-4"),
        ]
    )

    assert find_property_conflicts(prop) == []


def test_single_day_booking_holds_one_night():
    prop = make_property("Cabin", id="prop-2")
    prop.transactions.extend(
        [
            make_booking(date(2026, 2, 6), date(2026, 2, 8), id="tx-1"),
            make_booking(date(2026, 2, 7), None, id="tx-2"),
            make_booking(date(2026, 2, 8), date(2026, 2, 8), id="tx-3"),
        ]
    )

    conflicts = find_property_conflicts(prop)

    assert [(c.first.id, c.second.id) for c in conflicts] == [("tx-1", "tx-2")]
    assert (conflicts[0].overlap_start, conflicts[0].overlap_end) == (date(2026, 2, 7), date(2026, 2, 8))
    assert conflicts[0].overlap_nights == 1


def test_nested_booking_reports_inner_range():
    prop = make_property("Loft", id="prop-3")
    prop.transactions.extend(
        [
            make_booking(date(2026, 2, 1), date(2026, 2, 28), id="outer"),
            make_booking(date(2026, 2, 10), date(2026, 2, 12), id="inner"),
        ]
    )

    (conflict,) = find_property_conflicts(prop)

    assert (conflict.overlap_start, conflict.overlap_end) == (date(2026, 2, 10), date(2026, 2, 12))


def test_resolved_pairs_are_excluded():
    prop = beach_studio()

    assert find_conflicts([prop], resolved={"conflict_resolved:tx-a:tx-b"}) == []
    assert len(find_conflicts([prop])) == 1


def test_engine_persists_resolution(session, store, context):
    prop = beach_studio()
    session.add(prop)
    session.commit()
    engine = DashboardEngine(context)

    (conflict,) = engine.find_conflicts([prop])
    engine.mark_conflict_resolved(conflict)

    assert not engine.has_conflicts([prop])
    assert context.flags.get(conflict.key) is True


def test_flag_read_failure_shows_all_conflicts():
    flags = MagicMock()
    flags.keys_with_prefix.side_effect = StoreError("locked")
    engine = DashboardEngine(AppContext(settings=Settings(_env_file=None), flags=flags))

    assert engine.has_conflicts([beach_studio()])


def test_mark_resolved_requires_flag_store():
    engine = DashboardEngine(AppContext(settings=Settings(_env_file=None)))
    (conflict,) = engine.find_conflicts([beach_studio()])

    with pytest.raises(RuntimeError):
        engine.mark_conflict_resolved(conflict)
