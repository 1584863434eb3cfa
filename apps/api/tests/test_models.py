from __future__ import annotations

from datetime import date

import pytest

from factories import make_booking, make_property
from rentdar.core.context import currency_symbol
from rentdar.models.property import PropertyType
from rentdar.models.transaction import ExpenseCategory, Platform, Transaction


@pytest.mark.parametrize(
    ("label", "expected"),
    [
        ("Airbnb", Platform.AIRBNB),
        (" booking.com ", Platform.BOOKING),
        ("VRBO", Platform.VRBO),
        ("", Platform.DIRECT),
        (None, Platform.DIRECT),
        ("Expedia", Platform.OTHER),
    ],
)
def test_platform_from_label(label, expected):
    assert Platform.from_label(label) is expected


def test_expense_category_from_label():
    assert ExpenseCategory.from_label("Cleaning") is ExpenseCategory.CLEANING
    assert ExpenseCategory.from_label("landscaping") is ExpenseCategory.OTHER
    assert ExpenseCategory.from_label(None) is ExpenseCategory.OTHER


def test_property_display_helpers():
    prop = make_property("", address="220 Main St", city="Austin", state="TX")

    assert prop.display_name == "Untitled"
    assert prop.display_address == "220 Main St, Austin, TX"
    assert prop.short_address == "Austin, TX"
    assert make_property("Cabin", city="Asheville").short_address == "Asheville"
    assert PropertyType.SHORT_TERM.rate_period == "/night"


def test_transaction_range_helpers():
    stay = make_booking(date(2026, 2, 1), date(2026, 2, 4), amount="-90", platform=None)

    assert stay.nights == 3
    assert stay.magnitude == 90
    assert stay.platform_label is Platform.DIRECT
    assert stay.covers(date(2026, 2, 4))
    assert not stay.covers(date(2026, 2, 5))

    single = make_booking(date(2026, 2, 1))
    assert single.nights == 0
    assert single.checkout == date(2026, 2, 2)
    assert stay.checkout == date(2026, 2, 4)
    assert not single.covers(date(2026, 2, 2))
    assert single.covers(date(2026, 2, 2), open_end=date(2026, 3, 1))

    assert not Transaction(is_income=True, amount=0).covers(date(2026, 2, 1))


def test_currency_symbol_defaults_to_dollar():
    assert currency_symbol("gbp") == "£"
    assert currency_symbol("XYZ") == "$"


def test_relationship_attribute_does_not_shadow_helpers():
    for name in ("nights", "checkout", "platform_label", "magnitude"):
        assert isinstance(Transaction.__dict__[name], property)

    prop = make_property("Loft")
    booking = make_booking(date(2026, 2, 1), date(2026, 2, 3))
    prop.transactions.append(booking)

    assert booking.property is prop
    assert booking.nights == 2
