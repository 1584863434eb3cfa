"""Transaction query helpers."""
from __future__ import annotations

from ..db.store import RecordStore
from ..models.transaction import Transaction


def list_bookings(store: RecordStore, *, property_id: str | None = None) -> list[Transaction]:
    """Return income transactions ascending by start date, optionally for one property."""

    predicates = [Transaction.is_income.is_(True)]
    if property_id is not None:
        predicates.append(Transaction.property_id == property_id)
    return store.fetch(Transaction, *predicates, order_by=[Transaction.start_date.asc()])
