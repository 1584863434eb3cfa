"""Blocked date query and persistence helpers."""
from __future__ import annotations

from ..db.store import RecordStore
from ..models.blocked_date import BlockedDate


def list_blocked_dates(store: RecordStore, *, property_id: str | None = None) -> list[BlockedDate]:
    """Return blocked windows ascending by start date, optionally for one property."""

    predicates = []
    if property_id is not None:
        predicates.append(BlockedDate.property_id == property_id)
    return store.fetch(BlockedDate, *predicates, order_by=[BlockedDate.start_date.asc()])


def get_blocked_date(store: RecordStore, blocked_id: str) -> BlockedDate | None:
    return store.get(BlockedDate, blocked_id)


def delete_blocked_date(store: RecordStore, blocked: BlockedDate) -> None:
    """Delete a blocked window and commit; raises StoreError when rejected."""

    store.delete(blocked)
    store.save()
