"""Property query helpers."""
from __future__ import annotations

from sqlalchemy.orm import selectinload

from ..db.store import RecordStore
from ..models.property import Property, PropertyType


def list_properties(store: RecordStore, *, property_type: PropertyType | None = None) -> list[Property]:
    """Return properties newest first with their transactions loaded, optionally for one rental type."""

    predicates = []
    if property_type is not None:
        predicates.append(Property.property_type == property_type)
    return store.fetch(
        Property,
        *predicates,
        order_by=[Property.created_at.desc()],
        options=[selectinload(Property.transactions)],
    )


def get_property(store: RecordStore, property_id: str) -> Property | None:
    return store.get(Property, property_id)
