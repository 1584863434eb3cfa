"""Record store facade over a SQLAlchemy session."""
from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT")


class StoreError(RuntimeError):
    """Raised when the underlying database rejects a read or write."""


class RecordStore:
    """Predicate-filtered, sorted fetches and transactional save/delete.

    All SQLAlchemy failures surface as :class:`StoreError` so callers decide
    whether to degrade (reads) or report (writes).
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def fetch(
        self,
        entity: type[RecordT],
        *predicates: Any,
        order_by: Iterable[Any] = (),
        options: Iterable[Any] = (),
    ) -> list[RecordT]:
        stmt = select(entity)
        loaders = list(options)
        if loaders:
            stmt = stmt.options(*loaders)
        if predicates:
            stmt = stmt.where(*predicates)
        order = list(order_by)
        if order:
            stmt = stmt.order_by(*order)
        try:
            return list(self.session.execute(stmt).scalars().all())
        except SQLAlchemyError as exc:
            raise StoreError(f"fetch {entity.__name__} failed") from exc

    def get(self, entity: type[RecordT], record_id: Any) -> RecordT | None:
        try:
            return self.session.get(entity, record_id)
        except SQLAlchemyError as exc:
            raise StoreError(f"get {entity.__name__} failed") from exc

    def add(self, record: object) -> None:
        self.session.add(record)

    def delete(self, record: object) -> None:
        try:
            self.session.delete(record)
        except SQLAlchemyError as exc:
            raise StoreError("delete failed") from exc

    def save(self) -> None:
        """Commit pending changes; roll back and raise on failure."""

        try:
            self.session.commit()
        except SQLAlchemyError as exc:
            logger.warning("Commit failed, rolling back: %s", exc)
            self.session.rollback()
            raise StoreError("save failed") from exc
