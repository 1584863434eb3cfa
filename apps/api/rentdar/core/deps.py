"""FastAPI dependencies wiring the record store and application context."""
from __future__ import annotations

from fastapi import Depends
from sqlalchemy.orm import Session

from ..db.session import get_session
from ..db.store import RecordStore
from ..repositories.flags import FlagStore
from .config import get_settings
from .context import AppContext


def get_store(session: Session = Depends(get_session)) -> RecordStore:
    return RecordStore(session)


def get_context(store: RecordStore = Depends(get_store)) -> AppContext:
    return AppContext(settings=get_settings(), flags=FlagStore(store))
