"""Shared fixtures: an in-memory database, a record store and a fixed clock."""
from __future__ import annotations

from datetime import datetime

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from factories import TODAY
from rentdar.core.config import Settings
from rentdar.core.context import AppContext
from rentdar.db.store import RecordStore
from rentdar.models.base import Base
from rentdar.repositories.flags import FlagStore


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(engine, autoflush=False, expire_on_commit=False, class_=Session)


@pytest.fixture
def session(session_factory):
    with session_factory() as session:
        yield session


@pytest.fixture
def store(session) -> RecordStore:
    return RecordStore(session)


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, currency_code="EUR", user_name="Dana")


@pytest.fixture
def context(settings, store) -> AppContext:
    return AppContext(
        settings=settings,
        flags=FlagStore(store),
        clock=lambda: datetime(TODAY.year, TODAY.month, TODAY.day, 9, 30),
    )
