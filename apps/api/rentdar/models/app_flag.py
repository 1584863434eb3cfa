"""Persisted boolean flags (dismissed notices, resolved conflicts)."""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, utcnow


class AppFlag(Base):
    __tablename__ = "app_flags"

    key: Mapped[str] = mapped_column(String, primary_key=True)
    value: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )
