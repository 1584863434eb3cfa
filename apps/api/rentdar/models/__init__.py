"""Expose ORM models."""
from .app_flag import AppFlag
from .blocked_date import BlockedDate, BlockReason
from .property import BookingSource, Property, PropertyType
from .transaction import ExpenseCategory, Platform, Transaction

__all__ = [
    "AppFlag",
    "BlockReason",
    "BlockedDate",
    "BookingSource",
    "ExpenseCategory",
    "Platform",
    "Property",
    "PropertyType",
    "Transaction",
]
