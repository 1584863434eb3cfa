"""Calendar endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from ..core.context import AppContext
from ..core.deps import get_context, get_store
from ..db.store import RecordStore
from ..schemas import calendar as calendar_schema
from ..services import views as views_service
from ..services.bucketing import Month

router = APIRouter()


@router.get("", response_model=calendar_schema.CalendarResponse)
def get_calendar(
    year: int | None = Query(default=None, ge=1, le=9999),
    month: int | None = Query(default=None, ge=1, le=12),
    property_id: str | None = None,
    day: int | None = Query(default=None, ge=1, le=31),
    store: RecordStore = Depends(get_store),
    context: AppContext = Depends(get_context),
) -> calendar_schema.CalendarResponse:
    """Return the month grid for one property or all of them."""

    if (year is None) != (month is None):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Provide both year and month")
    display_month = Month(year, month) if year is not None and month is not None else None
    return views_service.calendar_snapshot(
        store, context, month=display_month, property_id=property_id, day=day
    )


@router.delete("/blocked-dates/{blocked_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_blocked_date(
    blocked_id: str,
    store: RecordStore = Depends(get_store),
) -> Response:
    """Remove an owner-blocked window."""

    views_service.delete_blocked_date(store, blocked_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
