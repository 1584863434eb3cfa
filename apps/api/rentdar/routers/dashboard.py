"""Dashboard endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Depends

from ..core.context import AppContext
from ..core.deps import get_context, get_store
from ..db.store import RecordStore
from ..schemas import dashboard as dashboard_schema
from ..services import views as views_service
from ..services.dashboard import LongTermStatusFilter, RentalTypeFilter, ShortTermStatusFilter

router = APIRouter()


@router.get("", response_model=dashboard_schema.DashboardResponse)
def get_dashboard(
    rental_type: RentalTypeFilter = RentalTypeFilter.ALL,
    short_term_status: ShortTermStatusFilter = ShortTermStatusFilter.ALL,
    long_term_status: LongTermStatusFilter = LongTermStatusFilter.ALL,
    store: RecordStore = Depends(get_store),
    context: AppContext = Depends(get_context),
) -> dashboard_schema.DashboardResponse:
    """Return filtered properties with counts and stats."""

    return views_service.dashboard_snapshot(
        store,
        context,
        rental_type=rental_type,
        short_term_status=short_term_status,
        long_term_status=long_term_status,
    )


@router.get("/conflicts", response_model=list[dashboard_schema.ConflictCard])
def list_conflicts(
    store: RecordStore = Depends(get_store),
    context: AppContext = Depends(get_context),
) -> list[dashboard_schema.ConflictCard]:
    """Return unresolved double bookings."""

    return views_service.list_conflicts(store, context)


@router.post("/conflicts/resolve", response_model=dashboard_schema.ResolveConflictResponse)
def resolve_conflict(
    payload: dashboard_schema.ResolveConflictRequest,
    store: RecordStore = Depends(get_store),
    context: AppContext = Depends(get_context),
) -> dashboard_schema.ResolveConflictResponse:
    """Mark a double booking as handled by the owner."""

    return views_service.resolve_conflict(store, context, payload)
