"""
Snapshot history endpoints.

Snapshots are only created by an explicit POST; reading the history never
writes to it.
"""

from fastapi import APIRouter, Depends, Query

from scrummer.core.dependencies import get_history_store
from scrummer.models.schemas import (
    HealthSummary,
    HistoryResponse,
    SaveResult,
    SignalsRecord,
    Snapshot,
    SprintIdResponse,
    TrendResponse,
)
from scrummer.routers.signals import current_signals
from scrummer.services import health_service
from scrummer.services.history_store import HistoryStore

router = APIRouter(prefix="/history", tags=["history"])


@router.get("", response_model=HistoryResponse)
async def get_history(store: HistoryStore = Depends(get_history_store)) -> HistoryResponse:
    """All snapshots, oldest first, with the current sprint id."""
    return HistoryResponse(sprint_id=store.get_current_sprint_id(), snapshots=store.get_history())


@router.get("/last", response_model=Snapshot | None)
async def get_last(store: HistoryStore = Depends(get_history_store)) -> Snapshot | None:
    return store.get_last()


@router.get("/trend/{metric}", response_model=TrendResponse)
async def get_trend(metric: str, store: HistoryStore = Depends(get_history_store)) -> TrendResponse:
    """Direction of a snapshot field between the two most recent snapshots."""
    return TrendResponse(metric=metric, trend=store.get_trend(metric))


@router.get("/summary", response_model=HealthSummary)
async def get_summary(store: HistoryStore = Depends(get_history_store)) -> HealthSummary:
    """Stability index, overcommit streak, predictability and narrative."""
    return health_service.summarize(store.get_history())


@router.post("/snapshots", response_model=SaveResult)
async def save_snapshot(
    force: bool = Query(False, description="Bypass the duplicate-save window"),
    signals: SignalsRecord = Depends(current_signals),
    store: HistoryStore = Depends(get_history_store),
) -> SaveResult:
    """
    Record a snapshot of the current signals.

    A save within the dedup window of the last snapshot returns ok=false with
    reason "duplicate" unless force is set.
    """
    return store.save_snapshot(signals, force=force)


@router.delete("", status_code=204)
async def clear_history(store: HistoryStore = Depends(get_history_store)) -> None:
    store.clear_history()


@router.get("/sprint", response_model=SprintIdResponse)
async def get_current_sprint(store: HistoryStore = Depends(get_history_store)) -> SprintIdResponse:
    return SprintIdResponse(sprint_id=store.get_current_sprint_id())


@router.post("/sprint/reset", response_model=SprintIdResponse)
async def reset_sprint(store: HistoryStore = Depends(get_history_store)) -> SprintIdResponse:
    """Mark the start of a new sprint without discarding history."""
    return SprintIdResponse(sprint_id=store.reset_current_sprint())
