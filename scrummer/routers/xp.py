"""Daily check-in XP endpoints."""

from fastapi import APIRouter, Depends

from scrummer.core.dependencies import get_xp_store
from scrummer.models.schemas import SignalsRecord, XpAward, XpStatus
from scrummer.routers.signals import current_signals
from scrummer.services.xp_service import XpStore

router = APIRouter(prefix="/xp", tags=["xp"])


@router.get("", response_model=XpStatus)
async def get_xp(store: XpStore = Depends(get_xp_store)) -> XpStatus:
    return store.status()


@router.post("/award", response_model=XpAward)
async def award_xp(
    signals: SignalsRecord = Depends(current_signals),
    store: XpStore = Depends(get_xp_store),
) -> XpAward:
    """
    Award today's XP for the stored setup.

    Only the first call on a given day awards anything; later calls return
    gained=0 with no reasons.
    """
    return store.award(signals)
