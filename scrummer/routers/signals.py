"""
Signal endpoints.

Computes sprint signals for the stored setup (or a posted one) and the
derived recommendations, suggestions and risk drivers.
"""

from fastapi import APIRouter, Depends

from scrummer.core.dependencies import get_engine, get_setup_store
from scrummer.models.schemas import (
    RecommendationResponse,
    RiskDriver,
    SetupRecord,
    SignalsRecord,
    Suggestion,
)
from scrummer.services import recommendation_service
from scrummer.services.setup_store import SetupStore
from scrummer.services.signal_engine import SignalEngine

router = APIRouter(prefix="/signals", tags=["signals"])


def current_signals(
    engine: SignalEngine = Depends(get_engine),
    store: SetupStore = Depends(get_setup_store),
) -> SignalsRecord:
    """Signals for the stored setup."""
    return engine.compute(store.load())


@router.get("", response_model=SignalsRecord)
async def get_signals(signals: SignalsRecord = Depends(current_signals)) -> SignalsRecord:
    return signals


@router.post("", response_model=SignalsRecord)
async def compute_signals(setup: SetupRecord, engine: SignalEngine = Depends(get_engine)) -> SignalsRecord:
    """Compute signals for an ad-hoc setup without persisting it."""
    return engine.compute(setup)


@router.get("/recommendation", response_model=RecommendationResponse)
async def get_recommendation(signals: SignalsRecord = Depends(current_signals)) -> RecommendationResponse:
    """Recommend the ceremony that needs attention, with its talking points."""
    return recommendation_service.build_recommendation(signals)


@router.get("/suggestions", response_model=list[Suggestion])
async def get_suggestions(signals: SignalsRecord = Depends(current_signals)) -> list[Suggestion]:
    return recommendation_service.build_suggestions(signals)


@router.get("/drivers", response_model=list[RiskDriver])
async def get_drivers(
    signals: SignalsRecord = Depends(current_signals),
    engine: SignalEngine = Depends(get_engine),
) -> list[RiskDriver]:
    return recommendation_service.risk_drivers(signals, engine.weights)
