"""
FastAPI dependencies for the shared service objects.

The engine and stores are built once in the app lifespan and kept on
``app.state``; endpoints receive them through these providers.
"""

from fastapi import Request

from scrummer.core.config import Settings
from scrummer.services.history_store import HistoryStore
from scrummer.services.notes_store import NotesStore
from scrummer.services.setup_store import SetupStore
from scrummer.services.signal_engine import SignalEngine
from scrummer.services.xp_service import XpStore


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_engine(request: Request) -> SignalEngine:
    return request.app.state.engine


def get_history_store(request: Request) -> HistoryStore:
    return request.app.state.history_store


def get_setup_store(request: Request) -> SetupStore:
    return request.app.state.setup_store


def get_xp_store(request: Request) -> XpStore:
    return request.app.state.xp_store


def get_notes_store(request: Request) -> NotesStore:
    return request.app.state.notes_store
