"""
FastAPI application entry point.

This module configures the FastAPI app with CORS, routers, and lifespan events.
The signal engine and the stores are created once at startup and shared
through app.state.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from scrummer.core.config import VERSION, Settings, settings as default_settings
from scrummer.core.logging_config import setup_logging
from scrummer.routers import forecast, health, history, notes, setup, signals, xp
from scrummer.services.history_store import HistoryStore
from scrummer.services.notes_store import NotesStore
from scrummer.services.setup_store import SetupStore
from scrummer.services.signal_engine import SignalEngine
from scrummer.services.storage import KeyValueStore
from scrummer.services.xp_service import XpStore

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler for startup/shutdown events."""
        setup_logging(settings.log_level)

        storage = KeyValueStore(settings.db_path, timeout=settings.db_timeout)
        storage.init()

        app.state.settings = settings
        app.state.engine = SignalEngine()
        app.state.setup_store = SetupStore(storage)
        app.state.history_store = HistoryStore(
            storage,
            limit=settings.history_limit,
            dedup_window_ms=settings.dedup_window_seconds * 1000,
        )
        app.state.xp_store = XpStore(storage)
        app.state.notes_store = NotesStore(storage)

        logger.info("Starting Scrummer API on %s:%s (store: %s)", settings.host, settings.port, settings.db_path)
        yield
        logger.info("Shutting down Scrummer API")

    app = FastAPI(
        title="Scrummer Sprint Health API",
        description="Sprint risk, confidence and capacity signals with local history",
        version=VERSION,
        lifespan=lifespan,
    )

    # Configure CORS for the dashboard frontend
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register routers
    app.include_router(health.router, prefix="/api")
    app.include_router(setup.router, prefix="/api")
    app.include_router(signals.router, prefix="/api")
    app.include_router(history.router, prefix="/api")
    app.include_router(forecast.router, prefix="/api")
    app.include_router(xp.router, prefix="/api")
    app.include_router(notes.router, prefix="/api")

    return app


app = create_app()


def run() -> None:
    import uvicorn

    uvicorn.run(
        "scrummer.main:app",
        host=default_settings.host,
        port=default_settings.port,
        reload=default_settings.debug,
    )


if __name__ == "__main__":
    run()
