"""Shared test fixtures for Scrummer."""

import sqlite3

import pytest
from fastapi.testclient import TestClient

from scrummer.core.config import Settings
from scrummer.main import create_app
from scrummer.services.history_store import HistoryStore
from scrummer.services.setup_store import SetupStore
from scrummer.services.storage import KeyValueStore

# 2026-01-07 09:30:00 UTC
START_MS = 1_767_778_200_000


class FakeClock:
    """Epoch-millisecond clock that only moves when told to."""

    def __init__(self, now: int = START_MS):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += int(seconds * 1000)


@pytest.fixture
def scenario_setup():
    """Reference sprint: 10 days, 5 people, 5 leave days, 50 SP vs 40/45/50."""
    return {
        "sprint_days": 10,
        "team_members": 5,
        "leave_days": 5,
        "committed_sp": 50,
        "v1": 40,
        "v2": 45,
        "v3": 50,
    }


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "scrummer.db"


@pytest.fixture
def storage(db_path):
    store = KeyValueStore(db_path, timeout=5)
    store.init()
    return store


@pytest.fixture
def write_raw(storage, db_path):
    """Write an undecoded payload straight into the store table."""

    def write(key: str, payload: str) -> None:
        conn = sqlite3.connect(str(db_path))
        try:
            conn.execute(
                "INSERT OR REPLACE INTO kv (key, value, updated_at) VALUES (?, ?, 0)",
                (key, payload),
            )
            conn.commit()
        finally:
            conn.close()

    return write


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def history(storage, clock):
    return HistoryStore(storage, clock=clock)


@pytest.fixture
def setup_store(storage):
    return SetupStore(storage)


@pytest.fixture
def client(db_path):
    app = create_app(Settings(db_path=str(db_path), log_level="WARNING"))
    with TestClient(app) as test_client:
        yield test_client
