"""
SQLite-backed key/value store for local dashboard state.

Holds the setup blob, the snapshot history log and the current sprint id,
each as one JSON value under its own key. Every failure is logged and
swallowed: reads fall back to None, writes report False.

Uses SQLite with WAL mode for better concurrent read performance
and atomic single-key writes.
"""

import json
import logging
import sqlite3
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Generator

logger = logging.getLogger(__name__)


class KeyValueStore:
    """JSON values stored by key in a single SQLite table."""

    def __init__(self, db_path: str | Path, timeout: float = 30):
        self.db_path = Path(db_path)
        self.timeout = timeout

    def init(self) -> None:
        """
        Initialize the SQLite database with schema and WAL mode.

        Called on application startup to ensure the database is ready.
        """
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            with self._get_connection() as conn:
                conn.execute("PRAGMA journal_mode=WAL")
                conn.execute("""
                    CREATE TABLE IF NOT EXISTS kv (
                        key TEXT PRIMARY KEY,
                        value TEXT NOT NULL,
                        updated_at REAL NOT NULL
                    )
                """)
                conn.commit()
        except (sqlite3.Error, OSError) as exc:
            logger.warning("Could not initialize store at %s: %s", self.db_path, exc)

    @contextmanager
    def _get_connection(self) -> Generator[sqlite3.Connection, None, None]:
        """
        Context manager for database connections.

        Handles connection lifecycle and ensures proper cleanup.
        """
        conn = sqlite3.connect(str(self.db_path), timeout=self.timeout)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        finally:
            conn.close()

    def get(self, key: str) -> Any | None:
        """Load and decode the value stored under key, or None."""
        try:
            with self._get_connection() as conn:
                cursor = conn.execute("SELECT value FROM kv WHERE key = ?", (key,))
                row = cursor.fetchone()
                if row is None:
                    return None
                return json.loads(row["value"])
        except (sqlite3.Error, json.JSONDecodeError) as exc:
            logger.warning("Unreadable value for %r, treating as missing: %s", key, exc)
            return None

    def set(self, key: str, value: Any) -> bool:
        """Encode and store value under key. Returns False if the write failed."""
        try:
            payload = json.dumps(value)
            with self._get_connection() as conn:
                conn.execute(
                    "INSERT OR REPLACE INTO kv (key, value, updated_at) VALUES (?, ?, ?)",
                    (key, payload, time.time()),
                )
                conn.commit()
            return True
        except (sqlite3.Error, TypeError, ValueError) as exc:
            logger.warning("Failed to persist %r: %s", key, exc)
            return False

    def get_stats(self) -> dict[str, Any]:
        """Key count and total payload size, for monitoring."""
        try:
            with self._get_connection() as conn:
                row = conn.execute(
                    "SELECT COUNT(*) AS entry_count, SUM(LENGTH(value)) AS total_bytes FROM kv"
                ).fetchone()
                return {
                    "entry_count": row["entry_count"],
                    "total_bytes": row["total_bytes"] or 0,
                }
        except sqlite3.Error:
            return {"entry_count": 0, "total_bytes": 0}
