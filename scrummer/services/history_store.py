"""
Bounded snapshot history for sprint signals.

The log is a JSON array of snapshots, oldest first, capped at a fixed length
with FIFO eviction. A separate key holds the current sprint id that new
snapshots are tagged with.

Snapshots are only written by an explicit save. Saves arriving within the
dedup window of the last entry are rejected unless forced, so repeated
refreshes cannot flood the log with near-identical points.

Note: every operation is a separate read/modify/write against the store with
no locking. Two processes saving at the same moment can lose one of the
updates (last writer wins).
"""

import logging
import time
from datetime import datetime
from typing import Callable, Optional

from pydantic import ValidationError

from scrummer.models.schemas import SaveResult, SignalsRecord, Snapshot, SprintMode, Trend
from scrummer.services.storage import KeyValueStore

logger = logging.getLogger(__name__)

HISTORY_KEY = "scrummer_sprint_history_v1"
SPRINT_ID_KEY = "scrummer_current_sprint_id"

DEFAULT_LIMIT = 30
DEFAULT_DEDUP_WINDOW_MS = 60_000


def _now_ms() -> int:
    return int(time.time() * 1000)


def detect_mode(risk_score: float) -> SprintMode:
    """Map a risk score onto the stable/watch/rescue posture."""
    if risk_score >= 70:
        return SprintMode.RESCUE
    if risk_score >= 40:
        return SprintMode.WATCH
    return SprintMode.STABLE


def generate_sprint_id(timestamp_ms: int) -> str:
    """Minute-precision, lexicographically sortable id, e.g. SPRINT_20260107_0930."""
    moment = datetime.fromtimestamp(timestamp_ms / 1000)
    return moment.strftime("SPRINT_%Y%m%d_%H%M")


class HistoryStore:
    """Owns the snapshot log and the current sprint id."""

    def __init__(
        self,
        storage: KeyValueStore,
        limit: int = DEFAULT_LIMIT,
        dedup_window_ms: int = DEFAULT_DEDUP_WINDOW_MS,
        clock: Optional[Callable[[], int]] = None,
    ):
        self.storage = storage
        self.limit = limit
        self.dedup_window_ms = dedup_window_ms
        self.clock = clock or _now_ms

    # --- Sprint id ---

    def get_current_sprint_id(self) -> str:
        """Return the current sprint id, creating and persisting one if absent."""
        existing = self.storage.get(SPRINT_ID_KEY)
        if isinstance(existing, str) and existing:
            return existing
        return self.reset_current_sprint()

    def reset_current_sprint(self) -> str:
        """Start a new sprint id. The history log is left untouched."""
        sprint_id = generate_sprint_id(self.clock())
        self.storage.set(SPRINT_ID_KEY, sprint_id)
        logger.info("Current sprint set to %s", sprint_id)
        return sprint_id

    # --- Log ---

    def _load(self) -> list[Snapshot]:
        raw = self.storage.get(HISTORY_KEY)
        if raw is None:
            return []
        if not isinstance(raw, list):
            logger.warning("History log is not a list, treating as empty")
            return []

        snapshots = []
        for entry in raw:
            try:
                snapshots.append(Snapshot.model_validate(entry))
            except ValidationError:
                logger.warning("Skipping malformed history entry: %r", entry)
        return snapshots

    def _save(self, snapshots: list[Snapshot]) -> bool:
        return self.storage.set(HISTORY_KEY, [s.model_dump(mode="json") for s in snapshots])

    def build_snapshot(self, signals: SignalsRecord, timestamp: int) -> Snapshot:
        return Snapshot(
            sprint_id=self.get_current_sprint_id(),
            timestamp=timestamp,
            risk_score=signals.risk_score,
            confidence=signals.confidence,
            overcommit_ratio=signals.overcommit_ratio,
            avg_velocity=signals.avg_velocity,
            committed_sp=signals.committed_sp,
            capacity_sp=signals.capacity_sp,
            mode=detect_mode(signals.risk_score),
        )

    def save_snapshot(self, signals: SignalsRecord, force: bool = False) -> SaveResult:
        """
        Append a snapshot of the given signals.

        Args:
            signals: Computed signals to record
            force: Skip the dedup window check (explicit user save)

        Returns:
            SaveResult with ok=True and the new snapshot, or ok=False with
            reason "duplicate" and the existing last snapshot
        """
        now = self.clock()
        history = self._load()

        last = history[-1] if history else None
        if last is not None and not force and abs(now - last.timestamp) < self.dedup_window_ms:
            logger.debug("Rejected snapshot within %d ms of the last one", self.dedup_window_ms)
            return SaveResult(ok=False, reason="duplicate", snapshot=last)

        snapshot = self.build_snapshot(signals, now)
        history.append(snapshot)

        # Keep the most recent entries only
        if len(history) > self.limit:
            history = history[len(history) - self.limit:]

        if self._save(history):
            logger.info(
                "Saved snapshot for %s (risk=%s, confidence=%s)",
                snapshot.sprint_id,
                snapshot.risk_score,
                snapshot.confidence,
            )
        else:
            logger.warning("Snapshot for %s was not persisted", snapshot.sprint_id)
        return SaveResult(ok=True, snapshot=snapshot)

    def get_history(self) -> list[Snapshot]:
        """All snapshots, oldest first."""
        return self._load()

    def get_last(self) -> Optional[Snapshot]:
        history = self._load()
        return history[-1] if history else None

    def get_trend(self, metric: str) -> Trend:
        """Direction of a snapshot field between the two most recent entries."""
        history = self._load()
        if len(history) < 2:
            return Trend.FLAT

        last = getattr(history[-1], metric, None)
        prev = getattr(history[-2], metric, None)
        if not _is_number(last) or not _is_number(prev):
            return Trend.FLAT

        if last > prev:
            return Trend.UP
        if last < prev:
            return Trend.DOWN
        return Trend.FLAT

    def clear_history(self) -> None:
        """Empty the log. The current sprint id is kept."""
        if not self._save([]):
            logger.warning("History could not be cleared")
            return
        logger.info("History cleared")


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)
