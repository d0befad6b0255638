"""
Daily check-in XP, stability streaks and levels.

At most one award is made per local calendar day. The award is built from
the current signals:
- +5 check-in when the setup has a commitment or velocity data
- +15 when confidence is at least 75
- +25 when commitment does not exceed average velocity
- +10 when velocity volatility is low
- +20 when risk dropped by 5 or more since the last award
- +10 and a longer streak when the sprint is stable; otherwise the streak resets

Progress is kept as one JSON value in the key/value store.
"""

import logging
import time
from datetime import datetime
from typing import Callable, Optional

from scrummer.models.schemas import LevelInfo, SignalsRecord, XpAward, XpMetrics, XpState, XpStatus
from scrummer.services.storage import KeyValueStore

logger = logging.getLogger(__name__)

XP_KEY = "scrummer_xp_v1"

LEVEL_SIZE = 300
LEVEL_TITLES = (
    "Rookie",
    "Sprint Scout",
    "Sprint Runner",
    "Velocity Cheetah",
    "Scrum Legend",
    "Agile Mythic",
)

CHECK_IN_XP = 5
CONFIDENCE_XP = 15
NO_OVERCOMMIT_XP = 25
LOW_VOLATILITY_XP = 10
RISK_IMPROVED_XP = 20
STABLE_DAY_XP = 10

CONFIDENCE_BONUS_MIN = 75
LOW_VOLATILITY_MAX = 0.30
RISK_IMPROVEMENT_MIN = 5


def _now_ms() -> int:
    return int(time.time() * 1000)


def day_key(timestamp_ms: int) -> str:
    """Local calendar day, e.g. 2026-01-07."""
    return datetime.fromtimestamp(timestamp_ms / 1000).strftime("%Y-%m-%d")


def level_info(total_xp: int) -> LevelInfo:
    level = total_xp // LEVEL_SIZE + 1
    title = LEVEL_TITLES[min(level - 1, len(LEVEL_TITLES) - 1)]
    return LevelInfo(level=level, in_level=total_xp % LEVEL_SIZE, next=LEVEL_SIZE, title=title)


def is_stable(signals: SignalsRecord) -> bool:
    """A stable day: low risk, good confidence and no overcommit."""
    return signals.risk_score < 40 and signals.confidence >= 70 and signals.overcommit_ratio <= 1.0


def award_xp(state: XpState, signals: SignalsRecord, day: str) -> XpAward:
    """
    Apply the daily award rules to a copy of state.

    Args:
        state: Progress before the award
        signals: Signals for the current setup
        day: Local day key the award is made for

    Returns:
        XpAward with the new state. If ``day`` was already awarded, gained is
        0, reasons is empty and the state is returned unchanged.
    """
    if state.last_award_day == day:
        return XpAward(gained=0, reasons=[], state=state, level=level_info(state.total_xp))

    gained = 0
    reasons = []

    def add(points: int, reason: str) -> None:
        nonlocal gained
        gained += points
        reasons.append(f"+{points} {reason}")

    if signals.committed_sp > 0 or signals.velocities:
        add(CHECK_IN_XP, "Daily check-in")
    if signals.confidence >= CONFIDENCE_BONUS_MIN:
        add(CONFIDENCE_XP, f"Confidence ≥ {CONFIDENCE_BONUS_MIN}")
    if 0 < signals.overcommit_ratio <= 1:
        add(NO_OVERCOMMIT_XP, "No overcommit")
    if 0 < signals.vol < LOW_VOLATILITY_MAX:
        add(LOW_VOLATILITY_XP, "Low volatility")
    if state.last_metrics is not None:
        if state.last_metrics.risk_score - signals.risk_score >= RISK_IMPROVEMENT_MIN:
            add(RISK_IMPROVED_XP, "Risk improved")

    streak = state.streak
    best_streak = state.best_streak
    if is_stable(signals):
        streak += 1
        best_streak = max(best_streak, streak)
        add(STABLE_DAY_XP, "Stable streak day")
    else:
        streak = 0
        reasons.append("Streak reset (not stable)")

    new_state = XpState(
        total_xp=state.total_xp + gained,
        streak=streak,
        best_streak=best_streak,
        last_award_day=day,
        last_metrics=XpMetrics(
            risk_score=signals.risk_score,
            confidence=signals.confidence,
            overcommit_ratio=signals.overcommit_ratio,
            vol=signals.vol,
        ),
    )
    return XpAward(gained=gained, reasons=reasons, state=new_state, level=level_info(new_state.total_xp))


class XpStore:
    """Loads, awards and persists XP progress."""

    def __init__(self, storage: KeyValueStore, clock: Optional[Callable[[], int]] = None):
        self.storage = storage
        self.clock = clock or _now_ms

    def load(self) -> XpState:
        raw = self.storage.get(XP_KEY)
        if not isinstance(raw, dict):
            return XpState()
        return XpState.model_validate(raw)

    def status(self) -> XpStatus:
        state = self.load()
        return XpStatus(state=state, level=level_info(state.total_xp))

    def award(self, signals: SignalsRecord) -> XpAward:
        """Make today's award, if it has not been made yet."""
        result = award_xp(self.load(), signals, day_key(self.clock()))
        if not result.reasons:
            logger.debug("XP already awarded for %s", result.state.last_award_day)
            return result

        if self.storage.set(XP_KEY, result.state.model_dump()):
            logger.info("Awarded %d XP (total %d)", result.gained, result.state.total_xp)
        else:
            logger.warning("XP award for %s was not persisted", result.state.last_award_day)
        return result
