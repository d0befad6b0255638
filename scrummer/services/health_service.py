"""
History-level sprint health.

Derived from the snapshot log, newest entries last:
- Overcommit streak: consecutive latest snapshots over capacity
- Predictability: CV of average velocity across the last 5 snapshots
- Stability index (0-100): weighted blend of risk, risk trend, overcommit
  and confidence
- Narrative: plain-text explanation of the latest posture
"""

import math
from typing import Optional

from scrummer.core.numbers import clamp, coefficient_of_variation, round_half_up
from scrummer.models.schemas import (
    HealthSummary,
    Predictability,
    Snapshot,
    SprintMode,
    StabilityIndex,
    Trend,
)

MODE_LABELS = {
    SprintMode.STABLE: "Stable",
    SprintMode.WATCH: "Watch",
    SprintMode.RESCUE: "Rescue",
}


def _direction(before: float, after: float) -> Trend:
    if not math.isfinite(before) or not math.isfinite(after):
        return Trend.FLAT
    if after > before:
        return Trend.UP
    if after < before:
        return Trend.DOWN
    return Trend.FLAT


def _arrow(direction: Trend, positive_up: bool = True) -> str:
    if direction is Trend.FLAT:
        return "flat"
    improving = (direction is Trend.UP) == positive_up
    return "improving" if improving else "worsening"


def overcommit_streak(history: list[Snapshot]) -> int:
    streak = 0
    for snapshot in reversed(history):
        if snapshot.overcommit_ratio > 1.01:
            streak += 1
        else:
            break
    return streak


def predictability(history: list[Snapshot]) -> Predictability:
    velocities = [s.avg_velocity for s in history[-5:] if s.avg_velocity > 0]
    if len(velocities) < 2:
        return Predictability(score=None, hint="Need 2+ velocity snapshots.")

    # Population stdev across snapshots
    cv = coefficient_of_variation(velocities, sample=False)
    if cv <= 0.10:
        return Predictability(score="High", hint="Velocity is consistent (low volatility).")
    if cv <= 0.25:
        return Predictability(score="Medium", hint="Some volatility. Slicing + WIP control helps.")
    return Predictability(score="Low", hint="High volatility. Predictability will suffer.")


def stability_index(history: list[Snapshot]) -> Optional[StabilityIndex]:
    if not history:
        return None

    last = history[-1]
    prev = history[-2] if len(history) >= 2 else None

    trend_score = 0.5
    if prev is not None:
        direction = _direction(prev.risk_score, last.risk_score)
        trend_score = {Trend.UP: 0.2, Trend.DOWN: 0.8}.get(direction, 0.5)

    over = last.overcommit_ratio
    over_score = 1.0 if over <= 1 else 0.6 if over <= 1.15 else 0.2

    index = (
        0.45 * clamp(1 - last.risk_score / 100, 0, 1)
        + 0.25 * trend_score
        + 0.20 * over_score
        + 0.10 * clamp(last.confidence / 100, 0, 1)
    )
    pct = round_half_up(index * 100)

    if pct < 45:
        label = "Fragile"
    elif pct < 70:
        label = "Watch"
    else:
        label = "Stable"
    return StabilityIndex(index=pct, label=label)


def build_narrative(history: list[Snapshot]) -> list[str]:
    if not history:
        return ["No snapshots yet. Save a snapshot to start tracking sprint health."]

    last = history[-1]
    prev = history[-2] if len(history) >= 2 else None
    risk = last.risk_score
    over = last.overcommit_ratio

    lines = [
        f"Current sprint posture: {MODE_LABELS[last.mode]} with risk {risk:g}/100 "
        f"and confidence {last.confidence:g}%."
    ]

    if over > 1.01:
        pct_over = round_half_up((over - 1) * 100)
        lines.append(
            f"Commitment is above capacity by approximately {pct_over}%. "
            "This is a scope/capacity signal, not an individual performance issue."
        )
    elif last.capacity_sp > 0 and last.committed_sp > 0:
        lines.append("Commitment is broadly aligned with capacity. This supports predictability.")
    else:
        lines.append("Add committed SP and velocities in Setup to strengthen the explanation.")

    if prev is not None:
        risk_dir = _direction(prev.risk_score, risk)
        cap_dir = _direction(prev.capacity_sp, last.capacity_sp)
        com_dir = _direction(prev.committed_sp, last.committed_sp)
        lines.append(
            f"Trend vs previous snapshot: risk {_arrow(risk_dir, positive_up=False)}, "
            f"capacity {_arrow(cap_dir)}, commitment {com_dir.value}."
        )

        d_cap = round(last.capacity_sp - prev.capacity_sp, 1)
        d_com = round(last.committed_sp - prev.committed_sp, 1)
        if abs(d_cap) >= 5 or abs(d_com) >= 5:
            lines.append(f"Key movement: capacity changed by {d_cap:g} SP and commitment changed by {d_com:g} SP.")

    if risk >= 70:
        lines.append("Recommended stance: protect the sprint goal, de-scope early, and run daily unblock checkpoints.")
    elif risk >= 40:
        lines.append("Recommended stance: run a Day-3 checkpoint and keep WIP low to protect predictability.")
    else:
        lines.append("Recommended stance: maintain flow discipline and keep scope changes visible.")

    return lines


def summarize(history: list[Snapshot]) -> HealthSummary:
    return HealthSummary(
        snapshot_count=len(history),
        latest=history[-1] if history else None,
        stability=stability_index(history),
        overcommit_streak=overcommit_streak(history),
        predictability=predictability(history),
        narrative=build_narrative(history),
    )
