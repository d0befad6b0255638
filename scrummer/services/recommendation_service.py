"""
Decision tables over a SignalsRecord.

Thresholds here are tuned against the exact signal formulas in
signal_engine, so they move together:
- Ceremony recommendation (planning, daily, refine, review, retro)
- Suggestion cards with a tone
- Risk driver breakdown of the three penalty components
"""

from scrummer.core.config import DEFAULT_WEIGHTS, SignalWeights
from scrummer.core.numbers import clamp
from scrummer.models.schemas import (
    Ceremony,
    CeremonyBrief,
    RecommendationResponse,
    RiskDriver,
    SignalsRecord,
    Suggestion,
    Tone,
)


def capacity_ratio(signals: SignalsRecord) -> float:
    """Effective capacity relative to average velocity."""
    if signals.avg_velocity <= 0:
        return 0.0
    return signals.capacity_sp / signals.avg_velocity


def recommend_ceremony(signals: SignalsRecord) -> Ceremony:
    """Pick the ceremony that most needs attention right now."""
    if signals.overcommit_ratio > 1.10 or capacity_ratio(signals) < 1.0:
        return Ceremony.PLANNING
    if signals.focus_factor < 0.90:
        return Ceremony.DAILY
    if signals.vol > 0.18:
        return Ceremony.RETRO
    if signals.confidence < 70:
        return Ceremony.REVIEW
    return Ceremony.PLANNING


_BRIEFS: dict[Ceremony, tuple[str, str, list[str]]] = {
    Ceremony.PLANNING: (
        "Sprint Planning",
        "Align scope with reality. Signals suggest checking commitment pressure.",
        [
            "Validate scope against average velocity.",
            "Confirm availability assumptions (leave/holidays).",
            "Identify optional backlog items for de-scoping.",
        ],
    ),
    Ceremony.DAILY: (
        "Daily Standup",
        "Protect flow. Unblock tickets fast and swarm on critical items.",
        [
            "Remove blockers with owners.",
            "Limit parallel work (WIP).",
            "Escalate dependencies early.",
        ],
    ),
    Ceremony.REFINE: (
        "Refinement",
        "Reduce future surprises. Break down large stories now.",
        [
            "Confirm acceptance criteria.",
            "Split oversized items.",
            "Ensure top items are 'Ready'.",
        ],
    ),
    Ceremony.REVIEW: (
        "Sprint Review",
        "Make progress visible. Reset priorities based on demo feedback.",
        [
            "Highlight shipped vs committed.",
            "Capture stakeholder feedback.",
            "Confirm priority for next sprint.",
        ],
    ),
    Ceremony.RETRO: (
        "Retrospective",
        "Improve the system. Pick ONE experiment to reduce risk next time.",
        [
            "Identify biggest system constraint.",
            "Choose one measurable experiment.",
            "Assign owner + review date.",
        ],
    ),
}


def ceremony_brief(ceremony: Ceremony, signals: SignalsRecord) -> CeremonyBrief:
    title, why, checklist = _BRIEFS[ceremony]
    checklist = list(checklist)

    if ceremony is Ceremony.PLANNING and signals.overcommit_ratio > 1.10:
        checklist.insert(0, "High Scope Pressure: Re-check commitment!")
    if ceremony is Ceremony.DAILY and signals.focus_factor < 0.90:
        checklist.insert(0, "Low Focus: Reduce WIP immediately.")

    return CeremonyBrief(ceremony=ceremony, title=title, why=why, checklist=checklist)


def build_recommendation(signals: SignalsRecord) -> RecommendationResponse:
    recommended = recommend_ceremony(signals)
    return RecommendationResponse(
        recommended=recommended,
        scope_ratio=signals.overcommit_ratio,
        capacity_ratio=capacity_ratio(signals),
        confidence=signals.confidence,
        risk_score=signals.risk_score,
        brief=ceremony_brief(recommended, signals),
    )


def tone_from_risk(risk_score: float) -> Tone:
    if risk_score <= 30:
        return Tone.OK
    if risk_score <= 60:
        return Tone.WARN
    return Tone.DANGER


def build_suggestions(signals: SignalsRecord) -> list[Suggestion]:
    """
    Suggestion cards for the current sprint.

    Without a commitment and velocity history only a setup prompt is returned.
    """
    if signals.committed_sp <= 0 or signals.avg_velocity <= 0:
        return [
            Suggestion(
                title="Setup Required",
                message="Actions need sprint metrics. Enter commitment and recent velocities in Setup first.",
                tone=Tone.WARN,
            )
        ]

    cards = [
        Suggestion(
            title="Sprint Health Check",
            message=(
                f"Risk score is {signals.risk_score} ({signals.risk_band.value}). "
                f"Delivery confidence is {signals.confidence}%."
            ),
            tone=tone_from_risk(signals.risk_score),
        )
    ]

    if signals.overcommit_ratio > 1.1:
        cards.append(
            Suggestion(
                title="Excessive Scope Pressure",
                message=(
                    "Commitment is well above the historical average. Renegotiate scope now: "
                    "de-scope 15% of the lowest priority work."
                ),
                tone=Tone.DANGER,
            )
        )
    elif signals.overcommit_ratio > 1.0:
        cards.append(
            Suggestion(
                title="Tight Delivery Window",
                message="The plan is slightly optimistic. Keep ad-hoc requests out of the sprint to protect the goal.",
                tone=Tone.WARN,
            )
        )

    if signals.capacity_shortfall_ratio > 1.2:
        cards.append(
            Suggestion(
                title="Capacity Crisis",
                message=(
                    "Leave and holidays leave a large gap between capacity and points. "
                    "Move 2-3 stories back to the backlog."
                ),
                tone=Tone.DANGER,
            )
        )

    if signals.vol > 0.35:
        cards.append(
            Suggestion(
                title="Unstable Velocity",
                message="Velocity is swinging too much. Break large stories into 1-3 point slices to stabilize flow.",
                tone=Tone.DANGER,
            )
        )
    elif signals.vol <= 0.20:
        cards.append(
            Suggestion(
                title="High Predictability",
                message="Flow is steady. Use the stability for a small process experiment or some technical debt.",
                tone=Tone.OK,
            )
        )

    cards.append(
        Suggestion(
            title="Limit WIP",
            message="Don't start new items until open tickets have moved to QA.",
            tone=Tone.NEUTRAL,
        )
    )
    return cards


def risk_drivers(signals: SignalsRecord, weights: SignalWeights = DEFAULT_WEIGHTS) -> list[RiskDriver]:
    """Penalty components as drivers, largest first. Empty without a commitment."""
    if signals.committed_sp <= 0:
        return []

    c = signals.components
    drivers = [
        ("Scope Pressure", "Commitment vs historical velocity.", c.over, weights.over_cap),
        ("Capacity Shortfall", "Effective availability vs load.", c.cap, weights.cap_cap),
        ("Predictability", "Historical velocity volatility.", c.vola, weights.vola_cap),
    ]

    result = [
        RiskDriver(
            title=title,
            description=description,
            score=score,
            max_score=max_score,
            impact_pct=clamp(score / max_score * 100, 0, 100) if max_score > 0 else 0.0,
        )
        for title, description, score, max_score in drivers
    ]
    result.sort(key=lambda d: d.score, reverse=True)
    return result
