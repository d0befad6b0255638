"""
Sprint signal calculation service.

Turns a sprint setup into risk and confidence signals. The risk score is a
sum of three independently clamped penalties:
- Overcommit (up to 50): commitment above historical average velocity
- Capacity shortfall (up to 35): commitment above leave-adjusted capacity
- Volatility (up to 15): coefficient of variation of recent velocity

Confidence starts from capacity / commitment and loses points for volatility.
"""

import math
from collections.abc import Mapping
from typing import Any, Optional, Union

from scrummer.core.config import DEFAULT_WEIGHTS, SignalWeights
from scrummer.core.numbers import clamp, coefficient_of_variation, finite_or_zero, mean, round_half_up
from scrummer.models.schemas import (
    CapacityHealth,
    RiskBand,
    RiskComponents,
    SetupRecord,
    SignalsRecord,
)

SetupInput = Union[SetupRecord, Mapping[str, Any], None]


def _as_setup(setup: SetupInput) -> SetupRecord:
    if isinstance(setup, SetupRecord):
        return setup
    if isinstance(setup, Mapping):
        return SetupRecord.model_validate(dict(setup))
    return SetupRecord()


def _ratio(numerator: float, denominator: float) -> float:
    if denominator <= 0:
        return 0.0
    result = numerator / denominator
    return result if math.isfinite(result) else 0.0


class SignalEngine:
    """Stateless calculator; holds only the fixed scoring weights."""

    def __init__(self, weights: SignalWeights = DEFAULT_WEIGHTS):
        self.weights = weights

    def risk_band(self, risk_score: float) -> RiskBand:
        if risk_score <= self.weights.low_band_max:
            return RiskBand.LOW
        if risk_score <= self.weights.moderate_band_max:
            return RiskBand.MODERATE
        return RiskBand.HIGH

    def capacity_health(self, committed_sp: float, capacity_sp: float) -> Optional[CapacityHealth]:
        if committed_sp <= 0 or capacity_sp <= 0:
            return None
        ratio = capacity_sp / committed_sp
        if ratio >= self.weights.healthy_ratio:
            return CapacityHealth.HEALTHY
        if ratio >= self.weights.at_risk_ratio:
            return CapacityHealth.AT_RISK
        return CapacityHealth.CRITICAL

    def compute(self, setup: SetupInput) -> SignalsRecord:
        """
        Compute sprint signals from a setup record.

        Never raises: missing or malformed fields are treated as 0, and zero
        denominators produce zero ratios rather than errors. A product or
        ratio that overflows the float range is also treated as 0, so every
        field of the result is finite.

        Args:
            setup: SetupRecord, a loosely typed mapping, or None

        Returns:
            Frozen SignalsRecord
        """
        w = self.weights
        s = _as_setup(setup)

        # Zero or missing sprints mean "no data", not zero performance
        velocities = tuple(v for v in (s.v1, s.v2, s.v3) if v > 0)
        avg_velocity = mean(list(velocities))
        vol = coefficient_of_variation(list(velocities), sample=True)

        ideal_pd = finite_or_zero(s.sprint_days * s.team_members)
        available_pd = max(0.0, ideal_pd - s.leave_days)
        availability_ratio = _ratio(available_pd, ideal_pd)
        capacity_sp = finite_or_zero(avg_velocity * availability_ratio)

        overcommit_ratio = _ratio(s.committed_sp, avg_velocity)
        shortfall_ratio = _ratio(s.committed_sp, capacity_sp)

        over = clamp((overcommit_ratio - 1) * w.over_scale, 0, w.over_cap)
        cap = clamp((shortfall_ratio - 1) * w.cap_scale, 0, w.cap_cap)
        vola = clamp(vol * w.vola_scale, 0, w.vola_cap)
        risk_score = round_half_up(clamp(over + cap + vola, 0, 100))

        base_confidence = _ratio(capacity_sp, s.committed_sp) * 100
        confidence = round_half_up(clamp(base_confidence - vol * w.confidence_vol_scale, 0, 100))

        return SignalsRecord(
            sprint_days=s.sprint_days,
            team_members=s.team_members,
            leave_days=s.leave_days,
            committed_sp=s.committed_sp,
            velocities=velocities,
            avg_velocity=avg_velocity,
            vol=vol,
            ideal_person_days=ideal_pd,
            available_person_days=available_pd,
            availability_ratio=availability_ratio,
            focus_factor=availability_ratio,
            capacity_sp=capacity_sp,
            overcommit_ratio=overcommit_ratio,
            capacity_shortfall_ratio=shortfall_ratio,
            risk_score=risk_score,
            confidence=confidence,
            risk_band=self.risk_band(risk_score),
            capacity_health=self.capacity_health(s.committed_sp, capacity_sp),
            components=RiskComponents(over=over, cap=cap, vola=vola),
        )


_default_engine = SignalEngine()


def compute_signals(setup: SetupInput, weights: SignalWeights = DEFAULT_WEIGHTS) -> SignalsRecord:
    """Convenience wrapper around SignalEngine.compute."""
    engine = _default_engine if weights is DEFAULT_WEIGHTS else SignalEngine(weights)
    return engine.compute(setup)
