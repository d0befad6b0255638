"""Small numeric helpers shared by the scoring services."""

import math
from typing import Any


def clamp(value: float, lo: float, hi: float) -> float:
    """Bound value to [lo, hi]. NaN is treated as the lower bound."""
    if math.isnan(value):
        return lo
    return max(lo, min(hi, value))


def finite_or_zero(value: float) -> float:
    return value if math.isfinite(value) else 0.0


def safe_number(value: Any) -> float:
    """
    Coerce a loosely typed value to a finite, non-negative float.

    Numbers and numeric strings pass through; anything missing, non-numeric,
    NaN, infinite or negative becomes 0.
    """
    if value is None:
        return 0.0
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    if not math.isfinite(number) or number < 0:
        return 0.0
    return number


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positives, like a browser's Math.round."""
    return int(math.floor(value + 0.5))


def mean(values: list[float]) -> float:
    # Divide before summing so values near the float maximum cannot overflow
    if not values:
        return 0.0
    n = len(values)
    return sum(v / n for v in values)


def coefficient_of_variation(values: list[float], sample: bool = True) -> float:
    """
    Standard deviation divided by mean.

    Uses the N-1 denominator when ``sample`` is true. Returns 0 for fewer than
    two values or a non-positive mean. The ratio does not depend on scale, so
    values are normalised by their largest magnitude first.
    """
    if len(values) < 2:
        return 0.0
    scale = max(abs(v) for v in values)
    if not math.isfinite(scale) or scale <= 0:
        return 0.0
    scaled = [v / scale for v in values]
    avg = mean(scaled)
    if avg <= 0:
        return 0.0
    denominator = len(values) - 1 if sample else len(values)
    variance = sum((x - avg) * (x - avg) for x in scaled) / denominator
    return finite_or_zero(math.sqrt(variance) / avg)
