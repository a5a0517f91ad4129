"""Peer-sample statistics and score transforms used by every factor scorer."""

from __future__ import annotations

import math
from bisect import bisect_left
from collections.abc import Sequence

from factorfive_mcp.config.settings import ScoringConfig, Tier

_DEFAULT_CONFIG = ScoringConfig()


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean; 0.0 for an empty sample."""

    if not values:
        return 0.0
    return sum(values) / len(values)


def std_dev(values: Sequence[float], center: float) -> float:
    """Population standard deviation around a supplied center."""

    # hypot scales internally, so huge finite deviations do not overflow.
    return math.hypot(*(value - center for value in values)) / math.sqrt(max(len(values), 1))


def z_score(value: float, mean: float, std_dev: float) -> float:
    """Distance from the mean in standard deviations; 0.0 when the spread is zero or unbounded."""

    if std_dev == 0 or not math.isfinite(std_dev):
        return 0.0
    return (value - mean) / std_dev


def percentile_rank(value: float, peer_values: Sequence[float]) -> float:
    """Share of peers strictly below ``value``, expressed 0-100.

    This is not an interpolated percentile: the result is the index of the
    first sorted peer value that is >= ``value`` divided by the sample size.
    A value above every peer ranks 100 and an empty sample ranks 50.
    """

    if not peer_values:
        return 50.0
    ordered = sorted(peer_values)
    index = bisect_left(ordered, value)
    if index == len(ordered):
        return 100.0
    return index / len(ordered) * 100


def z_to_points(z: float, max_points: float, config: ScoringConfig | None = None) -> float:
    """Map a z-score onto ``[0, max_points]`` with a steep, amplified logistic curve.

    z = 0 maps to exactly half of ``max_points``. Positive deviations are
    amplified by ``1 + amplification * z`` and negative ones damped by
    ``1 - amplification * |z|``, so the curve stays monotone while separating
    above- and below-average peers more aggressively than a plain sigmoid.
    """

    cfg = config or _DEFAULT_CONFIG
    clamped = clamp(z, -cfg.z_clamp, cfg.z_clamp)
    sigmoid = 1 / (1 + math.exp(-cfg.sigmoid_steepness * clamped))
    if clamped > 0:
        sigmoid = min(1.0, sigmoid * (1 + clamped * cfg.amplification))
    elif clamped < 0:
        sigmoid = max(0.0, sigmoid * (1 - abs(clamped) * cfg.amplification))
    return clamp(sigmoid * max_points, 0.0, max_points)


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (2.5 -> 3, -2.5 -> -2)."""

    return math.floor(value + 0.5)


def lookup_tier(value: float, tiers: Sequence[Tier], fallback: float, inclusive: bool = True) -> float:
    """Points of the first ascending tier whose upper bound ``value`` does not exceed."""

    for bound, points in tiers:
        if value <= bound if inclusive else value < bound:
            return points
    return fallback


def lookup_floor_tier(value: float, tiers: Sequence[Tier], fallback: float) -> float:
    """Points of the first descending tier whose lower bound ``value`` strictly exceeds."""

    for bound, points in tiers:
        if value > bound:
            return points
    return fallback
