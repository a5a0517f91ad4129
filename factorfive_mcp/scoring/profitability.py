"""Profitability factor: ROE and margins relative to peers."""

from __future__ import annotations

from collections.abc import Sequence

from factorfive_mcp.config.settings import ScoringConfig
from factorfive_mcp.schemas.models import FactorScore, FinancialMetrics, IndustryBenchmarks, PeerMetrics
from factorfive_mcp.scoring.benchmarks import peer_values
from factorfive_mcp.scoring.statistics import (
    clamp,
    percentile_rank,
    round_half_up,
    std_dev,
    z_score,
    z_to_points,
)

# field -> (benchmark attribute, points)
_WEIGHTS: dict[str, tuple[str, float]] = {
    "roe": ("avg_roe", 8),
    "net_margin": ("avg_net_margin", 6),
    "operating_margin": ("avg_operating_margin", 6),
}


def score_profitability(
    financials: FinancialMetrics | None,
    peer_metrics: Sequence[PeerMetrics],
    benchmarks: IndustryBenchmarks,
    config: ScoringConfig,
) -> FactorScore:
    """Score ROE (8 pts), net margin (6 pts) and operating margin (6 pts)."""

    if financials is None:
        return FactorScore(
            score=config.neutral_score,
            detail="Limited profitability data available",
            tooltip="Insufficient data for profitability analysis",
            percentile=config.neutral_percentile,
        )

    values: dict[str, float] = {}
    total = 0.0
    for field, (benchmark_attr, weight) in _WEIGHTS.items():
        value = getattr(financials, field) or 0.0
        center = getattr(benchmarks, benchmark_attr)
        spread = std_dev(peer_values(peer_metrics, field), center)
        total += z_to_points(z_score(value, center, spread), weight, config)
        values[field] = value
    score = int(clamp(round_half_up(total), 0, config.factor_max))

    composite = sum(values.values()) / len(values)
    peer_composites = [
        ((peer.roe or 0.0) + (peer.net_margin or 0.0) + (peer.operating_margin or 0.0)) / 3 for peer in peer_metrics
    ]
    percentile = round_half_up(percentile_rank(composite, peer_composites))

    detail = (
        f"ROE: {values['roe']:.1f}% (avg {benchmarks.avg_roe:.1f}%), "
        f"Net margin: {values['net_margin']:.1f}% (avg {benchmarks.avg_net_margin:.1f}%), "
        f"Operating margin: {values['operating_margin']:.1f}% (avg {benchmarks.avg_operating_margin:.1f}%)"
    )
    if score >= 15:
        level = "Highly profitable"
    elif score >= 10:
        level = "Average profitability"
    else:
        level = "Below average margins"
    tooltip = f"{percentile}th percentile. {level} vs {benchmarks.industry} peers"
    return FactorScore(score=score, detail=detail, tooltip=tooltip, percentile=percentile)
