"""Growth factor: revenue and EPS growth relative to peers."""

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


def score_growth(
    financials: FinancialMetrics | None,
    peer_metrics: Sequence[PeerMetrics],
    benchmarks: IndustryBenchmarks,
    config: ScoringConfig,
) -> FactorScore:
    """Score revenue and EPS growth, 10 points each."""

    if financials is None:
        return FactorScore(
            score=config.neutral_score,
            detail="Limited growth data available",
            tooltip="Insufficient data for growth analysis",
            percentile=config.neutral_percentile,
        )

    revenue_growth = financials.revenue_growth or 0.0
    eps_growth = financials.eps_growth or 0.0
    avg_revenue = benchmarks.avg_revenue_growth
    avg_eps = benchmarks.avg_eps_growth

    revenue_spread = std_dev(peer_values(peer_metrics, "revenue_growth"), avg_revenue)
    eps_spread = std_dev(peer_values(peer_metrics, "eps_growth"), avg_eps)

    half = config.factor_max / 2
    revenue_points = z_to_points(z_score(revenue_growth, avg_revenue, revenue_spread), half, config)
    eps_points = z_to_points(z_score(eps_growth, avg_eps, eps_spread), half, config)
    score = int(clamp(round_half_up(revenue_points + eps_points), 0, config.factor_max))

    composite = (revenue_growth + eps_growth) / 2
    peer_composites = [((peer.revenue_growth or 0.0) + (peer.eps_growth or 0.0)) / 2 for peer in peer_metrics]
    percentile = round_half_up(percentile_rank(composite, peer_composites))

    revenue_side = "above" if revenue_growth > avg_revenue else "below"
    eps_side = "above" if eps_growth > avg_eps else "below"
    detail = (
        f"Revenue: {revenue_growth:.1f}% ({revenue_side} industry avg {avg_revenue:.1f}%), "
        f"EPS: {eps_growth:.1f}% ({eps_side} avg {avg_eps:.1f}%)"
    )
    if score >= 15:
        level = "Strong"
    elif score >= 10:
        level = "Average"
    else:
        level = "Below average"
    tooltip = (
        f"{percentile}th percentile vs {benchmarks.peer_count} peers. "
        f"{level} growth relative to {benchmarks.industry} sector"
    )
    return FactorScore(score=score, detail=detail, tooltip=tooltip, percentile=percentile)
