"""Valuation factor: P/E, PEG and P/B against tiered relative-position tables.

Raw z-scores are deliberately not used here. A P/E a few percent above the
peer mean should not swing the score much, so relative position is bucketed
into tiers instead.
"""

from __future__ import annotations

from collections.abc import Sequence

from factorfive_mcp.config.settings import ScoringConfig
from factorfive_mcp.schemas.models import FactorScore, FinancialMetrics, IndustryBenchmarks, PeerMetrics
from factorfive_mcp.scoring.benchmarks import peer_values
from factorfive_mcp.scoring.statistics import clamp, lookup_tier, percentile_rank, round_half_up


def score_valuation(
    financials: FinancialMetrics | None,
    peer_metrics: Sequence[PeerMetrics],
    benchmarks: IndustryBenchmarks,
    config: ScoringConfig,
) -> FactorScore:
    """Score P/E (12 pts, PEG adjusted) and P/B (8 pts) relative to peers."""

    if financials is None:
        return FactorScore(
            score=config.neutral_score,
            detail="Limited valuation data available",
            tooltip="Insufficient data for valuation analysis",
            percentile=config.neutral_percentile,
        )

    pe = financials.pe or 0.0
    pb = financials.pb or 0.0
    peg = financials.peg if financials.peg is not None and financials.peg > 0 else None

    if pe <= 0 or pe > config.max_meaningful_pe:
        return FactorScore(
            score=config.neutral_score,
            detail="P/E not meaningful for valuation",
            tooltip="Company may be unprofitable or have unusual earnings",
            percentile=config.neutral_percentile,
        )

    peer_pe = peer_values(peer_metrics, "pe", lambda value: 0 < value < config.max_meaningful_pe)
    peer_pb = peer_values(peer_metrics, "pb", lambda value: value > 0)
    avg_pe = benchmarks.avg_pe

    if len(peer_pe) < config.min_relative_peers or avg_pe <= 0:
        return _absolute_valuation(pe, pb, peg, config)

    tables = config.valuation
    pe_ratio = pe / avg_pe
    pe_points = lookup_tier(pe_ratio, tables.pe_ratio, tables.pe_ratio_fallback)
    if peg is not None:
        pe_points += lookup_tier(peg, tables.peg, tables.peg_fallback, inclusive=False)
    pe_points = clamp(pe_points, 0, tables.pe_component_max)

    pb_points = tables.pb_default
    if pb > 0 and len(peer_pb) >= config.min_relative_peers and benchmarks.avg_pb > 0:
        pb_points = lookup_tier(pb / benchmarks.avg_pb, tables.pb_ratio, tables.pb_ratio_fallback)

    score = int(clamp(round_half_up(pe_points + pb_points), 0, config.factor_max))
    # Lower P/E than peers ranks higher.
    percentile = int(clamp(100 - round_half_up(percentile_rank(pe, peer_pe)), 0, 100))

    pe_diff = (pe - avg_pe) / avg_pe * 100
    if abs(pe_diff) < 5:
        relative = "in line with"
    elif pe_diff < 0:
        relative = f"{abs(pe_diff):.0f}% below"
    else:
        relative = f"{pe_diff:.0f}% above"
    peg_text = f", PEG: {peg:.2f}" if peg is not None else ""
    detail = f"P/E: {pe:.1f}x ({relative} industry {avg_pe:.1f}x){peg_text}, P/B: {pb:.1f}x"

    if score >= 16:
        assessment = "Excellent value"
    elif score >= 14:
        assessment = "Attractive valuation"
    elif score >= 11:
        assessment = "Fair valuation"
    elif score >= 8:
        assessment = "Slightly expensive"
    else:
        assessment = "Premium valuation"
    if pe_ratio < 1:
        position = "trading below"
    elif pe_ratio <= 1.15:
        position = "near"
    else:
        position = "above"
    tooltip = f"{percentile}th percentile. {assessment} - {position} {benchmarks.industry} average"
    return FactorScore(score=score, detail=detail, tooltip=tooltip, percentile=percentile)


def _absolute_valuation(pe: float, pb: float, peg: float | None, config: ScoringConfig) -> FactorScore:
    """Industry-agnostic P/E thresholds for thin peer samples."""

    tables = config.valuation
    points = lookup_tier(pe, tables.absolute_pe, tables.absolute_pe_fallback, inclusive=False)
    if peg is not None:
        if peg < tables.absolute_peg_cheap_below:
            points += tables.absolute_peg_adjustment
        elif peg > tables.absolute_peg_expensive_above:
            points -= tables.absolute_peg_adjustment
    score = int(clamp(round_half_up(points), 0, config.factor_max))
    peg_text = f", PEG: {peg:.2f}" if peg is not None else ""
    return FactorScore(
        score=score,
        detail=f"P/E: {pe:.1f}x, P/B: {pb:.1f}x{peg_text}",
        tooltip="Limited peer data; using absolute valuation assessment",
        percentile=config.neutral_percentile,
    )
