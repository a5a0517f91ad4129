"""Analyst factor: recommendation consensus plus price-target upside."""

from __future__ import annotations

from collections.abc import Sequence

from factorfive_mcp.config.settings import AnalystTables, ScoringConfig
from factorfive_mcp.schemas.models import FactorScore, PriceTarget, QuoteData, RecommendationTrend
from factorfive_mcp.scoring.statistics import clamp, lookup_floor_tier, round_half_up


def recommendation_points(bullish_pct: float, tables: AnalystTables) -> float:
    """Piecewise-linear 0-15 curve over the bullish share of analysts."""

    for lower, base, pct_per_point in tables.recommendation_curve:
        if bullish_pct >= lower:
            return base + (bullish_pct - lower) / pct_per_point
    lowest = tables.recommendation_curve[-1][0] if tables.recommendation_curve else 100.0
    return bullish_pct / lowest * tables.recommendation_floor_points


def price_target_upside(quote: QuoteData, price_target: PriceTarget | None) -> float | None:
    """Percent move from the current price to the mean target, if both are usable."""

    if price_target is None or not price_target.target_mean:
        return None
    if quote.price is None or quote.price <= 0:
        return None
    return (price_target.target_mean - quote.price) / quote.price * 100


def score_analyst(
    quote: QuoteData,
    recommendations: Sequence[RecommendationTrend],
    price_target: PriceTarget | None,
    config: ScoringConfig,
) -> FactorScore:
    """Score the latest recommendation period (15 pts) and target upside (5 pts)."""

    latest = recommendations[0] if recommendations else None
    if latest is None or latest.total == 0:
        return FactorScore(
            score=config.neutral_score,
            detail="Limited analyst coverage",
            tooltip="Insufficient analyst data",
            percentile=config.neutral_percentile,
        )

    tables = config.analyst
    total = latest.total
    bullish_pct = latest.bullish / total * 100
    bearish_pct = latest.bearish / total * 100
    rec_points = recommendation_points(bullish_pct, tables)

    upside = price_target_upside(quote, price_target)
    if upside is None:
        target_points = tables.no_target_points
        detail = f"{bullish_pct:.0f}% bullish consensus ({latest.bullish}/{total} analysts)"
    else:
        target_points = lookup_floor_tier(upside, tables.upside, tables.upside_fallback)
        detail = f"{bullish_pct:.0f}% bullish ({latest.bullish}/{total}), {upside:.1f}% to target"

    if bearish_pct > 30:
        tooltip = f"{bearish_pct:.0f}% bearish - analyst concerns present"
    elif bullish_pct > 70:
        tooltip = "Strong bullish consensus - high analyst confidence"
    else:
        tooltip = "Mixed analyst sentiment"

    return FactorScore(
        score=int(clamp(round_half_up(rec_points + target_points), 0, config.factor_max)),
        detail=detail,
        tooltip=tooltip,
        percentile=int(clamp(round_half_up(bullish_pct), 0, 100)),
    )
