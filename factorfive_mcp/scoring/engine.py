"""Deterministic peer-relative stock scoring engine."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from factorfive_mcp.analysis.rating import score_to_rating
from factorfive_mcp.config.settings import CompositeRules, ScoringConfig
from factorfive_mcp.schemas.models import (
    FinancialMetrics,
    PeerContext,
    PeerMetrics,
    PercentileRanks,
    PriceTarget,
    QuoteData,
    RecommendationTrend,
    ScoreBreakdown,
    StockScoreResult,
)
from factorfive_mcp.scoring.analyst import score_analyst
from factorfive_mcp.scoring.benchmarks import calculate_industry_benchmarks
from factorfive_mcp.scoring.growth import score_growth
from factorfive_mcp.scoring.profitability import score_profitability
from factorfive_mcp.scoring.quality import score_quality
from factorfive_mcp.scoring.statistics import clamp, round_half_up
from factorfive_mcp.scoring.valuation import score_valuation

LOGGER = logging.getLogger(__name__)


def _first_met(count: int, rules: tuple[tuple[int, int], ...]) -> int:
    for minimum, points in rules:
        if count >= minimum:
            return points
    return 0


def compound_bonus(scores: Sequence[int], rules: CompositeRules) -> int:
    """Bonus for excelling across several factors; excellent tiers win over strong ones."""

    excellent = sum(1 for score in scores if score >= rules.excellent_threshold)
    strong = sum(1 for score in scores if score >= rules.strong_threshold)
    return _first_met(excellent, rules.excellent_bonus) or _first_met(strong, rules.strong_bonus)


def compound_penalty(scores: Sequence[int], rules: CompositeRules) -> int:
    """Penalty for being weak across several factors."""

    weak = sum(1 for score in scores if score <= rules.weak_threshold)
    return _first_met(weak, rules.weak_penalty)


def apply_compound_adjustment(scores: Sequence[int], config: ScoringConfig | None = None) -> tuple[int, int]:
    """Return ``(final score, signed adjustment)`` for five factor scores."""

    rules = (config or ScoringConfig()).composite
    raw_total = sum(scores)
    adjustment = compound_bonus(scores, rules) - compound_penalty(scores, rules)
    final = int(clamp(round_half_up(raw_total + adjustment), 0, 100))
    return final, adjustment


def describe(peer_count: int, industry: str, adjustment: int) -> str:
    description = f"Context-aware analysis vs {peer_count} {industry} peers using z-score normalization"
    if adjustment > 0:
        description += f" (+{adjustment} compound excellence adjustment)"
    elif adjustment < 0:
        description += f" ({adjustment} compound concern adjustment)"
    return description


def calculate_stock_score(
    symbol: str,
    quote: QuoteData,
    financials: FinancialMetrics | None,
    recommendations: Sequence[RecommendationTrend],
    price_target: PriceTarget | None,
    peer_metrics: Sequence[PeerMetrics],
    industry: str,
    config: ScoringConfig | None = None,
) -> StockScoreResult:
    """Score a company 0-100 against its peer basket.

    Benchmarks are computed once, the five factor scorers run independently
    and the composite applies the compound excellence/concern adjustment.
    Missing data degrades to neutral sub-scores; nothing here raises for
    inputs that validate against the models.
    """

    cfg = config or ScoringConfig()
    peers = list(peer_metrics)
    benchmarks = calculate_industry_benchmarks(peers, industry)

    growth = score_growth(financials, peers, benchmarks, cfg)
    profitability = score_profitability(financials, peers, benchmarks, cfg)
    valuation = score_valuation(financials, peers, benchmarks, cfg)
    quality = score_quality(financials, peers, benchmarks, cfg)
    analyst = score_analyst(quote, recommendations, price_target, cfg)

    factor_scores = [growth.score, profitability.score, valuation.score, quality.score, analyst.score]
    final, adjustment = apply_compound_adjustment(factor_scores, cfg)

    breakdown = ScoreBreakdown(
        growth=growth,
        profitability=profitability,
        valuation=valuation,
        quality=quality,
        analyst=analyst,
        raw_total=sum(factor_scores),
        adjustment=adjustment,
        description=describe(benchmarks.peer_count, industry, adjustment),
        peer_context=PeerContext(
            industry=benchmarks.industry,
            peer_count=benchmarks.peer_count,
            percentile_ranks=PercentileRanks(
                growth=growth.percentile,
                profitability=profitability.percentile,
                valuation=valuation.percentile,
                quality=quality.percentile,
                analyst=analyst.percentile,
            ),
        ),
    )
    LOGGER.debug(
        "Scored stock",
        extra={"symbol": symbol, "score": final, "raw_total": breakdown.raw_total, "peer_count": len(peers)},
    )
    return StockScoreResult(
        symbol=symbol,
        score=final,
        rating=score_to_rating(final),
        breakdown=breakdown,
        benchmarks=benchmarks,
    )
