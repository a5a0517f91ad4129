"""Quality factor: balance sheet, earnings stability, cash flow and capital efficiency.

Four sub-scores of five points each. Earnings stability and cash-flow quality
are proxies: basic financials carry neither multi-year EPS history nor cash
flow statements, so they are inferred from growth rates and margins.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from factorfive_mcp.config.settings import ScoringConfig
from factorfive_mcp.schemas.models import FactorScore, FinancialMetrics, IndustryBenchmarks, PeerMetrics
from factorfive_mcp.scoring.benchmarks import peer_values
from factorfive_mcp.scoring.statistics import (
    clamp,
    mean,
    percentile_rank,
    round_half_up,
    std_dev,
    z_score,
    z_to_points,
)

SUB_SCORE_MAX = 5.0
MISSING_DEBT_EQUITY = 999.0
MAX_PEER_DEBT_EQUITY = 500.0
LOW_LEVERAGE_BELOW = 0.5
FALLBACK_SPREAD = 0.5


@dataclass(frozen=True)
class QualityComponents:
    balance_sheet: float
    earnings_stability: float
    cash_flow: float
    capital_efficiency: float

    @property
    def total(self) -> float:
        return self.balance_sheet + self.earnings_stability + self.cash_flow + self.capital_efficiency

    @property
    def is_mega_cap_profile(self) -> bool:
        """Strong cash generation, returns and earnings regardless of leverage."""

        return self.cash_flow >= 4 and self.capital_efficiency >= 3.5 and self.earnings_stability >= 3.5


def _peer_stats(values: list[float], default_mean: float, default_spread: float) -> tuple[float, float]:
    if not values:
        return default_mean, default_spread
    center = mean(values)
    return center, std_dev(values, center)


def balance_sheet_strength(
    financials: FinancialMetrics,
    peer_metrics: Sequence[PeerMetrics],
    config: ScoringConfig,
) -> float:
    """Inverted D/E z-score (3 pts) plus current-ratio z-score (2 pts)."""

    debt_equity = financials.debt_equity if financials.debt_equity is not None else MISSING_DEBT_EQUITY
    current_ratio = financials.current_ratio if financials.current_ratio is not None else 1.0

    peer_debt = peer_values(peer_metrics, "debt_equity", lambda value: value < MAX_PEER_DEBT_EQUITY)
    avg_debt, debt_spread = _peer_stats(peer_debt, 1.0, FALLBACK_SPREAD)
    if debt_equity < LOW_LEVERAGE_BELOW:
        debt_points = 3.0
    else:
        debt_z = -z_score(debt_equity, avg_debt, debt_spread or FALLBACK_SPREAD)
        debt_points = z_to_points(debt_z, 3, config)

    peer_current = peer_values(peer_metrics, "current_ratio")
    avg_current, current_spread = _peer_stats(peer_current, 1.5, FALLBACK_SPREAD)
    current_z = z_score(current_ratio, avg_current, current_spread or FALLBACK_SPREAD)
    return debt_points + z_to_points(current_z, 2, config)


def earnings_stability(financials: FinancialMetrics) -> float:
    """Proxy from margin sign and agreement between quarterly and annual EPS growth."""

    eps_annual = financials.eps_growth_annual or 0.0
    eps_quarterly = financials.eps_growth_quarterly_yoy
    if eps_quarterly is None:
        eps_quarterly = eps_annual
    net_margin = financials.net_margin or 0.0

    points = 2.5
    if net_margin > 0 and eps_annual > -50:
        points += 1.5
        if abs(eps_annual - eps_quarterly) < 10:
            points += 1
    else:
        points -= 1.5
    return clamp(points, 0, SUB_SCORE_MAX)


def cash_flow_quality(financials: FinancialMetrics) -> float:
    """Proxy banded on operating and net margin together."""

    operating = financials.operating_margin or 0.0
    net = financials.net_margin or 0.0
    if operating > 20 and net > 10:
        return 5.0
    if operating > 15 and net > 8:
        return 4.0
    if operating > 10 and net > 5:
        return 3.5
    if operating > 5 and net > 2:
        return 2.0
    if operating < 0 or net < 0:
        return 0.5
    return 2.5


def capital_efficiency(
    financials: FinancialMetrics,
    peer_metrics: Sequence[PeerMetrics],
    benchmarks: IndustryBenchmarks,
    config: ScoringConfig,
) -> float:
    """ROE as a ROIC proxy (3 pts) plus ROA relative to peers (2 pts)."""

    roic = financials.roe or 0.0
    if roic > 15:
        points = 3.0
    elif roic > 10:
        points = 2.5
    elif roic > 5:
        points = 1.5
    elif roic > 0:
        points = 0.5
    else:
        points = 0.0

    roa = financials.roa or 0.0
    avg_roa, roa_spread = _peer_stats(peer_values(peer_metrics, "roa"), benchmarks.avg_roe * 0.5, 2.0)
    points += z_to_points(z_score(roa, avg_roa, roa_spread), 2, config)
    return min(SUB_SCORE_MAX, points)


def score_quality(
    financials: FinancialMetrics | None,
    peer_metrics: Sequence[PeerMetrics],
    benchmarks: IndustryBenchmarks,
    config: ScoringConfig,
) -> FactorScore:
    """Combine the four quality sub-scores, floored at neutral for mega-cap profiles."""

    if financials is None:
        return FactorScore(
            score=config.neutral_score,
            detail="Limited quality data available",
            tooltip="Measures financial strength, earnings consistency, and capital efficiency relative to peers",
            percentile=config.neutral_percentile,
        )

    components = QualityComponents(
        balance_sheet=balance_sheet_strength(financials, peer_metrics, config),
        earnings_stability=earnings_stability(financials),
        cash_flow=cash_flow_quality(financials),
        capital_efficiency=capital_efficiency(financials, peer_metrics, benchmarks, config),
    )
    score = round_half_up(components.total)
    if components.is_mega_cap_profile:
        score = max(config.neutral_score, score)
    score = int(clamp(score, 0, config.factor_max))

    # Peer composites use a simplified scale; see DESIGN.md.
    peer_composites = [
        (50 if (peer.debt_equity if peer.debt_equity is not None else 1.0) < 2 else 30)
        + (peer.current_ratio if peer.current_ratio is not None else 1.5) * 10
        + (peer.roa or 0.0) * 5
        for peer in peer_metrics
    ]
    percentile = round_half_up(percentile_rank(components.total * 20, peer_composites))

    if score >= 16:
        level = "Exceptional quality"
    elif score >= 13:
        level = "Strong quality"
    elif score >= 10:
        level = "Adequate quality"
    elif score >= 7:
        level = "Below average quality"
    else:
        level = "Quality concerns"
    detail = (
        f"Balance sheet: {components.balance_sheet:.1f}/5, "
        f"Earnings stability: {components.earnings_stability:.1f}/5, "
        f"Cash flow: {components.cash_flow:.1f}/5, "
        f"Capital efficiency: {components.capital_efficiency:.1f}/5"
    )
    tooltip = (
        f"{percentile}th percentile. {level} - Measures financial strength, earnings consistency, "
        f"and capital efficiency relative to {benchmarks.peer_count} peers"
    )
    return FactorScore(score=score, detail=detail, tooltip=tooltip, percentile=percentile)
