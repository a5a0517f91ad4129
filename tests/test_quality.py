"""Tests for the quality scorer and its sub-scores."""

from __future__ import annotations

import pytest

from factorfive_mcp.config.settings import ScoringConfig
from factorfive_mcp.schemas.models import FinancialMetrics, PeerMetrics
from factorfive_mcp.scoring.benchmarks import calculate_industry_benchmarks
from factorfive_mcp.scoring.quality import (
    QualityComponents,
    balance_sheet_strength,
    capital_efficiency,
    cash_flow_quality,
    earnings_stability,
    score_quality,
)

CONFIG = ScoringConfig()


def _levered_peers() -> list[PeerMetrics]:
    return [
        PeerMetrics(symbol="AAA", debt_equity=0.5, current_ratio=1.5, roa=5.0),
        PeerMetrics(symbol="BBB", debt_equity=1.0, current_ratio=2.0, roa=6.0),
        PeerMetrics(symbol="CCC", debt_equity=1.5, current_ratio=2.5, roa=7.0),
    ]


def test_missing_financials_is_neutral() -> None:
    result = score_quality(None, [], calculate_industry_benchmarks([], "Tech"), CONFIG)
    assert result.score == 10
    assert result.percentile == 50


def test_low_leverage_earns_full_debt_points() -> None:
    financials = FinancialMetrics(debt_equity=0.3, current_ratio=1.5)
    assert balance_sheet_strength(financials, [], CONFIG) == pytest.approx(4.0)


def test_unreported_leverage_is_treated_as_heavy() -> None:
    financials = FinancialMetrics()
    assert balance_sheet_strength(financials, [], CONFIG) < 1.0


def test_peer_outlier_leverage_is_ignored() -> None:
    peers = [*_levered_peers(), PeerMetrics(symbol="DDD", debt_equity=750.0)]
    financials = FinancialMetrics(debt_equity=1.0, current_ratio=2.0)
    assert balance_sheet_strength(financials, peers, CONFIG) == pytest.approx(2.5)


@pytest.mark.parametrize(
    ("net_margin", "eps_annual", "eps_quarterly", "expected"),
    [
        (10.0, 20.0, 25.0, 5.0),
        (10.0, 20.0, 50.0, 4.0),
        (10.0, 20.0, None, 5.0),
        (-5.0, 20.0, 20.0, 1.0),
        (10.0, -60.0, -60.0, 1.0),
        (None, None, None, 1.0),
    ],
)
def test_earnings_stability_proxy(
    net_margin: float | None,
    eps_annual: float | None,
    eps_quarterly: float | None,
    expected: float,
) -> None:
    financials = FinancialMetrics(
        net_margin=net_margin,
        eps_growth_annual=eps_annual,
        eps_growth_quarterly_yoy=eps_quarterly,
    )
    assert earnings_stability(financials) == expected


@pytest.mark.parametrize(
    ("operating_margin", "net_margin", "expected"),
    [
        (25.0, 12.0, 5.0),
        (16.0, 9.0, 4.0),
        (12.0, 6.0, 3.5),
        (6.0, 3.0, 2.0),
        (-1.0, 5.0, 0.5),
        (3.0, 1.0, 2.5),
        (None, None, 2.5),
    ],
)
def test_cash_flow_proxy_bands(operating_margin: float | None, net_margin: float | None, expected: float) -> None:
    financials = FinancialMetrics(operating_margin=operating_margin, net_margin=net_margin)
    assert cash_flow_quality(financials) == expected


def test_capital_efficiency_roic_tiers_and_roa() -> None:
    benchmarks = calculate_industry_benchmarks([], "Tech")
    assert capital_efficiency(FinancialMetrics(roe=20.0), [], benchmarks, CONFIG) == pytest.approx(4.0)
    assert capital_efficiency(FinancialMetrics(roe=8.0), [], benchmarks, CONFIG) == pytest.approx(2.5)
    assert capital_efficiency(FinancialMetrics(roe=-3.0), [], benchmarks, CONFIG) == pytest.approx(1.0)


def test_capital_efficiency_is_capped() -> None:
    peers = _levered_peers()
    financials = FinancialMetrics(roe=40.0, roa=30.0)
    benchmarks = calculate_industry_benchmarks(peers, "Tech")
    assert capital_efficiency(financials, peers, benchmarks, CONFIG) == 5.0


def test_mega_cap_profile_detection() -> None:
    assert QualityComponents(0.0, 4.0, 4.0, 3.5).is_mega_cap_profile
    assert not QualityComponents(5.0, 3.0, 5.0, 5.0).is_mega_cap_profile
    assert QualityComponents(1.0, 2.0, 3.0, 4.0).total == 10.0


def test_highly_levered_cash_machine_stays_above_neutral() -> None:
    peers = _levered_peers()
    financials = FinancialMetrics(
        debt_equity=4.0,
        current_ratio=0.8,
        net_margin=25.0,
        operating_margin=30.0,
        eps_growth_annual=10.0,
        eps_growth_quarterly_yoy=12.0,
        roe=150.0,
        roa=6.0,
    )
    result = score_quality(financials, peers, calculate_industry_benchmarks(peers, "Tech"), CONFIG)
    assert result.score == 14
    assert "Cash flow: 5.0/5" in result.detail
    assert "relative to 3 peers" in result.tooltip


def test_distressed_company_scores_low() -> None:
    peers = _levered_peers()
    financials = FinancialMetrics(
        debt_equity=6.0,
        current_ratio=0.5,
        net_margin=-12.0,
        operating_margin=-8.0,
        eps_growth_annual=-80.0,
        roe=-20.0,
        roa=-10.0,
    )
    result = score_quality(financials, peers, calculate_industry_benchmarks(peers, "Tech"), CONFIG)
    assert result.score <= 3
    assert "Quality concerns" in result.tooltip
    assert 0 <= result.percentile <= 100
