"""Tests for peer-sample statistics and the z-score transform."""

from __future__ import annotations

import pytest

from factorfive_mcp.config.settings import ScoringConfig
from factorfive_mcp.scoring.statistics import (
    lookup_floor_tier,
    lookup_tier,
    mean,
    percentile_rank,
    round_half_up,
    std_dev,
    z_score,
    z_to_points,
)


def test_mean_and_std_dev() -> None:
    assert mean([]) == 0.0
    assert mean([2.0, 4.0, 6.0]) == 4.0
    assert std_dev([], 10.0) == 0.0
    assert std_dev([2.0, 4.0, 6.0], 4.0) == pytest.approx((8 / 3) ** 0.5)
    assert std_dev([1e200, 0.0, 5.0], 0.0) == pytest.approx(1e200 / 3**0.5)


def test_z_score_zero_spread_is_neutral() -> None:
    assert z_score(42.0, 10.0, 0.0) == 0.0
    assert z_score(12.0, 10.0, 2.0) == 1.0
    assert z_score(1e308, -1e308, float("inf")) == 0.0


def test_percentile_rank_counts_peers_strictly_below() -> None:
    peers = [4.0, 1.0, 3.0, 2.0]
    assert percentile_rank(3.0, peers) == 50.0
    assert percentile_rank(0.5, peers) == 0.0
    assert percentile_rank(2.5, peers) == 50.0
    assert percentile_rank(9.0, peers) == 100.0
    assert percentile_rank(1.0, [1.0, 1.0]) == 0.0


def test_percentile_rank_empty_sample_is_median() -> None:
    assert percentile_rank(7.0, []) == 50.0


@pytest.mark.parametrize("max_points", [2, 3, 6, 8, 10, 20])
def test_z_to_points_neutral_is_half(max_points: int) -> None:
    assert z_to_points(0.0, max_points) == max_points / 2


def test_z_to_points_monotone_and_bounded() -> None:
    grid = [step / 10 for step in range(-50, 51)]
    points = [z_to_points(z, 20) for z in grid]
    assert all(earlier <= later for earlier, later in zip(points, points[1:]))
    assert all(0 <= value <= 20 for value in points)


def test_z_to_points_tails() -> None:
    assert z_to_points(3.0, 20) >= 0.95 * 20
    assert z_to_points(-3.0, 20) <= 0.05 * 20
    assert z_to_points(50.0, 10) == 10
    assert z_to_points(-50.0, 10) == pytest.approx(0.0, abs=0.01)


def test_z_to_points_amplifies_positive_deviation() -> None:
    plain_sigmoid = 20 / (1 + 2.718281828459045 ** -2.5)
    assert z_to_points(1.0, 20) > plain_sigmoid
    assert z_to_points(-1.0, 20) < 20 - plain_sigmoid


def test_z_to_points_uses_config_steepness() -> None:
    gentle = ScoringConfig(sigmoid_steepness=0.5, amplification=0.0)
    assert z_to_points(1.0, 20, gentle) < z_to_points(1.0, 20)
    assert z_to_points(0.0, 20, gentle) == 10


def test_round_half_up() -> None:
    assert round_half_up(2.5) == 3
    assert round_half_up(12.5) == 13
    assert round_half_up(12.49) == 12
    assert round_half_up(-0.5) == 0


def test_tier_lookups() -> None:
    tiers = ((1.0, 10.0), (2.0, 5.0))
    assert lookup_tier(1.0, tiers, 0.0) == 10.0
    assert lookup_tier(1.0, tiers, 0.0, inclusive=False) == 5.0
    assert lookup_tier(3.0, tiers, 0.0) == 0.0
    descending = ((30.0, 5.0), (0.0, 1.5))
    assert lookup_floor_tier(35.0, descending, 0.0) == 5.0
    assert lookup_floor_tier(30.0, descending, 0.0) == 1.5
    assert lookup_floor_tier(-1.0, descending, 0.0) == 0.0
