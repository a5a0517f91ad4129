"""Industry benchmark aggregation over a peer basket."""

from __future__ import annotations

from collections.abc import Callable, Sequence

from factorfive_mcp.schemas.models import IndustryBenchmarks, PeerMetrics
from factorfive_mcp.scoring.statistics import mean


def peer_values(
    peers: Sequence[PeerMetrics],
    field: str,
    predicate: Callable[[float], bool] | None = None,
) -> list[float]:
    """Collect the reported values of one metric, optionally filtered."""

    values: list[float] = []
    for peer in peers:
        value = getattr(peer, field)
        if value is None:
            continue
        if predicate is not None and not predicate(value):
            continue
        values.append(value)
    return values


def calculate_industry_benchmarks(peer_metrics: Sequence[PeerMetrics], industry: str) -> IndustryBenchmarks:
    """Average each metric across the peers that reported it."""

    def avg(field: str) -> float:
        return mean(peer_values(peer_metrics, field))

    return IndustryBenchmarks(
        industry=industry,
        peer_count=len(peer_metrics),
        avg_revenue_growth=avg("revenue_growth"),
        avg_eps_growth=avg("eps_growth"),
        avg_roe=avg("roe"),
        avg_roa=avg("roa"),
        avg_net_margin=avg("net_margin"),
        avg_operating_margin=avg("operating_margin"),
        avg_pe=avg("pe"),
        avg_pb=avg("pb"),
        avg_debt_equity=avg("debt_equity"),
        avg_current_ratio=avg("current_ratio"),
        avg_momentum_1m=avg("momentum_1m"),
        avg_momentum_3m=avg("momentum_3m"),
    )
