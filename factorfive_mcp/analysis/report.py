"""Fetch orchestration: gather target and peer data, then run the scoring engine."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from typing import Protocol, TypeVar

from factorfive_mcp.config.settings import ScoringConfig
from factorfive_mcp.providers.base import BaseDataProvider
from factorfive_mcp.schemas.models import PeerMetrics, StockScoreReport
from factorfive_mcp.scoring.engine import calculate_stock_score
from factorfive_mcp.utils.cache import TTLCache

LOGGER = logging.getLogger(__name__)
T = TypeVar("T")


class ReportSettings(Protocol):
    peer_limit: int
    default_industry: str
    scoring: ScoringConfig


class ReportError(RuntimeError):
    """Raised when data required for a score cannot be obtained."""

    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message


async def _optional(label: str, call: Awaitable[T], default: T, warnings: list[str]) -> T:
    """Await a non-critical fetch, degrading to ``default`` on failure."""

    try:
        return await call
    except RuntimeError as error:
        LOGGER.warning("Non-critical fetch failed", extra={"fetch": label, "error": str(error)})
        warnings.append(f"{label} unavailable")
        return default


async def fetch_peer_metrics(
    provider: BaseDataProvider,
    ticker: str,
    limit: int,
    cache: TTLCache[PeerMetrics] | None = None,
) -> list[PeerMetrics]:
    """Resolve up to ``limit`` peers of ``ticker`` and fetch their metrics concurrently."""

    try:
        symbols = await provider.get_peers(ticker)
    except RuntimeError as error:
        LOGGER.warning("Peer lookup failed", extra={"ticker": ticker, "error": str(error)})
        return []

    selected: list[str] = []
    for symbol in symbols:
        if symbol != ticker and symbol not in selected:
            selected.append(symbol)
    selected = selected[:limit]

    async def _one(symbol: str) -> PeerMetrics | None:
        if cache is not None:
            cached = cache.get(symbol)
            if cached is not None:
                return cached
        try:
            metrics = await provider.get_peer_metrics(symbol)
        except RuntimeError as error:
            LOGGER.warning("Peer metrics fetch failed", extra={"peer": symbol, "error": str(error)})
            return None
        if metrics is not None and cache is not None:
            cache.set(symbol, metrics)
        return metrics

    results = await asyncio.gather(*(_one(symbol) for symbol in selected))
    return [peer for peer in results if peer is not None]


async def build_score_report(
    provider: BaseDataProvider,
    ticker: str,
    settings: ReportSettings,
    cache: TTLCache[PeerMetrics] | None = None,
) -> StockScoreReport:
    """Fetch everything needed for ``ticker`` and score it against its peers."""

    symbol = ticker.upper().strip()
    if not symbol:
        raise ReportError("invalid_symbol", "Ticker symbol is required")

    try:
        quote, profile = await asyncio.gather(
            provider.get_quote(symbol),
            provider.get_company_profile(symbol),
        )
    except RuntimeError as error:
        raise ReportError("upstream_error", f"Failed to fetch quote or profile for {symbol}") from error
    if quote is None or profile is None:
        raise ReportError("invalid_symbol", f"No data found for symbol: {symbol}")

    warnings: list[str] = []
    financials, recommendations, price_target = await asyncio.gather(
        _optional("financials", provider.get_basic_financials(symbol), None, warnings),
        _optional("recommendations", provider.get_recommendation_trends(symbol), [], warnings),
        _optional("price_target", provider.get_price_target(symbol), None, warnings),
    )
    industry = profile.industry or settings.default_industry
    peers = await fetch_peer_metrics(provider, symbol, settings.peer_limit, cache)
    if not peers:
        warnings.append("no peer data; scores use neutral and absolute fallbacks")

    result = calculate_stock_score(
        symbol=symbol,
        quote=quote,
        financials=financials,
        recommendations=recommendations,
        price_target=price_target,
        peer_metrics=peers,
        industry=industry,
        config=settings.scoring,
    )
    LOGGER.info(
        "Built score report",
        extra={"ticker": symbol, "score": result.score, "peer_count": len(peers), "warnings": len(warnings)},
    )
    return StockScoreReport(
        profile=profile,
        quote=quote,
        result=result,
        peers=[peer.symbol for peer in peers],
        warnings=warnings,
    )
