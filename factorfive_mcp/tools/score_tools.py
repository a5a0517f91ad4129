"""MCP tool registration for peer-relative stock scoring."""

from __future__ import annotations

import json

from mcp.server.fastmcp import FastMCP
from pydantic import ValidationError

from factorfive_mcp.analysis.report import ReportError, ReportSettings, build_score_report, fetch_peer_metrics
from factorfive_mcp.providers.base import BaseDataProvider
from factorfive_mcp.schemas.models import PeerMetrics, ScoreFromMetricsRequest
from factorfive_mcp.scoring.benchmarks import calculate_industry_benchmarks
from factorfive_mcp.scoring.engine import calculate_stock_score
from factorfive_mcp.utils.cache import TTLCache


def _error(code: str, message: str, details: object | None = None) -> str:
    error: dict[str, object] = {"code": code, "message": message}
    if details is not None:
        error["details"] = details
    return json.dumps({"error": error}, default=str)


def register_score_tools(
    mcp: FastMCP,
    provider: BaseDataProvider,
    settings: ReportSettings,
    cache: TTLCache[PeerMetrics] | None = None,
) -> None:
    """Register all scoring tools."""

    @mcp.tool(name="score_stock")
    async def score_stock(ticker: str) -> str:
        try:
            report = await build_score_report(provider, ticker, settings, cache)
        except ReportError as error:
            return _error(error.code, error.message)
        return report.model_dump_json()

    @mcp.tool(name="get_industry_benchmarks")
    async def get_industry_benchmarks(ticker: str) -> str:
        symbol = ticker.upper().strip()
        try:
            profile = await provider.get_company_profile(symbol)
        except RuntimeError:
            profile = None
        industry = profile.industry if profile and profile.industry else settings.default_industry
        peers = await fetch_peer_metrics(provider, symbol, settings.peer_limit, cache)
        benchmarks = calculate_industry_benchmarks(peers, industry)
        return json.dumps(
            {
                "ticker": symbol,
                "benchmarks": benchmarks.model_dump(mode="json"),
                "peers": [peer.model_dump(mode="json") for peer in peers],
            },
        )

    @mcp.tool(name="score_from_metrics")
    async def score_from_metrics(payload_json: str) -> str:
        try:
            request = ScoreFromMetricsRequest.model_validate_json(payload_json)
        except ValidationError as error:
            return _error("validation_error", "Invalid request payload", error.errors(include_url=False))
        result = calculate_stock_score(
            symbol=request.symbol,
            quote=request.quote,
            financials=request.financials,
            recommendations=request.recommendations,
            price_target=request.price_target,
            peer_metrics=request.peers,
            industry=request.industry,
            config=settings.scoring,
        )
        return result.model_dump_json()
