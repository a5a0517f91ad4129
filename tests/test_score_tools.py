"""Tests for scoring tool registration and JSON payloads."""

from __future__ import annotations

import asyncio
import json
from types import SimpleNamespace

from factorfive_mcp.config.settings import ScoringConfig
from factorfive_mcp.providers.base import BaseDataProvider
from factorfive_mcp.schemas.models import (
    CompanyProfile,
    FinancialMetrics,
    PeerMetrics,
    PriceTarget,
    QuoteData,
    RecommendationTrend,
)
from factorfive_mcp.tools.score_tools import register_score_tools


class _FakeMCP:
    def __init__(self) -> None:
        self.tools: dict[str, object] = {}

    def tool(self, name: str):
        def _decorator(func):
            self.tools[name] = func
            return func

        return _decorator


class _FakeProvider(BaseDataProvider):
    name = "fake"

    async def get_quote(self, ticker: str) -> QuoteData | None:
        return None if ticker == "NOPE" else QuoteData(ticker=ticker, price=50.0)

    async def get_company_profile(self, ticker: str) -> CompanyProfile | None:
        return None if ticker == "NOPE" else CompanyProfile(ticker=ticker, name="Chipco", industry="Semiconductors")

    async def get_basic_financials(self, ticker: str) -> FinancialMetrics | None:
        return FinancialMetrics(pe=22.0, roe=18.0)

    async def get_recommendation_trends(self, ticker: str) -> list[RecommendationTrend]:
        return [RecommendationTrend(strong_buy=3, buy=4, hold=3)]

    async def get_price_target(self, ticker: str) -> PriceTarget | None:
        return None

    async def get_peers(self, ticker: str) -> list[str]:
        return [ticker, "AAA", "BBB"]

    async def get_peer_metrics(self, ticker: str) -> PeerMetrics | None:
        return PeerMetrics(symbol=ticker, pe=20.0 if ticker == "AAA" else 30.0, roe=10.0)


def _register() -> _FakeMCP:
    mcp = _FakeMCP()
    settings = SimpleNamespace(peer_limit=10, default_industry="Technology", scoring=ScoringConfig())
    register_score_tools(mcp, _FakeProvider(), settings)  # type: ignore[arg-type]
    return mcp


def test_register_score_tools_exposes_expected_names() -> None:
    mcp = _register()
    assert set(mcp.tools) == {"score_stock", "get_industry_benchmarks", "score_from_metrics"}


def test_score_stock_returns_report_json() -> None:
    mcp = _register()
    payload = json.loads(asyncio.run(mcp.tools["score_stock"]("chip")))
    result = payload["result"]
    assert result["symbol"] == "CHIP"
    assert 0 <= result["score"] <= 100
    assert result["rating"] in {"Strong Buy", "Buy", "Hold", "Sell", "Strong Sell"}
    assert result["breakdown"]["peer_context"] == {
        "industry": "Semiconductors",
        "peer_count": 2,
        "percentile_ranks": result["breakdown"]["peer_context"]["percentile_ranks"],
    }
    assert payload["peers"] == ["AAA", "BBB"]


def test_score_stock_reports_unknown_symbol_as_error() -> None:
    mcp = _register()
    payload = json.loads(asyncio.run(mcp.tools["score_stock"]("nope")))
    assert payload["error"]["code"] == "invalid_symbol"
    assert "NOPE" in payload["error"]["message"]


def test_get_industry_benchmarks_averages_peers() -> None:
    mcp = _register()
    payload = json.loads(asyncio.run(mcp.tools["get_industry_benchmarks"]("chip")))
    assert payload["ticker"] == "CHIP"
    assert payload["benchmarks"]["industry"] == "Semiconductors"
    assert payload["benchmarks"]["peer_count"] == 2
    assert payload["benchmarks"]["avg_pe"] == 25.0
    assert [peer["symbol"] for peer in payload["peers"]] == ["AAA", "BBB"]


def test_score_from_metrics_scores_supplied_payload() -> None:
    mcp = _register()
    request = {
        "symbol": "acme",
        "quote": {"ticker": "ACME", "c": 100},
        "recommendations": [{"strongBuy": 10, "buy": 5, "hold": 5}],
        "price_target": {"targetMean": 125},
    }
    payload = json.loads(asyncio.run(mcp.tools["score_from_metrics"](json.dumps(request))))
    assert payload["symbol"] == "ACME"
    assert payload["breakdown"]["peer_context"]["industry"] == "Unknown"
    assert payload["breakdown"]["peer_context"]["peer_count"] == 0
    assert payload["breakdown"]["analyst"]["detail"] == "75% bullish (15/20), 25.0% to target"


def test_score_from_metrics_rejects_invalid_payload() -> None:
    mcp = _register()
    payload = json.loads(asyncio.run(mcp.tools["score_from_metrics"]('{"symbol": ""}')))
    assert payload["error"]["code"] == "validation_error"
    assert payload["error"]["details"]


def test_score_from_metrics_rejects_blank_symbol() -> None:
    mcp = _register()
    request = {"symbol": "   ", "quote": {"ticker": "ACME", "c": 100}}
    payload = json.loads(asyncio.run(mcp.tools["score_from_metrics"](json.dumps(request))))
    assert payload["error"]["code"] == "validation_error"
