"""Finnhub provider implementation."""

from __future__ import annotations

import asyncio
from typing import Any

from pydantic import ValidationError

from factorfive_mcp.providers.base import BaseDataProvider
from factorfive_mcp.schemas.models import (
    CompanyProfile,
    FinancialMetrics,
    PeerMetrics,
    PriceTarget,
    QuoteData,
    RecommendationTrend,
    coerce_metric,
)
from factorfive_mcp.utils.http import HttpClient


class FinnhubProvider(BaseDataProvider):
    """Fetch quotes, fundamentals, analyst data and peers from Finnhub."""

    name = "finnhub"
    _base_url = "https://finnhub.io/api/v1"

    def __init__(self, api_key: str, http_client: HttpClient) -> None:
        self._api_key = api_key
        self._http_client = http_client

    async def _get(self, path: str, **params: str) -> dict[str, Any] | list[Any] | None:
        return await self._http_client.get_json(
            f"{self._base_url}{path}",
            params={**params, "token": self._api_key},
        )

    async def get_quote(self, ticker: str) -> QuoteData | None:
        payload = await self._get("/quote", symbol=ticker)
        # Finnhub answers unknown symbols with an all-zero quote.
        if not isinstance(payload, dict) or not payload.get("c"):
            return None
        try:
            return QuoteData.model_validate({**payload, "ticker": ticker})
        except ValidationError:
            return None

    async def get_company_profile(self, ticker: str) -> CompanyProfile | None:
        payload = await self._get("/stock/profile2", symbol=ticker)
        if not isinstance(payload, dict) or not payload.get("name"):
            return None
        try:
            return CompanyProfile.model_validate({**payload, "ticker": ticker})
        except ValidationError:
            return None

    async def get_basic_financials(self, ticker: str) -> FinancialMetrics | None:
        payload = await self._get("/stock/metric", symbol=ticker, metric="all")
        metrics = _metric_bundle(payload)
        if metrics is None:
            return None
        try:
            return FinancialMetrics.model_validate(metrics)
        except ValidationError:
            return None

    async def get_recommendation_trends(self, ticker: str) -> list[RecommendationTrend]:
        payload = await self._get("/stock/recommendation", symbol=ticker)
        if not isinstance(payload, list):
            return []
        trends: list[RecommendationTrend] = []
        for entry in payload:
            if not isinstance(entry, dict):
                continue
            try:
                trends.append(RecommendationTrend.model_validate(entry))
            except ValidationError:
                continue
        return trends

    async def get_price_target(self, ticker: str) -> PriceTarget | None:
        payload = await self._get("/stock/price-target", symbol=ticker)
        if not isinstance(payload, dict) or not payload:
            return None
        try:
            return PriceTarget.model_validate(payload)
        except ValidationError:
            return None

    async def get_peers(self, ticker: str) -> list[str]:
        payload = await self._get("/stock/peers", symbol=ticker)
        if not isinstance(payload, list):
            return []
        return [str(symbol).upper() for symbol in payload if isinstance(symbol, str) and symbol.strip()]

    async def get_peer_metrics(self, ticker: str) -> PeerMetrics | None:
        quote_payload, metric_payload = await asyncio.gather(
            self._get("/quote", symbol=ticker),
            self._get("/stock/metric", symbol=ticker, metric="all"),
        )
        metrics = _metric_bundle(metric_payload)
        if metrics is None or not isinstance(quote_payload, dict):
            return None
        # Daily change stands in for momentum; no price history is fetched.
        momentum = coerce_metric(quote_payload.get("dp"))
        return PeerMetrics(
            symbol=ticker,
            revenue_growth=_first_present(metrics, "revenueGrowthQuarterlyYoy", "revenueGrowthAnnual"),
            eps_growth=_first_present(metrics, "epsGrowthQuarterlyYoy", "epsGrowthAnnual"),
            roe=coerce_metric(metrics.get("roeRfy")),
            roa=coerce_metric(metrics.get("roaRfy")),
            net_margin=coerce_metric(metrics.get("netProfitMarginAnnual")),
            operating_margin=coerce_metric(metrics.get("operatingMarginAnnual")),
            pe=coerce_metric(metrics.get("peNormalizedAnnual")),
            pb=coerce_metric(metrics.get("pbAnnual")),
            debt_equity=coerce_metric(metrics.get("debtEquityAnnual")),
            current_ratio=coerce_metric(metrics.get("currentRatioAnnual")),
            momentum_1m=momentum,
            momentum_3m=momentum,
        )


def _metric_bundle(payload: Any) -> dict[str, Any] | None:
    if not isinstance(payload, dict):
        return None
    metrics = payload.get("metric")
    if not isinstance(metrics, dict) or not metrics:
        return None
    return metrics


def _first_present(metrics: dict[str, Any], *keys: str) -> float | None:
    for key in keys:
        value = coerce_metric(metrics.get(key))
        if value is not None:
            return value
    return None
