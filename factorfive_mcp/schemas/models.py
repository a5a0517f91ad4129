"""Pydantic models shared by providers, the scoring engine and MCP tools."""

from __future__ import annotations

import math
from typing import Annotated, Any, Literal

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator

Rating = Literal["Strong Buy", "Buy", "Hold", "Sell", "Strong Sell"]


def coerce_metric(value: Any) -> float | None:
    """Convert an upstream metric to a finite float, or None when unusable."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if value in ("", "None", "null", "NaN"):
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


Metric = Annotated[float | None, BeforeValidator(coerce_metric)]


class QuoteData(BaseModel):
    """Current quote snapshot."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    ticker: str
    price: Metric = Field(default=None, alias="c")
    change: Metric = Field(default=None, alias="d")
    change_percent: Metric = Field(default=None, alias="dp")
    high: Metric = Field(default=None, alias="h")
    low: Metric = Field(default=None, alias="l")
    open: Metric = Field(default=None, alias="o")
    previous_close: Metric = Field(default=None, alias="pc")


class CompanyProfile(BaseModel):
    """Company profile fields used for labeling."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    ticker: str
    name: str | None = None
    industry: str | None = Field(default=None, alias="finnhubIndustry")
    exchange: str | None = None
    country: str | None = None
    market_cap: Metric = Field(default=None, alias="marketCapitalization")
    website: str | None = Field(default=None, alias="weburl")


class FinancialMetrics(BaseModel):
    """Target company metric bundle, keyed by Finnhub basic-financials names."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    pe: Metric = Field(default=None, alias="peNormalizedAnnual")
    pb: Metric = Field(default=None, alias="pbAnnual")
    peg: Metric = Field(default=None, alias="pegAnnual")
    roa: Metric = Field(default=None, alias="roaRfy")
    roe: Metric = Field(default=None, alias="roeRfy")
    net_margin: Metric = Field(default=None, alias="netProfitMarginAnnual")
    operating_margin: Metric = Field(default=None, alias="operatingMarginAnnual")
    revenue_growth_annual: Metric = Field(default=None, alias="revenueGrowthAnnual")
    eps_growth_annual: Metric = Field(default=None, alias="epsGrowthAnnual")
    revenue_growth_quarterly_yoy: Metric = Field(default=None, alias="revenueGrowthQuarterlyYoy")
    eps_growth_quarterly_yoy: Metric = Field(default=None, alias="epsGrowthQuarterlyYoy")
    current_ratio: Metric = Field(default=None, alias="currentRatioAnnual")
    debt_equity: Metric = Field(default=None, alias="debtEquityAnnual")

    @property
    def revenue_growth(self) -> float | None:
        """Quarterly YoY revenue growth, falling back to annual."""

        if self.revenue_growth_quarterly_yoy is not None:
            return self.revenue_growth_quarterly_yoy
        return self.revenue_growth_annual

    @property
    def eps_growth(self) -> float | None:
        """Quarterly YoY EPS growth, falling back to annual."""

        if self.eps_growth_quarterly_yoy is not None:
            return self.eps_growth_quarterly_yoy
        return self.eps_growth_annual


class PeerMetrics(BaseModel):
    """One peer company's metrics for industry comparison."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    symbol: str
    revenue_growth: Metric = None
    eps_growth: Metric = None
    roe: Metric = None
    roa: Metric = None
    net_margin: Metric = None
    operating_margin: Metric = None
    pe: Metric = None
    pb: Metric = None
    debt_equity: Metric = None
    current_ratio: Metric = None
    momentum_1m: Metric = None
    momentum_3m: Metric = None


class RecommendationTrend(BaseModel):
    """Analyst recommendation counts for one period."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    period: str | None = None
    strong_buy: int = Field(default=0, ge=0, alias="strongBuy")
    buy: int = Field(default=0, ge=0)
    hold: int = Field(default=0, ge=0)
    sell: int = Field(default=0, ge=0)
    strong_sell: int = Field(default=0, ge=0, alias="strongSell")

    @property
    def total(self) -> int:
        return self.strong_buy + self.buy + self.hold + self.sell + self.strong_sell

    @property
    def bullish(self) -> int:
        return self.strong_buy + self.buy

    @property
    def bearish(self) -> int:
        return self.sell + self.strong_sell


class PriceTarget(BaseModel):
    """Analyst consensus price targets."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    target_mean: Metric = Field(default=None, alias="targetMean")
    target_median: Metric = Field(default=None, alias="targetMedian")
    target_high: Metric = Field(default=None, alias="targetHigh")
    target_low: Metric = Field(default=None, alias="targetLow")
    last_updated: str | None = Field(default=None, alias="lastUpdated")


class IndustryBenchmarks(BaseModel):
    """Per-metric peer means for one scoring request."""

    industry: str
    peer_count: int = Field(ge=0)
    avg_revenue_growth: float = 0.0
    avg_eps_growth: float = 0.0
    avg_roe: float = 0.0
    avg_roa: float = 0.0
    avg_net_margin: float = 0.0
    avg_operating_margin: float = 0.0
    avg_pe: float = 0.0
    avg_pb: float = 0.0
    avg_debt_equity: float = 0.0
    avg_current_ratio: float = 0.0
    avg_momentum_1m: float = 0.0
    avg_momentum_3m: float = 0.0


class FactorScore(BaseModel):
    """One 0-20 factor score with its explanation."""

    score: int = Field(ge=0, le=20)
    detail: str
    tooltip: str
    percentile: int = Field(ge=0, le=100)


class PercentileRanks(BaseModel):
    growth: int = Field(ge=0, le=100)
    profitability: int = Field(ge=0, le=100)
    valuation: int = Field(ge=0, le=100)
    quality: int = Field(ge=0, le=100)
    analyst: int = Field(ge=0, le=100)


class PeerContext(BaseModel):
    industry: str
    peer_count: int = Field(ge=0)
    percentile_ranks: PercentileRanks


class ScoreBreakdown(BaseModel):
    """Auditable breakdown behind a composite score."""

    growth: FactorScore
    profitability: FactorScore
    valuation: FactorScore
    quality: FactorScore
    analyst: FactorScore
    raw_total: int = Field(ge=0, le=100)
    adjustment: int
    description: str
    peer_context: PeerContext


class StockScoreResult(BaseModel):
    """Engine output for one scoring request."""

    symbol: str
    score: int = Field(ge=0, le=100)
    rating: Rating
    breakdown: ScoreBreakdown
    benchmarks: IndustryBenchmarks


class StockScoreReport(BaseModel):
    """Tool-facing envelope around a score and the data it was built from."""

    profile: CompanyProfile
    quote: QuoteData
    result: StockScoreResult
    peers: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class ScoreFromMetricsRequest(BaseModel):
    """Caller-supplied inputs for offline scoring."""

    model_config = ConfigDict(populate_by_name=True)

    symbol: str = Field(min_length=1, max_length=15)
    industry: str = "Unknown"
    quote: QuoteData
    financials: FinancialMetrics | None = None
    recommendations: list[RecommendationTrend] = Field(default_factory=list)
    price_target: PriceTarget | None = None
    peers: list[PeerMetrics] = Field(default_factory=list)

    @field_validator("symbol", mode="before")
    @classmethod
    def normalize_symbol(cls, value: object) -> object:
        if isinstance(value, str):
            return value.upper().strip()
        return value
