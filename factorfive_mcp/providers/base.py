"""Provider abstraction for market data integrations."""

from __future__ import annotations

from abc import ABC, abstractmethod

from factorfive_mcp.schemas.models import (
    CompanyProfile,
    FinancialMetrics,
    PeerMetrics,
    PriceTarget,
    QuoteData,
    RecommendationTrend,
)


class BaseDataProvider(ABC):
    """Abstract provider interface."""

    name: str

    @abstractmethod
    async def get_quote(self, ticker: str) -> QuoteData | None:
        """Fetch quote snapshot."""

    @abstractmethod
    async def get_company_profile(self, ticker: str) -> CompanyProfile | None:
        """Fetch company profile."""

    @abstractmethod
    async def get_basic_financials(self, ticker: str) -> FinancialMetrics | None:
        """Fetch the metric bundle used for scoring."""

    @abstractmethod
    async def get_recommendation_trends(self, ticker: str) -> list[RecommendationTrend]:
        """Fetch analyst recommendation counts, most recent period first."""

    @abstractmethod
    async def get_price_target(self, ticker: str) -> PriceTarget | None:
        """Fetch analyst consensus price target."""

    @abstractmethod
    async def get_peers(self, ticker: str) -> list[str]:
        """Fetch symbols of comparable companies."""

    @abstractmethod
    async def get_peer_metrics(self, ticker: str) -> PeerMetrics | None:
        """Fetch one peer's comparison metrics."""
