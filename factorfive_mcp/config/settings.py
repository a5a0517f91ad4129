"""Application settings loaded from environment variables."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# (bound, points) pairs; see scoring.statistics.lookup_tier for matching rules.
Tier = tuple[float, float]


class RetryConfig(BaseModel):
    """Retry behavior for outbound HTTP calls."""

    attempts: int = Field(default=3, ge=1, le=10)
    min_seconds: float = Field(default=0.5, ge=0.1, le=10.0)
    max_seconds: float = Field(default=4.0, ge=0.1, le=20.0)


class ValuationTables(BaseModel):
    """Tier tables used by the valuation scorer."""

    absolute_pe: tuple[Tier, ...] = ((15, 18), (25, 15), (35, 12), (50, 10))
    absolute_pe_fallback: float = 8
    absolute_peg_cheap_below: float = 1.0
    absolute_peg_expensive_above: float = 2.0
    absolute_peg_adjustment: float = 2.0

    pe_ratio: tuple[Tier, ...] = (
        (0.60, 12),
        (0.75, 11.5),
        (0.85, 10.5),
        (0.95, 9.5),
        (1.05, 8),
        (1.15, 6.5),
        (1.30, 4.5),
        (1.50, 3),
        (2.00, 1.5),
    )
    pe_ratio_fallback: float = 0.5
    pe_component_max: float = 12

    peg: tuple[Tier, ...] = ((0.5, 5), (0.8, 4), (1.0, 2.5), (1.3, 1), (1.8, -0.5), (2.5, -2))
    peg_fallback: float = -4

    pb_ratio: tuple[Tier, ...] = (
        (0.60, 8),
        (0.75, 7.5),
        (0.90, 6.5),
        (1.00, 5),
        (1.15, 3.5),
        (1.35, 2),
        (1.60, 1),
    )
    pb_ratio_fallback: float = 0.5
    pb_default: float = 4


class AnalystTables(BaseModel):
    """Recommendation curve and price-target upside tiers."""

    # (lower bound of bullish %, base points, percent per extra point)
    recommendation_curve: tuple[tuple[float, float, float], ...] = (
        (85, 14, 15),
        (70, 11, 5),
        (55, 8, 5),
        (40, 5, 5),
        (25, 2.5, 6),
    )
    recommendation_floor_points: float = 2.5
    upside: tuple[Tier, ...] = ((30, 5), (20, 4.5), (10, 3.5), (5, 2.5), (0, 1.5), (-5, 0.5))
    upside_fallback: float = 0
    no_target_points: float = 1


class CompositeRules(BaseModel):
    """Thresholds for the compound excellence/concern adjustment."""

    excellent_threshold: int = 17
    strong_threshold: int = 15
    weak_threshold: int = 5
    # (minimum count, points), checked in order
    excellent_bonus: tuple[tuple[int, int], ...] = ((4, 15), (3, 12))
    strong_bonus: tuple[tuple[int, int], ...] = ((4, 8), (3, 5))
    weak_penalty: tuple[tuple[int, int], ...] = ((3, 10), (2, 5))


class ScoringConfig(BaseModel):
    """Tuning constants for the peer-relative scoring engine."""

    factor_max: int = 20
    neutral_score: int = 10
    neutral_percentile: int = 50

    sigmoid_steepness: float = Field(default=2.5, gt=0)
    amplification: float = Field(default=0.15, ge=0, lt=1 / 3)
    z_clamp: float = Field(default=3.0, gt=0)

    min_relative_peers: int = Field(default=3, ge=1)
    max_meaningful_pe: float = 500

    valuation: ValuationTables = ValuationTables()
    analyst: AnalystTables = AnalystTables()
    composite: CompositeRules = CompositeRules()


class Settings(BaseSettings):
    """Runtime application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    app_name: str = "factorfive-mcp"
    app_version: str = "1.0.0"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    transport_mode: Literal["auto", "stdio", "http"] = "auto"
    http_transport: Literal["sse", "streamable"] = "sse"
    host: str = "0.0.0.0"
    port: int = 8000
    mcp_path: str = "/mcp"
    health_path: str = "/health"

    request_timeout_seconds: float = Field(default=10.0, ge=1, le=120)
    retry: RetryConfig = RetryConfig()

    finnhub_api_key: str = Field(alias="FINNHUB_API_KEY")
    peer_limit: int = Field(default=10, ge=0, le=25)
    peer_cache_ttl_seconds: float = Field(default=900.0, ge=0)
    default_industry: str = "Technology"

    scoring: ScoringConfig = ScoringConfig()


def get_settings() -> Settings:
    """Return application settings."""

    return Settings()
