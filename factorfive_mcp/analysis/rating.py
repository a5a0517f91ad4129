"""Rating labels derived from the composite score."""

from __future__ import annotations

from factorfive_mcp.schemas.models import Rating

# (minimum score, label), checked top-down
_RATING_BANDS: tuple[tuple[int, Rating], ...] = (
    (70, "Strong Buy"),
    (55, "Buy"),
    (40, "Hold"),
    (25, "Sell"),
)


def score_to_rating(score: int) -> Rating:
    """Map a 0-100 composite score to a Strong Buy .. Strong Sell label."""

    for threshold, label in _RATING_BANDS:
        if score >= threshold:
            return label
    return "Strong Sell"
