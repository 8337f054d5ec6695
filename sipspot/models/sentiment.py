"""Aggregates over a cafe's reviews."""
from __future__ import annotations

from dataclasses import dataclass, field

from sipspot.models.utils import to_float, to_int


@dataclass
class SentimentStats:
    """Counts of analysed reviews per sentiment.

    Percentages are always derived from the counts; whatever the server
    sends alongside them is ignored.
    """
    positive: int = 0
    negative: int = 0
    neutral: int = 0

    @classmethod
    def from_api(cls, raw) -> SentimentStats | None:
        if not isinstance(raw, dict):
            return None
        return cls(
            positive=max(0, to_int(raw.get("positive"))),
            negative=max(0, to_int(raw.get("negative"))),
            neutral=max(0, to_int(raw.get("neutral"))),
        )

    @property
    def total(self) -> int:
        return self.positive + self.negative + self.neutral

    @property
    def percentages(self) -> dict[str, int]:
        """Whole-number share of each sentiment (all zero when empty)."""
        total = self.total
        if total == 0:
            return {"positive": 0, "neutral": 0, "negative": 0}
        return {
            name: int(count * 100 / total + 0.5)
            for name, count in (
                ("positive", self.positive),
                ("neutral", self.neutral),
                ("negative", self.negative),
            )
        }

    @property
    def dominant(self) -> str | None:
        if self.total == 0:
            return None
        counts = {"positive": self.positive, "neutral": self.neutral, "negative": self.negative}
        return max(counts, key=counts.get)


@dataclass
class CafeStats:
    """Rating distribution and engagement counters from /cafes/:id/stats."""
    total_reviews: int = 0
    average_rating: float = 0.0
    rating_category: str | None = None
    rating_distribution: dict[int, int] = field(default_factory=dict)
    recent_review_count: int = 0
    view_count: int = 0
    favorite_count: int = 0

    @classmethod
    def from_api(cls, raw) -> CafeStats | None:
        if not isinstance(raw, dict):
            return None
        distribution = {
            to_int(star): to_int(count)
            for star, count in (raw.get("ratingDistribution") or {}).items()
        }
        return cls(
            total_reviews=to_int(raw.get("totalReviews")),
            average_rating=to_float(raw.get("averageRating")),
            rating_category=raw.get("ratingCategory"),
            rating_distribution=distribution,
            recent_review_count=to_int(raw.get("recentReviewCount")),
            view_count=to_int(raw.get("viewCount")),
            favorite_count=to_int(raw.get("favoriteCount")),
        )
