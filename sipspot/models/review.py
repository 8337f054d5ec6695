"""Review DTOs as returned by the /cafes/:id/reviews and /reviews endpoints."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from sipspot.models.user import UserRef
from sipspot.models.utils import canonical_id, parse_datetime, to_float, to_int

SENTIMENTS = ("positive", "neutral", "negative")
DETAILED_RATING_KEYS = ("coffee", "ambience", "service", "value")


@dataclass
class AIAnalysis:
    """Server-side sentiment analysis of a single review."""
    sentiment: str
    keywords: list[str] = field(default_factory=list)
    summary: str = ""
    confidence: float = 0.0
    analyzed_at: datetime | None = None

    @classmethod
    def from_api(cls, raw) -> AIAnalysis | None:
        if not isinstance(raw, dict) or raw.get("sentiment") not in SENTIMENTS:
            return None
        return cls(
            sentiment=raw["sentiment"],
            keywords=[str(k) for k in raw.get("keywords") or []],
            summary=raw.get("summary") or "",
            confidence=min(1.0, max(0.0, to_float(raw.get("confidence")))),
            analyzed_at=parse_datetime(raw.get("analyzedAt")),
        )


@dataclass
class OwnerResponse:
    content: str
    responded_at: datetime | None = None
    responded_by: str | None = None

    @classmethod
    def from_api(cls, raw) -> OwnerResponse | None:
        if not isinstance(raw, dict) or not raw.get("content"):
            return None
        return cls(
            content=raw["content"],
            responded_at=parse_datetime(raw.get("respondedAt")),
            responded_by=canonical_id(raw.get("respondedBy")),
        )


@dataclass
class Review:
    """A user review of a cafe."""
    id: str
    cafe_id: str | None
    author: UserRef | None
    rating: int
    content: str
    detailed_ratings: dict[str, int] | None = None
    images: list[str] = field(default_factory=list)
    visit_date: datetime | None = None
    helpful_count: int = 0
    not_helpful_count: int = 0
    # user id -> "helpful" | "not-helpful"
    votes: dict[str, str] = field(default_factory=dict)
    owner_response: OwnerResponse | None = None
    ai_analysis: AIAnalysis | None = None
    is_edited: bool = False
    created_at: datetime | None = None

    @classmethod
    def from_api(cls, raw: dict) -> Review:
        detailed = raw.get("detailedRatings")
        if isinstance(detailed, dict):
            detailed = {
                key: to_int(detailed.get(key))
                for key in DETAILED_RATING_KEYS
                if detailed.get(key)
            } or None
        else:
            detailed = None
        votes = {}
        for vote in raw.get("helpfulVotes") or []:
            voter = canonical_id(vote.get("user")) if isinstance(vote, dict) else None
            if voter:
                votes[voter] = vote.get("vote", "helpful")
        images = []
        for img in raw.get("images") or []:
            url = img.get("url") if isinstance(img, dict) else img
            if url:
                images.append(url)
        return cls(
            id=canonical_id(raw) or "",
            cafe_id=canonical_id(raw.get("cafe")),
            author=UserRef.from_api(raw.get("author")),
            rating=to_int(raw.get("rating")),
            content=raw.get("content", ""),
            detailed_ratings=detailed,
            images=images,
            visit_date=parse_datetime(raw.get("visitDate")),
            helpful_count=to_int(raw.get("helpfulCount")),
            not_helpful_count=to_int(raw.get("notHelpfulCount")),
            votes=votes,
            owner_response=OwnerResponse.from_api(raw.get("ownerResponse")),
            ai_analysis=AIAnalysis.from_api(raw.get("aiAnalysis")),
            is_edited=bool(raw.get("isEdited")),
            created_at=parse_datetime(raw.get("createdAt")),
        )

    def vote_of(self, user_id: str | None) -> str | None:
        """Return the viewer's own vote on this review, if any."""
        if not user_id:
            return None
        return self.votes.get(user_id)

    def is_written_by(self, user_id: str | None) -> bool:
        return bool(user_id) and self.author is not None and self.author.id == user_id


@dataclass
class ReviewPage:
    items: list[Review]
    total_pages: int
    total_count: int
