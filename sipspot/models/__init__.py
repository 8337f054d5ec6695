"""Client-side data models (DTOs and filter state)."""
from sipspot.models.cafe import (
    Cafe,
    CafeFullInfo,
    CafePage,
    Geometry,
    Recommendations,
    VisitedCafe,
    VisitedPage,
)
from sipspot.models.filters import FilterState
from sipspot.models.review import AIAnalysis, OwnerResponse, Review, ReviewPage
from sipspot.models.sentiment import CafeStats, SentimentStats
from sipspot.models.user import UserProfile, UserRef, UserStats

__all__ = [
    "Cafe",
    "CafeFullInfo",
    "CafePage",
    "Geometry",
    "Recommendations",
    "VisitedCafe",
    "VisitedPage",
    "FilterState",
    "AIAnalysis",
    "OwnerResponse",
    "Review",
    "ReviewPage",
    "CafeStats",
    "SentimentStats",
    "UserProfile",
    "UserRef",
    "UserStats",
]
