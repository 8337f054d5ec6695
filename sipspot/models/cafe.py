"""Cafe DTOs as returned by the /cafes endpoints."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from sipspot.models.review import Review
from sipspot.models.sentiment import CafeStats, SentimentStats
from sipspot.models.user import UserRef
from sipspot.models.utils import canonical_id, parse_datetime, to_float, to_int


@dataclass(frozen=True)
class Geometry:
    """A GeoJSON point. The backend stores coordinates as [lng, lat]."""
    lng: float
    lat: float

    @classmethod
    def from_api(cls, raw) -> Geometry | None:
        if not isinstance(raw, dict):
            return None
        coords = raw.get("coordinates")
        if not isinstance(coords, (list, tuple)) or len(coords) < 2:
            return None
        try:
            return cls(lng=float(coords[0]), lat=float(coords[1]))
        except (TypeError, ValueError):
            return None

    @property
    def has_location(self) -> bool:
        # (0, 0) is what the backend stores when geocoding failed
        return not (self.lng == 0 and self.lat == 0)


def _image_urls(raw) -> list[str]:
    urls = []
    for img in raw or []:
        if isinstance(img, str):
            urls.append(img)
        elif isinstance(img, dict) and img.get("url"):
            urls.append(img["url"])
    return urls


@dataclass
class Cafe:
    """A listed venue."""
    id: str
    name: str
    description: str = ""
    rating: float = 0.0
    review_count: int = 0
    price: int = 2
    city: str = ""
    address: str = ""
    geometry: Geometry | None = None
    amenities: frozenset[str] = field(default_factory=frozenset)
    images: list[str] = field(default_factory=list)
    view_count: int = 0
    favorite_count: int = 0
    author: UserRef | None = None
    # None for anonymous viewers
    is_favorited: bool | None = None
    specialty: str | None = None
    phone_number: str | None = None
    website: str | None = None

    @classmethod
    def from_api(cls, raw: dict) -> Cafe:
        is_fav = raw.get("isFavorited")
        return cls(
            id=canonical_id(raw) or "",
            name=raw.get("name", ""),
            description=raw.get("description", ""),
            rating=to_float(raw.get("rating")),
            review_count=max(0, to_int(raw.get("reviewCount"))),
            price=to_int(raw.get("price"), 2),
            city=raw.get("city", ""),
            address=raw.get("address", ""),
            geometry=Geometry.from_api(raw.get("geometry")),
            amenities=frozenset(raw.get("amenities") or []),
            images=_image_urls(raw.get("images")),
            view_count=to_int(raw.get("viewCount")),
            favorite_count=max(0, to_int(raw.get("favoriteCount"))),
            author=UserRef.from_api(raw.get("author")),
            is_favorited=bool(is_fav) if is_fav is not None else None,
            specialty=raw.get("specialty"),
            phone_number=raw.get("phoneNumber"),
            website=raw.get("website"),
        )

    @property
    def price_label(self) -> str:
        return "$" * max(1, min(self.price, 4))

    @property
    def has_location(self) -> bool:
        return self.geometry is not None and self.geometry.has_location

    def is_owned_by(self, user_id: str | None) -> bool:
        return bool(user_id) and self.author is not None and self.author.id == user_id


@dataclass
class CafePage:
    """One page of a cafe listing."""
    items: list[Cafe]
    total_pages: int
    total_count: int


@dataclass
class CafeFullInfo:
    """A cafe plus its optional aggregates, fetched concurrently."""
    cafe: Cafe
    stats: CafeStats | None = None
    recent_reviews: list[Review] = field(default_factory=list)
    sentiment: SentimentStats | None = None


@dataclass
class Recommendations:
    nearby: list[Cafe] = field(default_factory=list)
    top_rated: list[Cafe] = field(default_factory=list)


@dataclass
class VisitedCafe:
    cafe: Cafe
    visited_at: datetime | None = None

    @classmethod
    def from_api(cls, raw) -> VisitedCafe | None:
        if not isinstance(raw, dict) or not isinstance(raw.get("cafe"), dict):
            return None
        return cls(cafe=Cafe.from_api(raw["cafe"]), visited_at=parse_datetime(raw.get("visitedAt")))


@dataclass
class VisitedPage:
    items: list[VisitedCafe]
    total_pages: int
    total_count: int
