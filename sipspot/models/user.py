"""Author references and the signed-in user's account."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from sipspot.models.utils import canonical_id, parse_datetime, to_float, to_int


@dataclass
class UserRef:
    """A user as embedded in cafes and reviews (populated or bare id)."""
    id: str | None
    username: str | None = None
    avatar: str | None = None
    role: str | None = None

    @classmethod
    def from_api(cls, raw) -> UserRef | None:
        if raw is None:
            return None
        if isinstance(raw, str):
            return cls(id=raw)
        avatar = raw.get("avatar")
        if isinstance(avatar, dict):
            avatar = avatar.get("url")
        return cls(
            id=canonical_id(raw),
            username=raw.get("username"),
            avatar=avatar,
            role=raw.get("role"),
        )

    @property
    def display_name(self) -> str:
        return self.username or "Anonymous"


@dataclass
class UserProfile:
    """The signed-in user's own account, as returned by /auth/me."""
    id: str | None
    username: str = ""
    email: str = ""
    avatar: str | None = None
    bio: str = ""
    role: str | None = None
    created_at: datetime | None = None
    last_login: datetime | None = None
    review_count: int = 0
    cafe_count: int = 0
    visited_count: int = 0

    @classmethod
    def from_api(cls, raw) -> UserProfile | None:
        if not isinstance(raw, dict):
            return None
        ref = UserRef.from_api(raw)
        visited = raw.get("visited")
        return cls(
            id=ref.id,
            username=raw.get("username") or "",
            email=raw.get("email") or "",
            avatar=ref.avatar,
            bio=raw.get("bio") or "",
            role=raw.get("role"),
            created_at=parse_datetime(raw.get("createdAt")),
            last_login=parse_datetime(raw.get("lastLogin")),
            review_count=max(0, to_int(raw.get("reviewCount"))),
            cafe_count=max(0, to_int(raw.get("cafeCount"))),
            visited_count=len(visited) if isinstance(visited, list) else 0,
        )

    def to_ref(self) -> UserRef:
        return UserRef(id=self.id, username=self.username, avatar=self.avatar, role=self.role)

    def edit_payload(self) -> dict:
        return {"username": self.username, "email": self.email, "bio": self.bio, "avatar": self.avatar or ""}


@dataclass
class UserStats:
    """Activity counters from /users/me/stats."""
    cafes: int = 0
    reviews: int = 0
    favorites: int = 0
    average_rating: float = 0.0
    total_likes: int = 0

    @classmethod
    def from_api(cls, raw) -> UserStats | None:
        if not isinstance(raw, dict):
            return None
        return cls(
            cafes=to_int(raw.get("cafes")),
            reviews=to_int(raw.get("reviews")),
            favorites=to_int(raw.get("favorites")),
            average_rating=round(to_float(raw.get("averageRating")), 1),
            total_likes=to_int(raw.get("totalLikes")),
        )
