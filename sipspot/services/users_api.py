"""Account endpoints: login/logout and the viewer's own content."""
import logging
from typing import Optional

from config import FAVORITES_PAGE_SIZE
from sipspot.models import (
    Cafe,
    CafePage,
    Review,
    ReviewPage,
    UserProfile,
    UserRef,
    UserStats,
    VisitedCafe,
    VisitedPage,
)
from sipspot.services.cafes_api import page_info
from sipspot.services.http_client import ApiClient, ApiError

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("username", "email", "bio", "avatar")


class UsersAPI:
    """Wrappers for /auth and /users/me."""

    def __init__(self, client: ApiClient):
        self.client = client

    def login(self, identifier: str, password: str) -> UserRef:
        """Log in with an email or username; keeps the returned token."""
        body = self.client.post("/auth/login", {"identifier": identifier, "password": password})
        return self._accept_session(body)

    def register(self, username: str, email: str, password: str) -> UserRef:
        body = self.client.post(
            "/auth/register",
            {"username": username, "email": email, "password": password},
        )
        return self._accept_session(body)

    def logout(self) -> None:
        """End the session. Local credentials are dropped even if the call fails."""
        try:
            self.client.post("/auth/logout")
        except ApiError as exc:
            logger.warning("Logout request failed: %s", exc)
        finally:
            self.client.token = None
            self.client.cookies.clear()

    def current_user(self) -> Optional[UserRef]:
        return UserRef.from_api(self.client.get("/auth/me").get("data"))

    def get_profile(self) -> UserProfile:
        profile = UserProfile.from_api(self.client.get("/auth/me").get("data"))
        if profile is None:
            raise ApiError("Invalid response from server")
        return profile

    def update_profile(self, data: dict) -> UserProfile:
        """Save username, email, bio and avatar; other keys are not sent."""
        payload = {k: v for k, v in data.items() if k in PROFILE_FIELDS}
        profile = UserProfile.from_api(self.client.put("/auth/me", payload).get("data"))
        if profile is None:
            raise ApiError("Invalid response from server")
        return profile

    def update_password(self, current_password: str, new_password: str) -> None:
        """Change the password. The backend issues a fresh token, which replaces ours.

        A wrong current password is answered with 401; the session stays valid.
        """
        body = self.client.put(
            "/auth/password",
            {"currentPassword": current_password, "newPassword": new_password},
            notify_unauthorized=False,
        )
        if body.get("token"):
            self.client.token = body["token"]

    def get_my_stats(self) -> Optional[UserStats]:
        return UserStats.from_api(self.client.get("/users/me/stats").get("data"))

    def get_visited_cafes(self, page: int = 1, limit: int = 20) -> VisitedPage:
        body = self.client.get("/users/me/visited", params={"page": page, "limit": limit})
        items = [v for v in map(VisitedCafe.from_api, body.get("data") or []) if v is not None]
        pages, total = page_info(body, len(items))
        return VisitedPage(items=items, total_pages=pages, total_count=total)

    def mark_visited(self, cafe_id: str) -> None:
        self.client.post(f"/users/me/visited/{cafe_id}")

    def get_favorites(self, page: int = 1, limit: int = FAVORITES_PAGE_SIZE) -> CafePage:
        body = self.client.get("/users/me/favorites", params={"page": page, "limit": limit})
        items = [Cafe.from_api(raw) for raw in body.get("data") or []]
        pages, total = page_info(body, len(items))
        return CafePage(items=items, total_pages=pages, total_count=total)

    def get_my_reviews(self, page: int = 1, limit: int = 10) -> ReviewPage:
        body = self.client.get("/users/me/reviews", params={"page": page, "limit": limit})
        items = [Review.from_api(raw) for raw in body.get("data") or []]
        pages, total = page_info(body, len(items))
        return ReviewPage(items=items, total_pages=pages, total_count=total)

    def _accept_session(self, body: dict) -> UserRef:
        token = body.get("token")
        if not token:
            raise ApiError("Login response did not include a token", data=body)
        self.client.token = token
        return UserRef.from_api(body.get("user") or {})
