"""Cafe and review endpoints of the SipSpot backend."""
import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Optional

from config import DEFAULT_CAFE_SORT, DEFAULT_REVIEW_SORT, NEARBY_DISTANCE_METERS
from sipspot.models import (
    AIAnalysis,
    Cafe,
    CafeFullInfo,
    CafePage,
    CafeStats,
    FilterState,
    Recommendations,
    Review,
    ReviewPage,
    SentimentStats,
)
from sipspot.services.http_client import ApiClient, ApiError, UploadFile

logger = logging.getLogger(__name__)

VOTE_TYPES = ("helpful", "not-helpful")


def page_info(body: dict, item_count: int) -> tuple[int, int]:
    """Return (total_pages, total_count) from a list response.

    Paginated responses carry a ``pagination`` block; older list endpoints
    put ``pages``/``total`` at the top level; search results carry neither.
    """
    pagination = body.get("pagination")
    if isinstance(pagination, dict):
        source = pagination
    elif "pages" in body or "total" in body:
        source = body
    else:
        return 1, item_count
    total = int(source.get("total") or item_count)
    pages = int(source.get("pages") or 0)
    return max(1, pages), total


def _data(body: dict):
    return body.get("data")


def _cafe_list(body: dict) -> list[Cafe]:
    return [Cafe.from_api(raw) for raw in _data(body) or []]


def _review_list(body: dict) -> list[Review]:
    return [Review.from_api(raw) for raw in _data(body) or []]


def _filter_params(filters: FilterState) -> dict:
    return {
        "city": filters.city or None,
        "minRating": filters.min_rating,
        "maxPrice": filters.max_price,
        "amenities": sorted(filters.amenities) or None,
    }


class CafesAPI:
    """Typed wrappers for the /cafes and /reviews resources."""

    def __init__(self, client: ApiClient):
        self.client = client

    # ------------------------------------------------------------------
    # Cafes
    # ------------------------------------------------------------------

    def get_cafes(self, params: Optional[dict] = None) -> CafePage:
        body = self.client.get("/cafes", params=params)
        items = _cafe_list(body)
        pages, total = page_info(body, len(items))
        return CafePage(items=items, total_pages=pages, total_count=total)

    def search_cafes(self, q: str, params: Optional[dict] = None) -> CafePage:
        body = self.client.get("/cafes/search", params={"q": q, **(params or {})})
        items = _cafe_list(body)
        pages, total = page_info(body, len(items))
        return CafePage(items=items, total_pages=pages, total_count=total)

    def list_cafes(
        self,
        filters: FilterState,
        page: int = 1,
        limit: int = 20,
        sort: str = DEFAULT_CAFE_SORT,
    ) -> CafePage:
        """Fetch one page of cafes matching *filters*.

        A non-blank search string goes to the relevance-ranked search
        endpoint; otherwise the plain list endpoint is used with *sort*.
        """
        common = _filter_params(filters)
        if filters.query:
            return self.search_cafes(filters.query, {**common, "limit": limit})
        return self.get_cafes({**common, "page": page, "limit": limit, "sort": sort})

    def get_nearby_cafes(
        self,
        lat: float,
        lng: float,
        distance: int = NEARBY_DISTANCE_METERS,
        limit: int = 10,
    ) -> list[Cafe]:
        body = self.client.get(
            "/cafes/nearby",
            params={"lat": lat, "lng": lng, "distance": distance, "limit": limit},
        )
        return _cafe_list(body)

    def get_top_rated_cafes(self, limit: int = 10, city: Optional[str] = None) -> list[Cafe]:
        body = self.client.get("/cafes/top/rated", params={"limit": limit, "city": city})
        return _cafe_list(body)

    def get_cafe(self, cafe_id: str) -> Cafe:
        return Cafe.from_api(_data(self.client.get(f"/cafes/{cafe_id}")) or {})

    def get_cafe_stats(self, cafe_id: str) -> Optional[CafeStats]:
        return CafeStats.from_api(_data(self.client.get(f"/cafes/{cafe_id}/stats")))

    def create_cafe(self, data: dict, images: Optional[list[UploadFile]] = None) -> Cafe:
        if images:
            body = self.client.upload_files("/cafes", images, "images", data)
        else:
            body = self.client.post("/cafes", data)
        return Cafe.from_api(_data(body) or {})

    def update_cafe(self, cafe_id: str, data: dict) -> Cafe:
        return Cafe.from_api(_data(self.client.put(f"/cafes/{cafe_id}", data)) or {})

    def delete_cafe(self, cafe_id: str) -> None:
        self.client.delete(f"/cafes/{cafe_id}")

    def add_favorite(self, cafe_id: str) -> None:
        self.client.post(f"/cafes/{cafe_id}/favorite")

    def remove_favorite(self, cafe_id: str) -> None:
        self.client.delete(f"/cafes/{cafe_id}/favorite")

    def toggle_favorite(self, cafe_id: str, currently_favorited: bool) -> bool:
        """Flip the favorite state and return the new one.

        Errors from the transport propagate unchanged; nothing is retried.
        """
        if currently_favorited:
            self.remove_favorite(cafe_id)
            return False
        self.add_favorite(cafe_id)
        return True

    # ------------------------------------------------------------------
    # Reviews (nested under a cafe)
    # ------------------------------------------------------------------

    def get_reviews(
        self,
        cafe_id: str,
        page: int = 1,
        limit: int = 10,
        sort: str = DEFAULT_REVIEW_SORT,
    ) -> ReviewPage:
        body = self.client.get(
            f"/cafes/{cafe_id}/reviews",
            params={"page": page, "limit": limit, "sort": sort},
        )
        items = _review_list(body)
        pages, total = page_info(body, len(items))
        return ReviewPage(items=items, total_pages=pages, total_count=total)

    def get_most_helpful_reviews(self, cafe_id: str, limit: int = 5) -> list[Review]:
        body = self.client.get(f"/cafes/{cafe_id}/reviews/helpful", params={"limit": limit})
        return _review_list(body)

    def get_sentiment_stats(self, cafe_id: str) -> Optional[SentimentStats]:
        return SentimentStats.from_api(_data(self.client.get(f"/cafes/{cafe_id}/reviews/sentiment")))

    def create_review(
        self,
        cafe_id: str,
        data: dict,
        images: Optional[list[UploadFile]] = None,
    ) -> Review:
        """Post a review; multipart when images are attached, JSON otherwise."""
        path = f"/cafes/{cafe_id}/reviews"
        if images:
            body = self.client.upload_files(path, images, "images", data)
        else:
            body = self.client.post(path, data)
        return Review.from_api(_data(body) or {})

    # ------------------------------------------------------------------
    # Reviews (standalone)
    # ------------------------------------------------------------------

    def get_review(self, review_id: str) -> Review:
        return Review.from_api(_data(self.client.get(f"/reviews/{review_id}")) or {})

    def update_review(self, review_id: str, data: dict) -> Review:
        return Review.from_api(_data(self.client.put(f"/reviews/{review_id}", data)) or {})

    def delete_review(self, review_id: str) -> None:
        self.client.delete(f"/reviews/{review_id}")

    def vote_review(self, review_id: str, vote_type: str = "helpful") -> dict:
        if vote_type not in VOTE_TYPES:
            raise ValueError(f"Unknown vote type: {vote_type!r}")
        body = self.client.post(f"/reviews/{review_id}/helpful", {"voteType": vote_type})
        return _data(body) or {}

    def remove_review_vote(self, review_id: str) -> dict:
        return _data(self.client.delete(f"/reviews/{review_id}/helpful")) or {}

    def report_review(self, review_id: str, reason: str = "") -> None:
        self.client.post(f"/reviews/{review_id}/report", {"reason": reason})

    def add_owner_response(self, review_id: str, content: str) -> Review:
        body = self.client.post(f"/reviews/{review_id}/response", {"content": content})
        return Review.from_api(_data(body) or {})

    def analyze_review(self, review_id: str) -> Optional[AIAnalysis]:
        return AIAnalysis.from_api(_data(self.client.post(f"/reviews/{review_id}/analyze")))

    # ------------------------------------------------------------------
    # Aggregates
    # ------------------------------------------------------------------

    def get_cafe_full_info(self, cafe_id: str) -> CafeFullInfo:
        """Fetch a cafe with its stats, latest reviews and sentiment.

        The four reads run concurrently. Only the cafe itself is required;
        each optional read that fails is logged and left empty.
        """
        with ThreadPoolExecutor(max_workers=4) as pool:
            cafe_f = pool.submit(self.get_cafe, cafe_id)
            stats_f = pool.submit(self.get_cafe_stats, cafe_id)
            reviews_f = pool.submit(self.get_reviews, cafe_id, 1, 10)
            sentiment_f = pool.submit(self.get_sentiment_stats, cafe_id)
            cafe = cafe_f.result()
            reviews = _settle(reviews_f, "reviews", cafe_id)
            return CafeFullInfo(
                cafe=cafe,
                stats=_settle(stats_f, "stats", cafe_id),
                recent_reviews=reviews.items if reviews is not None else [],
                sentiment=_settle(sentiment_f, "sentiment", cafe_id),
            )

    def get_recommended_cafes(self, lat: float, lng: float) -> Recommendations:
        """Nearby and top-rated cafes; either half may come back empty."""
        with ThreadPoolExecutor(max_workers=2) as pool:
            nearby_f = pool.submit(self.get_nearby_cafes, lat, lng, NEARBY_DISTANCE_METERS, 10)
            top_f = pool.submit(self.get_top_rated_cafes, 10)
            return Recommendations(
                nearby=_settle(nearby_f, "nearby cafes", f"{lat},{lng}") or [],
                top_rated=_settle(top_f, "top rated cafes", f"{lat},{lng}") or [],
            )


def _settle(future: Future, label: str, key: str):
    try:
        return future.result()
    except ApiError as exc:
        logger.warning("Optional %s fetch failed for %s: %s", label, key, exc)
        return None
