"""Cafe detail page state: cafe, reviews pane, favorite and review actions."""
import asyncio
import logging
from typing import Awaitable, Callable, Optional

from config import DEFAULT_REVIEW_SORT, REVIEWS_PAGE_SIZE
from sipspot.models import Cafe, CafeStats, Review, SentimentStats
from sipspot.services.cafes_api import CafesAPI
from sipspot.services.http_client import ApiError, UploadFile
from sipspot.ui.controllers.base import Controller, LoadState, call_in_thread, error_text

logger = logging.getLogger(__name__)

Confirm = Callable[[], Awaitable[bool]]


class CafeDetailController(Controller):
    """Owns one cafe's detail view.

    Mutation failures never change ``state``; they land in
    ``action_errors`` under the key of the control that triggered them
    (``favorite``, ``delete``, ``vote:<review id>``, ...).
    """

    def __init__(
        self,
        api: CafesAPI,
        cafe_id: str,
        viewer_id: Optional[str] = None,
        review_page_size: int = REVIEWS_PAGE_SIZE,
        on_change: Optional[Callable[[], None]] = None,
        on_navigate: Optional[Callable[[str], None]] = None,
    ):
        super().__init__(on_change)
        self.api = api
        self.cafe_id = cafe_id
        self.viewer_id = viewer_id
        self.review_page_size = review_page_size
        self.on_navigate = on_navigate

        self.state = LoadState.IDLE
        self.cafe: Optional[Cafe] = None
        self.error: Optional[str] = None
        self.sentiment: Optional[SentimentStats] = None
        self.stats: Optional[CafeStats] = None

        self.reviews: list[Review] = []
        self.review_page = 1
        self.review_sort = DEFAULT_REVIEW_SORT
        self.review_total_pages = 1
        self.review_total = 0
        self.reviews_loading = False
        self.reviews_error: Optional[str] = None

        self.action_errors: dict[str, str] = {}
        self._review_generation = 0
        self._favorite_pending = False

    @property
    def is_owner(self) -> bool:
        return self.cafe is not None and self.cafe.is_owned_by(self.viewer_id)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def load(self) -> None:
        """Initial load: the cafe is required, everything else is optional."""
        self.state = LoadState.LOADING
        self.error = None
        self._notify()
        try:
            self.cafe = await call_in_thread(self.api.get_cafe, self.cafe_id)
        except ApiError as exc:
            logger.error("Failed to load cafe %s: %s", self.cafe_id, exc)
            self.state = LoadState.ERRORED
            self.error = error_text(exc)
            self._notify()
            return
        self.state = LoadState.LOADED
        self._notify()
        await asyncio.gather(self.load_sentiment(), self.load_stats(), self.load_reviews())

    async def retry(self) -> None:
        await self.load()

    async def load_sentiment(self) -> None:
        try:
            self.sentiment = await call_in_thread(self.api.get_sentiment_stats, self.cafe_id)
        except ApiError as exc:
            logger.warning("Sentiment stats unavailable for cafe %s: %s", self.cafe_id, exc)
            return
        self._notify()

    async def load_stats(self) -> None:
        try:
            self.stats = await call_in_thread(self.api.get_cafe_stats, self.cafe_id)
        except ApiError as exc:
            logger.warning("Stats unavailable for cafe %s: %s", self.cafe_id, exc)
            return
        self._notify()

    async def load_reviews(self) -> None:
        """Fetch the review page for the current (cafe, page, sort) triple."""
        self._review_generation += 1
        ticket = self._review_generation
        page, sort = self.review_page, self.review_sort

        self.reviews_loading = True
        self.reviews_error = None
        self._notify()
        try:
            result = await call_in_thread(
                self.api.get_reviews, self.cafe_id, page, self.review_page_size, sort,
            )
        except ApiError as exc:
            if ticket != self._review_generation:
                return
            logger.warning("Failed to load reviews for cafe %s: %s", self.cafe_id, exc)
            self.reviews_loading = False
            self.reviews_error = error_text(exc)
            self._notify()
            return

        if ticket != self._review_generation:
            logger.debug("Dropping stale reviews response (page=%d, sort=%s)", page, sort)
            return
        self.reviews = result.items
        self.review_total_pages = result.total_pages
        self.review_total = result.total_count
        self.reviews_loading = False
        self._notify()

    async def set_review_sort(self, sort: str) -> None:
        if sort == self.review_sort:
            return
        self.review_sort = sort
        self.review_page = 1
        await self.load_reviews()

    async def go_to_review_page(self, page: int) -> None:
        page = max(1, min(int(page), self.review_total_pages))
        if page == self.review_page:
            return
        self.review_page = page
        await self.load_reviews()

    async def reconcile(self) -> None:
        """Re-read the server's aggregates after a review mutation."""
        self.review_page = 1
        await asyncio.gather(
            self._refresh_cafe_quietly(), self.load_reviews(), self.load_sentiment(),
        )

    async def _refresh_cafe_quietly(self) -> None:
        try:
            cafe = await call_in_thread(self.api.get_cafe, self.cafe_id)
        except ApiError as exc:
            logger.warning("Could not refresh cafe %s: %s", self.cafe_id, exc)
            return
        self.cafe = cafe
        self._notify()

    # ------------------------------------------------------------------
    # Favorite (optimistic)
    # ------------------------------------------------------------------

    async def toggle_favorite(self) -> bool:
        """Flip the favorite flag locally, then confirm with the server.

        The optimistic change and its rollback are each applied in a single
        synchronous step, so views never observe a half-applied state.
        """
        cafe = self.cafe
        if cafe is None or self._favorite_pending:
            return False
        if not self.viewer_id:
            self.action_errors["favorite"] = "Please log in to save favorites"
            self._notify()
            return False

        was_favorited = bool(cafe.is_favorited)
        previous_count = cafe.favorite_count
        self._favorite_pending = True
        self.action_errors.pop("favorite", None)
        cafe.is_favorited = not was_favorited
        cafe.favorite_count = max(0, previous_count + (-1 if was_favorited else 1))
        self._notify()

        try:
            await call_in_thread(self.api.toggle_favorite, cafe.id, was_favorited)
        except ApiError as exc:
            logger.warning("Favorite toggle failed for cafe %s: %s", cafe.id, exc)
            cafe.is_favorited = was_favorited
            cafe.favorite_count = previous_count
            self.action_errors["favorite"] = error_text(exc)
            self._notify()
            return False
        finally:
            self._favorite_pending = False

        await self._refresh_cafe_quietly()
        return True

    # ------------------------------------------------------------------
    # Reviews
    # ------------------------------------------------------------------

    async def submit_review(self, data: dict, images: Optional[list[UploadFile]] = None) -> Review:
        """Create a review, then reload the cafe and the first review page.

        Errors propagate to the caller (the review form shows them).
        """
        review = await call_in_thread(self.api.create_review, self.cafe_id, data, images or [])
        await self.reconcile()
        return review

    async def update_review(self, review_id: str, data: dict) -> Review:
        review = await call_in_thread(self.api.update_review, review_id, data)
        await self.reconcile()
        return review

    async def vote_review(self, review_id: str, vote_type: str = "helpful") -> bool:
        """Vote on a review; voting the same way again withdraws the vote."""
        review = self._find_review(review_id)
        current = review.vote_of(self.viewer_id) if review else None
        if current == vote_type:
            ok = await self._mutate(f"vote:{review_id}", self.api.remove_review_vote, review_id)
        else:
            ok = await self._mutate(f"vote:{review_id}", self.api.vote_review, review_id, vote_type)
        if ok:
            await self.load_reviews()
        return ok

    async def report_review(self, review_id: str, reason: str = "") -> bool:
        return await self._mutate(f"report:{review_id}", self.api.report_review, review_id, reason)

    async def respond_to_review(self, review_id: str, content: str) -> bool:
        ok = await self._mutate(
            f"response:{review_id}", self.api.add_owner_response, review_id, content,
        )
        if ok:
            await self.load_reviews()
        return ok

    async def analyze_review(self, review_id: str) -> bool:
        ok = await self._mutate(f"analyze:{review_id}", self.api.analyze_review, review_id)
        if ok:
            await asyncio.gather(self.load_reviews(), self.load_sentiment())
        return ok

    async def delete_review(self, review_id: str, confirm: Confirm) -> bool:
        if not await confirm():
            return False
        ok = await self._mutate(f"delete:{review_id}", self.api.delete_review, review_id)
        if ok:
            await self.reconcile()
        return ok

    # ------------------------------------------------------------------
    # Cafe deletion
    # ------------------------------------------------------------------

    async def delete_cafe(self, confirm: Confirm) -> bool:
        """Delete the cafe after an explicit yes from *confirm*."""
        if self.cafe is None or not await confirm():
            return False
        if not await self._mutate("delete", self.api.delete_cafe, self.cafe_id):
            return False
        logger.info("Deleted cafe %s", self.cafe_id)
        if self.on_navigate is not None:
            self.on_navigate("/cafes")
        return True

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _find_review(self, review_id: str) -> Optional[Review]:
        return next((r for r in self.reviews if r.id == review_id), None)

    async def _mutate(self, key: str, fn, *args) -> bool:
        self.action_errors.pop(key, None)
        try:
            await call_in_thread(fn, *args)
        except ApiError as exc:
            logger.warning("Action %s failed for cafe %s: %s", key, self.cafe_id, exc)
            self.action_errors[key] = error_text(exc)
            self._notify()
            return False
        return True
