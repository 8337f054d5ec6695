"""Cafe list page state: filters, URL mirroring, pagination."""
import logging
from typing import Callable

from config import CAFES_PAGE_SIZE
from sipspot.models import Cafe, FilterState
from sipspot.services.cafes_api import CafesAPI
from sipspot.services.http_client import ApiError
from sipspot.ui.controllers.base import Controller, LoadState, call_in_thread, error_text

logger = logging.getLogger(__name__)


class CafeListController(Controller):
    """Owns the filter state of the list page and the results it produced.

    Every fetch takes a ticket from ``_generation``; a response whose ticket
    is no longer the latest is dropped, so an older request finishing late
    can never overwrite the results of a newer one.
    """

    def __init__(
        self,
        api: CafesAPI,
        filters: FilterState | None = None,
        page_size: int = CAFES_PAGE_SIZE,
        path: str = "/cafes",
        on_change: Callable[[], None] | None = None,
        on_url_change: Callable[[str], None] | None = None,
    ):
        super().__init__(on_change)
        self.api = api
        self.filters = filters or FilterState()
        self.page_size = page_size
        self.path = path
        self.on_url_change = on_url_change

        self.state = LoadState.IDLE
        self.cafes: list[Cafe] = []
        self.total_pages = 1
        self.total_count = 0
        self.error: str | None = None
        self._generation = 0

    @classmethod
    def from_query_string(cls, api: CafesAPI, query_string: str, **kwargs):
        return cls(api, FilterState.from_query_string(query_string), **kwargs)

    @property
    def url(self) -> str:
        return self.filters.to_url(self.path)

    # ------------------------------------------------------------------
    # Fetching
    # ------------------------------------------------------------------

    async def load(self) -> None:
        """Fetch results for the current filters."""
        self._generation += 1
        ticket = self._generation
        filters = self.filters

        self.state = LoadState.LOADING
        self.error = None
        self._notify()

        try:
            page = await call_in_thread(
                self.api.list_cafes, filters, filters.page, self.page_size, filters.sort,
            )
        except ApiError as exc:
            if ticket != self._generation:
                logger.debug("Dropping stale cafe list error (ticket %d)", ticket)
                return
            logger.error("Failed to load cafes for %s: %s", filters, exc)
            self.state = LoadState.ERRORED
            self.error = error_text(exc)
            self._notify()
            return

        if ticket != self._generation:
            logger.debug("Dropping stale cafe list response (ticket %d)", ticket)
            return
        self.cafes = page.items
        self.total_pages = page.total_pages
        self.total_count = page.total_count
        self.state = LoadState.LOADED
        self._notify()

    async def retry(self) -> None:
        await self.load()

    # ------------------------------------------------------------------
    # Filter mutations (all reset to page 1)
    # ------------------------------------------------------------------

    async def apply(self, filters: FilterState) -> None:
        """Replace the filter state, mirror it to the URL and re-fetch."""
        if filters == self.filters and self.state is not LoadState.IDLE:
            return
        self.filters = filters
        if self.on_url_change is not None:
            self.on_url_change(self.url)
        await self.load()

    async def set_search(self, text: str) -> None:
        await self.apply(self.filters.with_changes(search=text or ""))

    async def set_city(self, city: str | None) -> None:
        await self.apply(self.filters.with_changes(city=city or ""))

    async def set_min_rating(self, rating: float | None) -> None:
        await self.apply(self.filters.with_changes(min_rating=rating))

    async def set_max_price(self, price: int | None) -> None:
        await self.apply(self.filters.with_changes(max_price=price))

    async def toggle_amenity(self, amenity: str) -> None:
        await self.apply(self.filters.toggle_amenity(amenity))

    async def set_sort(self, sort: str) -> None:
        await self.apply(self.filters.with_changes(sort=sort))

    async def clear_filters(self) -> None:
        await self.apply(self.filters.cleared())

    # ------------------------------------------------------------------
    # Pagination (keeps the filters)
    # ------------------------------------------------------------------

    async def go_to_page(self, page: int) -> None:
        page = max(1, min(int(page), self.total_pages))
        await self.apply(self.filters.with_page(page))
