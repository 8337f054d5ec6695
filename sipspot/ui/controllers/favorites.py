"""Favorite hearts on cafe cards."""
import logging
from typing import Callable, Optional

from sipspot.models import Cafe
from sipspot.services.cafes_api import CafesAPI
from sipspot.services.http_client import ApiError
from sipspot.ui.controllers.base import Controller, call_in_thread, error_text

logger = logging.getLogger(__name__)

Redraw = Callable[[], None]


class CardFavorites(Controller):
    """Optimistic favorite toggling for every card on one page.

    Each card is flipped at once and rolled back if the server refuses.
    Failures land in ``errors`` under the cafe id. A card whose toggle is
    still in flight ignores further clicks.
    """

    def __init__(
        self,
        api: CafesAPI,
        viewer_id: Optional[str] = None,
        on_change: Optional[Callable[[], None]] = None,
    ):
        super().__init__(on_change)
        self.api = api
        self.viewer_id = viewer_id
        self.errors: dict[str, str] = {}
        self._pending: set[str] = set()

    async def toggle(self, cafe: Cafe, redraw: Optional[Redraw] = None) -> bool:
        if cafe.id in self._pending:
            return False
        if not self.viewer_id:
            self.errors[cafe.id] = "Please log in to save favorites"
            self._notify()
            return False

        was_favorited = bool(cafe.is_favorited)
        previous_count = cafe.favorite_count
        self._pending.add(cafe.id)
        self.errors.pop(cafe.id, None)
        cafe.is_favorited = not was_favorited
        cafe.favorite_count = max(0, previous_count + (-1 if was_favorited else 1))
        if redraw is not None:
            redraw()

        try:
            await call_in_thread(self.api.toggle_favorite, cafe.id, was_favorited)
        except ApiError as exc:
            logger.warning("Favorite toggle failed for cafe %s: %s", cafe.id, exc)
            cafe.is_favorited = was_favorited
            cafe.favorite_count = previous_count
            self.errors[cafe.id] = error_text(exc)
            if redraw is not None:
                redraw()
            self._notify()
            return False
        finally:
            self._pending.discard(cafe.id)
        return True
