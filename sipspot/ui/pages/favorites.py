"""Favorites and My Reviews pages."""
import logging

from nicegui import ui

from config import FAVORITES_PAGE_SIZE
from sipspot.services import ApiError
from sipspot.ui.components.cafe_card import cafe_grid, favorite_handler
from sipspot.ui.components.helpers import (
    empty_state,
    error_banner,
    format_date,
    page_header,
    star_icons,
)
from sipspot.ui.components.pagination import pagination
from sipspot.ui.controllers import CardFavorites
from sipspot.ui.controllers.base import call_in_thread, error_text
from sipspot.ui.layout import build_layout
from sipspot.ui.session import cafes_api, current_user, users_api

logger = logging.getLogger(__name__)


def _login_required() -> bool:
    if current_user() is None:
        ui.navigate.to("/login")
        return True
    return False


def favorites_page():
    """Render the viewer's favorite cafes."""
    if _login_required():
        return
    content = build_layout()
    users = users_api()
    state = {"page": 1, "result": None, "error": None}

    async def _removed(cafe):
        ui.notify(f"Removed {cafe.name} from favorites", type="positive")
        await _load()

    hearts = favorite_handler(CardFavorites(cafes_api(), current_user().id), on_saved=_removed)

    with content:
        page_header("Favorites", subtitle="Cafes you saved", icon="favorite")

        @ui.refreshable
        def _body():
            if state["error"]:
                error_banner(state["error"], on_retry=_load)
                return
            result = state["result"]
            if result is None:
                with ui.row().classes("w-full justify-center py-12"):
                    ui.spinner(size="xl")
                return
            if not result.items:
                empty_state("You have not saved any cafes yet.", icon="favorite_border")
                return
            cafe_grid(result.items, on_favorite=hearts)
            pagination(state["page"], result.total_pages, _go_to)

        _body()

    async def _load():
        state["error"] = None
        try:
            result = await call_in_thread(users.get_favorites, state["page"], FAVORITES_PAGE_SIZE)
        except ApiError as exc:
            logger.error("Failed to load favorites: %s", exc)
            state["error"] = error_text(exc)
            _body.refresh()
            return
        for cafe in result.items:
            cafe.is_favorited = True
        state["result"] = result
        _body.refresh()

    async def _go_to(page: int):
        state["page"] = page
        await _load()

    ui.timer(0.1, _load, once=True)


def my_reviews_page():
    """Render the reviews written by the viewer."""
    if _login_required():
        return
    content = build_layout()
    users = users_api()
    state = {"page": 1, "result": None, "error": None}

    with content:
        page_header("My Reviews", icon="rate_review")

        @ui.refreshable
        def _body():
            if state["error"]:
                error_banner(state["error"], on_retry=_load)
                return
            result = state["result"]
            if result is None:
                with ui.row().classes("w-full justify-center py-12"):
                    ui.spinner(size="xl")
                return
            if not result.items:
                empty_state("You have not written any reviews yet.", icon="rate_review")
                return
            for review in result.items:
                with ui.card().classes("w-full p-4 cursor-pointer").on(
                    "click", lambda r=review: ui.navigate.to(f"/cafes/{r.cafe_id}"),
                ):
                    with ui.row().classes("items-center gap-2"):
                        star_icons(review.rating)
                        ui.label(format_date(review.created_at)).classes("text-caption text-secondary")
                    ui.label(review.content).classes("text-body2")
            pagination(state["page"], result.total_pages, _go_to)

        _body()

    async def _load():
        state["error"] = None
        try:
            state["result"] = await call_in_thread(users.get_my_reviews, state["page"])
        except ApiError as exc:
            logger.error("Failed to load reviews: %s", exc)
            state["error"] = error_text(exc)
        _body.refresh()

    async def _go_to(page: int):
        state["page"] = page
        await _load()

    ui.timer(0.1, _load, once=True)
