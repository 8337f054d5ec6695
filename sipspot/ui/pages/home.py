"""Home page -- nearby and top rated cafes."""
import logging

from nicegui import ui

from sipspot.services import ApiError
from sipspot.ui.components.cafe_card import cafe_grid, favorite_handler
from sipspot.ui.components.cafe_map import cafe_map
from sipspot.ui.components.helpers import empty_state, error_banner, section_header
from sipspot.ui.controllers import CardFavorites
from sipspot.ui.controllers.base import call_in_thread, error_text
from sipspot.ui.layout import build_layout
from sipspot.ui.location import browser_location
from sipspot.ui.session import cafes_api, current_user

logger = logging.getLogger(__name__)


def home_page():
    """Render the landing page."""
    content = build_layout()
    api = cafes_api()
    user = current_user()
    hearts = favorite_handler(CardFavorites(api, user.id if user else None))
    state = {"recs": None, "error": None, "loading": True}

    with content:
        ui.label("Find your next favorite cafe").classes("text-h4 font-bold")
        ui.label("Discover great coffee nearby, read honest reviews, share your own.").classes(
            "text-body1 text-secondary"
        )
        with ui.row().classes("gap-2"):
            ui.button("Browse all cafes", icon="local_cafe", on_click=lambda: ui.navigate.to("/cafes")).props(
                "color=primary"
            )
            ui.button("Cafes near me", icon="near_me", on_click=lambda: ui.navigate.to("/nearby")).props(
                "color=primary outline"
            )

        @ui.refreshable
        def _results():
            if state["loading"]:
                with ui.row().classes("w-full justify-center py-12"):
                    ui.spinner(size="xl")
                return
            if state["error"]:
                error_banner(state["error"], on_retry=_load)
                return
            recs = state["recs"]

            section_header("Near you", icon="near_me")
            if recs.nearby:
                cafe_map(recs.nearby, height="320px")
                cafe_grid(recs.nearby[:6], on_favorite=hearts)
            else:
                empty_state("No cafes found near you yet.")

            section_header("Top rated", icon="emoji_events")
            if recs.top_rated:
                cafe_grid(recs.top_rated[:6], on_favorite=hearts)
            else:
                empty_state("No rated cafes yet.")

        _results()

    async def _load():
        state["loading"] = True
        state["error"] = None
        _results.refresh()
        lat, lng, _approximate = await browser_location()
        try:
            state["recs"] = await call_in_thread(api.get_recommended_cafes, lat, lng)
        except ApiError as exc:
            logger.error("Failed to load recommendations: %s", exc)
            state["error"] = error_text(exc)
        state["loading"] = False
        _results.refresh()

    ui.timer(0.1, _load, once=True)
