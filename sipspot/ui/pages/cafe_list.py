"""Cafe list page -- search, filters, sort and pagination mirrored to the URL."""
import json

from nicegui import ui

from config import AMENITY_OPTIONS, CAFE_SORT_OPTIONS, CITY_OPTIONS
from sipspot.ui.components.cafe_card import cafe_grid, favorite_handler
from sipspot.ui.components.cafe_map import cafe_map
from sipspot.ui.components.helpers import INPUT_PROPS, empty_state, error_banner, page_header
from sipspot.ui.components.pagination import pagination
from sipspot.ui.controllers import CafeListController, CardFavorites, LoadState
from sipspot.ui.layout import build_layout
from sipspot.ui.session import cafes_api, current_user

# 0 stands for "no filter" in the selects
_RATING_OPTIONS = {0: "Any rating", 3: "3+ stars", 3.5: "3.5+ stars", 4: "4+ stars", 4.5: "4.5+ stars"}
_PRICE_OPTIONS = {0: "Any price", 1: "$", 2: "$$ or less", 3: "$$$ or less", 4: "$$$$ or less"}


def _replace_url(url: str) -> None:
    ui.run_javascript(f"history.replaceState(null, '', {json.dumps(url)})")


def cafe_list_page(query_string: str = ""):
    """Render the searchable cafe list for the filters encoded in *query_string*."""
    content = build_layout()
    view = {"map": False}
    api = cafes_api()
    user = current_user()
    ctrl = CafeListController.from_query_string(api, query_string, on_url_change=_replace_url)
    hearts = favorite_handler(CardFavorites(api, user.id if user else None))

    with content:
        page_header("Cafes", subtitle="Search and filter coffee shops", icon="local_cafe")

        async def _clear():
            search.value = ""
            await ctrl.clear_filters()

        def _set_map(value: bool):
            view["map"] = value
            _results.refresh()

        # ------------------------------------------------------------------
        # Filter bar
        # ------------------------------------------------------------------
        with ui.card().classes("w-full p-4"):
            with ui.row().classes("items-center gap-3 w-full"):
                search = ui.input(
                    placeholder="Search by name, description or specialty...",
                    value=ctrl.filters.search,
                ).props(f"{INPUT_PROPS} clearable").classes("flex-1")
                search.props('prepend-inner-icon="search"')
                search.on("keydown.enter", lambda: ctrl.set_search(search.value or ""))
                search.on("clear", lambda: ctrl.set_search(""))
                ui.button("Search", on_click=lambda: ctrl.set_search(search.value or "")).props(
                    "color=primary"
                )

            with ui.row().classes("items-center gap-3 w-full"):
                ui.select(
                    {"": "All cities", **{c: c for c in CITY_OPTIONS}},
                    value=ctrl.filters.city if ctrl.filters.city in CITY_OPTIONS else "",
                    label="City",
                    on_change=lambda e: ctrl.set_city(e.value),
                ).props(INPUT_PROPS).classes("w-40")
                ui.select(
                    _RATING_OPTIONS,
                    value=ctrl.filters.min_rating if ctrl.filters.min_rating in _RATING_OPTIONS else 0,
                    label="Rating",
                    on_change=lambda e: ctrl.set_min_rating(e.value or None),
                ).props(INPUT_PROPS).classes("w-36")
                ui.select(
                    _PRICE_OPTIONS,
                    value=ctrl.filters.max_price or 0,
                    label="Price",
                    on_change=lambda e: ctrl.set_max_price(e.value or None),
                ).props(INPUT_PROPS).classes("w-36")
                ui.select(
                    CAFE_SORT_OPTIONS, value=ctrl.filters.sort, label="Sort by",
                    on_change=lambda e: ctrl.set_sort(e.value),
                ).props(INPUT_PROPS).classes("w-44")
                ui.space()
                ui.switch("Map", value=False, on_change=lambda e: _set_map(e.value))

            @ui.refreshable
            def _amenities():
                with ui.row().classes("gap-1 w-full"):
                    for amenity in AMENITY_OPTIONS:
                        selected = amenity in ctrl.filters.amenities
                        ui.chip(
                            amenity, selectable=True, selected=selected,
                            color="primary" if selected else "grey-3",
                            text_color="white" if selected else "grey-9",
                            on_click=lambda a=amenity: ctrl.toggle_amenity(a),
                        ).props("dense")
                    if ctrl.filters.active_count:
                        ui.button(
                            f"Clear filters ({ctrl.filters.active_count})", icon="filter_alt_off",
                            on_click=_clear,
                        ).props("flat dense color=negative size=sm")

            _amenities()

        # ------------------------------------------------------------------
        # Results
        # ------------------------------------------------------------------
        @ui.refreshable
        def _results():
            if ctrl.state is LoadState.ERRORED:
                error_banner(ctrl.error or "Could not load cafes", on_retry=ctrl.retry)
                return
            if ctrl.state in (LoadState.IDLE, LoadState.LOADING):
                with ui.row().classes("w-full justify-center py-12"):
                    ui.spinner(size="xl")
                return
            if not ctrl.cafes:
                empty_state("No cafes match your filters.")
                return

            ui.label(f"{ctrl.total_count} cafes found").classes("text-body2 text-secondary")
            if view["map"]:
                cafe_map(ctrl.cafes, on_marker_click=lambda cid: ui.navigate.to(f"/cafes/{cid}"))
            cafe_grid(ctrl.cafes, on_favorite=hearts)
            pagination(ctrl.filters.page, ctrl.total_pages, ctrl.go_to_page)

        _results()

    def _on_change():
        _amenities.refresh()
        _results.refresh()

    ctrl.subscribe(_on_change)
    ui.timer(0.1, ctrl.load, once=True)
