"""Nearby page -- cafes within a chosen radius of the browser's location."""
from nicegui import ui

from config import DEFAULT_LOCATION, NEARBY_DISTANCE_OPTIONS
from sipspot.services.geo import distance_km, format_distance
from sipspot.ui.components.cafe_card import cafe_grid, favorite_handler
from sipspot.ui.components.cafe_map import cafe_map
from sipspot.ui.components.helpers import empty_state, error_banner, page_header
from sipspot.ui.controllers import CardFavorites, LoadState, NearbyController
from sipspot.ui.layout import build_layout
from sipspot.ui.location import browser_location
from sipspot.ui.session import cafes_api, current_user


def nearby_page():
    """Render cafes around the viewer."""
    content = build_layout()
    api = cafes_api()
    user = current_user()
    ctrl = NearbyController(api)
    hearts = favorite_handler(CardFavorites(api, user.id if user else None))
    view = {"map": False}

    def _distance_label(cafe) -> str | None:
        if ctrl.location is None or not cafe.has_location:
            return None
        return format_distance(distance_km(ctrl.location, (cafe.geometry.lat, cafe.geometry.lng)))

    async def _locate():
        lat, lng, approximate = await browser_location()
        await ctrl.set_location(lat, lng, approximate=approximate)

    def _set_map(value: bool):
        view["map"] = value
        _results.refresh()

    with content:
        page_header("Nearby", subtitle="Coffee around you", icon="near_me")

        with ui.card().classes("w-full p-4"):
            with ui.row().classes("items-center gap-3 w-full"):
                ui.label("Search radius").classes("text-body2 font-medium")
                ui.toggle(
                    {d: f"{d // 1000} km" for d in NEARBY_DISTANCE_OPTIONS},
                    value=ctrl.distance,
                    on_change=lambda e: ctrl.set_distance(e.value),
                ).props("color=primary no-caps")
                ui.space()
                ui.button("Locate me", icon="my_location", on_click=_locate).props("flat color=primary")
                ui.switch("Map", value=False, on_change=lambda e: _set_map(e.value))

        @ui.refreshable
        def _results():
            if ctrl.location is None:
                with ui.row().classes("w-full justify-center items-center gap-3 py-12"):
                    ui.spinner(size="lg")
                    ui.label("Finding your location...").classes("text-body2 text-secondary")
                return
            if ctrl.approximate:
                ui.label(
                    f"Location unavailable, showing cafes around {DEFAULT_LOCATION['city']}"
                ).classes("text-caption text-secondary")
            if ctrl.state is LoadState.ERRORED:
                error_banner(ctrl.error or "Could not load nearby cafes", on_retry=ctrl.retry)
                return
            if ctrl.state is LoadState.LOADING:
                with ui.row().classes("w-full justify-center py-12"):
                    ui.spinner(size="xl")
                return
            if not ctrl.cafes:
                empty_state(f"No cafes within {ctrl.distance_km:g} km.", icon="near_me")
                if ctrl.distance != NEARBY_DISTANCE_OPTIONS[-1]:
                    with ui.row().classes("w-full justify-center"):
                        ui.button(
                            f"Search within {NEARBY_DISTANCE_OPTIONS[-1] // 1000} km",
                            on_click=lambda: ctrl.set_distance(NEARBY_DISTANCE_OPTIONS[-1]),
                        ).props("color=primary outline")
                return

            ui.label(
                f"{len(ctrl.cafes)} cafes within {ctrl.distance_km:g} km"
            ).classes("text-body2 text-secondary")
            if view["map"]:
                cafe_map(ctrl.cafes, on_marker_click=lambda cid: ui.navigate.to(f"/cafes/{cid}"))
            cafe_grid(ctrl.cafes, on_favorite=hearts, distance_to=_distance_label)

        _results()

    ctrl.subscribe(_results.refresh)
    ui.timer(0.1, _locate, once=True)
