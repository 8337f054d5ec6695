"""Cafe summary card component."""
from nicegui import ui

from sipspot.ui.components.helpers import cafe_image_src, star_icons


def cafe_card(cafe, on_favorite=None, show_distance: str | None = None):
    """Render a card for a single cafe.

    Args:
        cafe: ``Cafe`` DTO.
        on_favorite: Optional async callback(cafe, redraw) for the heart
            button; ``redraw`` repaints the heart. Hidden when omitted.
        show_distance: Optional pre-formatted distance label.
    """
    index = {"value": 0}

    with ui.card().tight().classes("w-full cursor-pointer hover:shadow-lg"):
        with ui.element("div").classes("relative w-full"):

            @ui.refreshable
            def _image():
                ui.image(cafe_image_src(cafe, index["value"])).classes("w-full h-44 object-cover")

            _image()

            if len(cafe.images) > 1:
                def _step(delta: int):
                    index["value"] = (index["value"] + delta) % len(cafe.images)
                    _image.refresh()

                ui.button(icon="chevron_left", on_click=lambda: _step(-1)).props(
                    "round dense flat color=white size=sm"
                ).classes("absolute left-1 top-1/2 bg-black/30")
                ui.button(icon="chevron_right", on_click=lambda: _step(1)).props(
                    "round dense flat color=white size=sm"
                ).classes("absolute right-1 top-1/2 bg-black/30")

            if on_favorite is not None:

                @ui.refreshable
                def _heart():
                    ui.button(
                        icon="favorite" if cafe.is_favorited else "favorite_border",
                        on_click=lambda: on_favorite(cafe, _heart.refresh),
                    ).props("round dense flat color=red size=sm").classes(
                        "absolute right-2 top-2 bg-white/80"
                    )

                _heart()

        with ui.column().classes("p-4 gap-1 w-full").on(
            "click", lambda c=cafe: ui.navigate.to(f"/cafes/{c.id}")
        ):
            with ui.row().classes("items-center justify-between w-full no-wrap"):
                ui.label(cafe.name).classes("text-subtitle1 font-bold ellipsis")
                ui.label(cafe.price_label).classes("text-body2 text-positive")
            with ui.row().classes("items-center gap-2"):
                star_icons(cafe.rating)
                ui.label(f"{cafe.rating:.1f}").classes("text-body2 font-medium")
                ui.label(f"({cafe.review_count} reviews)").classes("text-caption text-secondary")
            with ui.row().classes("items-center gap-1"):
                ui.icon("place", size="xs").classes("text-secondary")
                ui.label(cafe.city or cafe.address).classes("text-caption text-secondary")
                if show_distance:
                    ui.label(f"· {show_distance}").classes("text-caption text-secondary")
            if cafe.amenities:
                with ui.row().classes("gap-1 mt-1"):
                    for amenity in sorted(cafe.amenities)[:3]:
                        ui.badge(amenity, color="brown-1").classes("text-brown-9")
                    if len(cafe.amenities) > 3:
                        ui.badge(f"+{len(cafe.amenities) - 3}", color="grey-3").classes(
                            "text-grey-8"
                        )


def cafe_grid(cafes, on_favorite=None, distance_to=None):
    """Responsive grid of cafe cards.

    *distance_to* optionally maps a cafe to a distance label for its card.
    """
    with ui.grid().classes("w-full gap-4 grid-cols-1 sm:grid-cols-2 lg:grid-cols-3"):
        for cafe in cafes:
            cafe_card(
                cafe, on_favorite=on_favorite,
                show_distance=distance_to(cafe) if distance_to else None,
            )


def favorite_handler(favorites, on_saved=None):
    """Adapt a ``CardFavorites`` to the heart callback of ``cafe_card``.

    Anonymous viewers are sent to the login page; failed toggles are
    reported with a notification after the heart has rolled back.
    """

    async def _toggle(cafe, redraw):
        if not favorites.viewer_id:
            ui.navigate.to("/login")
            return
        if await favorites.toggle(cafe, redraw):
            if on_saved is not None:
                await on_saved(cafe)
        elif cafe.id in favorites.errors:
            ui.notify(favorites.errors[cafe.id], type="negative")

    return _toggle
