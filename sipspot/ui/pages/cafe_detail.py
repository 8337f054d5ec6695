"""Cafe detail page -- info, favorite, sentiment, reviews and review form."""
from nicegui import ui

from sipspot.services.http_client import ApiError
from sipspot.ui.components.ai_analysis import sentiment_panel
from sipspot.ui.components.cafe_map import cafe_map
from sipspot.ui.components.helpers import (
    cafe_image_src,
    error_banner,
    section_header,
    star_icons,
)
from sipspot.ui.components.review_form import review_form
from sipspot.ui.components.review_list import review_list
from sipspot.ui.components.stats_card import stats_card
from sipspot.ui.controllers import (
    CafeDetailController,
    LoadState,
    ReviewFormController,
    ValueWatch,
)
from sipspot.ui.controllers.base import call_in_thread, error_text
from sipspot.ui.layout import build_layout
from sipspot.ui.session import cafes_api, current_user, users_api


def confirm_dialog(title: str, message: str, ok_label: str = "Delete"):
    """Return an async yes/no prompt for controller actions that need one."""

    async def _ask() -> bool:
        with ui.dialog() as dlg, ui.card():
            ui.label(title).classes("text-subtitle1 font-bold")
            ui.label(message).classes("text-body2 text-secondary")
            with ui.row().classes("justify-end gap-2 mt-4"):
                ui.button("Cancel", on_click=lambda: dlg.submit(False)).props("flat")
                ui.button(ok_label, on_click=lambda: dlg.submit(True)).props("color=negative")
        result = await dlg
        dlg.clear()
        return bool(result)

    return _ask


def cafe_detail_page(cafe_id: str):
    """Render the detail page for one cafe."""
    content = build_layout()
    user = current_user()
    ctrl = CafeDetailController(
        cafes_api(), cafe_id,
        viewer_id=user.id if user else None,
        on_navigate=ui.navigate.to,
    )

    def _new_form() -> ReviewFormController:
        return ReviewFormController(submit=ctrl.submit_review)

    form_holder = {"form": _new_form()}
    users = users_api() if user else None

    async def _mark_visited():
        try:
            await call_in_thread(users.mark_visited, cafe_id)
        except ApiError as exc:
            ui.notify(error_text(exc), type="negative")
            return
        ui.notify("Added to your visited cafes", type="positive")

    with content:

        @ui.refreshable
        def _header():
            if ctrl.state is LoadState.ERRORED:
                error_banner(ctrl.error or "Could not load this cafe", on_retry=ctrl.retry)
                return
            cafe = ctrl.cafe
            if cafe is None:
                with ui.row().classes("w-full justify-center py-12"):
                    ui.spinner(size="xl")
                return

            with ui.row().classes("w-full gap-6 items-start"):
                if len(cafe.images) > 1:
                    with ui.carousel(animated=True, arrows=True, navigation=True).classes(
                        "w-full md:w-[480px] rounded-lg"
                    ).props("height=320px"):
                        for url in cafe.images:
                            with ui.carousel_slide().classes("p-0"):
                                ui.image(url).classes("w-full h-full object-cover")
                else:
                    ui.image(cafe_image_src(cafe)).classes(
                        "w-full md:w-[480px] h-80 rounded-lg object-cover"
                    )

                with ui.column().classes("flex-1 gap-2"):
                    with ui.row().classes("items-center gap-3 w-full"):
                        ui.label(cafe.name).classes("text-h4 font-bold flex-1")
                        fav = ui.button(
                            icon="favorite" if cafe.is_favorited else "favorite_border",
                            on_click=ctrl.toggle_favorite,
                        ).props("round flat color=red size=lg")
                        fav.tooltip("Remove from favorites" if cafe.is_favorited else "Add to favorites")
                        if users is not None:
                            ui.button(icon="where_to_vote", on_click=_mark_visited).props(
                                "round flat color=primary size=lg"
                            ).tooltip("I have been here")
                    if "favorite" in ctrl.action_errors:
                        ui.label(ctrl.action_errors["favorite"]).classes("text-caption text-negative")

                    with ui.row().classes("items-center gap-2"):
                        star_icons(cafe.rating, size="sm")
                        ui.label(f"{cafe.rating:.1f}").classes("text-subtitle1 font-bold")
                        ui.label(f"({cafe.review_count} reviews)").classes("text-body2 text-secondary")
                        ui.label(cafe.price_label).classes("text-subtitle1 text-positive ml-2")
                    with ui.row().classes("items-center gap-1"):
                        ui.icon("place").classes("text-secondary")
                        ui.label(f"{cafe.address}, {cafe.city}").classes("text-body2 text-secondary")
                    if cafe.phone_number:
                        with ui.row().classes("items-center gap-1"):
                            ui.icon("call").classes("text-secondary")
                            ui.label(cafe.phone_number).classes("text-body2 text-secondary")
                    if cafe.website:
                        with ui.row().classes("items-center gap-1"):
                            ui.icon("language").classes("text-secondary")
                            ui.link(cafe.website, cafe.website, new_tab=True).classes("text-body2")

                    ui.label(cafe.description).classes("text-body1 whitespace-pre-line")
                    if cafe.amenities:
                        with ui.row().classes("gap-1"):
                            for amenity in sorted(cafe.amenities):
                                ui.badge(amenity, color="brown-1").classes("text-brown-9")

                    if ctrl.is_owner:
                        with ui.row().classes("gap-2 mt-2"):
                            ui.button(
                                "Edit", icon="edit",
                                on_click=lambda: ui.navigate.to(f"/cafes/{cafe.id}/edit"),
                            ).props("color=primary outline")
                            ui.button(
                                "Delete Cafe", icon="delete",
                                on_click=lambda: ctrl.delete_cafe(confirm_dialog(
                                    f'Delete "{cafe.name}"?',
                                    "Are you sure you want to delete this cafe? "
                                    "All of its reviews will be removed as well.",
                                )),
                            ).props("color=negative outline")
                        if "delete" in ctrl.action_errors:
                            ui.label(ctrl.action_errors["delete"]).classes("text-caption text-negative")

            with ui.row().classes("w-full gap-4"):
                stats_card("Reviews", str(cafe.review_count), icon="rate_review")
                stats_card("Favorites", str(cafe.favorite_count), icon="favorite", color="red")
                stats_card("Views", str(cafe.view_count), icon="visibility", color="accent")
                if ctrl.stats and ctrl.stats.recent_review_count:
                    stats_card(
                        "Reviews this month", str(ctrl.stats.recent_review_count),
                        icon="trending_up", color="positive",
                    )

        @ui.refreshable
        def _location_map():
            cafe = ctrl.cafe
            if cafe is not None and cafe.has_location:
                cafe_map([cafe], height="260px", cluster=False)

        @ui.refreshable
        def _sentiment():
            if ctrl.cafe is not None:
                sentiment_panel(ctrl.sentiment)

        @ui.refreshable
        def _reviews():
            if ctrl.cafe is None:
                return
            review_list(ctrl, confirm_dialog, on_edit=_edit_review)

        @ui.refreshable
        def _form():
            if ctrl.cafe is None:
                return
            if user is None:
                with ui.card().classes("w-full p-5 items-center"):
                    ui.label("Log in to write a review.").classes("text-body1 text-secondary")
                    ui.button("Log in", on_click=lambda: ui.navigate.to("/login")).props("color=primary")
                return
            if ctrl.is_owner:
                return
            review_form(form_holder["form"], on_saved=_reset_form)

        _header()
        _location_map()
        with ui.row().classes("w-full gap-6 items-start"):
            with ui.column().classes("flex-[2] gap-4"):
                section_header("What people say", icon="forum")
                _reviews()
            with ui.column().classes("flex-1 gap-4"):
                _sentiment()
                _form()

    def _reset_form():
        form_holder["form"] = _new_form()
        _form.refresh()

    def _edit_review(review):
        with ui.dialog() as dlg, ui.card().classes("w-[560px]"):
            edit_form = ReviewFormController(
                submit=lambda data, _images: ctrl.update_review(review.id, data),
                initial=review,
            )
            review_form(edit_form, on_cancel=dlg.close, on_saved=dlg.close)
        dlg.open()

    form_shown = {"value": False}
    map_location = ValueWatch()

    def _on_change():
        _header.refresh()
        # the map is rebuilt only when the cafe moves
        if map_location.changed(ctrl.cafe.geometry if ctrl.cafe is not None else None):
            _location_map.refresh()
        _sentiment.refresh()
        _reviews.refresh()
        # the form keeps its own state; only build it once the cafe is known
        if ctrl.cafe is not None and not form_shown["value"]:
            form_shown["value"] = True
            _form.refresh()

    ctrl.subscribe(_on_change)
    ui.timer(0.1, ctrl.load, once=True)
