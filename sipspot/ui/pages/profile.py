"""Profile page -- account details, activity, visited cafes and password change."""
from nicegui import ui

from config import BIO_MAX_LENGTH
from sipspot.ui.components.cafe_card import cafe_card
from sipspot.ui.components.helpers import (
    INPUT_PROPS,
    empty_state,
    error_banner,
    format_date,
    section_header,
    user_avatar,
)
from sipspot.ui.components.pagination import pagination
from sipspot.ui.components.stats_card import stats_card
from sipspot.ui.controllers import LoadState, ProfileController
from sipspot.ui.layout import build_layout
from sipspot.ui.session import current_user, remember_login, remember_user, users_api


def _field_error(errors: dict, key: str):
    if key in errors:
        ui.label(errors[key]).classes("text-caption text-negative")


def profile_page():
    """Render the signed-in user's profile."""
    if current_user() is None:
        ui.navigate.to("/login?redirect_to=/profile")
        return
    content = build_layout()
    ctrl = ProfileController(users_api())
    editing = {"value": False}
    draft: dict[str, str] = {}

    def _set_editing(value: bool):
        editing["value"] = value
        ctrl.edit_errors = {}
        if value:
            draft.update(ctrl.profile.edit_payload())
        _account.refresh()

    async def _password_dialog():
        ctrl.password_errors = {}
        with ui.dialog() as dlg, ui.card().classes("w-[420px] gap-2"):
            ui.label("Change password").classes("text-subtitle1 font-bold")
            current = ui.input("Current password", password=True).props(INPUT_PROPS).classes("w-full")
            new = ui.input("New password", password=True, password_toggle_button=True).props(
                INPUT_PROPS
            ).classes("w-full")
            confirm = ui.input("Confirm new password", password=True).props(INPUT_PROPS).classes("w-full")

            @ui.refreshable
            def _errors():
                for key in ("current", "new", "confirm", "submit"):
                    _field_error(ctrl.password_errors, key)

            _errors()

            async def _submit():
                ok = await ctrl.change_password(current.value or "", new.value or "", confirm.value or "")
                if ok:
                    remember_login(ctrl.profile.to_ref(), ctrl.token)
                    dlg.submit(True)
                else:
                    _errors.refresh()

            with ui.row().classes("justify-end gap-2 w-full mt-2"):
                ui.button("Cancel", on_click=lambda: dlg.submit(False)).props("flat")
                ui.button("Update", on_click=_submit).props("color=primary")

        if await dlg:
            ui.notify("Password changed", type="positive")
        dlg.clear()

    with content:

        @ui.refreshable
        def _account():
            if ctrl.state is LoadState.ERRORED:
                error_banner(ctrl.error or "Could not load your profile", on_retry=ctrl.retry)
                return
            profile = ctrl.profile
            if profile is None:
                with ui.row().classes("w-full justify-center py-12"):
                    ui.spinner(size="xl")
                return

            with ui.card().classes("w-full p-6"):
                if editing["value"]:
                    _edit_form()
                    return
                with ui.row().classes("items-center gap-4 w-full"):
                    user_avatar(profile.to_ref(), size=72)
                    with ui.column().classes("gap-0 flex-1"):
                        ui.label(profile.username).classes("text-h5 font-bold")
                        ui.label(profile.email).classes("text-body2 text-secondary")
                        if profile.created_at:
                            ui.label(f"Member since {format_date(profile.created_at)}").classes(
                                "text-caption text-secondary"
                            )
                    ui.button("Edit profile", icon="edit", on_click=lambda: _set_editing(True)).props(
                        "color=primary outline"
                    )
                    ui.button("Change password", icon="lock", on_click=_password_dialog).props(
                        "flat color=primary"
                    )
                if profile.bio:
                    ui.label(profile.bio).classes("text-body1 mt-3 whitespace-pre-line")

        def _edit_form():
            ui.input("Username").bind_value(draft, "username").props(INPUT_PROPS).classes("w-full")
            _field_error(ctrl.edit_errors, "username")
            ui.input("Email").bind_value(draft, "email").props(INPUT_PROPS).classes("w-full")
            _field_error(ctrl.edit_errors, "email")
            ui.input("Avatar URL", placeholder="https://example.com/avatar.jpg").bind_value(
                draft, "avatar"
            ).props(INPUT_PROPS).classes("w-full")
            _field_error(ctrl.edit_errors, "avatar")
            ui.textarea("Bio").bind_value(draft, "bio").props(
                f"{INPUT_PROPS} counter maxlength={BIO_MAX_LENGTH}"
            ).classes("w-full")
            _field_error(ctrl.edit_errors, "bio")
            _field_error(ctrl.edit_errors, "submit")

            async def _save():
                if await ctrl.save_profile(dict(draft)):
                    remember_user(ctrl.profile.to_ref())
                    ui.notify("Profile updated", type="positive")
                    _set_editing(False)
                else:
                    _account.refresh()

            with ui.row().classes("justify-end gap-2 w-full"):
                ui.button("Cancel", on_click=lambda: _set_editing(False)).props("flat")
                ui.button("Save", icon="save", on_click=_save).props("color=primary").bind_enabled_from(
                    ctrl, "saving", backward=lambda saving: not saving,
                )

        @ui.refreshable
        def _stats():
            stats = ctrl.stats
            if stats is None:
                return
            with ui.row().classes("w-full gap-4"):
                stats_card("Reviews", str(stats.reviews), icon="rate_review")
                stats_card("Cafes added", str(stats.cafes), icon="storefront", color="accent")
                stats_card("Favorites", str(stats.favorites), icon="favorite", color="red")
                stats_card("Average rating", f"{stats.average_rating:.1f}", icon="star", color="amber")
                stats_card("Likes received", str(stats.total_likes), icon="thumb_up", color="positive")

        @ui.refreshable
        def _visited():
            if ctrl.profile is None:
                return
            section_header("Visited cafes", icon="where_to_vote")
            if ctrl.visited_error:
                error_banner(ctrl.visited_error, on_retry=ctrl.load_visited)
                return
            if not ctrl.visited:
                empty_state("You have not marked any cafes as visited yet.", icon="where_to_vote")
                return
            with ui.grid().classes("w-full gap-4 grid-cols-1 sm:grid-cols-2 lg:grid-cols-3"):
                for entry in ctrl.visited:
                    with ui.column().classes("gap-1"):
                        cafe_card(entry.cafe)
                        if entry.visited_at:
                            ui.label(f"Visited {format_date(entry.visited_at)}").classes(
                                "text-caption text-secondary"
                            )
            pagination(ctrl.visited_page, ctrl.visited_total_pages, ctrl.go_to_visited_page)

        _account()
        _stats()
        _visited()

    def _on_change():
        # the edit form is refreshed by its own save handler
        if not editing["value"]:
            _account.refresh()
        _stats.refresh()
        _visited.refresh()

    ctrl.subscribe(_on_change)
    ui.timer(0.1, ctrl.load, once=True)
