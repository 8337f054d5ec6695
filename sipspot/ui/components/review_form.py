"""Review form renderer driven by a ``ReviewFormController``."""
from nicegui import ui

from config import REVIEW_MAX_IMAGES, REVIEW_MAX_LENGTH
from sipspot.models.review import DETAILED_RATING_KEYS
from sipspot.ui.components.helpers import INPUT_PROPS, section_header


def review_form(form, on_cancel=None, on_saved=None):
    """Render *form*; re-renders itself whenever the controller changes."""

    @ui.refreshable
    def _errors():
        for key in ("rating", "images", "submit"):
            if key in form.errors:
                ui.label(form.errors[key]).classes("text-caption text-negative")

    @ui.refreshable
    def _images():
        if not form.draft.images:
            return
        with ui.row().classes("gap-2"):
            for idx, (name, _content, _ctype) in enumerate(form.draft.images):
                ui.chip(name, removable=True, on_value_change=lambda _e, i=idx: form.remove_image(i))

    with ui.card().classes("w-full p-5"):
        section_header("Edit your review" if form.is_edit else "Write a review", icon="rate_review")

        with ui.row().classes("items-center gap-3"):
            ui.label("Overall").classes("text-body2 w-24")
            ui.rating(
                value=form.draft.rating, max=5, size="md", color="amber-7",
                on_change=lambda e: form.set_rating(e.value),
            )

        with ui.expansion("Detailed ratings (optional)", icon="tune").classes("w-full"):
            for key in DETAILED_RATING_KEYS:
                with ui.row().classes("items-center gap-3"):
                    ui.label(key.title()).classes("text-body2 w-24")
                    ui.rating(
                        value=form.draft.detailed_ratings.get(key, 0), max=5, size="sm",
                        color="amber-6",
                        on_change=lambda e, k=key: form.set_detailed_rating(k, e.value),
                    )

        content = ui.textarea(
            "Your review", value=form.draft.content,
            on_change=lambda e: form.set_content(e.value),
        ).props(f"{INPUT_PROPS} counter maxlength={REVIEW_MAX_LENGTH}").classes("w-full")
        content.validation = lambda _v: form.errors.get("content")

        ui.input(
            "Visit date", value=form.draft.visit_date,
            on_change=lambda e: form.set_visit_date(e.value),
        ).props(f'{INPUT_PROPS} type=date').classes("w-48")

        if not form.is_edit:
            async def _handle_upload(e):
                data = await e.file.read()
                form.add_images([(e.file.name, data, e.file.content_type or "image/jpeg")])
                upload.reset()

            upload = ui.upload(
                label=f"Photos (up to {REVIEW_MAX_IMAGES})",
                auto_upload=True, multiple=True,
                on_upload=_handle_upload,
            ).props('accept="image/*" max-file-size=5242880 flat dense').classes("w-full")
            _images()

        _errors()

        with ui.row().classes("justify-end gap-2 w-full"):
            if on_cancel is not None:
                ui.button("Cancel", on_click=on_cancel).props("flat")
            submit_btn = ui.button("Submit", icon="send").props("color=primary")

        async def _submit():
            submit_btn.disable()
            try:
                ok = await form.submit()
            finally:
                submit_btn.enable()
            if ok:
                ui.notify("Review saved!", type="positive")
                if on_saved is not None:
                    on_saved()
                return
            if "submit" in form.errors:
                ui.notify(form.errors["submit"], type="negative")
            content.validate()

        submit_btn.on_click(_submit)

    def _on_change():
        _errors.refresh()
        if not form.is_edit:
            _images.refresh()

    form.subscribe(_on_change)
