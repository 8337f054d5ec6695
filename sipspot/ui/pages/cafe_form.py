"""Create / edit cafe page."""
import logging

from nicegui import ui

from config import AMENITY_OPTIONS, CITY_OPTIONS, SPECIALTY_OPTIONS
from sipspot.services import ApiError, validate_cafe
from sipspot.ui.components.helpers import CARD_CLASSES, INPUT_PROPS, error_banner, page_header
from sipspot.ui.controllers.base import call_in_thread, error_text
from sipspot.ui.layout import build_layout
from sipspot.ui.session import cafes_api, current_user

logger = logging.getLogger(__name__)


def cafe_form_page(cafe_id: str | None = None):
    """Render the cafe form; edits an existing cafe when *cafe_id* is given."""
    content = build_layout()
    api = cafes_api()
    user = current_user()
    images: list[tuple[str, bytes, str]] = []

    with content:
        page_header(
            "Edit cafe" if cafe_id else "Add a cafe",
            subtitle="Share a coffee shop with the community",
            icon="add_business",
        )
        if user is None:
            error_banner("Please log in to add or edit cafes.")
            ui.button("Log in", on_click=lambda: ui.navigate.to("/login")).props("color=primary")
            return

        form_col = ui.column().classes("w-full gap-4")

    async def _build():
        cafe = None
        if cafe_id:
            try:
                cafe = await call_in_thread(api.get_cafe, cafe_id)
            except ApiError as exc:
                with form_col:
                    error_banner(error_text(exc))
                return
            if not cafe.is_owned_by(user.id):
                with form_col:
                    error_banner("Only the owner can edit this cafe.")
                return

        with form_col, ui.card().classes(CARD_CLASSES):
            name = ui.input("Name", value=cafe.name if cafe else "").props(INPUT_PROPS).classes("w-full")
            description = ui.textarea(
                "Description", value=cafe.description if cafe else "",
            ).props(f"{INPUT_PROPS} counter maxlength=2000").classes("w-full")
            with ui.row().classes("w-full gap-3"):
                address = ui.input("Address", value=cafe.address if cafe else "").props(
                    INPUT_PROPS
                ).classes("flex-1")
                city = ui.select(
                    CITY_OPTIONS, label="City", value=cafe.city if cafe else None,
                    new_value_mode="add-unique", with_input=True,
                ).props(INPUT_PROPS).classes("w-48")
            with ui.row().classes("w-full gap-3"):
                price = ui.select(
                    {1: "$", 2: "$$", 3: "$$$", 4: "$$$$"}, label="Price level",
                    value=cafe.price if cafe else 2,
                ).props(INPUT_PROPS).classes("w-36")
                specialty = ui.select(
                    SPECIALTY_OPTIONS, label="Specialty",
                    value=cafe.specialty if cafe and cafe.specialty in SPECIALTY_OPTIONS else None,
                    clearable=True,
                ).props(INPUT_PROPS).classes("w-48")
                phone = ui.input("Phone", value=(cafe.phone_number or "") if cafe else "").props(
                    INPUT_PROPS
                ).classes("w-48")
                website = ui.input("Website", value=(cafe.website or "") if cafe else "").props(
                    INPUT_PROPS
                ).classes("flex-1")
            amenities = ui.select(
                AMENITY_OPTIONS, label="Amenities", multiple=True,
                value=sorted(cafe.amenities) if cafe else [],
            ).props(f"{INPUT_PROPS} use-chips").classes("w-full")

            if cafe is None:
                async def _handle_upload(e):
                    data = await e.file.read()
                    images.append((e.file.name, data, e.file.content_type or "image/jpeg"))
                    ui.notify(f"Added {e.file.name}", type="info")

                ui.upload(
                    label="Photos", auto_upload=True, multiple=True, on_upload=_handle_upload,
                ).props('accept="image/*" max-file-size=5242880 flat dense').classes("w-full")

            errors_label = ui.label("").classes("text-caption text-negative")
            save_btn = ui.button("Save", icon="save").props("color=primary")

        async def _save():
            data = {
                "name": (name.value or "").strip(),
                "description": (description.value or "").strip(),
                "address": (address.value or "").strip(),
                "city": (city.value or "").strip(),
                "price": price.value,
                "specialty": specialty.value,
                "phoneNumber": (phone.value or "").strip() or None,
                "website": (website.value or "").strip() or None,
                "amenities": list(amenities.value or []),
            }
            errors = validate_cafe(data)
            if errors:
                errors_label.text = " · ".join(errors.values())
                return
            errors_label.text = ""
            save_btn.disable()
            try:
                if cafe is None:
                    saved = await call_in_thread(api.create_cafe, data, list(images))
                else:
                    saved = await call_in_thread(api.update_cafe, cafe.id, data)
            except ApiError as exc:
                logger.warning("Saving cafe failed: %s", exc)
                ui.notify(error_text(exc), type="negative")
                save_btn.enable()
                return
            ui.notify("Cafe saved!", type="positive")
            ui.navigate.to(f"/cafes/{saved.id}")

        save_btn.on_click(_save)

    ui.timer(0.1, _build, once=True)
