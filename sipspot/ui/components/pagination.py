"""Numbered pagination bar."""
from typing import Optional

from nicegui import ui


def page_window(current: int, total: int, radius: int = 2) -> list[Optional[int]]:
    """Page numbers to show, with ``None`` standing for an ellipsis.

    Always includes the first and last page plus ``current +- radius``:
    ``page_window(6, 12)`` -> ``[1, None, 4, 5, 6, 7, 8, None, 12]``.
    """
    if total <= 1:
        return [1]
    current = max(1, min(current, total))
    low = max(2, current - radius)
    high = min(total - 1, current + radius)

    pages: list[Optional[int]] = [1]
    if low > 2:
        pages.append(None)
    pages.extend(range(low, high + 1))
    if high < total - 1:
        pages.append(None)
    pages.append(total)
    return pages


def pagination(current: int, total: int, on_page):
    """Render prev / numbered / next buttons; *on_page* receives the page number."""
    if total <= 1:
        return
    with ui.row().classes("items-center justify-center gap-1 w-full mt-4"):
        prev_btn = ui.button(icon="chevron_left", on_click=lambda: on_page(current - 1)).props(
            "flat dense round"
        )
        if current <= 1:
            prev_btn.disable()

        for page in page_window(current, total):
            if page is None:
                ui.label("…").classes("px-2 text-secondary")
            elif page == current:
                ui.button(str(page)).props("unelevated dense color=primary").classes("min-w-[36px]")
            else:
                ui.button(str(page), on_click=lambda p=page: on_page(p)).props(
                    "flat dense color=primary"
                ).classes("min-w-[36px]")

        next_btn = ui.button(icon="chevron_right", on_click=lambda: on_page(current + 1)).props(
            "flat dense round"
        )
        if current >= total:
            next_btn.disable()
