"""Reusable statistics card component."""
from nicegui import ui


def stats_card(title: str, value: str, icon: str = "info", color: str = "primary"):
    """Render a small counter card (views, favorites, reviews)."""
    with ui.card().classes("min-w-[150px] flex-1 p-4"):
        with ui.row().classes("items-center gap-3 w-full"):
            ui.icon(icon).classes(f"text-{color} text-2xl")
            with ui.column().classes("gap-0"):
                ui.label(value).classes("text-h6 font-bold")
                ui.label(title).classes("text-caption text-secondary")
