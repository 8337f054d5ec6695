"""Shared UI helper functions and design tokens for cafe display."""

from nicegui import ui


# ─── Design Tokens ────────────────────────────────────────────────────────────

# Card & layout
CARD_CLASSES = "w-full p-5"
INPUT_PROPS = "outlined dense"
HOVER_BG = "hover:bg-[#F5EEE6]"

# Nav active-state tokens (used in layout.py JS)
NAV_ACTIVE_BG = "#EADBC8"
NAV_ACTIVE_TEXT = "#3E2723"

# Sentiment colors (review badges and the sentiment panel)
SENTIMENT_COLORS = {
    "positive": {"bg": "#E8F5E9", "bar": "positive", "text": "#1B5E20", "icon": "sentiment_satisfied"},
    "neutral": {"bg": "#F5F5F5", "bar": "grey-6", "text": "#424242", "icon": "sentiment_neutral"},
    "negative": {"bg": "#FFEBEE", "bar": "negative", "text": "#B71C1C", "icon": "sentiment_dissatisfied"},
}
SENTIMENT_LABELS = {
    "positive": "Positive",
    "neutral": "Neutral",
    "negative": "Negative",
}

PLACEHOLDER_IMAGE = "https://placehold.co/600x400?text=SipSpot"


def page_header(title: str, subtitle: str | None = None, icon: str | None = None):
    """Render a consistent page title with optional icon + subtitle."""
    with ui.row().classes("items-center gap-3"):
        if icon:
            ui.icon(icon, size="sm").classes("text-accent")
        ui.label(title).classes("text-h5 font-bold")
    if subtitle:
        ui.label(subtitle).classes("text-body2 text-secondary")


def section_header(title: str, icon: str | None = None, subtitle: str | None = None):
    """Render a consistent card section header with accent-colored icon."""
    with ui.row().classes("items-center gap-2 mb-2"):
        if icon:
            ui.icon(icon).classes("text-accent")
        ui.label(title).classes("text-subtitle1 font-bold")
    if subtitle:
        ui.label(subtitle).classes("text-caption text-secondary")


def star_icons(rating: float, size: str = "xs"):
    """Render five star icons (full / half / empty) for *rating*."""
    with ui.row().classes("items-center gap-0"):
        for i in range(1, 6):
            if rating >= i:
                name = "star"
            elif rating >= i - 0.5:
                name = "star_half"
            else:
                name = "star_border"
            ui.icon(name, size=size).classes("text-amber-7")


def error_banner(message: str, on_retry=None):
    """Inline error with an optional retry button."""
    with ui.card().classes("w-full p-4 bg-red-1"):
        with ui.row().classes("items-center gap-3 w-full"):
            ui.icon("error_outline").classes("text-negative text-2xl")
            ui.label(message).classes("text-body1 flex-1")
            if on_retry is not None:
                ui.button("Retry", icon="refresh", on_click=on_retry).props(
                    "flat dense color=negative"
                )


def empty_state(message: str, icon: str = "local_cafe"):
    with ui.column().classes("w-full items-center py-12 gap-2"):
        ui.icon(icon).classes("text-6xl text-grey-5")
        ui.label(message).classes("text-body1 text-secondary")


# Predefined palette for letter-avatar backgrounds
AVATAR_COLORS = [
    "#E57373", "#F06292", "#BA68C8", "#9575CD", "#7986CB",
    "#64B5F6", "#4FC3F7", "#4DD0E1", "#4DB6AC", "#81C784",
    "#AED581", "#DCE775", "#FFD54F", "#FFB74D", "#FF8A65",
    "#A1887F", "#90A4AE",
]


def avatar_color(name: str) -> str:
    """Return a deterministic color based on the first letter of *name*."""
    idx = ord(name[0].upper()) % len(AVATAR_COLORS) if name else 0
    return AVATAR_COLORS[idx]


def user_avatar(user, size: int = 36) -> None:
    """Render a user's avatar image, falling back to a letter avatar."""
    name = user.display_name if user else "?"
    if user is not None and user.avatar:
        ui.image(user.avatar).classes("rounded-full object-cover").style(
            f"width: {size}px; height: {size}px; flex-shrink: 0"
        )
    else:
        ui.avatar(
            name[0].upper(), color=avatar_color(name), text_color="white",
            size=f"{size}px", font_size=f"{size // 2}px",
        )


def cafe_image_src(cafe, index: int = 0) -> str:
    """Return the image URL at *index*, or the placeholder."""
    if cafe.images:
        return cafe.images[index % len(cafe.images)]
    return PLACEHOLDER_IMAGE


def format_date(value, na_text: str = "") -> str:
    if value is None:
        return na_text
    return value.strftime("%b %d, %Y")
