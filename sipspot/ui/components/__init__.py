"""Reusable UI components."""
from sipspot.ui.components.stats_card import stats_card
from sipspot.ui.components.cafe_card import cafe_card, cafe_grid
from sipspot.ui.components.pagination import page_window, pagination
from sipspot.ui.components.helpers import avatar_color, cafe_image_src, star_icons

__all__ = [
    "stats_card", "cafe_card", "cafe_grid", "page_window", "pagination",
    "avatar_color", "cafe_image_src", "star_icons",
]
