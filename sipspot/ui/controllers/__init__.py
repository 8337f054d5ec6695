"""Page controllers (UI state without NiceGUI)."""
from sipspot.ui.controllers.base import LoadState, ValueWatch
from sipspot.ui.controllers.cafe_detail import CafeDetailController
from sipspot.ui.controllers.cafe_list import CafeListController
from sipspot.ui.controllers.favorites import CardFavorites
from sipspot.ui.controllers.nearby import NearbyController
from sipspot.ui.controllers.profile import ProfileController
from sipspot.ui.controllers.review_form import FormState, ReviewDraft, ReviewFormController

__all__ = [
    "LoadState",
    "ValueWatch",
    "CafeDetailController",
    "CafeListController",
    "CardFavorites",
    "NearbyController",
    "ProfileController",
    "FormState",
    "ReviewDraft",
    "ReviewFormController",
]
