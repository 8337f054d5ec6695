"""Profile page state: account details, activity stats and visited cafes."""
import asyncio
import logging
from typing import Callable, Optional

from config import VISITED_PAGE_SIZE
from sipspot.models import UserProfile, UserStats, VisitedCafe
from sipspot.services.http_client import ApiError
from sipspot.services.users_api import UsersAPI
from sipspot.services.validation import validate_password_change, validate_profile
from sipspot.ui.controllers.base import Controller, LoadState, call_in_thread, error_text

logger = logging.getLogger(__name__)


class ProfileController(Controller):
    """Owns the signed-in user's profile view.

    The profile itself is required; stats and visited cafes are optional
    and fail quietly. Edit and password errors are kept per form, keyed by
    field, with ``submit`` holding the server's answer.
    """

    def __init__(
        self,
        api: UsersAPI,
        visited_page_size: int = VISITED_PAGE_SIZE,
        on_change: Optional[Callable[[], None]] = None,
    ):
        super().__init__(on_change)
        self.api = api
        self.visited_page_size = visited_page_size

        self.state = LoadState.IDLE
        self.profile: Optional[UserProfile] = None
        self.error: Optional[str] = None
        self.stats: Optional[UserStats] = None

        self.visited: list[VisitedCafe] = []
        self.visited_page = 1
        self.visited_total_pages = 1
        self.visited_error: Optional[str] = None

        self.edit_errors: dict[str, str] = {}
        self.password_errors: dict[str, str] = {}
        self.saving = False

    @property
    def token(self) -> Optional[str]:
        return self.api.client.token

    async def load(self) -> None:
        self.state = LoadState.LOADING
        self.error = None
        self._notify()
        try:
            self.profile = await call_in_thread(self.api.get_profile)
        except ApiError as exc:
            logger.error("Failed to load profile: %s", exc)
            self.state = LoadState.ERRORED
            self.error = error_text(exc)
            self._notify()
            return
        self.state = LoadState.LOADED
        self._notify()
        await asyncio.gather(self.load_stats(), self.load_visited())

    async def retry(self) -> None:
        await self.load()

    async def load_stats(self) -> None:
        try:
            self.stats = await call_in_thread(self.api.get_my_stats)
        except ApiError as exc:
            logger.warning("User stats unavailable: %s", exc)
            return
        self._notify()

    async def load_visited(self) -> None:
        self.visited_error = None
        try:
            result = await call_in_thread(
                self.api.get_visited_cafes, self.visited_page, self.visited_page_size,
            )
        except ApiError as exc:
            logger.warning("Visited cafes unavailable: %s", exc)
            self.visited_error = error_text(exc)
            self._notify()
            return
        self.visited = result.items
        self.visited_total_pages = result.total_pages
        self._notify()

    async def go_to_visited_page(self, page: int) -> None:
        page = max(1, min(int(page), self.visited_total_pages))
        if page == self.visited_page:
            return
        self.visited_page = page
        await self.load_visited()

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------

    async def save_profile(self, data: dict) -> bool:
        """Validate and save profile fields; the profile is replaced on success."""
        data = {key: (value or "").strip() for key, value in data.items()}
        self.edit_errors = validate_profile(data)
        if self.edit_errors:
            self._notify()
            return False
        ok, profile = await self._save(self.edit_errors, self.api.update_profile, data)
        if ok:
            self.profile = profile
            self._notify()
        return ok

    async def change_password(self, current: str, new: str, confirm: str) -> bool:
        self.password_errors = validate_password_change(current, new, confirm)
        if self.password_errors:
            self._notify()
            return False
        ok, _ = await self._save(self.password_errors, self.api.update_password, current, new)
        return ok

    async def _save(self, errors: dict[str, str], fn, *args):
        self.saving = True
        self._notify()
        try:
            result = await call_in_thread(fn, *args)
        except ApiError as exc:
            logger.warning("Profile update failed: %s", exc)
            errors["submit"] = error_text(exc)
            return False, None
        finally:
            self.saving = False
            self._notify()
        return True, result
