"""Per-user API access: builds clients from the token kept in user storage."""
import asyncio
import logging
from typing import Callable, MutableMapping, Optional

from nicegui import app

from sipspot.models import UserRef
from sipspot.services import ApiClient, CafesAPI, UsersAPI

logger = logging.getLogger(__name__)


def login_clearer(
    storage: MutableMapping,
    loop: Optional[asyncio.AbstractEventLoop] = None,
) -> Callable[[], None]:
    """Build the 401 hook for an ``ApiClient``.

    *storage* is resolved up front on the page's thread, since API calls run
    in worker threads where the request context is not available. With a
    *loop* the clearing is handed back to that loop.
    """
    def _clear() -> None:
        if storage.pop("token", None) is not None:
            logger.info("Session expired, cleared stored token")
        storage.pop("user", None)

    if loop is None:
        return _clear
    return lambda: loop.call_soon_threadsafe(_clear)


def api_client() -> ApiClient:
    storage = app.storage.user
    return ApiClient(
        token=storage.get("token"),
        on_unauthorized=login_clearer(storage, asyncio.get_running_loop()),
    )


def cafes_api() -> CafesAPI:
    return CafesAPI(api_client())


def users_api() -> UsersAPI:
    return UsersAPI(api_client())


def current_user() -> Optional[UserRef]:
    raw = app.storage.user.get("user")
    if not raw:
        return None
    return UserRef(id=raw.get("id"), username=raw.get("username"), role=raw.get("role"))


def remember_user(user: UserRef) -> None:
    app.storage.user["user"] = {"id": user.id, "username": user.username, "role": user.role}


def remember_login(user: UserRef, token: str) -> None:
    app.storage.user["token"] = token
    remember_user(user)


def forget_login() -> None:
    login_clearer(app.storage.user)()
