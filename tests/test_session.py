import asyncio
from unittest.mock import MagicMock

from sipspot.models import Cafe
from sipspot.services import ApiClient, CafesAPI
from sipspot.ui.controllers import CafeDetailController, CafeListController, LoadState
from sipspot.ui.session import login_clearer


def _expired_client(storage, loop):
    resp = MagicMock()
    resp.status_code = 401
    resp.content = b"{}"
    resp.json.return_value = {"success": False, "message": "Token expired"}
    session = MagicMock()
    session.request.return_value = resp
    return ApiClient(
        base_url="http://api.test/api",
        token=storage.get("token"),
        session=session,
        on_unauthorized=login_clearer(storage, loop),
    )


def _logged_in_storage():
    return {"token": "jwt-123", "user": {"id": "me", "username": "ada"}}


def test_expired_session_rolls_back_favorite_and_clears_login():
    storage = _logged_in_storage()

    async def scenario():
        client = _expired_client(storage, asyncio.get_running_loop())
        ctrl = CafeDetailController(CafesAPI(client), "c1", viewer_id="me")
        ctrl.cafe = Cafe(id="c1", name="Blue Bottle", favorite_count=3, is_favorited=False)
        ctrl.state = LoadState.LOADED
        ok = await ctrl.toggle_favorite()
        await asyncio.sleep(0)
        return ctrl, ok

    ctrl, ok = asyncio.run(scenario())

    assert ok is False
    assert (ctrl.cafe.is_favorited, ctrl.cafe.favorite_count) == (False, 3)
    assert ctrl.action_errors == {"favorite": "Token expired"}
    assert storage == {}


def test_expired_session_errors_the_list_instead_of_hanging():
    storage = _logged_in_storage()

    async def scenario():
        client = _expired_client(storage, asyncio.get_running_loop())
        ctrl = CafeListController(CafesAPI(client))
        await ctrl.load()
        await asyncio.sleep(0)
        return ctrl

    ctrl = asyncio.run(scenario())

    assert ctrl.state is LoadState.ERRORED
    assert ctrl.error == "Token expired"
    assert "token" not in storage


def test_clearer_without_loop_clears_immediately():
    storage = _logged_in_storage()
    login_clearer(storage)()
    assert storage == {}
    # already logged out
    login_clearer(storage)()
    assert storage == {}
