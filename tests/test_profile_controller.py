import asyncio
from types import SimpleNamespace

from sipspot.models import Cafe, UserProfile, UserStats, VisitedCafe, VisitedPage
from sipspot.services.http_client import ApiError
from sipspot.ui.controllers import LoadState, ProfileController


class FakeUsersAPI:
    def __init__(self):
        self.client = SimpleNamespace(token="jwt-1")
        self.fail = set()
        self.calls = []

    def _check(self, name):
        self.calls.append(name)
        if name in self.fail:
            raise ApiError(f"{name} failed", status=500)

    def get_profile(self):
        self._check("get_profile")
        return UserProfile(id="u1", username="ada", email="ada@example.com")

    def get_my_stats(self):
        self._check("get_my_stats")
        return UserStats(reviews=4, average_rating=4.5)

    def get_visited_cafes(self, page, limit):
        self._check("get_visited_cafes")
        items = [VisitedCafe(cafe=Cafe(id=f"c{page}", name=f"Page {page} cafe"))]
        return VisitedPage(items=items, total_pages=3, total_count=5)

    def update_profile(self, data):
        self._check("update_profile")
        return UserProfile(id="u1", **data)

    def update_password(self, current, new):
        self._check("update_password")
        if current != "secret1":
            raise ApiError("Current password is incorrect", status=401)
        self.client.token = "jwt-2"


def test_profile_loads_with_activity():
    api = FakeUsersAPI()
    ctrl = ProfileController(api)

    asyncio.run(ctrl.load())

    assert ctrl.state is LoadState.LOADED
    assert ctrl.profile.username == "ada"
    assert ctrl.stats.reviews == 4
    assert [v.cafe.name for v in ctrl.visited] == ["Page 1 cafe"]


def test_activity_failures_leave_the_profile_usable():
    api = FakeUsersAPI()
    api.fail = {"get_my_stats", "get_visited_cafes"}
    ctrl = ProfileController(api)

    asyncio.run(ctrl.load())

    assert ctrl.state is LoadState.LOADED
    assert ctrl.stats is None
    assert ctrl.visited_error == "get_visited_cafes failed"


def test_missing_profile_is_an_error():
    api = FakeUsersAPI()
    api.fail = {"get_profile"}
    ctrl = ProfileController(api)

    asyncio.run(ctrl.load())

    assert ctrl.state is LoadState.ERRORED
    assert ctrl.error == "get_profile failed"
    assert api.calls == ["get_profile"]


def test_visited_pages_are_clamped():
    api = FakeUsersAPI()
    ctrl = ProfileController(api)
    asyncio.run(ctrl.load())

    asyncio.run(ctrl.go_to_visited_page(9))

    assert ctrl.visited_page == 3
    assert [v.cafe.name for v in ctrl.visited] == ["Page 3 cafe"]


def test_invalid_profile_edit_is_not_sent():
    api = FakeUsersAPI()
    ctrl = ProfileController(api)

    ok = asyncio.run(ctrl.save_profile({"username": "ada", "email": "nope", "bio": "", "avatar": ""}))

    assert ok is False
    assert set(ctrl.edit_errors) == {"email"}
    assert "update_profile" not in api.calls


def test_profile_edit_is_trimmed_and_replaces_the_profile():
    api = FakeUsersAPI()
    ctrl = ProfileController(api)

    ok = asyncio.run(ctrl.save_profile({
        "username": " ada ", "email": "ada@example.com", "bio": " Espresso first ", "avatar": None,
    }))

    assert ok is True
    assert ctrl.profile.bio == "Espresso first"
    assert ctrl.profile.username == "ada"
    assert ctrl.saving is False


def test_server_refusal_is_shown_on_the_form():
    api = FakeUsersAPI()
    api.fail = {"update_profile"}
    ctrl = ProfileController(api)

    ok = asyncio.run(ctrl.save_profile({"username": "ada", "email": "ada@example.com"}))

    assert ok is False
    assert ctrl.edit_errors == {"submit": "update_profile failed"}
    assert ctrl.saving is False


def test_password_change():
    api = FakeUsersAPI()
    ctrl = ProfileController(api)

    assert asyncio.run(ctrl.change_password("secret1", "secret2", "secret3")) is False
    assert set(ctrl.password_errors) == {"confirm"}

    assert asyncio.run(ctrl.change_password("wrong1", "secret2", "secret2")) is False
    assert ctrl.password_errors == {"submit": "Current password is incorrect"}
    assert ctrl.token == "jwt-1"

    assert asyncio.run(ctrl.change_password("secret1", "secret2", "secret2")) is True
    assert ctrl.password_errors == {}
    assert ctrl.token == "jwt-2"
