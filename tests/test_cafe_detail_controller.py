import asyncio

from sipspot.models import Cafe, Geometry, Review, ReviewPage, SentimentStats, UserRef
from sipspot.services.http_client import ApiError
from sipspot.ui.controllers import CafeDetailController, LoadState, ValueWatch


class FakeCafesAPI:
    """In-memory stand-in for CafesAPI with a configurable server state."""

    def __init__(self):
        self.server = {"favorited": False, "favorites": 7, "reviews": 3}
        self.calls = []
        self.fail = set()
        self.seen_during_toggle = None
        self.ctrl = None

    def _check(self, name):
        self.calls.append(name)
        if name in self.fail:
            raise ApiError(f"{name} failed", status=500)

    def get_cafe(self, cafe_id):
        self._check("get_cafe")
        return Cafe(
            id=cafe_id, name="Blue Bottle",
            review_count=self.server["reviews"],
            favorite_count=self.server["favorites"],
            is_favorited=self.server["favorited"],
            author=UserRef(id="owner"),
            geometry=Geometry(lng=-122.3, lat=47.6),
        )

    def get_sentiment_stats(self, cafe_id):
        self._check("get_sentiment_stats")
        return SentimentStats(positive=2, neutral=1)

    def get_cafe_stats(self, cafe_id):
        self._check("get_cafe_stats")
        return None

    def get_reviews(self, cafe_id, page, limit, sort):
        self._check("get_reviews")
        reviews = [
            Review(id="r1", cafe_id=cafe_id, author=UserRef(id="u2"), rating=5,
                   content="Lovely espresso", votes={"me": "helpful"}),
        ]
        return ReviewPage(items=reviews, total_pages=2, total_count=self.server["reviews"])

    def toggle_favorite(self, cafe_id, currently_favorited):
        cafe = self.ctrl.cafe
        self.seen_during_toggle = (cafe.is_favorited, cafe.favorite_count)
        self._check("toggle_favorite")
        self.server["favorited"] = not currently_favorited
        self.server["favorites"] += -1 if currently_favorited else 1
        return not currently_favorited

    def create_review(self, cafe_id, data, images):
        self._check("create_review")
        self.server["reviews"] += 1
        return Review(id="new", cafe_id=cafe_id, author=UserRef(id="me"), rating=data["rating"],
                      content=data["content"])

    def vote_review(self, review_id, vote_type):
        self._check("vote_review")

    def remove_review_vote(self, review_id):
        self._check("remove_review_vote")

    def delete_review(self, review_id):
        self._check("delete_review")

    def delete_cafe(self, cafe_id):
        self._check("delete_cafe")


def _controller(viewer_id="me", **kwargs):
    api = FakeCafesAPI()
    ctrl = CafeDetailController(api, "c1", viewer_id=viewer_id, **kwargs)
    api.ctrl = ctrl
    return api, ctrl


def _confirm(answer):
    async def _ask():
        return answer
    return _ask


def test_initial_load_fetches_cafe_then_optional_reads():
    api, ctrl = _controller()
    asyncio.run(ctrl.load())

    assert ctrl.state is LoadState.LOADED
    assert api.calls[0] == "get_cafe"
    assert set(api.calls[1:]) == {"get_sentiment_stats", "get_cafe_stats", "get_reviews"}
    assert ctrl.sentiment.positive == 2
    assert [r.id for r in ctrl.reviews] == ["r1"]


def test_cafe_failure_is_fatal_but_sentiment_failure_is_not():
    api, ctrl = _controller()
    api.fail.add("get_cafe")
    asyncio.run(ctrl.load())
    assert ctrl.state is LoadState.ERRORED
    assert ctrl.error == "get_cafe failed"
    assert api.calls == ["get_cafe"]

    api, ctrl = _controller()
    api.fail.add("get_sentiment_stats")
    asyncio.run(ctrl.load())
    assert ctrl.state is LoadState.LOADED
    assert ctrl.sentiment is None
    assert ctrl.reviews


def test_optimistic_favorite_success():
    api, ctrl = _controller()

    async def scenario():
        await ctrl.load()
        return await ctrl.toggle_favorite()

    assert asyncio.run(scenario()) is True
    # the flip was visible before the server answered
    assert api.seen_during_toggle == (True, 8)
    assert ctrl.cafe.is_favorited is True
    assert ctrl.cafe.favorite_count == 8
    assert "favorite" not in ctrl.action_errors


def test_optimistic_favorite_rolls_back_on_failure():
    api, ctrl = _controller()
    api.fail.add("toggle_favorite")
    notified = []
    ctrl.subscribe(lambda: notified.append((ctrl.cafe.is_favorited, ctrl.cafe.favorite_count)
                                           if ctrl.cafe else None))

    async def scenario():
        await ctrl.load()
        notified.clear()
        return await ctrl.toggle_favorite()

    assert asyncio.run(scenario()) is False
    assert api.seen_during_toggle == (True, 8)
    assert ctrl.cafe.is_favorited is False
    assert ctrl.cafe.favorite_count == 7
    assert ctrl.action_errors["favorite"] == "toggle_favorite failed"
    assert notified == [(True, 8), (False, 7)]


def test_anonymous_favorite_asks_to_log_in():
    api, ctrl = _controller(viewer_id=None)

    async def scenario():
        await ctrl.load()
        return await ctrl.toggle_favorite()

    assert asyncio.run(scenario()) is False
    assert "toggle_favorite" not in api.calls
    assert "favorite" in ctrl.action_errors


def test_submit_review_reconciles_with_server():
    api, ctrl = _controller()

    async def scenario():
        await ctrl.load()
        await ctrl.go_to_review_page(2)
        api.calls.clear()
        await ctrl.submit_review({"rating": 5, "content": "Best cortado in town"})

    asyncio.run(scenario())

    assert api.calls[0] == "create_review"
    assert {"get_cafe", "get_reviews"} <= set(api.calls)
    assert ctrl.review_page == 1
    assert ctrl.cafe.review_count == 4


def test_voting_the_same_way_removes_the_vote():
    api, ctrl = _controller()

    async def scenario():
        await ctrl.load()
        api.calls.clear()
        await ctrl.vote_review("r1", "helpful")
        await ctrl.vote_review("r1", "not-helpful")

    asyncio.run(scenario())
    assert "remove_review_vote" in api.calls
    assert "vote_review" in api.calls


def test_action_failure_is_scoped():
    api, ctrl = _controller()
    api.fail.add("delete_review")

    async def scenario():
        await ctrl.load()
        return await ctrl.delete_review("r1", _confirm(True))

    assert asyncio.run(scenario()) is False
    assert ctrl.action_errors == {"delete:r1": "delete_review failed"}
    assert ctrl.state is LoadState.LOADED


def test_delete_cafe_requires_confirmation():
    navigated = []
    api, ctrl = _controller(on_navigate=navigated.append)

    async def scenario():
        await ctrl.load()
        declined = await ctrl.delete_cafe(_confirm(False))
        accepted = await ctrl.delete_cafe(_confirm(True))
        return declined, accepted

    declined, accepted = asyncio.run(scenario())
    assert declined is False
    assert accepted is True
    assert api.calls.count("delete_cafe") == 1
    assert navigated == ["/cafes"]


def test_review_sort_change_resets_page():
    api, ctrl = _controller()

    async def scenario():
        await ctrl.load()
        await ctrl.go_to_review_page(2)
        await ctrl.set_review_sort("-rating")

    asyncio.run(scenario())
    assert ctrl.review_page == 1
    assert ctrl.review_sort == "-rating"


def test_location_map_is_rebuilt_only_when_the_cafe_moves():
    api, ctrl = _controller()
    location = ValueWatch()
    rebuilds = []

    def _on_change():
        geometry = ctrl.cafe.geometry if ctrl.cafe is not None else None
        if location.changed(geometry):
            rebuilds.append(geometry)

    ctrl.subscribe(_on_change)

    async def scenario():
        await ctrl.load()
        await ctrl.toggle_favorite()
        await ctrl.go_to_review_page(2)

    asyncio.run(scenario())
    assert rebuilds == [Geometry(lng=-122.3, lat=47.6)]
