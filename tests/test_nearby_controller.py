import asyncio
import threading

import pytest

from sipspot.models import Cafe
from sipspot.services.http_client import ApiError
from sipspot.ui.controllers import LoadState, NearbyController


class FakeCafesAPI:
    def __init__(self):
        self.calls = []
        self.blockers: dict[int, threading.Event] = {}
        self.fail_next = False

    def get_nearby_cafes(self, lat, lng, distance, limit):
        self.calls.append((lat, lng, distance, limit))
        if distance in self.blockers:
            self.blockers[distance].wait(timeout=5)
        if self.fail_next:
            self.fail_next = False
            raise ApiError("Internal server error", status=500)
        return [Cafe(id=f"c{distance}", name=f"{distance // 1000} km cafe")]


def test_nothing_is_fetched_before_a_location_is_known():
    api = FakeCafesAPI()
    ctrl = NearbyController(api)

    asyncio.run(ctrl.set_distance(1000))

    assert api.calls == []
    assert ctrl.state is LoadState.IDLE
    assert ctrl.distance_km == 1.0


def test_location_then_radius_change_refetches():
    api = FakeCafesAPI()
    ctrl = NearbyController(api, limit=20)

    asyncio.run(ctrl.set_location(47.61, -122.34, approximate=True))
    asyncio.run(ctrl.set_distance(10000))
    asyncio.run(ctrl.set_distance(10000))

    assert api.calls == [(47.61, -122.34, 5000, 20), (47.61, -122.34, 10000, 20)]
    assert [c.name for c in ctrl.cafes] == ["10 km cafe"]
    assert ctrl.approximate is True
    assert ctrl.state is LoadState.LOADED


def test_unsupported_radius_is_rejected():
    with pytest.raises(ValueError):
        NearbyController(FakeCafesAPI(), distance=1234)
    ctrl = NearbyController(FakeCafesAPI())
    with pytest.raises(ValueError):
        asyncio.run(ctrl.set_distance(3000))
    assert ctrl.distance == 5000


def test_answer_for_an_older_radius_is_dropped():
    api = FakeCafesAPI()
    release = threading.Event()
    api.blockers[1000] = release
    ctrl = NearbyController(api)
    ctrl.location = (47.61, -122.34)

    async def scenario():
        slow = asyncio.create_task(ctrl.set_distance(1000))
        await asyncio.sleep(0.05)
        await ctrl.set_distance(10000)
        release.set()
        await slow

    asyncio.run(scenario())

    assert [c.name for c in ctrl.cafes] == ["10 km cafe"]
    assert ctrl.distance == 10000


def test_error_then_retry():
    api = FakeCafesAPI()
    api.fail_next = True
    ctrl = NearbyController(api)

    asyncio.run(ctrl.set_location(47.61, -122.34))
    assert ctrl.state is LoadState.ERRORED
    assert ctrl.error == "Internal server error"

    asyncio.run(ctrl.retry())
    assert ctrl.state is LoadState.LOADED
