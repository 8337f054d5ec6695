"""Nearby page state: a location, a search radius and the cafes inside it."""
import logging
from typing import Callable, Optional

from config import NEARBY_DISTANCE_METERS, NEARBY_DISTANCE_OPTIONS, NEARBY_LIMIT
from sipspot.models import Cafe
from sipspot.services.cafes_api import CafesAPI
from sipspot.services.http_client import ApiError
from sipspot.ui.controllers.base import Controller, LoadState, call_in_thread, error_text

logger = logging.getLogger(__name__)


class NearbyController(Controller):
    """Loads cafes around a point.

    Nothing is fetched until a location is known. Changing the radius
    re-fetches; a response for an older (location, radius) is dropped.
    """

    def __init__(
        self,
        api: CafesAPI,
        distance: int = NEARBY_DISTANCE_METERS,
        limit: int = NEARBY_LIMIT,
        on_change: Optional[Callable[[], None]] = None,
    ):
        super().__init__(on_change)
        if distance not in NEARBY_DISTANCE_OPTIONS:
            raise ValueError(f"Unsupported search distance: {distance}")
        self.api = api
        self.distance = distance
        self.limit = limit

        self.location: Optional[tuple[float, float]] = None
        # True when the browser gave no position and a default was used
        self.approximate = False
        self.state = LoadState.IDLE
        self.cafes: list[Cafe] = []
        self.error: Optional[str] = None
        self._generation = 0

    @property
    def distance_km(self) -> float:
        return self.distance / 1000

    async def set_location(self, lat: float, lng: float, approximate: bool = False) -> None:
        self.location = (lat, lng)
        self.approximate = approximate
        await self.load()

    async def set_distance(self, distance: int) -> None:
        if distance not in NEARBY_DISTANCE_OPTIONS:
            raise ValueError(f"Unsupported search distance: {distance}")
        if distance == self.distance:
            return
        self.distance = distance
        await self.load()

    async def load(self) -> None:
        if self.location is None:
            return
        self._generation += 1
        ticket = self._generation
        (lat, lng), distance = self.location, self.distance

        self.state = LoadState.LOADING
        self.error = None
        self._notify()
        try:
            cafes = await call_in_thread(self.api.get_nearby_cafes, lat, lng, distance, self.limit)
        except ApiError as exc:
            if ticket != self._generation:
                return
            logger.error("Failed to load cafes near %s,%s: %s", lat, lng, exc)
            self.state = LoadState.ERRORED
            self.error = error_text(exc)
            self._notify()
            return

        if ticket != self._generation:
            logger.debug("Dropping stale nearby response (distance=%d)", distance)
            return
        self.cafes = cafes
        self.state = LoadState.LOADED
        self._notify()

    async def retry(self) -> None:
        await self.load()
