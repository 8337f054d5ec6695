"""Shared plumbing for page controllers."""
import asyncio
import functools
import logging
from enum import Enum
from typing import Callable

from sipspot.services.http_client import ApiError

logger = logging.getLogger(__name__)

GENERIC_ERROR = "Something went wrong, please try again"


class LoadState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    ERRORED = "errored"


async def call_in_thread(fn, *args, **kwargs):
    """Run a blocking API call off the event loop."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, functools.partial(fn, *args, **kwargs))


def error_text(exc: Exception) -> str:
    if isinstance(exc, ApiError) and exc.message:
        return exc.message
    return GENERIC_ERROR


class Controller:
    """Holds page state and tells subscribed views when it changed."""

    def __init__(self, on_change: Callable[[], None] | None = None):
        self._listeners: list[Callable[[], None]] = []
        if on_change is not None:
            self._listeners.append(on_change)

    def subscribe(self, listener: Callable[[], None]) -> Callable[[], None]:
        """Register *listener*; returns the matching unsubscribe function."""
        self._listeners.append(listener)

        def _unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()


class ValueWatch:
    """Remembers the last value seen; ``changed`` reports when it differs."""

    def __init__(self, initial=None):
        self._last = initial

    def changed(self, value) -> bool:
        if value == self._last:
            return False
        self._last = value
        return True
