"""Load external map scripts/stylesheets once per browser client."""
import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)

ASSET_KINDS = ("script", "stylesheet")


@dataclass(frozen=True)
class LoadResult:
    ready: bool
    error: Optional[str] = None


class AssetLoadError(Exception):
    """Raised by an injector when the browser could not load an asset."""


# inject(url, kind) resolves once the tag has loaded, raises AssetLoadError otherwise
Injector = Callable[[str, str], Awaitable[None]]


class MapAssetLoader:
    """De-duplicating asset loader.

    Concurrent ``load`` calls for the same URL share a single in-flight
    injection. Successful loads are remembered; failed ones are forgotten so
    a later call tries again.
    """

    def __init__(self, inject: Injector):
        self._inject = inject
        self._loaded: set[str] = set()
        self._pending: dict[str, asyncio.Task] = {}

    async def load(self, url: str, kind: str = "script") -> LoadResult:
        if kind not in ASSET_KINDS:
            raise ValueError(f"Unknown asset kind: {kind!r}")
        if url in self._loaded:
            return LoadResult(ready=True)

        task = self._pending.get(url)
        if task is None:
            task = asyncio.ensure_future(self._run(url, kind))
            self._pending[url] = task
        return await asyncio.shield(task)

    async def load_all(self, assets: list[tuple[str, str]]) -> LoadResult:
        """Load (url, kind) pairs in order; stops at the first failure."""
        for url, kind in assets:
            result = await self.load(url, kind)
            if not result.ready:
                return result
        return LoadResult(ready=True)

    async def _run(self, url: str, kind: str) -> LoadResult:
        try:
            await self._inject(url, kind)
        except (AssetLoadError, TimeoutError) as exc:
            logger.warning("Failed to load %s %s: %s", kind, url, exc)
            return LoadResult(ready=False, error=str(exc) or f"Could not load {url}")
        finally:
            self._pending.pop(url, None)
        self._loaded.add(url)
        logger.debug("Loaded %s %s", kind, url)
        return LoadResult(ready=True)
