"""Browser geolocation with a configured fallback."""
import logging

from nicegui import ui

from config import DEFAULT_LOCATION

logger = logging.getLogger(__name__)

_LOCATE_JS = """
return await new Promise((resolve) => {
    if (!navigator.geolocation) { resolve(null); return; }
    navigator.geolocation.getCurrentPosition(
        (pos) => resolve({lat: pos.coords.latitude, lng: pos.coords.longitude}),
        () => resolve(null),
        {timeout: 5000, maximumAge: 600000},
    );
});
"""


async def browser_location() -> tuple[float, float, bool]:
    """Return (lat, lng, approximate); approximate means the default was used."""
    try:
        pos = await ui.run_javascript(_LOCATE_JS, timeout=8)
    except TimeoutError:
        pos = None
    if not pos:
        logger.debug("No browser location, using %s", DEFAULT_LOCATION["city"])
        return DEFAULT_LOCATION["lat"], DEFAULT_LOCATION["lng"], True
    return pos["lat"], pos["lng"], False
