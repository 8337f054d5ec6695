"""Map and distance helpers: cafes to markers, viewport bounds, cluster tiers."""
import logging
import math
from dataclasses import dataclass
from typing import Iterable, Optional

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371.0

# (upper bound exclusive, name, colour, diameter px); the last tier is open ended
CLUSTER_TIERS = [
    (10, "small", "#00BCD4", 40),
    (30, "medium", "#2196F3", 50),
    (None, "large", "#3F51B5", 60),
]


@dataclass(frozen=True)
class Marker:
    cafe_id: str
    lat: float
    lng: float
    title: str
    rating: float = 0.0
    price_label: str = ""
    address: str = ""

    @property
    def latlng(self) -> tuple[float, float]:
        return (self.lat, self.lng)


def project_markers(cafes: Iterable) -> list[Marker]:
    """Build one marker per cafe that has a usable location.

    Cafes without geometry, or sitting on the (0, 0) placeholder the backend
    stores for un-geocoded cafes, are skipped.
    """
    markers = []
    skipped = 0
    for cafe in cafes:
        geometry = getattr(cafe, "geometry", None)
        if geometry is None or not geometry.has_location:
            skipped += 1
            continue
        markers.append(Marker(
            cafe_id=cafe.id,
            lat=geometry.lat,
            lng=geometry.lng,
            title=cafe.name,
            rating=cafe.rating,
            price_label=cafe.price_label,
            address=cafe.address,
        ))
    if skipped:
        logger.debug("Skipped %d cafe(s) without a location", skipped)
    return markers


def bounds(markers: list[Marker]) -> Optional[tuple[tuple[float, float], tuple[float, float]]]:
    """Return ((south, west), (north, east)) around *markers*, or None if empty."""
    if not markers:
        return None
    lats = [m.lat for m in markers]
    lngs = [m.lng for m in markers]
    return (min(lats), min(lngs)), (max(lats), max(lngs))


def cluster_tiers() -> list[dict]:
    """Cluster icon tiers, smallest first, as handed to the map script.

    A cluster of ``count`` markers takes the first tier whose ``limit`` is
    None or greater than ``count``.
    """
    return [
        {"name": name, "limit": limit, "color": color, "size": size}
        for limit, name, color, size in CLUSTER_TIERS
    ]


def distance_km(origin: tuple[float, float], target: tuple[float, float]) -> float:
    """Great-circle (haversine) distance between two (lat, lng) points."""
    lat1, lng1 = map(math.radians, origin)
    lat2, lng2 = map(math.radians, target)
    a = (
        math.sin((lat2 - lat1) / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin((lng2 - lng1) / 2) ** 2
    )
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(a))


def format_distance(km: Optional[float]) -> str:
    if km is None:
        return ""
    if km < 1:
        return f"{round(km * 1000)}m"
    return f"{km:.1f}km"
