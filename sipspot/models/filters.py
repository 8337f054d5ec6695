"""Cafe list filter state and its URL query-string form."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import Iterable
from urllib.parse import parse_qsl, urlencode

from config import DEFAULT_CAFE_SORT

logger = logging.getLogger(__name__)

MIN_PRICE_TIER = 1
MAX_PRICE_TIER = 4


def _format_number(value: float) -> str:
    # 4.0 -> "4", 3.5 -> "3.5"; str(float) round-trips exactly
    if float(value).is_integer():
        return str(int(value))
    return str(float(value))


def _parse_rating(raw: str) -> float | None:
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Ignoring malformed minRating=%r", raw)
        return None
    if math.isnan(value) or not 0 <= value <= 5:
        logger.warning("Ignoring out-of-range minRating=%r", raw)
        return None
    return value


def _parse_int(name: str, raw: str, lo: int, hi: int | None = None) -> int | None:
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring malformed %s=%r", name, raw)
        return None
    if value < lo or (hi is not None and value > hi):
        logger.warning("Ignoring out-of-range %s=%r", name, raw)
        return None
    return value


@dataclass(frozen=True)
class FilterState:
    """Everything the cafe list page can be filtered, sorted and paged by.

    Immutable: every user interaction produces a new state via
    :meth:`with_changes`, which also resets the page unless told otherwise.
    """
    search: str = ""
    city: str = ""
    min_rating: float | None = None
    max_price: int | None = None
    amenities: frozenset[str] = frozenset()
    sort: str = DEFAULT_CAFE_SORT
    page: int = 1

    # ------------------------------------------------------------------
    # Mutation helpers
    # ------------------------------------------------------------------

    def with_changes(self, **changes) -> FilterState:
        """Return a copy with *changes* applied; page goes back to 1."""
        if "amenities" in changes:
            changes["amenities"] = frozenset(changes["amenities"] or ())
        changes.setdefault("page", 1)
        return replace(self, **changes)

    def toggle_amenity(self, amenity: str) -> FilterState:
        if amenity in self.amenities:
            return self.with_changes(amenities=self.amenities - {amenity})
        return self.with_changes(amenities=self.amenities | {amenity})

    def with_page(self, page: int) -> FilterState:
        return replace(self, page=max(1, int(page)))

    def cleared(self) -> FilterState:
        return FilterState()

    @property
    def query(self) -> str:
        """Search text as sent to the backend (blank means no search)."""
        return self.search.strip()

    @property
    def active_count(self) -> int:
        """Number of narrowing filters in effect (search and sort excluded)."""
        return sum((
            bool(self.city),
            self.min_rating is not None,
            self.max_price is not None,
            len(self.amenities),
        ))

    # ------------------------------------------------------------------
    # URL serialization
    # ------------------------------------------------------------------

    def to_query_params(self) -> list[tuple[str, str]]:
        """Serialize to ordered query pairs; empty/default fields are omitted."""
        params: list[tuple[str, str]] = []
        if self.search:
            params.append(("search", self.search))
        if self.city:
            params.append(("city", self.city))
        if self.min_rating is not None:
            params.append(("minRating", _format_number(self.min_rating)))
        if self.max_price is not None:
            params.append(("maxPrice", str(self.max_price)))
        if self.sort and self.sort != DEFAULT_CAFE_SORT:
            params.append(("sort", self.sort))
        if self.page > 1:
            params.append(("page", str(self.page)))
        for amenity in sorted(self.amenities):
            params.append(("amenities", amenity))
        return params

    def to_query_string(self) -> str:
        return urlencode(self.to_query_params())

    def to_url(self, path: str = "/cafes") -> str:
        qs = self.to_query_string()
        return f"{path}?{qs}" if qs else path

    @classmethod
    def from_query_params(cls, pairs: Iterable[tuple[str, str]]) -> FilterState:
        """Inverse of :meth:`to_query_params`.

        Unknown keys are ignored; for singular keys the last value wins.
        """
        values: dict = {}
        amenities: set[str] = set()
        for key, raw in pairs:
            if key == "amenities":
                if raw:
                    amenities.add(raw)
            elif key == "search":
                values["search"] = raw
            elif key == "city":
                values["city"] = raw
            elif key == "minRating":
                values["min_rating"] = _parse_rating(raw)
            elif key == "maxPrice":
                values["max_price"] = _parse_int("maxPrice", raw, MIN_PRICE_TIER, MAX_PRICE_TIER)
            elif key == "sort":
                values["sort"] = raw or DEFAULT_CAFE_SORT
            elif key == "page":
                values["page"] = _parse_int("page", raw, 1) or 1
        return cls(amenities=frozenset(amenities), **values)

    @classmethod
    def from_query_string(cls, query_string: str) -> FilterState:
        return cls.from_query_params(parse_qsl(query_string.lstrip("?")))
