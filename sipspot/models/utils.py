"""Shared parsing helpers for API payloads."""
from datetime import date, datetime
from typing import Optional


def canonical_id(raw) -> Optional[str]:
    """Return the single canonical identifier for an API object.

    The backend serializes documents with ``_id`` and, through virtuals,
    sometimes ``id`` as well. Plain strings are treated as bare references.
    """
    if raw is None:
        return None
    if isinstance(raw, str):
        return raw or None
    if isinstance(raw, dict):
        value = raw.get("id") or raw.get("_id")
        return str(value) if value else None
    return str(raw)


def parse_datetime(value) -> Optional[datetime]:
    """Parse ISO-8601 strings as produced by the backend ('...Z' suffix)."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None


def to_int(value, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def to_float(value, default: float = 0.0) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default
