"""
Formatting helpers shared by the resource presenters.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

from . import storage

NOT_AVAILABLE = "N/A"

_UNITS = (
    ("year", 365 * 24 * 3600),
    ("month", 30 * 24 * 3600),
    ("week", 7 * 24 * 3600),
    ("day", 24 * 3600),
    ("hour", 3600),
    ("minute", 60),
    ("second", 1),
)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def diff_for_humans(value: datetime | None, *, now: datetime | None = None) -> str | None:
    """
    Relative description such as "3 hours ago" or "2 days from now".
    """
    if value is None:
        return None
    current = _as_utc(now or datetime.now(timezone.utc))
    seconds = int((current - _as_utc(value)).total_seconds())
    suffix = "ago" if seconds >= 0 else "from now"
    seconds = abs(seconds)

    if seconds < 1:
        return "just now"

    for unit, size in _UNITS:
        if seconds >= size:
            count = seconds // size
            plural = "" if count == 1 else "s"
            return f"{count} {unit}{plural} {suffix}"
    return "just now"


def datetime_string(value: datetime | None) -> str | None:
    if value is None:
        return None
    return _as_utc(value).strftime("%Y-%m-%d %H:%M:%S")


def money(value: Any) -> str | None:
    if value is None:
        return None
    return f"{Decimal(str(value)):.2f}"


def image_url(path: str | None) -> str | None:
    if not path:
        return None
    return storage.public_url(path)


def timestamps(row: dict) -> dict[str, str | None]:
    return {
        "created_at": diff_for_humans(row.get("created_at")),
        "updated_at": datetime_string(row.get("updated_at")),
    }


def present_active(row: dict) -> dict:
    return {"id": int(row["id"]), "slug": str(row["slug"]), "name": str(row["name"])}
