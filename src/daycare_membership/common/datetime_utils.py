from __future__ import annotations

from datetime import date, datetime, time


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def day_bounds(day: date) -> tuple[datetime, datetime]:
    """Return [start, end] of a calendar day, both inclusive."""
    return datetime.combine(day, time.min), datetime.combine(day, time.max)


def to_iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None
