"""Geocore timestamp helpers.

The service uses a single textual format for every date, `yyyy/MM/dd HH:mm:ss`
in GMT, and epoch milliseconds for feed and check-in timestamps.
"""

from __future__ import annotations

from datetime import datetime, timezone

GEOCORE_DATE_FORMAT = "%Y/%m/%d %H:%M:%S"


def as_utc(value: datetime) -> datetime:
    # naive values are taken as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_geocore_date(value: datetime) -> str:
    return as_utc(value).strftime(GEOCORE_DATE_FORMAT)


def parse_geocore_date(value: str | None) -> datetime | None:
    """Parse a Geocore formatted string; returns None when absent or malformed."""

    if not value:
        return None
    try:
        parsed = datetime.strptime(value.strip(), GEOCORE_DATE_FORMAT)
    except ValueError:
        return None
    return parsed.replace(tzinfo=timezone.utc)


def to_epoch_millis(value: datetime) -> int:
    return int(as_utc(value).timestamp() * 1000)


def from_epoch_millis(millis: int) -> datetime:
    return datetime.fromtimestamp(millis / 1000.0, tz=timezone.utc)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
