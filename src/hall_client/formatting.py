"""
Urbit-style date and number encodings.

The path date becomes a segment of the grams subscription path and is parsed
by the ship itself, so the format below is exact: unpadded month/day,
two-digit time fields and a 16-bit hex fraction of a second.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Union

INBOX_CIRCLE = "inbox"
GRAMS_PATH = f"/circle/{INBOX_CIRCLE}/grams/"
DEFAULT_LOOKBACK = timedelta(hours=6)
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

Timestamp = Union[datetime, int, float]


def _to_utc(when: Timestamp) -> datetime:
    if isinstance(when, datetime):
        if when.tzinfo is None:
            return when.replace(tzinfo=timezone.utc)
        return when.astimezone(timezone.utc)
    return EPOCH + timedelta(milliseconds=when)


def format_path_date(when: Timestamp) -> str:
    """Format a date the urbit way (~2017.12.27..18.48.00..0000).

    ``when`` is a datetime (naive values are read as UTC) or milliseconds
    since the epoch.
    """
    dat = _to_utc(when)
    millis = dat.microsecond // 1000
    fraction = (0x10000 * millis) // 1000
    return (
        f"~{dat.year}.{dat.month}.{dat.day}"
        f"..{dat.hour:02d}.{dat.minute:02d}.{dat.second:02d}"
        f"..{fraction:04x}"
    )


def format_grouped_number(num: int) -> str:
    """Format a number the urbit way (1.024)."""
    return f"{int(num):,}".replace(",", ".")


def station(ship: str, circle: str) -> str:
    return f"~{ship.lstrip('~')}/{circle}"


def inbox_station(ship: str) -> str:
    return station(ship, INBOX_CIRCLE)


def _path_segment(value: Union[Timestamp, str]) -> str:
    if isinstance(value, str):
        return value
    return format_path_date(value)


def grams_path(
    start: Optional[Union[Timestamp, str]] = None,
    end: Optional[Union[Timestamp, str]] = None,
    now: Optional[datetime] = None,
) -> str:
    """Build the inbox grams subscription path.

    Without ``start`` the feed opens six hours before ``now``. String bounds
    are passed through as already-formatted ranges.
    """
    if start is None:
        now = now or datetime.now(timezone.utc)
        return GRAMS_PATH + format_path_date(_to_utc(now) - DEFAULT_LOOKBACK)

    path = GRAMS_PATH + _path_segment(start)
    if end is not None:
        path += "/" + _path_segment(end)
    return path
