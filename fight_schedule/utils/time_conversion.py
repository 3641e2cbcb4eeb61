"""Locale-independent conversion of UTC instants to India Standard Time.

The arithmetic is done on minutes-of-day with an explicit day carry rather
than through ``zoneinfo`` so the output never depends on the host's time
zone database or locale settings.
"""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import NamedTuple, Tuple

from ..config import TARGET_TZ_LABEL, TARGET_UTC_OFFSET_MINUTES
from ..errors import ParseFailure
from .datetime_utils import Instant, parse_instant

logger = logging.getLogger(__name__)

MINUTES_PER_DAY: int = 1440

_WEEKDAYS: Tuple[str, ...] = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_MONTHS: Tuple[str, ...] = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


class LocalTime(NamedTuple):
    """Rendered local date (``Fri, May 16, 2025``) and time (``3:30 AM IST``)."""

    date_string: str
    time_string: str


UNKNOWN_LOCAL_TIME = LocalTime("TBA", "TBA")


def shift_minutes(hour: int, minute: int, offset_minutes: int) -> Tuple[int, int, int]:
    """Apply *offset_minutes* to a UTC clock reading.

    Returns ``(local_hour, local_minute, day_delta)`` where ``day_delta`` is
    -1, 0 or +1.
    """
    total = hour * 60 + minute + offset_minutes
    day_delta = 0
    if total >= MINUTES_PER_DAY:
        total -= MINUTES_PER_DAY
        day_delta = 1
    elif total < 0:
        total += MINUTES_PER_DAY
        day_delta = -1
    return total // 60, total % 60, day_delta


def _twelve_hour(hour: int) -> Tuple[int, str]:
    return (hour % 12 or 12), ("PM" if hour >= 12 else "AM")


def to_local_time(
    instant: Instant,
    offset_minutes: int = TARGET_UTC_OFFSET_MINUTES,
    label: str = TARGET_TZ_LABEL,
) -> LocalTime:
    """Render *instant* as a local calendar date and 12-hour clock time.

    Seconds are discarded. Raises :class:`ParseFailure` if *instant* is not
    a valid instant; see :func:`format_local_time` for the non-raising form.
    """
    utc = parse_instant(instant)
    hour, minute, day_delta = shift_minutes(utc.hour, utc.minute, offset_minutes)
    local_date = utc.date() + timedelta(days=day_delta)

    display_hour, meridiem = _twelve_hour(hour)
    date_string = (
        f"{_WEEKDAYS[local_date.weekday()]}, {_MONTHS[local_date.month - 1]} "
        f"{local_date.day}, {local_date.year}"
    )
    time_string = f"{display_hour}:{minute:02d} {meridiem} {label}"
    return LocalTime(date_string, time_string)


def format_local_time(instant: Instant) -> LocalTime:
    """Like :func:`to_local_time` but yields ``UNKNOWN_LOCAL_TIME`` on bad input."""
    try:
        return to_local_time(instant)
    except ParseFailure as exc:
        logger.warning("Cannot localise event time: %s", exc)
        return UNKNOWN_LOCAL_TIME


def format_utc_time(instant: Instant) -> str:
    """Render the UTC clock reading as ``hh:mm AM GMT`` (``TBA`` on bad input)."""
    try:
        utc = parse_instant(instant)
    except ParseFailure as exc:
        logger.warning("Cannot format UTC event time: %s", exc)
        return UNKNOWN_LOCAL_TIME.time_string
    display_hour, meridiem = _twelve_hour(utc.hour)
    return f"{display_hour:02d}:{utc.minute:02d} {meridiem} GMT"


__all__ = [
    "LocalTime",
    "UNKNOWN_LOCAL_TIME",
    "shift_minutes",
    "to_local_time",
    "format_local_time",
    "format_utc_time",
]
