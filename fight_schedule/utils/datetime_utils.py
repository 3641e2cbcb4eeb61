"""Utility functions for working with dates and times."""

from datetime import datetime, timezone
from typing import Union

from ..errors import ParseFailure

__all__ = [
    "get_current_timestamp",
    "parse_instant",
    "to_epoch_millis",
]

Instant = Union[str, datetime]


def get_current_timestamp() -> datetime:
    """Return the current UTC datetime with micro-second precision."""
    return datetime.now(tz=timezone.utc)


def parse_instant(value: Instant) -> datetime:
    """Return *value* as an aware UTC datetime.

    Strings are read as ISO-8601; a trailing ``Z`` is accepted. Naive
    values are taken to be UTC.

    Raises
    ------
    ParseFailure
        If *value* is not a datetime or a parseable ISO-8601 string.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as exc:
            raise ParseFailure(f"Invalid ISO-8601 instant: {value!r}") from exc
    else:
        raise ParseFailure(f"Cannot interpret {type(value).__name__} as an instant")

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def to_epoch_millis(moment: datetime) -> int:
    """Milliseconds since the Unix epoch for an aware *moment*."""
    return int(moment.timestamp() * 1000)
