"""Domain models used across the project."""

from .event import (  # noqa: F401
    CacheRecord,
    EventPayload,
    FightEvent,
    Matchup,
    Promotion,
    Source,
)

__all__ = [
    "Promotion",
    "Matchup",
    "FightEvent",
    "Source",
    "EventPayload",
    "CacheRecord",
]
