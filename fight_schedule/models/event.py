"""Domain models for fight cards, their citations and the cached payload."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Mapping

from ..errors import ParseFailure


class Promotion(str, Enum):
    """Closed set of promotions the schedule tracks."""

    UFC = "UFC"
    PFL = "PFL"
    BKFC = "BKFC"
    ONE = "ONE Championship"
    BELLATOR = "Bellator MMA"
    RIZIN = "RIZIN FF"

    @classmethod
    def parse(cls, value: Any) -> "Promotion":
        """Resolve *value* by member value or member name, ignoring case."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            needle = value.strip().casefold()
            for member in cls:
                if needle in (member.value.casefold(), member.name.casefold()):
                    return member
        raise ParseFailure(f"Unrecognised promotion: {value!r}")


def _require(data: Mapping[str, Any], key: str, kind: type) -> Any:
    if key not in data:
        raise ParseFailure(f"Missing required field '{key}'")
    value = data[key]
    if not isinstance(value, kind):
        raise ParseFailure(f"Field '{key}' must be {kind.__name__}, got {type(value).__name__}")
    return value


@dataclass(slots=True)
class Matchup:
    """One bout on a card.

    ``is_main_event`` and ``is_co_main_event`` are independent flags.
    """

    fighter1: str
    fighter2: str
    weight_class: str
    is_main_event: bool = False
    is_co_main_event: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Matchup":
        if not isinstance(data, Mapping):
            raise ParseFailure(f"Matchup must be an object, got {type(data).__name__}")
        return cls(
            fighter1=_require(data, "fighter1", str),
            fighter2=_require(data, "fighter2", str),
            weight_class=_require(data, "weightClass", str),
            is_main_event=_require(data, "isMainEvent", bool),
            is_co_main_event=bool(data.get("isCoMainEvent", False)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fighter1": self.fighter1,
            "fighter2": self.fighter2,
            "weightClass": self.weight_class,
            "isMainEvent": self.is_main_event,
            "isCoMainEvent": self.is_co_main_event,
        }


@dataclass(slots=True)
class FightEvent:
    """A scheduled card for one promotion.

    ``date`` holds the ISO-8601 instant exactly as supplied by the source;
    ``fight_card`` keeps the source's bout order.
    """

    promotion: Promotion
    event_name: str
    date: str
    venue: str
    location: str
    fight_card: List[Matchup] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FightEvent":
        if not isinstance(data, Mapping):
            raise ParseFailure(f"Event must be an object, got {type(data).__name__}")
        return cls(
            promotion=Promotion.parse(_require(data, "promotion", str)),
            event_name=_require(data, "eventName", str),
            date=_require(data, "date", str),
            venue=_require(data, "venue", str),
            location=_require(data, "location", str),
            fight_card=[Matchup.from_dict(m) for m in _require(data, "fightCard", list)],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "promotion": self.promotion.value,
            "eventName": self.event_name,
            "date": self.date,
            "venue": self.venue,
            "location": self.location,
            "fightCard": [m.to_dict() for m in self.fight_card],
        }


@dataclass(slots=True, frozen=True)
class Source:
    """A grounding citation."""

    title: str
    uri: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Source":
        uri = _require(data, "uri", str)
        return cls(title=data.get("title") or uri, uri=uri)

    def to_dict(self) -> Dict[str, str]:
        return {"title": self.title, "uri": self.uri}


@dataclass(slots=True)
class EventPayload:
    """The ``{events, sources}`` pair produced by one fetch."""

    events: List[FightEvent] = field(default_factory=list)
    sources: List[Source] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "EventPayload":
        if not isinstance(data, Mapping):
            raise ParseFailure(f"Payload must be an object, got {type(data).__name__}")
        return cls(
            events=[FightEvent.from_dict(e) for e in data.get("events", [])],
            sources=[Source.from_dict(s) for s in data.get("sources", [])],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "events": [e.to_dict() for e in self.events],
            "sources": [s.to_dict() for s in self.sources],
        }


@dataclass(slots=True)
class CacheRecord:
    """The single persisted fetch result; ``timestamp`` is epoch milliseconds."""

    payload: EventPayload
    timestamp: int

    @property
    def written_at(self) -> datetime:
        return datetime.fromtimestamp(self.timestamp / 1000, tz=timezone.utc)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CacheRecord":
        timestamp = data.get("timestamp")
        if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
            raise ParseFailure(f"Cache record timestamp must be numeric, got {timestamp!r}")
        return cls(payload=EventPayload.from_dict(data.get("data", {})), timestamp=int(timestamp))

    def to_dict(self) -> Dict[str, Any]:
        return {"data": self.payload.to_dict(), "timestamp": self.timestamp}


__all__ = [
    "Promotion",
    "Matchup",
    "FightEvent",
    "Source",
    "EventPayload",
    "CacheRecord",
]
