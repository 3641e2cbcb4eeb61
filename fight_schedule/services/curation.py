"""Filtering, ordering and per-promotion grouping of fetched events."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional, Tuple

from ..config import RECENT_EVENT_GRACE_HOURS
from ..errors import ParseFailure
from ..models.event import FightEvent, Promotion
from ..utils.datetime_utils import get_current_timestamp, parse_instant

logger = logging.getLogger(__name__)


def curate(
    events: Iterable[FightEvent],
    reference: Optional[datetime] = None,
    grace: timedelta = timedelta(hours=RECENT_EVENT_GRACE_HOURS),
) -> List[FightEvent]:
    """Drop concluded events and order the rest chronologically.

    An event is kept while its start is later than ``reference - grace``, so
    cards that began within the grace window still show. Events sharing a
    start time keep their input order. Events whose date cannot be parsed
    are dropped with a warning.
    """
    reference = parse_instant(reference) if reference is not None else get_current_timestamp()
    cutoff = reference - grace

    kept: List[Tuple[datetime, FightEvent]] = []
    for event in events:
        try:
            instant = parse_instant(event.date)
        except ParseFailure as exc:
            logger.warning("Skipping '%s' with unreadable date: %s", event.event_name, exc)
            continue
        if instant > cutoff:
            kept.append((instant, event))

    kept.sort(key=lambda pair: pair[0])
    return [event for _, event in kept]


def count_by_promotion(events: Iterable[FightEvent]) -> Dict[Promotion, int]:
    """Number of events per promotion, ordered by promotion name.

    Promotions with no events are absent.
    """
    counts: Dict[Promotion, int] = {}
    for event in events:
        counts[event.promotion] = counts.get(event.promotion, 0) + 1
    return dict(sorted(counts.items(), key=lambda item: item[0].value))


def events_for_promotion(events: Iterable[FightEvent], promotion: Promotion) -> List[FightEvent]:
    return [event for event in events if event.promotion is promotion]

__all__ = ["curate", "count_by_promotion", "events_for_promotion"]
