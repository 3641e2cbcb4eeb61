"""Fetch, curate and summarise the upcoming fight schedule."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from ..logging_config import logging as _  # noqa: F401  # ensure config applied early
from ..config import CACHE_TTL_HOURS
from ..models.event import FightEvent, Promotion, Source
from ..services.cache import EventCache
from ..services.curation import count_by_promotion, curate, events_for_promotion
from ..services.orchestrator import FetchOrchestrator, summarize_result
from ..services.storage import get_cache_store
from ..utils.time_conversion import format_local_time, format_utc_time

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ScheduleView:
    """Curated schedule ready for presentation."""

    events: List[FightEvent] = field(default_factory=list)
    promotion_counts: Dict[Promotion, int] = field(default_factory=dict)
    sources: List[Source] = field(default_factory=list)
    degraded: bool = False
    cached_at: Optional[datetime] = None


def build_orchestrator() -> FetchOrchestrator:
    """Wire the configured store and TTL into a :class:`FetchOrchestrator`."""
    cache = EventCache(get_cache_store(), ttl=timedelta(hours=CACHE_TTL_HOURS))
    return FetchOrchestrator(cache)


def run(
    orchestrator: Optional[FetchOrchestrator] = None,
    reference: Optional[datetime] = None,
) -> ScheduleView:
    """Execute the pipeline once.

    Raises :class:`~fight_schedule.errors.DataUnavailable` when there is
    neither live nor cached data.
    """
    logger.info("Starting fight schedule workflow")
    orchestrator = orchestrator or build_orchestrator()

    result = orchestrator.fetch_events()
    logger.info("Fetch result: %s", summarize_result(result))
    if result.degraded:
        logger.warning("Showing cached schedule – live search is currently unavailable")

    events = curate(result.events, reference)
    view = ScheduleView(
        events=events,
        promotion_counts=count_by_promotion(events),
        sources=list(result.sources),
        degraded=result.degraded,
        cached_at=result.cached_at,
    )
    _log_schedule(view)
    return view


def _log_schedule(view: ScheduleView) -> None:
    logger.info("=== Upcoming Fight Schedule ===")
    logger.info("Events after curation: %d", len(view.events))
    for promotion, count in view.promotion_counts.items():
        logger.info("%s: %d event%s", promotion.value, count, "s" if count > 1 else "")
        for event in events_for_promotion(view.events, promotion):
            local = format_local_time(event.date)
            logger.info(
                "  %s | %s %s (%s) | %s, %s",
                event.event_name,
                local.date_string,
                local.time_string,
                format_utc_time(event.date),
                event.venue,
                event.location,
            )
    logger.info("Sources cited: %d", len(view.sources))
    logger.info("===============================")

__all__ = ["ScheduleView", "build_orchestrator", "run"]
