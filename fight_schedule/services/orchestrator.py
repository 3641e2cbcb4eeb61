"""Cache-first fetch of the fight schedule with stale-on-failure fallback."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from ..config import FETCH_DEADLINE_SECONDS
from ..errors import DataUnavailable, ParseFailure
from ..models.event import CacheRecord, EventPayload, FightEvent, Source
from .cache import EventCache
from .storage import STORE_ERRORS
from .discovery import fetch_fight_data

logger = logging.getLogger(__name__)

Fetcher = Callable[[], Mapping[str, Any]]


@dataclass(slots=True)
class FetchResult:
    """Payload handed to callers.

    ``degraded`` is set when the live fetch failed and a stale cache record
    was served instead; ``cached_at`` is the write time of the record served,
    or of the record just written (``None`` when the cache write failed).
    """

    payload: EventPayload
    degraded: bool = False
    cached_at: Optional[datetime] = None

    @property
    def events(self) -> List[FightEvent]:
        return self.payload.events

    @property
    def sources(self) -> List[Source]:
        return self.payload.sources


def normalize_sources(citations: Iterable[Any]) -> List[Source]:
    """Deduplicate citations by URI, keeping first-seen order.

    Accepts bare URL strings or mappings carrying ``url``/``uri`` and an
    optional ``title``; entries without a URI are skipped and a missing
    title falls back to the URI.
    """
    sources: List[Source] = []
    seen = set()
    for citation in citations or []:
        if isinstance(citation, str):
            uri, title = citation, None
        elif isinstance(citation, Mapping):
            uri = citation.get("url") or citation.get("uri")
            title = citation.get("title")
        else:
            continue
        if not uri or uri in seen:
            continue
        sources.append(Source(title=title or uri, uri=uri))
        seen.add(uri)
    return sources


def normalize_events(raw_events: Iterable[Any]) -> List[FightEvent]:
    """Build :class:`FightEvent` objects, dropping records that fail validation."""
    events: List[FightEvent] = []
    for raw in raw_events or []:
        try:
            events.append(FightEvent.from_dict(raw))
        except ParseFailure as exc:
            name = raw.get("eventName") if isinstance(raw, Mapping) else None
            logger.warning("Dropping event %r: %s", name, exc)
    return events


class FetchOrchestrator:
    """Serve the schedule from *cache* when fresh, otherwise from *fetcher*.

    At most one live fetch runs at a time; concurrent callers share its
    outcome.
    """

    def __init__(
        self,
        cache: EventCache,
        fetcher: Fetcher = fetch_fight_data,
        deadline_seconds: float = FETCH_DEADLINE_SECONDS,
    ) -> None:
        self.cache = cache
        self.fetcher = fetcher
        self.deadline_seconds = deadline_seconds
        self._lock = threading.Lock()
        self._inflight: Optional[Future] = None

    def fetch_events(self) -> FetchResult:
        """Return the current schedule.

        Raises
        ------
        DataUnavailable
            If the live fetch fails and nothing has ever been cached, or a
            coalesced caller waits past the deadline.
        """
        with self._lock:
            pending = self._inflight
            if pending is None:
                pending = self._inflight = Future()
                leader = True
            else:
                leader = False

        if not leader:
            logger.info("Fetch already in progress – waiting for its result")
            try:
                return pending.result(timeout=self.deadline_seconds)
            except FutureTimeoutError as exc:
                raise DataUnavailable(
                    f"No schedule within {self.deadline_seconds:.0f}s deadline"
                ) from exc

        try:
            result = self._fetch()
        except BaseException as exc:
            pending.set_exception(exc)
            raise
        else:
            pending.set_result(result)
            return result
        finally:
            with self._lock:
                self._inflight = None

    def _fetch(self) -> FetchResult:
        record = self.cache.read()
        if record is not None and self.cache.is_fresh(record):
            logger.info("Serving fresh cache (age %s)", self.cache.age(record))
            return FetchResult(record.payload, degraded=False, cached_at=record.written_at)

        logger.info("Cache %s – fetching live schedule", "stale" if record else "empty")
        try:
            payload = self._fetch_live()
        except Exception as exc:
            return self._fallback(record, exc)

        try:
            written = self.cache.write(payload)
        except STORE_ERRORS as exc:
            logger.error("Could not cache live schedule: %s", exc)
            return FetchResult(payload, degraded=False, cached_at=None)
        return FetchResult(payload, degraded=False, cached_at=written.written_at)

    def _fetch_live(self) -> EventPayload:
        raw = self.fetcher()
        if not isinstance(raw, Mapping):
            raise ParseFailure(f"Fetcher returned {type(raw).__name__}, expected a mapping")
        events = normalize_events(raw.get("events", []))
        sources = normalize_sources(raw.get("citations", []))
        logger.info("Live fetch returned %d events and %d sources", len(events), len(sources))
        return EventPayload(events=events, sources=sources)

    def _fallback(self, record: Optional[CacheRecord], exc: Exception) -> FetchResult:
        if record is None:
            logger.error("Live fetch failed and no cache exists: %s", exc)
            raise DataUnavailable("Unable to load fight data and no cached copy exists") from exc
        logger.warning(
            "Live fetch failed (%s) – serving cached data from %s",
            exc,
            record.written_at.isoformat(),
        )
        return FetchResult(record.payload, degraded=True, cached_at=record.written_at)


def summarize_result(result: FetchResult) -> Dict[str, Any]:
    """Small log-friendly description of *result*."""
    return {
        "events": len(result.events),
        "sources": len(result.sources),
        "degraded": result.degraded,
        "cached_at": result.cached_at.isoformat() if result.cached_at else None,
    }

__all__ = [
    "FetchResult",
    "FetchOrchestrator",
    "normalize_sources",
    "normalize_events",
    "summarize_result",
]
