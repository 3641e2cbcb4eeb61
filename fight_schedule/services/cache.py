"""Time-bounded cache holding the last successful fetch result."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Callable, Optional

from ..config import CACHE_KEY, CACHE_TTL_HOURS
from ..errors import ParseFailure
from ..models.event import CacheRecord, EventPayload
from ..utils.datetime_utils import get_current_timestamp, to_epoch_millis
from .storage import STORE_ERRORS, KeyValueStore

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class EventCache:
    """A single :class:`CacheRecord` persisted under a fixed key.

    The record is replaced on every write and never deleted; it only ages.
    Changing *key* orphans whatever was stored under the previous one.
    """

    def __init__(
        self,
        store: KeyValueStore,
        ttl: timedelta = timedelta(hours=CACHE_TTL_HOURS),
        key: str = CACHE_KEY,
        clock: Clock = get_current_timestamp,
    ) -> None:
        self.store = store
        self.ttl = ttl
        self.key = key
        self._clock = clock

    def read(self) -> Optional[CacheRecord]:
        """Return the stored record regardless of age, or ``None``."""
        try:
            raw = self.store.get(self.key)
        except STORE_ERRORS as exc:
            logger.error("Cache store unavailable, reading '%s' failed: %s", self.key, exc)
            return None
        if raw is None:
            return None
        try:
            return CacheRecord.from_dict(raw)
        except ParseFailure as exc:
            logger.warning("Ignoring unreadable cache record '%s': %s", self.key, exc)
            return None

    def write(self, payload: EventPayload) -> CacheRecord:
        """Persist *payload* stamped with the current time."""
        record = CacheRecord(payload=payload, timestamp=to_epoch_millis(self._clock()))
        self.store.set(self.key, record.to_dict())
        logger.info(
            "Cached %d events and %d sources under '%s'",
            len(payload.events),
            len(payload.sources),
            self.key,
        )
        return record

    def age(self, record: CacheRecord) -> timedelta:
        return timedelta(milliseconds=to_epoch_millis(self._clock()) - record.timestamp)

    def is_fresh(self, record: CacheRecord) -> bool:
        """``True`` while the record is younger than the TTL.

        A record stamped later than now is stale.
        """
        return timedelta(0) <= self.age(record) < self.ttl

__all__ = ["EventCache", "Clock"]
