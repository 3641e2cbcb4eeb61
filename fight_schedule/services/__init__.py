"""Service layer modules grouping business logic by concern.

This module provides convenience re-exports so that callers can simply do for
example `from fight_schedule.services import curate` without having to know
which underlying module provides the symbol.
"""

from .discovery import fetch_fight_data  # noqa: F401
from .storage import InMemoryKeyValueStore, MongoKeyValueStore, get_cache_store  # noqa: F401
from .cache import EventCache  # noqa: F401
from .orchestrator import FetchOrchestrator, FetchResult  # noqa: F401
from .curation import curate, count_by_promotion, events_for_promotion  # noqa: F401

__all__ = [
    "fetch_fight_data",
    "InMemoryKeyValueStore",
    "MongoKeyValueStore",
    "get_cache_store",
    "EventCache",
    "FetchOrchestrator",
    "FetchResult",
    "curate",
    "count_by_promotion",
    "events_for_promotion",
]
