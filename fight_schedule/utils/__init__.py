"""Utility functions for the fight_schedule project.

Re-exports the text-cleaning, JSON-extraction and date/time helpers so that
imports like `from ..utils import to_local_time` work as expected.
"""

from .text_cleaning import strip_think_blocks, strip_citation_markers  # noqa: F401
from .datetime_utils import get_current_timestamp, parse_instant, to_epoch_millis  # noqa: F401
from .llm_parsing import extract_structured_json  # noqa: F401
from .time_conversion import (  # noqa: F401
    LocalTime,
    UNKNOWN_LOCAL_TIME,
    format_local_time,
    format_utc_time,
    to_local_time,
)

__all__ = [
    "strip_think_blocks",
    "strip_citation_markers",
    "get_current_timestamp",
    "parse_instant",
    "to_epoch_millis",
    "extract_structured_json",
    "LocalTime",
    "UNKNOWN_LOCAL_TIME",
    "format_local_time",
    "format_utc_time",
    "to_local_time",
]
