"""Centralised configuration for fight_schedule.

Environment variables are loaded once and all related constants are
grouped by concern for easier maintenance.
"""

from __future__ import annotations

import os
from datetime import datetime
from dotenv import load_dotenv

# ---------------------------------------------------------------------------
# Load environment variables from `.env` (if present)
# ---------------------------------------------------------------------------
load_dotenv()

# ---------------------------------------------------------------------------
# Core credentials (from environment)
# ---------------------------------------------------------------------------
PERPLEXITY_API_KEY: str | None = os.getenv("PERPLEXITY_API_KEY")
OPENAI_API_KEY: str | None = os.getenv("OPENAI_API_KEY")
MONGODB_URI: str | None = os.getenv("MONGODB_URI")

# ---------------------------------------------------------------------------
# Cache settings
# Bump the key version whenever the payload shape changes.
# ---------------------------------------------------------------------------
CACHE_KEY: str = "mma_fights_cache_v2"
CACHE_TTL_HOURS: float = float(os.getenv("FIGHT_CACHE_TTL_HOURS", "6"))
MONGODB_DATABASE: str = os.getenv("MONGODB_DATABASE", "fight_schedule")
MONGODB_COLLECTION: str = os.getenv("MONGODB_COLLECTION", "cache")

# ---------------------------------------------------------------------------
# Localisation + curation
# ---------------------------------------------------------------------------
TARGET_UTC_OFFSET_MINUTES: int = 330  # UTC+5:30
TARGET_TZ_LABEL: str = "IST"
RECENT_EVENT_GRACE_HOURS: int = 12

# ---------------------------------------------------------------------------
# External collaborator settings
# ---------------------------------------------------------------------------
SEARCH_WINDOW_MONTHS: int = 3
REQUEST_TIMEOUT_SECONDS: float = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "120"))
FETCH_DEADLINE_SECONDS: float = float(os.getenv("FETCH_DEADLINE_SECONDS", "300"))

# ---------------------------------------------------------------------------
# Miscellaneous
# Perplexity date format for date filtering
# ---------------------------------------------------------------------------
CURRENT_DATE: str = datetime.now().strftime("%m/%d/%Y")

# ---------------------------------------------------------------------------
# Re-exported names
# ---------------------------------------------------------------------------
__all__ = [
    # credentials
    "PERPLEXITY_API_KEY",
    "OPENAI_API_KEY",
    "MONGODB_URI",
    # cache
    "CACHE_KEY",
    "CACHE_TTL_HOURS",
    "MONGODB_DATABASE",
    "MONGODB_COLLECTION",
    # localisation
    "TARGET_UTC_OFFSET_MINUTES",
    "TARGET_TZ_LABEL",
    "RECENT_EVENT_GRACE_HOURS",
    # collaborator
    "SEARCH_WINDOW_MONTHS",
    "REQUEST_TIMEOUT_SECONDS",
    "FETCH_DEADLINE_SECONDS",
    # misc
    "CURRENT_DATE",
]
