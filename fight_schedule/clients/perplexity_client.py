"""Shared HTTP session for Perplexity API calls."""

from __future__ import annotations

import requests

from ..config import PERPLEXITY_API_KEY

_session: requests.Session | None = None


def get_session() -> requests.Session:
    """Return a singleton :class:`requests.Session` carrying Perplexity auth headers."""
    global _session
    if _session is None:
        if not PERPLEXITY_API_KEY:
            raise EnvironmentError("PERPLEXITY_API_KEY is not set in environment variables")
        _session = requests.Session()
        _session.headers.update(
            {
                "Authorization": f"Bearer {PERPLEXITY_API_KEY}",
                "Content-Type": "application/json",
            }
        )
    return _session

__all__ = ["get_session"]
