"""Helpers for tidying raw LLM output before it is parsed."""

from __future__ import annotations

import re
from typing import Final

# ---------------------------------------------------------------------------
# Public helpers
# ---------------------------------------------------------------------------

def strip_think_blocks(text: str) -> str:
    """Extract content after the closing </think> tag from an LLM response.

    Handles missing tags and safely removes JSON code fences if present.
    """
    if not text:
        return ""

    marker: Final[str] = "</think>"
    idx: int = text.rfind(marker)

    # Fallback to full text if marker is missing
    after: str = text if idx == -1 else text[idx + len(marker) :]

    cleaned: str = after.strip()

    # Remove JSON code fences if present
    if cleaned.startswith("```json"):
        cleaned = cleaned[len("```json") :].strip()
    if cleaned.startswith("```"):
        cleaned = cleaned[3:].strip()
    if cleaned.endswith("```"):
        cleaned = cleaned[:-3].strip()

    return cleaned


def strip_citation_markers(text: str) -> str:
    """Drop inline numeric citation markers (``[1]``, ``[12]``) from *text*.

    Search answers annotate facts with these markers; left in place they end
    up glued to fighter and event names after structuring.
    """
    cleaned: str = strip_think_blocks(text)
    cleaned = re.sub(r"\[\d+\]", "", cleaned)
    return cleaned.strip()

__all__ = ["strip_think_blocks", "strip_citation_markers"]
