"""Utilities for parsing structured outputs returned by LLM calls.

The structuring pass is asked for ``{"events": [...]}`` but models
occasionally answer with a bare array, wrap the JSON in fences or prefix it
with prose, so extraction is tolerant of all three.
"""

from __future__ import annotations

import json
import re
from typing import Any, Dict

from ..errors import ParseFailure
from .text_cleaning import strip_think_blocks

__all__ = ["extract_structured_json"]


def _as_object(parsed: Any) -> Dict[str, Any]:
    if isinstance(parsed, list):
        return {"events": parsed}
    if isinstance(parsed, dict):
        return parsed
    raise ParseFailure(f"Expected a JSON object or array, got {type(parsed).__name__}")


def extract_structured_json(response_text: str) -> Dict[str, Any]:
    """Robustly extract JSON from an LLM response.

    Parameters
    ----------
    response_text
        The raw message content returned by the model.

    Returns
    -------
    dict[str, Any]
        The parsed JSON object.  A top-level array is wrapped into
        ``{"events": <list>}`` so that downstream code can always rely on
        the ``"events"`` key.

    Raises
    ------
    ParseFailure
        If no valid JSON snippet can be located in *response_text*.
    """

    cleaned: str = strip_think_blocks(response_text or "").strip()

    # 1. Try to parse the whole string first (fast path)
    try:
        return _as_object(json.loads(cleaned))
    except json.JSONDecodeError:
        pass

    # 2. Search for fenced JSON block, with or without explicit `json` label
    fenced = re.search(
        r"```(?:json)?\s*([\[{].*?[\]}])\s*```",
        cleaned,
        flags=re.DOTALL | re.IGNORECASE,
    )
    if fenced:
        snippet = fenced.group(1).strip()
        try:
            return _as_object(json.loads(snippet))
        except json.JSONDecodeError:
            cleaned = snippet  # Narrow search space.

    # 3. Progressive truncation from first { or [
    starts = [i for i in (cleaned.find("{"), cleaned.find("[")) if i != -1]
    if not starts:
        raise ParseFailure("Could not locate JSON in model response")

    candidate = cleaned[min(starts):]

    for end in range(len(candidate), 0, -1):
        snippet = candidate[:end].strip()
        try:
            return _as_object(json.loads(snippet))
        except json.JSONDecodeError:
            continue

    raise ParseFailure("Could not locate JSON in model response")
