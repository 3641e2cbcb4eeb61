"""Fight-card discovery: Perplexity web search, then OpenAI structuring."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Tuple

import requests
from openai import OpenAIError

from ..clients.openai_client import get_openai
from ..clients.perplexity_client import get_session as get_perplexity_session
from ..config import (
    CURRENT_DATE,
    REQUEST_TIMEOUT_SECONDS,
    SEARCH_WINDOW_MONTHS,
)
from ..errors import CollaboratorError
from ..models.event import Promotion
from ..utils.llm_parsing import extract_structured_json
from ..utils.text_cleaning import strip_citation_markers

# ---------------------------------------------------------------------------
# Local model settings (only used by this service)
# ---------------------------------------------------------------------------
PERPLEXITY_URL: str = "https://api.perplexity.ai/chat/completions"
PERPLEXITY_MODEL: str = "sonar-pro"
# accepted values: "low", "medium", "high"
PERPLEXITY_CONTEXT_SIZE: str = "high"
OPENAI_STRUCTURING_MODEL: str = "gpt-4.1-mini"

logger = logging.getLogger(__name__)

_MATCHUP_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "fighter1": {"type": "string"},
        "fighter2": {"type": "string"},
        "weightClass": {"type": "string"},
        "isMainEvent": {"type": "boolean"},
        "isCoMainEvent": {"type": "boolean"},
    },
    "required": ["fighter1", "fighter2", "weightClass", "isMainEvent", "isCoMainEvent"],
    "additionalProperties": False,
}

FIGHT_CARD_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "events": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "promotion": {"type": "string", "enum": [p.value for p in Promotion]},
                    "eventName": {"type": "string"},
                    "date": {"type": "string", "description": "ISO 8601 UTC string"},
                    "venue": {"type": "string"},
                    "location": {"type": "string"},
                    "fightCard": {"type": "array", "items": _MATCHUP_SCHEMA},
                },
                "required": ["promotion", "eventName", "date", "venue", "location", "fightCard"],
                "additionalProperties": False,
            },
        }
    },
    "required": ["events"],
    "additionalProperties": False,
}


def search_fight_cards() -> Tuple[str, List[Any]]:
    """Ask Perplexity for upcoming cards; return the answer text and raw citations.

    Citations are the ``search_results`` entries when the API provides them,
    otherwise the bare ``citations`` URL list.
    """
    logger.info("Searching upcoming fight cards with Perplexity API…")

    data = {
        "model": PERPLEXITY_MODEL,
        "messages": [
            {
                "role": "system",
                "content": (
                    "You are a combat-sports schedule researcher. Report only confirmed,"
                    " scheduled events from reputable sources."
                ),
            },
            {
                "role": "user",
                "content": (
                    "Find major upcoming MMA fight cards for UFC, PFL, Bellator, ONE Championship,"
                    f" BKFC and RIZIN scheduled within the next {SEARCH_WINDOW_MONTHS} months"
                    f" from {CURRENT_DATE}.\n"
                    "Search for the specific main card start time in GMT/UTC.\n"
                    "Include promotion name, event title, venue name, and city/country location.\n"
                    "Identify the main event and co-main event matchups."
                ),
            },
        ],
        "search_after_date_filter": CURRENT_DATE,
        "web_search_options": {"search_context_size": PERPLEXITY_CONTEXT_SIZE},
    }

    try:
        response = get_perplexity_session().post(
            PERPLEXITY_URL, json=data, timeout=REQUEST_TIMEOUT_SECONDS
        )
    except requests.RequestException as exc:
        logger.error("Perplexity request failed: %s", exc)
        raise CollaboratorError(f"Perplexity request failed: {exc}") from exc

    if response.status_code != 200:
        logger.error(
            "Error from Perplexity API: %s - %s", response.status_code, response.text
        )
        raise CollaboratorError(f"Perplexity API error: {response.status_code}")

    body: Dict[str, Any] = response.json()
    answer: str = body["choices"][0]["message"]["content"]
    logger.debug("Raw Perplexity response: %s", answer)

    citations: List[Any] = body.get("search_results") or body.get("citations") or []
    logger.info("Perplexity answered with %d citations", len(citations))
    return strip_citation_markers(answer), citations


def structure_fight_cards(context_text: str) -> List[Dict[str, Any]]:
    """Coerce free-text search results into a list of raw event dicts."""
    logger.info("Structuring fight cards with %s", OPENAI_STRUCTURING_MODEL)
    try:
        resp = get_openai().chat.completions.create(
            model=OPENAI_STRUCTURING_MODEL,
            messages=[
                {
                    "role": "system",
                    "content": (
                        "Convert the MMA event data you are given into JSON matching the schema."
                        " The \"date\" field MUST be a full ISO 8601 string in UTC"
                        " (e.g. \"2025-05-15T22:00:00Z\"). If a specific time isn't mentioned,"
                        " use a likely start time (e.g. 22:00 UTC for Europe events,"
                        " 03:00 UTC for US PPVs)."
                    ),
                },
                {"role": "user", "content": f"Data: {context_text}"},
            ],
            response_format={
                "type": "json_schema",
                "json_schema": {
                    "name": "fight_cards",
                    "strict": True,
                    "schema": FIGHT_CARD_SCHEMA,
                },
            },
            temperature=0,
        )
    except OpenAIError as exc:
        logger.error("%s structuring failed: %s", OPENAI_STRUCTURING_MODEL, exc)
        raise CollaboratorError(f"Structuring request failed: {exc}") from exc

    content: str = resp.choices[0].message.content or ""
    logger.debug("Raw %s response: %s", OPENAI_STRUCTURING_MODEL, content)

    events = extract_structured_json(content).get("events", [])
    logger.info("Structured %d candidate events", len(events))
    return events


def fetch_fight_data() -> Dict[str, Any]:
    """Run both passes; returns ``{"events": [...], "citations": [...]}``."""
    context_text, citations = search_fight_cards()
    events = structure_fight_cards(context_text)
    return {"events": events, "citations": citations}

__all__ = [
    "FIGHT_CARD_SCHEMA",
    "search_fight_cards",
    "structure_fight_cards",
    "fetch_fight_data",
]
