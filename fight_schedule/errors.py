"""Exception hierarchy shared by the fetch pipeline."""

from __future__ import annotations


class FightScheduleError(Exception):
    """Base class for all fight_schedule errors."""


class ParseFailure(FightScheduleError, ValueError):
    """An instant, JSON payload or event record could not be parsed."""


class CollaboratorError(FightScheduleError):
    """The search or structuring API returned an error or could not be reached."""


class DataUnavailable(FightScheduleError):
    """The live fetch failed and there is no cached payload to fall back to."""


__all__ = [
    "FightScheduleError",
    "ParseFailure",
    "CollaboratorError",
    "DataUnavailable",
]
