"""``python -m fight_schedule`` entry point."""

import logging
import sys

from .errors import DataUnavailable
from .workflows.schedule_pipeline import run

logger = logging.getLogger("fight_schedule")


def main() -> int:
    try:
        run()
    except DataUnavailable as exc:
        logger.error("Live data search is currently unavailable: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
