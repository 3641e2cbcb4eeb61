"""Centralised logging configuration.

Importing this module sets the default logging format/level (``LOG_LEVEL``
overrides the level). Other modules should simply import `logging` and call
`logging.getLogger(__name__)`.
"""

import logging
import os

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

__all__ = ["logging"]
