"""Top-level package for the fight-schedule project.

This package simply exposes the public run() helper so callers can do
`python -m fight_schedule` or `from fight_schedule import run; run()`.
"""

from importlib import metadata as _metadata

try:
    __version__: str = _metadata.version("fight-schedule")
except _metadata.PackageNotFoundError:  # pragma: no cover – running from source
    __version__ = "0.0.0"

from .workflows.schedule_pipeline import run  # convenience re-export

__all__ = ["run", "__version__"]
