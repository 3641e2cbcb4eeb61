"""End-to-end workflows."""

from .schedule_pipeline import ScheduleView, build_orchestrator, run  # noqa: F401

__all__ = ["ScheduleView", "build_orchestrator", "run"]
