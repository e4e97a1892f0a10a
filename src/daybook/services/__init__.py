"""Application services orchestrating the cache, reminders and booking checks."""

from __future__ import annotations

from .conflicts import ConflictEngine, format_conflict_message, intervals_overlap
from .context import NotifiedSet, ServiceContext
from .notifications import NotificationScheduler, fan_out
from .periodic import CronScheduler, PeriodicJob, PeriodicRegistry
from .refresh import RefreshOrchestrator
from .runtime import AssistantRuntime, run_runtime

__all__ = [
    "AssistantRuntime",
    "ConflictEngine",
    "CronScheduler",
    "NotificationScheduler",
    "NotifiedSet",
    "PeriodicJob",
    "PeriodicRegistry",
    "RefreshOrchestrator",
    "ServiceContext",
    "fan_out",
    "format_conflict_message",
    "intervals_overlap",
    "run_runtime",
]
