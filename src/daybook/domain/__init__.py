"""Domain models for the cached calendar, task and board read model."""

from __future__ import annotations

from .enums import CacheDomain
from .models import (
    DEFAULT_EVENT_DURATION,
    AllDayEvent,
    Card,
    ConflictCandidate,
    ConflictEntry,
    ConflictReport,
    Event,
    InvalidCandidateError,
    SchedulingCheck,
    Snapshot,
    Suggestion,
    Task,
    TimedEvent,
    event_from_record,
)

__all__ = [
    "AllDayEvent",
    "CacheDomain",
    "Card",
    "ConflictCandidate",
    "ConflictEntry",
    "ConflictReport",
    "DEFAULT_EVENT_DURATION",
    "Event",
    "InvalidCandidateError",
    "SchedulingCheck",
    "Snapshot",
    "Suggestion",
    "Task",
    "TimedEvent",
    "event_from_record",
]
