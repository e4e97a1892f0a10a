"""Data access layer: the snapshot cache and the collaborator ports."""

from __future__ import annotations

from .cache.snapshot_store import Clock, SnapshotStore
from .gateways import (
    BoardReader,
    CalendarReader,
    Collaborators,
    CollaboratorsNotConfiguredError,
    MessageOptions,
    MessageSender,
    TaskReader,
    load_collaborators,
)

__all__ = [
    "BoardReader",
    "CalendarReader",
    "Clock",
    "Collaborators",
    "CollaboratorsNotConfiguredError",
    "MessageOptions",
    "MessageSender",
    "SnapshotStore",
    "TaskReader",
    "load_collaborators",
]
