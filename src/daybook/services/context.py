from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import FrozenSet, Optional, Set
from zoneinfo import ZoneInfo

from ..config import AppSettings, get_settings
from ..data import Clock, Collaborators, SnapshotStore, load_collaborators


class NotifiedSet:
    """Process-lifetime record of event ids that already had their reminder."""

    def __init__(self) -> None:
        self._ids: Set[str] = set()
        self._lock = threading.Lock()

    def claim(self, event_id: str) -> bool:
        """Insert ``event_id`` if absent; ``True`` only for the first caller."""

        with self._lock:
            if event_id in self._ids:
                return False
            self._ids.add(event_id)
            return True

    def __contains__(self, event_id: object) -> bool:
        return event_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def snapshot(self) -> FrozenSet[str]:
        with self._lock:
            return frozenset(self._ids)


@dataclass(slots=True)
class ServiceContext:
    """Aggregate root shared by the refresh, notification and booking services."""

    collaborators: Collaborators
    settings: AppSettings = field(default_factory=get_settings)
    clock: Optional[Clock] = None
    notified: NotifiedSet = field(default_factory=NotifiedSet)
    store: SnapshotStore = field(init=False)

    def __post_init__(self) -> None:
        if self.clock is None:
            tz = self.settings.scheduler.tz
            self.clock = lambda: datetime.now(tz)
        self.store = SnapshotStore(
            self.settings.cache.snapshot_file,
            staleness_threshold=self.settings.cache.staleness_threshold,
            clock=self.now,
        )

    @classmethod
    def from_settings(cls, settings: Optional[AppSettings] = None) -> "ServiceContext":
        resolved = settings or get_settings()
        return cls(collaborators=load_collaborators(resolved.collaborators), settings=resolved)

    @property
    def tz(self) -> ZoneInfo:
        return self.settings.scheduler.tz

    @property
    def recipients(self) -> tuple[str, ...]:
        return self.settings.scheduler.recipients

    def now(self) -> datetime:
        assert self.clock is not None
        return self.clock()
