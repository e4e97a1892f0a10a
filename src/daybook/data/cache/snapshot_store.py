from __future__ import annotations

import logging
import os
import tempfile
import threading
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, Iterable, Optional

import orjson

from ...domain import CacheDomain, Snapshot

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SnapshotStore:
    """In-memory read model mirrored to a single JSON document on disk.

    The in-memory snapshot is the source of truth for the running process.
    Mutations swap the whole reference under a short lock, so readers see
    either the old or the new snapshot. The disk copy is a recovery aid and is
    always rewritten wholesale through a temporary file and an atomic rename.
    """

    def __init__(
        self,
        path: Path,
        *,
        staleness_threshold: timedelta = timedelta(hours=2),
        clock: Clock = _utc_now,
    ) -> None:
        self._path = path
        self._staleness_threshold = staleness_threshold
        self._clock = clock
        self._snapshot = Snapshot.empty()
        self._swap_lock = threading.Lock()
        self._write_lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def read(self) -> Snapshot:
        return self._snapshot

    def is_stale(self, now: Optional[datetime] = None) -> bool:
        last_update = self._snapshot.last_update
        if last_update is None:
            return True
        return (now or self._clock()) - last_update > self._staleness_threshold

    def load(self) -> bool:
        """Materialize the persisted snapshot. Returns ``True`` when a refresh is needed."""

        try:
            raw = self._path.read_bytes()
            snapshot = Snapshot.from_record(orjson.loads(raw))
        except FileNotFoundError:
            logger.info("No persisted snapshot at %s; starting empty", self._path)
            self._swap(Snapshot.empty())
            return True
        except (OSError, orjson.JSONDecodeError, AttributeError, KeyError, TypeError, ValueError):
            logger.exception("Persisted snapshot at %s is unreadable; starting empty", self._path)
            self._swap(Snapshot.empty())
            return True

        self._swap(snapshot)
        logger.info(
            "Snapshot loaded from disk: %d events, %d tasks, %d cards",
            len(snapshot.events),
            len(snapshot.tasks),
            len(snapshot.board_cards),
        )
        if self.is_stale():
            logger.info("Snapshot last updated at %s is stale; refresh needed", snapshot.last_update)
            return True
        return False

    def replace(self, snapshot: Snapshot) -> None:
        with self._swap_lock:
            self._snapshot = self._monotonic(snapshot, self._snapshot)
        self._persist()

    def patch(self, domain: CacheDomain, values: Iterable[object]) -> Snapshot:
        items = tuple(values)
        with self._swap_lock:
            current = self._snapshot
            updated = self._monotonic(current.with_domain(domain, items, self._clock()), current)
            self._snapshot = updated
        self._persist()
        return updated

    def _swap(self, snapshot: Snapshot) -> None:
        with self._swap_lock:
            self._snapshot = snapshot

    @staticmethod
    def _monotonic(candidate: Snapshot, current: Snapshot) -> Snapshot:
        if current.last_update is None or candidate.last_update is None:
            return candidate
        if candidate.last_update >= current.last_update:
            return candidate
        return Snapshot(
            events=candidate.events,
            tasks=candidate.tasks,
            board_cards=candidate.board_cards,
            last_update=current.last_update,
        )

    def _persist(self) -> None:
        # Serialized so the most recent snapshot is always the last one written.
        with self._write_lock:
            snapshot = self._snapshot
            try:
                self._write_atomic(orjson.dumps(snapshot.to_record(), option=orjson.OPT_INDENT_2) + b"\n")
            except OSError:
                logger.exception("Failed to persist snapshot to %s", self._path)

    def _write_atomic(self, payload: bytes) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{self._path.name}.", suffix=".tmp", dir=self._path.parent)
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(payload)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


__all__ = ["Clock", "SnapshotStore"]
