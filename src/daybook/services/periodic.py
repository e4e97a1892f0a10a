"""Periodic job registration.

The runtime only depends on :class:`PeriodicRegistry`. :class:`CronScheduler`
is the asyncio implementation: every job owns a loop that sleeps until the
next croniter occurrence and then spawns the callback as its own task, so a
slow invocation never delays the next one and invocations may overlap.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Any, Awaitable, Callable, List, Optional, Protocol, Set

from croniter import croniter

logger = logging.getLogger(__name__)

AsyncCallback = Callable[[], Awaitable[Any]]


class PeriodicRegistry(Protocol):
    def register(self, schedule: str, callback: AsyncCallback, *, name: Optional[str] = None) -> None: ...


@dataclass(frozen=True, slots=True)
class PeriodicJob:
    name: str
    schedule: str
    callback: AsyncCallback

    def next_run(self, after: datetime) -> datetime:
        return croniter(self.schedule, after).get_next(datetime)


class CronScheduler:
    def __init__(self, *, tz: tzinfo, clock: Optional[Callable[[], datetime]] = None) -> None:
        self._tz = tz
        self._clock = clock or (lambda: datetime.now(tz))
        self._jobs: List[PeriodicJob] = []
        self._loops: List[asyncio.Task] = []
        self._inflight: Set[asyncio.Task] = set()
        self._running = False

    @property
    def jobs(self) -> List[PeriodicJob]:
        return list(self._jobs)

    @property
    def running(self) -> bool:
        return self._running

    def register(self, schedule: str, callback: AsyncCallback, *, name: Optional[str] = None) -> None:
        if not croniter.is_valid(schedule):
            raise ValueError(f"Invalid cron expression: {schedule!r}")
        job = PeriodicJob(name=name or getattr(callback, "__name__", "job"), schedule=schedule, callback=callback)
        self._jobs.append(job)
        logger.info("Registered periodic job %s (%s)", job.name, job.schedule)
        if self._running:
            self._loops.append(asyncio.create_task(self._run_job(job), name=f"periodic:{job.name}"))

    def start(self) -> None:
        """Start one loop per registered job. Must be called from a running event loop."""

        if self._running:
            return
        self._running = True
        for job in self._jobs:
            self._loops.append(asyncio.create_task(self._run_job(job), name=f"periodic:{job.name}"))

    async def stop(self) -> None:
        self._running = False
        tasks = [*self._loops, *self._inflight]
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._loops.clear()
        self._inflight.clear()

    async def _run_job(self, job: PeriodicJob) -> None:
        anchor = self._clock().astimezone(self._tz)
        while self._running:
            fire_at = job.next_run(anchor)
            delay = (fire_at - self._clock()).total_seconds()
            if delay > 0:
                await asyncio.sleep(delay)
            # Anchor on the fire time so an early wake-up cannot schedule the same slot twice.
            anchor = max(fire_at, self._clock().astimezone(self._tz))
            self.trigger(job)

    def trigger(self, job: PeriodicJob) -> asyncio.Task:
        task = asyncio.create_task(self._invoke(job), name=f"periodic-run:{job.name}")
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)
        return task

    async def _invoke(self, job: PeriodicJob) -> None:
        try:
            await job.callback()
        except Exception:  # noqa: BLE001
            logger.exception("Periodic job %s failed", job.name)


__all__ = ["AsyncCallback", "CronScheduler", "PeriodicJob", "PeriodicRegistry"]
