from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Coroutine, Optional, Set

from ..data import MessageOptions
from .context import ServiceContext
from .digest import compose_afternoon_digest, compose_morning_digest
from .notifications import NotificationScheduler, fan_out
from .periodic import CronScheduler, PeriodicRegistry
from .refresh import RefreshOrchestrator

logger = logging.getLogger(__name__)

DigestComposer = Callable[..., str]
DIGEST_OPTIONS = MessageOptions(parse_mode="Markdown", disable_preview=True)


@dataclass(slots=True)
class AssistantRuntime:
    """Wires the refresh, digest and reminder jobs onto a periodic registry."""

    context: ServiceContext
    registry: PeriodicRegistry
    refresher: RefreshOrchestrator = field(init=False)
    notifications: NotificationScheduler = field(init=False)
    _background: Set[asyncio.Task] = field(default_factory=set, init=False)

    def __post_init__(self) -> None:
        self.refresher = RefreshOrchestrator(self.context)
        self.notifications = NotificationScheduler(self.context)

    async def start(self) -> None:
        """Load the persisted snapshot, kick off a refresh if needed and register jobs."""

        needs_refresh = self.context.store.load()
        snapshot = self.context.store.read()
        if needs_refresh or (not snapshot.events and not snapshot.tasks):
            self._spawn(self.refresher.refresh_all())

        settings = self.context.settings.scheduler
        self.registry.register(settings.refresh_cron, self.refresher.refresh_all, name="refresh")
        if not self.context.recipients:
            logger.warning("No recipients configured; digests and reminders are disabled")
            return

        self.registry.register(settings.morning_cron, self.morning_digest, name="morning-digest")
        self.registry.register(settings.afternoon_cron, self.afternoon_digest, name="afternoon-digest")
        self.registry.register(settings.scan_cron, self.notifications.scan, name="reminder-scan")

    async def morning_digest(self) -> bool:
        return await self._send_digest("morning", compose_morning_digest)

    async def afternoon_digest(self) -> bool:
        return await self._send_digest("afternoon", compose_afternoon_digest)

    async def _send_digest(self, label: str, composer: DigestComposer) -> bool:
        try:
            await self.refresher.refresh_all()
            text = composer(self.context.store.read(), now=self.context.now(), settings=self.context.settings.scheduler)
            delivered = await fan_out(self.context.collaborators.messenger, self.context.recipients, text, DIGEST_OPTIONS)
        except Exception:  # noqa: BLE001
            logger.exception("Skipping %s digest", label)
            return False
        logger.info("Sent %s digest to %d/%d recipients", label, delivered, len(self.context.recipients))
        return True

    def _spawn(self, coroutine: Coroutine[Any, Any, Any]) -> asyncio.Task:
        task = asyncio.create_task(coroutine)
        self._background.add(task)
        task.add_done_callback(self._background.discard)
        return task

    async def shutdown(self) -> None:
        tasks = list(self._background)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)


async def run_runtime(context: ServiceContext, *, stop_event: Optional[asyncio.Event] = None) -> None:
    scheduler = CronScheduler(tz=context.tz, clock=context.now)
    runtime = AssistantRuntime(context, scheduler)
    await runtime.start()
    scheduler.start()
    logger.info("Daybook runtime started with %d periodic jobs", len(scheduler.jobs))
    try:
        await (stop_event or asyncio.Event()).wait()
    finally:
        await scheduler.stop()
        await runtime.shutdown()
        logger.info("Daybook runtime stopped")


__all__ = ["AssistantRuntime", "run_runtime"]
