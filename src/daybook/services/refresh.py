from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import List, Tuple, Union

from ..domain import CacheDomain, Card, Event, Snapshot, Task, event_from_record
from .context import ServiceContext

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class RefreshOrchestrator:
    """Populates the snapshot store from the external read collaborators.

    ``refresh_all`` is all-or-nothing: stale data is preferred over a snapshot
    mixing fresh and old domains. ``invalidate`` patches one domain at a time
    and keeps whatever it managed to patch before a failure.
    """

    context: ServiceContext

    async def fetch_events(self) -> List[Event]:
        now = self.context.now()
        end = now + self.context.settings.cache.lookahead
        records = await self.context.collaborators.calendar.list_events(now, end)
        return [event_from_record(record, default_tz=self.context.tz) for record in records]

    async def fetch_tasks(self) -> List[Task]:
        records = await self.context.collaborators.tasks.list_tasks()
        return [Task.from_record(record) for record in records]

    async def fetch_board_cards(self) -> List[Card]:
        records = await self.context.collaborators.board.list_all_cards()
        return [Card.from_record(record) for record in records]

    async def _fetch(self, domain: CacheDomain) -> List[Union[Event, Task, Card]]:
        if domain is CacheDomain.EVENTS:
            return await self.fetch_events()
        if domain is CacheDomain.TASKS:
            return await self.fetch_tasks()
        return await self.fetch_board_cards()

    async def refresh_all(self) -> bool:
        logger.info("Refreshing snapshot")
        try:
            events, tasks, cards = await asyncio.gather(
                self.fetch_events(),
                self.fetch_tasks(),
                self.fetch_board_cards(),
            )
        except Exception:  # noqa: BLE001
            logger.exception("Snapshot refresh aborted; keeping previous snapshot")
            return False

        snapshot = Snapshot(
            events=tuple(events),
            tasks=tuple(tasks),
            board_cards=tuple(cards),
            last_update=self.context.now(),
        )
        # Persisting fsyncs; run it off the event loop.
        await asyncio.to_thread(self.context.store.replace, snapshot)
        logger.info("Snapshot refreshed: %d events, %d tasks, %d cards", len(events), len(tasks), len(cards))
        return True

    async def invalidate(self, domain: Union[CacheDomain, str] = CacheDomain.ALL) -> Tuple[CacheDomain, ...]:
        """Re-fetch ``domain`` and patch it in; returns the domains actually patched."""

        requested = CacheDomain.parse(domain)
        logger.info("Invalidating cache domain %s", requested.value)
        patched: list[CacheDomain] = []
        for item in requested.expand():
            try:
                values = await self._fetch(item)
            except Exception:  # noqa: BLE001
                logger.exception(
                    "Invalidation of %s failed; skipping remaining domains (already patched: %s)",
                    item.value,
                    ", ".join(done.value for done in patched) or "none",
                )
                break
            await asyncio.to_thread(self.context.store.patch, item, values)
            patched.append(item)
        return tuple(patched)


__all__ = ["RefreshOrchestrator"]
