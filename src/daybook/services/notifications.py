from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Sequence

from ..data import MessageOptions, MessageSender
from ..domain import TimedEvent
from ..utils import event_status_emoji
from .context import ServiceContext

logger = logging.getLogger(__name__)


async def fan_out(messenger: MessageSender, recipients: Sequence[str], text: str, options: MessageOptions) -> int:
    """Send ``text`` to every recipient independently; returns the number delivered."""

    delivered = 0
    for recipient in recipients:
        try:
            await messenger.send_message(recipient, text, options)
        except Exception:  # noqa: BLE001
            logger.warning("Delivery to recipient %s failed", recipient, exc_info=True)
            continue
        delivered += 1
    return delivered


def reminder_text(event: TimedEvent, *, lead_minutes: int, emoji: str) -> str:
    return f"🔔 *Daqui a {lead_minutes} min:*\n{emoji} {event.summary}"


def reminder_options(event: TimedEvent) -> MessageOptions:
    buttons = (("📹 Entrar", event.conference_link),) if event.conference_link else ()
    return MessageOptions(parse_mode="Markdown", buttons=buttons)


@dataclass(slots=True)
class NotificationScheduler:
    context: ServiceContext

    def due_events(self) -> List[TimedEvent]:
        """Timed events inside the reminder window that were not reminded yet."""

        settings = self.context.settings.scheduler
        now = self.context.now()
        due: list[TimedEvent] = []
        for event in self.context.store.read().timed_events:
            if event.id in self.context.notified:
                continue
            minutes_until = (event.start - now).total_seconds() / 60
            if settings.reminder_window_start <= minutes_until <= settings.reminder_window_end:
                due.append(event)
        return due

    async def scan(self) -> List[str]:
        """One polling tick. Returns the ids reminded by this tick."""

        reminded: list[str] = []
        for event in self.due_events():
            # Claim first: a concurrent tick seeing the same event must not send again.
            if not self.context.notified.claim(event.id):
                continue
            await self.send_reminder(event)
            reminded.append(event.id)
        return reminded

    async def send_reminder(self, event: TimedEvent) -> None:
        text = reminder_text(
            event,
            lead_minutes=self.context.settings.scheduler.reminder_minutes,
            emoji=event_status_emoji(event, now=self.context.now()),
        )
        delivered = await fan_out(
            self.context.collaborators.messenger,
            self.context.recipients,
            text,
            reminder_options(event),
        )
        logger.info(
            "Reminder sent for event %s (%s) to %d/%d recipients",
            event.id,
            event.summary,
            delivered,
            len(self.context.recipients),
        )


__all__ = ["NotificationScheduler", "fan_out", "reminder_options", "reminder_text"]
