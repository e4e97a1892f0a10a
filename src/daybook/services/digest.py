from __future__ import annotations

import random
from datetime import datetime
from typing import Callable, Iterable, List, Optional, Sequence, TypeVar

from ..config import SchedulerSettings
from ..domain import AllDayEvent, Card, Event, Snapshot, Task, TimedEvent
from ..utils import format_event_line

T = TypeVar("T")

TODO_LIST_MARKERS = ("a fazer", "to do", "todo")

MOTIVATIONAL_PHRASES = (
    '"O sucesso é a soma de pequenos esforços repetidos dia após dia." 💪',
    '"Não pare até se orgulhar." 🚀',
    '"A disciplina é a mãe do êxito." 🎯',
    '"Foco na meta!" 🏹',
    '"Você é capaz de coisas incríveis." ✨',
    '"Vamos fazer acontecer!" 🔥',
    '"Um passo de cada vez." 👣',
    '"Acredite no seu potencial." 💡',
    '"Persistência é o caminho do êxito." 🛣️',
)


def todo_cards(cards: Iterable[Card]) -> List[Card]:
    return [card for card in cards if any(marker in card.list_name.lower() for marker in TODO_LIST_MARKERS)]


def events_today(events: Iterable[Event], now: datetime) -> List[Event]:
    today = now.date()
    selected: list[Event] = []
    for event in events:
        if isinstance(event, TimedEvent) and event.start.astimezone(now.tzinfo).date() == today:
            selected.append(event)
        elif isinstance(event, AllDayEvent) and event.date == today:
            selected.append(event)
    return selected


def events_remaining(events: Iterable[Event], now: datetime) -> List[Event]:
    today = now.date()
    selected: list[Event] = []
    for event in events:
        if isinstance(event, AllDayEvent) and event.date == today:
            selected.append(event)
        elif isinstance(event, TimedEvent) and event.start > now:
            selected.append(event)
    return selected


def _bulleted(items: Sequence[T], limit: int, render: Callable[[T], str], overflow: str) -> List[str]:
    lines = [f"   {render(item)}" for item in items[:limit]]
    if len(items) > limit:
        lines.append(f"   ...e mais {len(items) - limit} {overflow}.")
    return lines


def _event_lines(events: Sequence[Event], now: datetime) -> List[str]:
    return [f"   {format_event_line(event, now=now, tz=now.tzinfo)}" for event in events]


def _task_line(task: Task) -> str:
    return f"▫️ {task.title}"


def _card_line(card: Card) -> str:
    return f"🔹 [{card.name}]({card.short_url})"


def compose_morning_digest(
    snapshot: Snapshot,
    *,
    now: datetime,
    settings: SchedulerSettings,
    rng: Optional[random.Random] = None,
) -> str:
    """Today's events, pending tasks and to-do cards."""

    todays_events = events_today(snapshot.events, now)
    tasks = list(snapshot.tasks)
    cards = todo_cards(snapshot.board_cards)

    lines = [f"☀️ *Bom dia! Resumo de hoje ({now.strftime('%d/%m')}):*", ""]
    if not todays_events and not tasks and not cards:
        lines.append("🎉 Nada pendente. Você está livre!")
    else:
        if todays_events:
            lines += ["📅 *Compromissos:*", *_event_lines(todays_events, now), ""]
        if tasks:
            lines += ["📝 *Pendências:*", *_bulleted(tasks, settings.max_tasks_in_summary, _task_line, "tarefas"), ""]
        if cards:
            lines += ["🗂️ *Quadro (A Fazer):*", *_bulleted(cards, settings.max_cards_in_summary, _card_line, "cards"), ""]

    lines += ["", f"_{(rng or random).choice(MOTIVATIONAL_PHRASES)}_"]
    return "\n".join(lines)


def compose_afternoon_digest(
    snapshot: Snapshot,
    *,
    now: datetime,
    settings: SchedulerSettings,
    rng: Optional[random.Random] = None,
) -> str:
    """What is left of the day: upcoming events plus the same task and card filters."""

    remaining = events_remaining(snapshot.events, now)
    tasks = list(snapshot.tasks)
    cards = todo_cards(snapshot.board_cards)

    lines = [f"🕑 *Check das {now.hour}h:*", ""]
    if remaining:
        lines += ["📅 *Próximos Eventos:*", *_event_lines(remaining, now), ""]
    if tasks:
        lines += [
            f"📝 *Pendências ({len(tasks)}):*",
            *_bulleted(tasks, settings.max_tasks_in_summary, _task_line, "tarefas"),
            "",
        ]
    if cards:
        lines += [
            f"🗂️ *A Fazer ({len(cards)}):*",
            *_bulleted(cards, settings.max_cards_in_summary, _card_line, "cards"),
            "",
        ]
    if not remaining and not tasks and not cards:
        lines += ["✅ Tudo limpo por enquanto!", ""]

    lines.append(f"_{(rng or random).choice(MOTIVATIONAL_PHRASES)}_")
    return "\n".join(lines)


__all__ = [
    "MOTIVATIONAL_PHRASES",
    "compose_afternoon_digest",
    "compose_morning_digest",
    "events_remaining",
    "events_today",
    "todo_cards",
]
