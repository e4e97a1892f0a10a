"""Human-friendly (pt-BR) rendering of dates and events for chat messages."""

from __future__ import annotations

from datetime import date, datetime, tzinfo
from typing import Optional, Union

from ..domain import AllDayEvent, Event, TimedEvent

WEEKDAYS = ("Segunda-feira", "Terça-feira", "Quarta-feira", "Quinta-feira", "Sexta-feira", "Sábado", "Domingo")


def format_clock(value: datetime, tz: tzinfo) -> str:
    return value.astimezone(tz).strftime("%H:%M")


def format_time_range(start: datetime, end: Optional[datetime], tz: tzinfo) -> str:
    if end is None:
        return format_clock(start, tz)
    return f"{format_clock(start, tz)} - {format_clock(end, tz)}"


def _day_part(day: date, today: date, *, relative: bool, show_year: bool) -> str:
    if relative:
        delta = (day - today).days
        if delta == 0:
            return "Hoje"
        if delta == 1:
            return "Amanhã"
        if delta == -1:
            return "Ontem"
        if 1 < delta <= 6:
            return WEEKDAYS[day.weekday()]
        if 6 < delta <= 13:
            return f"{WEEKDAYS[day.weekday()]} que vem"
    label = day.strftime("%d/%m")
    if show_year or day.year != today.year:
        label += f"/{day.year}"
    return label


def format_friendly_date(
    value: Union[date, datetime],
    *,
    now: datetime,
    tz: tzinfo,
    relative: bool = True,
    show_year: bool = False,
    show_time: bool = True,
) -> str:
    today = now.astimezone(tz).date()
    if not isinstance(value, datetime):
        return f"{_day_part(value, today, relative=relative, show_year=show_year)} (dia todo)"

    local = value.astimezone(tz)
    day_part = _day_part(local.date(), today, relative=relative, show_year=show_year)
    if not show_time:
        return day_part
    time_part = f"{local.hour}h" if local.minute == 0 else f"{local.hour}h{local.minute:02d}"
    return f"{day_part} às {time_part}"


def event_status_emoji(event: Event, *, now: datetime) -> str:
    if event.summary.startswith("✅"):
        return "✅"

    if isinstance(event, AllDayEvent):
        return "📆"

    emojis = []
    minutes_until = (event.start - now).total_seconds() / 60
    if minutes_until < 0:
        emojis.append("⏸️")
    elif minutes_until <= 60:
        emojis.append("🟡")
    else:
        emojis.append("🟢")
    if event.conference_link:
        emojis.append("📹")
    if event.recurring_id:
        emojis.append("🔄")
    return " ".join(emojis)


def event_moment(event: Event) -> Union[date, datetime]:
    return event.start if isinstance(event, TimedEvent) else event.date


def format_event_line(event: Event, *, now: datetime, tz: tzinfo) -> str:
    when = format_friendly_date(event_moment(event), now=now, tz=tz, relative=False)
    return f"{event_status_emoji(event, now=now)} {when} - {event.summary or 'Sem título'}"
