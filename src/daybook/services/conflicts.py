from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, time, timedelta, tzinfo
from typing import Iterable, List, Sequence

from ..domain import (
    DEFAULT_EVENT_DURATION,
    ConflictCandidate,
    ConflictEntry,
    ConflictReport,
    Event,
    SchedulingCheck,
    Suggestion,
    TimedEvent,
    event_from_record,
)
from ..utils import format_clock, format_time_range
from .context import ServiceContext

logger = logging.getLogger(__name__)

PROBE_OFFSETS_MINUTES = (-30, 30, 60, 90, 120)
MAX_SUGGESTIONS = 3
LONG_EVENT_THRESHOLD = timedelta(hours=3)


def intervals_overlap(start: datetime, end: datetime, other_start: datetime, other_end: datetime) -> bool:
    """Half-open ``[start, end)`` intersection; touching intervals do not overlap."""

    return start < other_end and end > other_start


def suggestion_label(offset_minutes: int) -> str:
    if offset_minutes < 0:
        return f"{abs(offset_minutes)} min antes"
    if offset_minutes == 0:
        return "horário sugerido"
    return f"{offset_minutes} min depois"


def _overlaps_any(start: datetime, end: datetime, events: Iterable[Event]) -> bool:
    return any(
        intervals_overlap(start, end, event.start, event.end) for event in events if isinstance(event, TimedEvent)
    )


@dataclass(slots=True)
class ConflictEngine:
    """Booking-time overlap checks against live calendar data."""

    context: ServiceContext

    async def fetch_day_events(self, moment: datetime) -> List[Event]:
        tz = self.context.tz
        day_start = datetime.combine(moment.astimezone(tz).date(), time.min, tzinfo=tz)
        day_end = day_start + timedelta(days=1)
        records = await self.context.collaborators.calendar.list_events(day_start, day_end)
        return [event_from_record(record, default_tz=tz) for record in records]

    async def check_conflicts(self, candidate: ConflictCandidate) -> ConflictReport:
        if candidate.start is None or not isinstance(candidate.start, datetime):
            return ConflictReport.clear()

        start = candidate.start
        end = candidate.end if isinstance(candidate.end, datetime) else start + DEFAULT_EVENT_DURATION

        try:
            day_events = await self.fetch_day_events(start)
        except Exception:  # noqa: BLE001
            logger.exception("Could not fetch events to check conflicts for %r", candidate.summary)
            return ConflictReport.clear(verified=False)

        tz = self.context.tz
        conflicts = [
            ConflictEntry(
                id=event.id,
                summary=event.summary,
                start=format_clock(event.start, tz),
                end=format_clock(event.end, tz),
            )
            for event in day_events
            if isinstance(event, TimedEvent) and intervals_overlap(start, end, event.start, event.end)
        ]
        if not conflicts:
            return ConflictReport.clear()

        suggestions = self.generate_alternatives(start, end - start, day_events)
        logger.info(
            "Conflict detected for %r with %s",
            candidate.summary,
            ", ".join(conflict.summary for conflict in conflicts),
        )
        return ConflictReport(has_conflict=True, conflicts=conflicts, suggestions=suggestions)

    def generate_alternatives(
        self,
        original_start: datetime,
        duration: timedelta,
        day_events: Sequence[Event],
    ) -> List[Suggestion]:
        """Probe fixed offsets in order and keep the first free, future slots."""

        now = self.context.now()
        suggestions: list[Suggestion] = []
        for offset in PROBE_OFFSETS_MINUTES:
            probe_start = original_start + timedelta(minutes=offset)
            probe_end = probe_start + duration
            if probe_start <= now or _overlaps_any(probe_start, probe_end, day_events):
                continue
            suggestions.append(
                Suggestion(start=probe_start, end=probe_end, offset_minutes=offset, label=suggestion_label(offset))
            )
            if len(suggestions) >= MAX_SUGGESTIONS:
                break
        return suggestions

    def validate_scheduling_context(self, candidate: ConflictCandidate) -> SchedulingCheck:
        if candidate.start is None:
            return SchedulingCheck(is_valid=False, warnings=["Horário não especificado"])

        tz = self.context.tz
        timed = isinstance(candidate.start, datetime)
        if timed and candidate.start < self.context.now():
            return SchedulingCheck(is_valid=False, warnings=["Não é possível agendar no passado"])

        warnings: list[str] = []
        if timed:
            local = candidate.start.astimezone(tz)
            if local.hour < 6:
                warnings.append("⏰ Evento marcado para madrugada")
            if local.hour >= 22:
                warnings.append("🌙 Evento marcado para tarde da noite")
            weekday = local.weekday()
        else:
            weekday = candidate.start.weekday()
        if weekday >= 5:
            warnings.append("📅 Evento no fim de semana")

        if candidate.end is not None and isinstance(candidate.end, datetime) == timed:
            duration = candidate.end - candidate.start
            if duration > LONG_EVENT_THRESHOLD:
                warnings.append(f"⏱️ Evento longo ({round(duration.total_seconds() / 3600)} horas)")

        return SchedulingCheck(is_valid=True, warnings=warnings)


def format_conflict_message(candidate: ConflictCandidate, report: ConflictReport, *, tz: tzinfo) -> str:
    lines = [
        "⚠️ *Conflito Detectado!*",
        "",
        f"Você quer agendar: *{candidate.summary}*",
        "",
        "Mas você já tem:",
    ]
    lines += [f"📅 *{conflict.summary}* ({conflict.start} - {conflict.end})" for conflict in report.conflicts]
    if report.suggestions:
        lines += ["", "💡 *Sugestões de horários:*"]
        for index, suggestion in enumerate(report.suggestions, start=1):
            lines.append(
                f"{index}. {format_time_range(suggestion.start, suggestion.end, tz)} ({suggestion.label})"
            )
    lines += ["", "_Quer forçar o agendamento ou escolher outro horário?_"]
    return "\n".join(lines)


__all__ = [
    "ConflictEngine",
    "PROBE_OFFSETS_MINUTES",
    "format_conflict_message",
    "intervals_overlap",
    "suggestion_label",
]
