from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Any, ClassVar, Dict, Iterable, List, Optional, Tuple, Union

from .enums import CacheDomain


class InvalidCandidateError(ValueError):
    """Raised when a booking candidate carries an unparsable date or time."""


def _parse_datetime(value: Any, *, default_tz: tzinfo = timezone.utc) -> datetime:
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    else:
        raise ValueError(f"Unsupported datetime value: {value!r}")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=default_tz)
    return parsed


def _parse_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        # Task due values arrive as midnight timestamps; only the day matters.
        return date.fromisoformat(value[:10])
    raise ValueError(f"Unsupported date value: {value!r}")


def _iso(value: Optional[Union[date, datetime]]) -> Optional[str]:
    return value.isoformat() if value is not None else None


@dataclass(frozen=True, slots=True)
class TimedEvent:
    id: str
    summary: str
    start: datetime
    end: datetime
    conference_link: Optional[str] = None
    recurring_id: Optional[str] = None

    kind: ClassVar[str] = "timed"

    def to_record(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "id": self.id,
            "summary": self.summary,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "conferenceLink": self.conference_link,
            "recurringId": self.recurring_id,
        }


@dataclass(frozen=True, slots=True)
class AllDayEvent:
    id: str
    summary: str
    date: date

    kind: ClassVar[str] = "all_day"

    def to_record(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "id": self.id,
            "summary": self.summary,
            "date": self.date.isoformat(),
        }


Event = Union[TimedEvent, AllDayEvent]


def event_from_record(record: Union[Event, Dict[str, Any]], *, default_tz: tzinfo = timezone.utc) -> Event:
    """Build an event from a persisted record or a calendar API item.

    Persisted records carry an explicit ``kind``. Calendar items use the
    ``start.dateTime`` / ``start.date`` shape, with ``hangoutLink`` and
    ``recurringEventId`` as optional extras.
    """

    if isinstance(record, (TimedEvent, AllDayEvent)):
        return record

    identifier = str(record["id"])
    summary = record.get("summary") or ""
    kind = record.get("kind")

    if kind == AllDayEvent.kind:
        return AllDayEvent(id=identifier, summary=summary, date=_parse_date(record["date"]))
    if kind == TimedEvent.kind:
        return TimedEvent(
            id=identifier,
            summary=summary,
            start=_parse_datetime(record["start"], default_tz=default_tz),
            end=_parse_datetime(record["end"], default_tz=default_tz),
            conference_link=record.get("conferenceLink"),
            recurring_id=record.get("recurringId"),
        )

    start = record.get("start") or {}
    end = record.get("end") or {}
    if start.get("dateTime"):
        starts_at = _parse_datetime(start["dateTime"], default_tz=default_tz)
        ends_at = _parse_datetime(end["dateTime"], default_tz=default_tz) if end.get("dateTime") else starts_at
        return TimedEvent(
            id=identifier,
            summary=summary,
            start=starts_at,
            end=ends_at,
            conference_link=record.get("hangoutLink"),
            recurring_id=record.get("recurringEventId"),
        )
    if start.get("date"):
        return AllDayEvent(id=identifier, summary=summary, date=_parse_date(start["date"]))
    raise ValueError(f"Event {identifier!r} has neither a start time nor a start date")


@dataclass(frozen=True, slots=True)
class Task:
    id: str
    title: str
    notes: Optional[str] = None
    due: Optional[date] = None

    @classmethod
    def from_record(cls, record: Union["Task", Dict[str, Any]]) -> "Task":
        if isinstance(record, Task):
            return record
        return cls(
            id=str(record["id"]),
            title=str(record.get("title") or record.get("name") or ""),
            notes=record.get("notes"),
            due=_parse_date(record["due"]) if record.get("due") else None,
        )

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "notes": self.notes,
            "due": _iso(self.due),
        }


@dataclass(frozen=True, slots=True)
class Card:
    id: str
    name: str
    list_name: str
    short_url: str
    desc: Optional[str] = None

    @classmethod
    def from_record(cls, record: Union["Card", Dict[str, Any]]) -> "Card":
        if isinstance(record, Card):
            return record
        return cls(
            id=str(record["id"]),
            name=str(record["name"]),
            list_name=str(record.get("listName") or ""),
            short_url=str(record.get("shortUrl") or ""),
            desc=record.get("desc") or None,
        )

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "listName": self.list_name,
            "shortUrl": self.short_url,
            "desc": self.desc,
        }


@dataclass(frozen=True, slots=True)
class Snapshot:
    """Immutable read model of the user's events, tasks and board cards."""

    events: Tuple[Event, ...] = ()
    tasks: Tuple[Task, ...] = ()
    board_cards: Tuple[Card, ...] = ()
    last_update: Optional[datetime] = None

    @classmethod
    def empty(cls) -> "Snapshot":
        return cls()

    @property
    def timed_events(self) -> List[TimedEvent]:
        return [event for event in self.events if isinstance(event, TimedEvent)]

    def with_domain(self, domain: CacheDomain, values: Iterable[Any], last_update: datetime) -> "Snapshot":
        if domain is CacheDomain.EVENTS:
            return replace(self, events=tuple(values), last_update=last_update)
        if domain is CacheDomain.TASKS:
            return replace(self, tasks=tuple(values), last_update=last_update)
        if domain is CacheDomain.BOARD_CARDS:
            return replace(self, board_cards=tuple(values), last_update=last_update)
        raise ValueError(f"Cannot patch composite domain {domain.value!r}")

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Snapshot":
        last_update = record.get("lastUpdate")
        return cls(
            events=tuple(event_from_record(item) for item in record.get("events") or []),
            tasks=tuple(Task.from_record(item) for item in record.get("tasks") or []),
            board_cards=tuple(Card.from_record(item) for item in record.get("boardCards") or []),
            last_update=_parse_datetime(last_update) if last_update else None,
        )

    def to_record(self) -> Dict[str, Any]:
        return {
            "events": [event.to_record() for event in self.events],
            "tasks": [task.to_record() for task in self.tasks],
            "boardCards": [card.to_record() for card in self.board_cards],
            "lastUpdate": _iso(self.last_update),
        }


@dataclass(frozen=True, slots=True)
class ConflictCandidate:
    """A booking request. ``start`` is a ``date`` for all-day bookings."""

    summary: str
    start: Optional[Union[date, datetime]]
    end: Optional[Union[date, datetime]] = None

    @property
    def is_all_day(self) -> bool:
        return self.start is not None and not isinstance(self.start, datetime)

    @classmethod
    def from_payload(
        cls,
        summary: str,
        start: Optional[Union[str, date, datetime]],
        end: Optional[Union[str, date, datetime]] = None,
        *,
        tz: tzinfo,
    ) -> "ConflictCandidate":
        starts_at = _parse_moment(start, tz) if start else None
        ends_at = _parse_moment(end, tz) if end else None
        if starts_at is not None and ends_at is not None:
            if isinstance(starts_at, datetime) != isinstance(ends_at, datetime):
                raise InvalidCandidateError("Start and end must both be dates or both carry a time of day")
        return cls(summary=summary, start=starts_at, end=ends_at)


def _parse_moment(value: Union[str, date, datetime], tz: tzinfo) -> Union[date, datetime]:
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=tz)
    if isinstance(value, date):
        return value
    try:
        if "T" in value:
            return _parse_datetime(value, default_tz=tz)
        return date.fromisoformat(value)
    except ValueError as exc:
        raise InvalidCandidateError(f"Invalid date or time: {value!r}") from exc


@dataclass(frozen=True, slots=True)
class Suggestion:
    start: datetime
    end: datetime
    offset_minutes: int
    label: str

    def to_record(self) -> Dict[str, Any]:
        return {
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "offsetMinutes": self.offset_minutes,
            "label": self.label,
        }


@dataclass(frozen=True, slots=True)
class ConflictEntry:
    id: str
    summary: str
    start: str
    end: str


@dataclass(frozen=True, slots=True)
class ConflictReport:
    has_conflict: bool
    conflicts: List[ConflictEntry] = field(default_factory=list)
    suggestions: List[Suggestion] = field(default_factory=list)
    verified: bool = True

    @classmethod
    def clear(cls, *, verified: bool = True) -> "ConflictReport":
        return cls(has_conflict=False, verified=verified)


@dataclass(frozen=True, slots=True)
class SchedulingCheck:
    is_valid: bool
    warnings: List[str] = field(default_factory=list)


DEFAULT_EVENT_DURATION = timedelta(hours=1)
