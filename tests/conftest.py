from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Any, Callable, List, Optional, Sequence, Set, Tuple
from zoneinfo import ZoneInfo

import pytest

from daybook.config import AppSettings, CacheSettings, LoggingSettings, SchedulerSettings
from daybook.data import Collaborators, MessageOptions
from daybook.domain import AllDayEvent, Card, Task, TimedEvent
from daybook.services import ServiceContext

TZ = ZoneInfo("America/Sao_Paulo")
MONDAY_9AM = datetime(2024, 6, 10, 9, 0, tzinfo=TZ)


def at(hour: int, minute: int = 0, *, day: date = MONDAY_9AM.date()) -> datetime:
    return datetime(day.year, day.month, day.day, hour, minute, tzinfo=TZ)


def timed(event_id: str, start: datetime, end: Optional[datetime] = None, **extra: Any) -> TimedEvent:
    return TimedEvent(id=event_id, summary=extra.pop("summary", event_id), start=start, end=end or start + timedelta(hours=1), **extra)


def all_day(event_id: str, day: date, summary: Optional[str] = None) -> AllDayEvent:
    return AllDayEvent(id=event_id, summary=summary or event_id, date=day)


class FrozenClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def set(self, now: datetime) -> None:
        self.now = now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


class FakeCalendar:
    def __init__(self, events: Sequence[Any] = ()) -> None:
        self.events: List[Any] = list(events)
        self.calls: List[Tuple[datetime, datetime]] = []
        self.error: Optional[Exception] = None

    async def list_events(self, start: datetime, end: datetime) -> List[Any]:
        self.calls.append((start, end))
        if self.error is not None:
            raise self.error
        return list(self.events)


class FakeTasks:
    def __init__(self, tasks: Sequence[Any] = ()) -> None:
        self.tasks: List[Any] = list(tasks)
        self.calls = 0
        self.error: Optional[Exception] = None

    async def list_tasks(self) -> List[Any]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.tasks)


class FakeBoard:
    def __init__(self, cards: Sequence[Any] = ()) -> None:
        self.cards: List[Any] = list(cards)
        self.calls = 0
        self.error: Optional[Exception] = None

    async def list_all_cards(self) -> List[Any]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.cards)


class RecordingMessenger:
    def __init__(self) -> None:
        self.sent: List[Tuple[str, str, MessageOptions]] = []
        self.failing: Set[str] = set()

    async def send_message(self, recipient_id: str, text: str, options: MessageOptions) -> None:
        if recipient_id in self.failing:
            raise ConnectionError(f"cannot reach {recipient_id}")
        self.sent.append((recipient_id, text, options))


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(MONDAY_9AM)


@pytest.fixture
def calendar() -> FakeCalendar:
    return FakeCalendar()


@pytest.fixture
def task_reader() -> FakeTasks:
    return FakeTasks()


@pytest.fixture
def board() -> FakeBoard:
    return FakeBoard()


@pytest.fixture
def messenger() -> RecordingMessenger:
    return RecordingMessenger()


@pytest.fixture
def collaborators(calendar, task_reader, board, messenger) -> Collaborators:
    return Collaborators(calendar=calendar, tasks=task_reader, board=board, messenger=messenger)


@pytest.fixture
def make_settings(tmp_path) -> Callable[..., AppSettings]:
    def _make(*, recipients: Sequence[str] = ("100", "200"), **scheduler: Any) -> AppSettings:
        return AppSettings(
            scheduler=SchedulerSettings(recipients=tuple(recipients), timezone="America/Sao_Paulo", **scheduler),
            cache=CacheSettings(snapshot_file=tmp_path / "snapshot.json"),
            logging=LoggingSettings(directory=tmp_path / "logs"),
        )

    return _make


@pytest.fixture
def make_context(collaborators, clock, make_settings) -> Callable[..., ServiceContext]:
    def _make(**settings_overrides: Any) -> ServiceContext:
        return ServiceContext(collaborators=collaborators, settings=make_settings(**settings_overrides), clock=clock)

    return _make


@pytest.fixture
def context(make_context) -> ServiceContext:
    return make_context()


@pytest.fixture
def sample_tasks() -> List[Task]:
    return [Task(id=f"t{index}", title=f"Task {index}") for index in range(3)]


@pytest.fixture
def sample_cards() -> List[Card]:
    return [
        Card(id="c1", name="Write report", list_name="A Fazer", short_url="https://trello.com/c/1"),
        Card(id="c2", name="Ship release", list_name="Done", short_url="https://trello.com/c/2"),
        Card(id="c3", name="Review PR", list_name="To Do (week)", short_url="https://trello.com/c/3"),
    ]
