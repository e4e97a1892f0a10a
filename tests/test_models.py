from datetime import date, datetime, timedelta, timezone

import pytest

from conftest import TZ
from daybook.domain import (
    AllDayEvent,
    CacheDomain,
    Card,
    ConflictCandidate,
    InvalidCandidateError,
    Snapshot,
    Task,
    TimedEvent,
    event_from_record,
)


def test_calendar_item_with_time_becomes_timed_event():
    event = event_from_record(
        {
            "id": "abc",
            "summary": "Standup",
            "start": {"dateTime": "2024-06-10T10:00:00-03:00"},
            "end": {"dateTime": "2024-06-10T10:15:00-03:00"},
            "hangoutLink": "https://meet.google.com/xyz",
            "recurringEventId": "series-1",
        }
    )

    assert isinstance(event, TimedEvent)
    assert event.start == datetime(2024, 6, 10, 13, 0, tzinfo=timezone.utc)
    assert event.end - event.start == timedelta(minutes=15)
    assert event.conference_link == "https://meet.google.com/xyz"
    assert event.recurring_id == "series-1"


def test_calendar_item_with_date_becomes_all_day_event():
    event = event_from_record({"id": "h1", "summary": "Holiday", "start": {"date": "2024-06-10"}})

    assert event == AllDayEvent(id="h1", summary="Holiday", date=date(2024, 6, 10))


def test_calendar_item_without_start_is_rejected():
    with pytest.raises(ValueError):
        event_from_record({"id": "broken", "summary": "?"})


def test_naive_times_take_the_default_zone():
    event = event_from_record(
        {"id": "n1", "start": {"dateTime": "2024-06-10T10:00:00"}, "end": {"dateTime": "2024-06-10T11:00:00"}},
        default_tz=TZ,
    )

    assert event.start.tzinfo is TZ
    assert event.summary == ""


def test_snapshot_document_uses_persisted_key_names():
    snapshot = Snapshot(
        events=(
            TimedEvent(
                id="e1",
                summary="Call",
                start=datetime(2024, 6, 10, 14, 0, tzinfo=TZ),
                end=datetime(2024, 6, 10, 15, 0, tzinfo=TZ),
                conference_link="https://meet.example/1",
            ),
            AllDayEvent(id="e2", summary="Trip", date=date(2024, 6, 11)),
        ),
        tasks=(Task(id="t1", title="Taxes", due=date(2024, 6, 30)),),
        board_cards=(Card(id="c1", name="Card", list_name="A Fazer", short_url="https://trello.com/c/1"),),
        last_update=datetime(2024, 6, 10, 9, 0, tzinfo=TZ),
    )

    document = snapshot.to_record()

    assert document["lastUpdate"] == "2024-06-10T09:00:00-03:00"
    assert document["events"][0]["kind"] == "timed"
    assert document["events"][0]["conferenceLink"] == "https://meet.example/1"
    assert document["events"][1] == {"kind": "all_day", "id": "e2", "summary": "Trip", "date": "2024-06-11"}
    assert document["boardCards"][0]["shortUrl"] == "https://trello.com/c/1"
    assert Snapshot.from_record(document) == snapshot


def test_task_record_accepts_name_and_timestamp_due():
    task = Task.from_record({"id": "t1", "name": "Renew passport", "due": "2024-07-01T00:00:00.000Z"})

    assert task.title == "Renew passport"
    assert task.due == date(2024, 7, 1)


def test_card_record_maps_board_fields():
    card = Card.from_record({"id": "c1", "name": "Deploy", "listName": "To Do", "shortUrl": "https://trello.com/c/x"})

    assert card.list_name == "To Do"
    assert card.short_url == "https://trello.com/c/x"
    assert card.desc is None


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("events", CacheDomain.EVENTS),
        ("TASKS", CacheDomain.TASKS),
        ("boardCards", CacheDomain.BOARD_CARDS),
        ("trello", CacheDomain.BOARD_CARDS),
        (CacheDomain.ALL, CacheDomain.ALL),
    ],
)
def test_cache_domain_aliases(raw, expected):
    assert CacheDomain.parse(raw) is expected


def test_unknown_cache_domain_is_rejected():
    with pytest.raises(ValueError):
        CacheDomain.parse("calendar")


def test_candidate_without_time_is_all_day():
    candidate = ConflictCandidate.from_payload("Trip", "2024-06-15", tz=TZ)

    assert candidate.is_all_day
    assert candidate.start == date(2024, 6, 15)


def test_candidate_with_time_is_localized():
    candidate = ConflictCandidate.from_payload("Call", "2024-06-10T14:00", "2024-06-10T15:00", tz=TZ)

    assert not candidate.is_all_day
    assert candidate.start == datetime(2024, 6, 10, 14, 0, tzinfo=TZ)
    assert candidate.end == datetime(2024, 6, 10, 15, 0, tzinfo=TZ)


def test_candidate_rejects_garbage_and_mixed_precision():
    with pytest.raises(InvalidCandidateError):
        ConflictCandidate.from_payload("Call", "tomorrow at 3", tz=TZ)
    with pytest.raises(InvalidCandidateError):
        ConflictCandidate.from_payload("Call", "2024-06-10T14:00", "2024-06-11", tz=TZ)
