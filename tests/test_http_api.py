from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from conftest import MONDAY_9AM, at, timed
from daybook.domain import Card, Snapshot
from daybook.services.http import create_app


@pytest.fixture
def client(context):
    return TestClient(create_app(context))


def test_snapshot_status_reports_counts(context, client):
    context.store.replace(
        Snapshot(
            events=(timed("e1", MONDAY_9AM + timedelta(hours=1)),),
            board_cards=(Card(id="c1", name="Plan", list_name="To Do", short_url="https://trello.com/c/1"),),
            last_update=MONDAY_9AM,
        )
    )

    response = client.get("/api/snapshot")

    assert response.status_code == 200
    assert response.json() == {
        "lastUpdate": "2024-06-10T09:00:00-03:00",
        "stale": False,
        "events": 1,
        "tasks": 0,
        "boardCards": 1,
    }


def test_empty_snapshot_is_stale(client):
    body = client.get("/api/snapshot").json()

    assert body["stale"] is True
    assert body["lastUpdate"] is None


def test_invalidate_board_cards(context, client, board, calendar):
    board.cards = [{"id": "c9", "name": "New", "listName": "A Fazer", "shortUrl": "https://trello.com/c/9"}]

    response = client.post("/api/cache/invalidate", json={"domain": "boardCards"})

    assert response.status_code == 200
    assert response.json() == {"requested": "board_cards", "refreshed": ["board_cards"]}
    assert [card.id for card in context.store.read().board_cards] == ["c9"]
    assert calendar.calls == []


def test_invalidate_unknown_domain(client):
    response = client.post("/api/cache/invalidate", json={"domain": "email"})

    assert response.status_code == 422


def test_booking_conflict_returns_report_and_message(client, calendar):
    calendar.events = [timed("existing", at(14, 30), at(15, 30), summary="Client review")]

    response = client.post(
        "/api/bookings/check",
        json={"summary": "Call", "start": "2024-06-10T14:00", "end": "2024-06-10T15:00"},
    )

    body = response.json()
    assert response.status_code == 200
    assert body["isValid"] is True
    assert body["report"]["hasConflict"] is True
    assert body["report"]["verified"] is True
    assert body["report"]["conflicts"][0]["summary"] == "Client review"
    assert [item["offsetMinutes"] for item in body["report"]["suggestions"]] == [-30, 90, 120]
    assert "Client review" in body["message"]


def test_free_booking_has_no_message(client):
    body = client.post("/api/bookings/check", json={"summary": "Call", "start": "2024-06-10T16:00"}).json()

    assert body["report"]["hasConflict"] is False
    assert body["message"] is None


def test_past_booking_is_invalid_without_fetching(client, calendar):
    body = client.post("/api/bookings/check", json={"summary": "Call", "start": "2024-06-10T08:00"}).json()

    assert body["isValid"] is False
    assert body["report"] is None
    assert calendar.calls == []


def test_malformed_booking_time(client):
    response = client.post("/api/bookings/check", json={"summary": "Call", "start": "later today"})

    assert response.status_code == 422
