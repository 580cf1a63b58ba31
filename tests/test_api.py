"""Tests for API endpoints (no external API keys required)."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable, Iterator
from datetime import date
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from src.api.main import app
from src.api.routes.dashboard import run_reminders
from src.extraction.models import ExtractedAction
from src.models import ActionItem, Priority
from src.runtime import Runtime, build_runtime, get_runtime
from src.storage.state import InMemoryStateStore
from tests.helpers import FakeEmailSender, SequentialIds

TRANSCRIPT = "Alice will send the deck by Friday. Bob will book the room."


def fake_extract(transcript: str) -> list[ExtractedAction]:
    return [
        ExtractedAction(
            description="Send the deck",
            assignee="Alice",
            due_date=date(2099, 1, 2),
            priority=Priority.HIGH,
        ),
        ExtractedAction(description="Book the room", assignee="Bob", priority=Priority.LOW),
    ]


@pytest.fixture
def runtime() -> Iterator[Runtime]:
    rt = build_runtime(
        state=InMemoryStateStore(),
        email_sender=FakeEmailSender(),
        extract=fake_extract,
        ids=SequentialIds(),
        send_interval=0,
    )
    app.dependency_overrides[get_runtime] = lambda: rt
    yield rt
    app.dependency_overrides.clear()


@pytest.fixture
def client(runtime: Runtime) -> TestClient:
    return TestClient(app)


def _upload(client: TestClient, **overrides: str) -> dict:  # type: ignore[type-arg]
    payload = {"title": "Weekly sync", "transcript": TRANSCRIPT, "uploadedBy": "lead@example.com"}
    payload.update(overrides)
    response = client.post("/api/meetings/upload", json=payload)
    assert response.status_code == 201, response.text
    return response.json()  # type: ignore[no-any-return]


def test_health(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200


class TestMeetings:
    def test_upload_returns_unprocessed_meeting(self, client: TestClient) -> None:
        body = _upload(client)
        assert body["title"] == "Weekly sync"
        assert body["uploadedBy"] == "lead@example.com"
        assert body["processed"] is False
        assert body["id"].startswith("meeting_")

    def test_upload_runs_pipeline(self, client: TestClient, runtime: Runtime) -> None:
        meeting_id = _upload(client)["id"]

        detail = client.get(f"/api/meetings/{meeting_id}").json()
        assert detail["processed"] is True
        assert len(runtime.store.list_actions()) == 2
        assert len(runtime.pipeline.email_sender.sent) == 1  # type: ignore[attr-defined]

    def test_short_transcript_is_rejected_with_400(self, client: TestClient) -> None:
        response = client.post("/api/meetings/upload", json={"title": "x", "transcript": "short"})
        assert response.status_code == 400
        assert response.json()["error"] == "Invalid request body"

    def test_missing_title_is_rejected(self, client: TestClient) -> None:
        response = client.post("/api/meetings/upload", json={"transcript": TRANSCRIPT})
        assert response.status_code == 400

    def test_invalid_uploader_email_is_rejected(self, client: TestClient) -> None:
        response = client.post(
            "/api/meetings/upload",
            json={"title": "Sync", "transcript": TRANSCRIPT, "uploadedBy": "not-an-email"},
        )
        assert response.status_code == 400

    def test_unknown_meeting_returns_404(self, client: TestClient) -> None:
        response = client.get("/api/meetings/missing")
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "not_found"

    def test_list_meetings(self, client: TestClient) -> None:
        _upload(client, title="First")
        _upload(client, title="Second")
        titles = {m["title"] for m in client.get("/api/meetings").json()}
        assert titles == {"First", "Second"}


class TestActions:
    def test_list_actions_sorted(self, client: TestClient) -> None:
        _upload(client)
        body = client.get("/api/actions").json()
        assert body["total"] == 2
        # dated item before undated item
        assert [a["assignee"] for a in body["actions"]] == ["Alice", "Bob"]
        assert body["actions"][0]["dueDate"] == "2099-01-02"
        assert body["actions"][0]["status"] == "pending"

    def test_filter_by_priority_and_assignee(self, client: TestClient) -> None:
        _upload(client)
        body = client.get("/api/actions", params={"priority": "low", "assignee": "bo"}).json()
        assert body["total"] == 1
        assert body["actions"][0]["assignee"] == "Bob"

    def test_invalid_status_filter_is_400(self, client: TestClient) -> None:
        response = client.get("/api/actions", params={"status": "archived"})
        assert response.status_code == 400

    def test_update_to_done_and_back(self, client: TestClient) -> None:
        _upload(client)
        action_id = client.get("/api/actions").json()["actions"][0]["id"]

        done = client.put(f"/api/actions/{action_id}", json={"status": "done"}).json()
        assert done["status"] == "done"
        assert done["completedAt"] is not None

        reopened = client.put(f"/api/actions/{action_id}", json={"status": "pending"}).json()
        assert reopened["status"] == "pending"
        assert reopened["completedAt"] is None

    def test_update_clears_due_date(self, client: TestClient) -> None:
        _upload(client)
        action_id = client.get("/api/actions").json()["actions"][0]["id"]

        body = client.put(f"/api/actions/{action_id}", json={"dueDate": None}).json()

        assert body["dueDate"] is None
        assert body["assignee"] == "Alice"

    def test_update_unknown_action_is_404(self, client: TestClient) -> None:
        response = client.put("/api/actions/missing", json={"status": "done"})
        assert response.status_code == 404

    def test_update_invalid_status_is_400(self, client: TestClient) -> None:
        _upload(client)
        action_id = client.get("/api/actions").json()["actions"][0]["id"]
        response = client.put(f"/api/actions/{action_id}", json={"status": "archived"})
        assert response.status_code == 400


class TestDashboardAndReminders:
    def test_empty_dashboard(self, client: TestClient) -> None:
        body = client.get("/api/dashboard").json()
        assert body["totalMeetings"] == 0
        assert body["completionRate"] == 0

    def test_dashboard_after_upload(self, client: TestClient) -> None:
        _upload(client)
        action_id = client.get("/api/actions").json()["actions"][0]["id"]
        client.put(f"/api/actions/{action_id}", json={"status": "done"})

        body = client.get("/api/dashboard").json()

        assert body["totalMeetings"] == 1
        assert body["completedActions"] == 1
        assert body["activeActions"] == 1
        assert body["completionRate"] == 50
        assert body["priorityBreakdown"] == {"high": 0, "medium": 0, "low": 1}

    def test_run_reminders(self, client: TestClient, runtime: Runtime) -> None:
        _upload(client)
        action_id = client.get("/api/actions").json()["actions"][0]["id"]
        client.put(f"/api/actions/{action_id}", json={"dueDate": "2000-01-01"})

        response = client.post("/api/reminders/run")

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Reminders triggered for 1 assignee(s)"
        assert body["details"] == {"dueToday": 0, "overdue": 1, "markedOverdue": 1}
        assert runtime.store.get_action(action_id).status == "overdue"  # type: ignore[union-attr]


def test_unexpected_error_returns_500(runtime: Runtime) -> None:
    client = TestClient(app, raise_server_exceptions=False)
    with patch.object(runtime.pipeline, "list_meetings", side_effect=RuntimeError("db down")):
        response = client.get("/api/meetings")
    assert response.status_code == 500
    assert response.json() == {"error": "Internal Server Error"}


def test_reminder_run_leaves_event_loop_responsive(
    runtime: Runtime, make_action: Callable[..., ActionItem]
) -> None:
    for name in ("Alice", "Bob", "Carol", "Dan"):
        runtime.store.save_action(make_action(assignee=name, due_date=date(2000, 1, 1)))
    runtime.notifier.send_interval = 0.2

    async def run_with_ticker() -> float:
        stop = asyncio.Event()
        widest = 0.0

        async def ticker() -> None:
            nonlocal widest
            last = time.monotonic()
            while not stop.is_set():
                await asyncio.sleep(0.02)
                now = time.monotonic()
                widest = max(widest, now - last)
                last = now

        task = asyncio.create_task(ticker())
        await run_reminders(runtime)
        stop.set()
        await task
        return widest

    assert asyncio.run(run_with_ticker()) < 0.5
    assert len(runtime.pipeline.email_sender.sent) == 4  # type: ignore[attr-defined]
