"""Shared fixtures: in-memory store, event bus, fake email transport."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from src.events.bus import EventBus
from src.models import ActionItem, ActionStatus, Priority
from src.storage.repository import ActionItemStore
from src.storage.state import InMemoryStateStore
from tests.helpers import FIXED_NOW, FakeEmailSender, SequentialIds


@pytest.fixture
def store() -> ActionItemStore:
    return ActionItemStore(InMemoryStateStore())


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


@pytest.fixture
def email_sender() -> FakeEmailSender:
    return FakeEmailSender()


@pytest.fixture
def ids() -> SequentialIds:
    return SequentialIds()


@pytest.fixture
def make_action() -> Callable[..., ActionItem]:
    """Factory for action items with sensible defaults."""
    counter = {"n": 0}

    def _make(**overrides: Any) -> ActionItem:
        counter["n"] += 1
        fields: dict[str, Any] = {
            "id": f"action_{counter['n']}",
            "meeting_id": "meeting_1",
            "description": f"Task {counter['n']}",
            "assignee": "Alice",
            "due_date": None,
            "priority": Priority.MEDIUM,
            "status": ActionStatus.PENDING,
            "created_at": FIXED_NOW,
            "completed_at": None,
        }
        fields.update(overrides)
        return ActionItem(**fields)

    return _make
