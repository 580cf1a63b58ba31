"""Test doubles shared across test modules."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import UTC, date, datetime
from typing import Any

from src.events.bus import EventBus
from src.events.payloads import ACTIONS_EXTRACTED, ACTIONS_SAVED, MEETING_UPLOADED, REMINDER_DUE
from src.notifications.email import DeliveryResult

# Wednesday
TODAY = date(2025, 3, 12)
FIXED_NOW = datetime(2025, 3, 12, 10, 0, tzinfo=UTC)


@dataclass
class SentEmail:
    to: str
    subject: str
    html: str


class FakeEmailSender:
    """Records every send; optionally reports failure like a bounced email."""

    def __init__(self, ok: bool = True) -> None:
        self.ok = ok
        self.sent: list[SentEmail] = []

    def send(self, to: str, subject: str, html: str) -> DeliveryResult:
        self.sent.append(SentEmail(to=to, subject=subject, html=html))
        if self.ok:
            return DeliveryResult(ok=True, message_id=f"msg_{len(self.sent)}")
        return DeliveryResult(ok=False, error="transport unavailable")


class SequentialIds:
    def __init__(self) -> None:
        self.counter = 0

    def new_id(self, kind: str) -> str:
        self.counter += 1
        return f"{kind}_{self.counter}"


class EventRecorder:
    """Subscribes to every topic and keeps the payloads it sees."""

    def __init__(self, bus: EventBus) -> None:
        self.events: dict[str, list[Any]] = defaultdict(list)
        for topic in (MEETING_UPLOADED, ACTIONS_EXTRACTED, ACTIONS_SAVED, REMINDER_DUE):
            bus.subscribe(topic, self.events[topic].append)
