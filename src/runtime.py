"""Wiring of store, event bus, pipeline, and reminder notifier."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from functools import lru_cache

from src.config import settings
from src.events.bus import EventBus
from src.extraction.extractor import extract_actions
from src.extraction.patterns import extract_actions_offline
from src.ids import IdGenerator, UuidIdGenerator
from src.notifications.email import EmailSender, ResendEmailSender
from src.pipeline.orchestrator import Extractor, MeetingPipeline
from src.reminders.notifier import ReminderNotifier
from src.reminders.sweep import SweepResult, run_reminder_sweep
from src.storage.repository import ActionItemStore
from src.storage.state import StateStore, create_state_store

logger = logging.getLogger(__name__)


def select_extractor(name: str | None = None) -> Extractor:
    """Return the extraction function named by ``name`` or settings.extractor."""
    name = name or settings.extractor
    if name == "claude":
        return extract_actions
    if name == "pattern":
        return extract_actions_offline
    raise ValueError(f"Unknown extractor: {name!r}")


@dataclass
class Runtime:
    store: ActionItemStore
    bus: EventBus
    pipeline: MeetingPipeline
    notifier: ReminderNotifier

    def run_sweep(self, today: date | None = None) -> SweepResult:
        today = today or self.notifier.clock().date()
        return run_reminder_sweep(self.store, self.bus, today=today)


def build_runtime(
    state: StateStore | None = None,
    email_sender: EmailSender | None = None,
    extract: Extractor | None = None,
    ids: IdGenerator | None = None,
    send_interval: float | None = None,
) -> Runtime:
    """Build a fully subscribed runtime. Defaults come from settings."""
    store = ActionItemStore(state or create_state_store())
    bus = EventBus()
    sender = email_sender or ResendEmailSender()
    ids = ids or UuidIdGenerator()

    pipeline = MeetingPipeline(store, bus, sender, ids=ids, extract=extract or select_extractor())
    pipeline.register()

    notifier = ReminderNotifier(
        store,
        sender,
        default_recipient=settings.default_reminder_recipient,
        recipients=settings.assignee_emails,
        send_interval=(
            settings.reminder_send_interval_seconds if send_interval is None else send_interval
        ),
        ids=ids,
    )
    notifier.register(bus)

    logger.info(
        "Runtime ready (state backend: %s, extractor: %s)",
        settings.state_backend,
        settings.extractor,
    )
    return Runtime(store=store, bus=bus, pipeline=pipeline, notifier=notifier)


@lru_cache(maxsize=1)
def get_runtime() -> Runtime:
    """Return the process-wide runtime."""
    return build_runtime()
