"""``reminder.due`` subscriber: email the assignee and log each attempt."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping
from datetime import datetime

from src.events.bus import EventBus
from src.events.payloads import REMINDER_DUE, ReminderDue
from src.ids import IdGenerator, UuidIdGenerator
from src.models import ReminderLog, ReminderStatus, utc_now
from src.notifications.email import DeliveryResult, EmailSender
from src.notifications.templates import render_reminder_email, reminder_subject
from src.storage.repository import ActionItemStore

logger = logging.getLogger(__name__)


class ReminderNotifier:
    """Delivers batched reminder emails.

    Recipients are looked up in ``recipients`` (assignee name -> address,
    case-insensitive) and fall back to ``default_recipient``. A pause of
    ``send_interval`` seconds precedes each send to stay under the
    transport's rate limit.
    """

    def __init__(
        self,
        store: ActionItemStore,
        email_sender: EmailSender,
        default_recipient: str,
        recipients: Mapping[str, str] | None = None,
        send_interval: float = 0.0,
        ids: IdGenerator | None = None,
        clock: Callable[[], datetime] = utc_now,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.store = store
        self.email_sender = email_sender
        self.default_recipient = default_recipient
        self.recipients = {k.lower(): v for k, v in (recipients or {}).items()}
        self.send_interval = send_interval
        self.ids = ids or UuidIdGenerator()
        self.clock = clock
        self.sleep = sleep

    def register(self, bus: EventBus) -> None:
        bus.subscribe(REMINDER_DUE, self.on_reminder_due)

    def recipient_for(self, assignee: str) -> str:
        return self.recipients.get(assignee.lower(), self.default_recipient)

    def on_reminder_due(self, event: ReminderDue) -> DeliveryResult:
        recipient = self.recipient_for(event.assignee)
        logger.info(
            "Sending reminder to %s for %s (%d due, %d overdue)",
            recipient,
            event.assignee,
            event.due_count,
            event.overdue_count,
        )

        html = render_reminder_email(
            event.assignee,
            event.actions,
            event.due_count,
            event.overdue_count,
            today=self.clock().date(),
        )
        if self.send_interval > 0:
            self.sleep(self.send_interval)
        result = self.email_sender.send(
            to=recipient,
            subject=reminder_subject(len(event.actions), event.overdue_count),
            html=html,
        )

        status = ReminderStatus.SENT if result.ok else ReminderStatus.FAILED
        sent_at = self.clock()
        for action in event.actions:
            self.store.save_reminder(
                ReminderLog(
                    id=self.ids.new_id("reminder"),
                    action_id=action.id,
                    sent_at=sent_at,
                    status=status,
                    error=result.error,
                )
            )

        if not result.ok:
            logger.error("Reminder email for %s failed: %s", event.assignee, result.error)
        return result
