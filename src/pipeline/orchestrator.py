"""Meeting processing pipeline: upload -> extract -> save -> confirm.

Each step is an event subscriber, so every hand-off goes through the bus:

    upload_meeting        emits meeting.uploaded
    on_meeting_uploaded   emits actions.extracted (only when something was found)
    on_actions_extracted  emits actions.saved
    on_actions_saved      sends the confirmation email
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from datetime import date, datetime
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from src.errors import NotFoundError, ValidationError
from src.events.bus import EventBus
from src.events.payloads import (
    ACTIONS_EXTRACTED,
    ACTIONS_SAVED,
    MEETING_UPLOADED,
    ActionsExtracted,
    ActionsSaved,
    ExtractedActionPayload,
    MeetingUploaded,
)
from src.extraction.extractor import extract_actions
from src.extraction.models import ExtractedAction
from src.ids import IdGenerator, UuidIdGenerator
from src.models import ActionItem, ActionStatus, Meeting, utc_now
from src.notifications.email import DeliveryResult, EmailSender
from src.notifications.templates import confirmation_subject, render_confirmation_email
from src.storage.repository import ActionItemStore

logger = logging.getLogger(__name__)

Extractor = Callable[[str], list[ExtractedAction]]

UPDATABLE_FIELDS = {"status", "assignee", "due_date"}


def apply_action_update(
    action: ActionItem,
    changes: Mapping[str, Any],
    now: datetime,
) -> ActionItem:
    """Return a copy of ``action`` with ``changes`` applied.

    Moving into ``done`` stamps ``completed_at``; moving out of ``done``
    clears it. Any other change leaves ``completed_at`` alone.
    """
    unknown = set(changes) - UPDATABLE_FIELDS
    if unknown:
        raise ValidationError(
            "Unsupported fields in action update",
            metadata={"fields": sorted(unknown)},
        )

    data = action.model_dump()
    data.update(changes)
    try:
        updated = ActionItem.model_validate(data)
    except PydanticValidationError as exc:
        errors = exc.errors(include_url=False, include_context=False, include_input=False)
        raise ValidationError("Invalid action update", metadata={"errors": errors}) from exc

    was_done = action.status is ActionStatus.DONE
    is_done = updated.status is ActionStatus.DONE
    if is_done and not was_done:
        updated.completed_at = now
    elif was_done and not is_done:
        updated.completed_at = None
    return updated


class MeetingPipeline:
    """Orchestrates the event chain for one deployment.

    Args:
        store: Typed accessor over the state store.
        bus: Event bus the handlers subscribe to and emit on.
        email_sender: Transport for the confirmation email.
        ids: Unique ID capability.
        extract: ``transcript -> ExtractedAction[]``; defaults to Claude extraction.
        clock: Returns the current UTC time.
    """

    def __init__(
        self,
        store: ActionItemStore,
        bus: EventBus,
        email_sender: EmailSender,
        ids: IdGenerator | None = None,
        extract: Extractor | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.store = store
        self.bus = bus
        self.email_sender = email_sender
        self.ids = ids or UuidIdGenerator()
        self.extract = extract or extract_actions
        self.clock = clock

    def register(self) -> None:
        self.bus.subscribe(MEETING_UPLOADED, self.on_meeting_uploaded)
        self.bus.subscribe(ACTIONS_EXTRACTED, self.on_actions_extracted)
        self.bus.subscribe(ACTIONS_SAVED, self.on_actions_saved)

    # -- step 1 -----------------------------------------------------------

    def upload_meeting(
        self,
        title: str,
        transcript: str,
        uploaded_by: str | None = None,
    ) -> Meeting:
        """Store a new meeting and kick off extraction."""
        meeting = Meeting(
            id=self.ids.new_id("meeting"),
            title=title,
            transcript=transcript,
            uploaded_by=uploaded_by or "anonymous",
            created_at=self.clock(),
            processed=False,
        )
        self.store.save_meeting(meeting)
        self.store.index_meeting(meeting.id)
        logger.info("Meeting %s stored (%r), triggering extraction", meeting.id, title)

        self.bus.emit(
            MEETING_UPLOADED,
            MeetingUploaded(meeting_id=meeting.id, title=title, transcript=transcript),
        )
        return meeting

    # -- step 2 -----------------------------------------------------------

    def on_meeting_uploaded(self, event: MeetingUploaded) -> None:
        """Run extraction for an uploaded meeting.

        The meeting is marked processed even when extraction fails, so a bad
        transcript is not re-queued forever; the error is re-raised for the
        host to log. A redelivered event for a processed meeting is ignored.
        """
        if self._already_processed(event.meeting_id):
            return
        logger.info("Starting extraction for meeting %s", event.meeting_id)
        try:
            extracted = self.extract(event.transcript)
        except Exception:
            logger.exception("Extraction failed for meeting %s", event.meeting_id)
            self._mark_processed(event.meeting_id)
            raise

        if not extracted:
            logger.warning("No action items found in meeting %s", event.meeting_id)
            self._mark_processed(event.meeting_id)
            return

        logger.info("Extracted %d action items for meeting %s", len(extracted), event.meeting_id)
        self.bus.emit(
            ACTIONS_EXTRACTED,
            ActionsExtracted(
                meeting_id=event.meeting_id,
                title=event.title,
                extracted_actions=[
                    ExtractedActionPayload.model_validate(a.to_payload()) for a in extracted
                ],
            ),
        )

    # -- step 3 -----------------------------------------------------------

    def on_actions_extracted(self, event: ActionsExtracted) -> None:
        """Persist extracted candidates as pending action items."""
        if self._already_processed(event.meeting_id):
            return
        now = self.clock()
        action_items: list[ActionItem] = []
        for candidate in event.extracted_actions:
            action = ActionItem(
                id=self.ids.new_id("action"),
                meeting_id=event.meeting_id,
                description=candidate.description,
                assignee=candidate.assignee,
                due_date=date.fromisoformat(candidate.due_date) if candidate.due_date else None,
                priority=candidate.priority,
                status=ActionStatus.PENDING,
                created_at=now,
                completed_at=None,
            )
            self.store.save_action(action)
            action_items.append(action)
            logger.info("Action %s saved for %s", action.id, action.assignee)

        action_ids = [a.id for a in action_items]
        self.store.index_actions(action_ids)
        self._mark_processed(event.meeting_id)

        self.bus.emit(
            ACTIONS_SAVED,
            ActionsSaved(
                meeting_id=event.meeting_id,
                title=event.title,
                action_ids=action_ids,
                action_items=action_items,
                actions_count=len(action_items),
            ),
        )
        logger.info("Saved %d actions for meeting %s", len(action_ids), event.meeting_id)

    # -- step 4 -----------------------------------------------------------

    def on_actions_saved(self, event: ActionsSaved) -> DeliveryResult | None:
        """Email the uploader a summary. Delivery failures are logged only."""
        meeting = self.store.get_meeting(event.meeting_id)
        if meeting is None:
            logger.warning("Meeting %s not found, skipping confirmation email", event.meeting_id)
            return None

        result = self.email_sender.send(
            to=meeting.uploaded_by,
            subject=confirmation_subject(event.title, event.actions_count),
            html=render_confirmation_email(event.title, event.action_items),
        )
        if result.ok:
            logger.info("Confirmation email sent for meeting %s", event.meeting_id)
        else:
            logger.error(
                "Confirmation email failed for meeting %s: %s", event.meeting_id, result.error
            )
        return result

    # -- reads and edits --------------------------------------------------

    def get_meeting(self, meeting_id: str) -> Meeting:
        meeting = self.store.get_meeting(meeting_id)
        if meeting is None:
            raise NotFoundError(f"Meeting with id {meeting_id} not found")
        return meeting

    def list_meetings(self) -> list[Meeting]:
        return sorted(self.store.list_meetings(), key=lambda m: m.created_at, reverse=True)

    def update_action(self, action_id: str, changes: Mapping[str, Any]) -> ActionItem:
        """Apply an external edit to an action item (last writer wins)."""
        existing = self.store.get_action(action_id)
        if existing is None:
            raise NotFoundError(f"Action with id {action_id} not found")

        updated = apply_action_update(existing, changes, self.clock())
        self.store.save_action(updated)
        logger.info("Action %s updated (status=%s)", action_id, updated.status)
        return updated

    def _already_processed(self, meeting_id: str) -> bool:
        meeting = self.store.get_meeting(meeting_id)
        if meeting is not None and meeting.processed:
            logger.info("Meeting %s already processed, ignoring redelivered event", meeting_id)
            return True
        return False

    def _mark_processed(self, meeting_id: str) -> None:
        meeting = self.store.get_meeting(meeting_id)
        if meeting is None:
            logger.warning("Meeting %s not found, cannot mark processed", meeting_id)
            return
        if not meeting.processed:
            meeting.processed = True
            self.store.save_meeting(meeting)
        logger.info("Meeting %s marked as processed", meeting_id)
