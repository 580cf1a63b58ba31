"""Event topics and their payload schemas."""

from __future__ import annotations

from src.models import ActionItem, CamelModel

MEETING_UPLOADED = "meeting.uploaded"
ACTIONS_EXTRACTED = "actions.extracted"
ACTIONS_SAVED = "actions.saved"
REMINDER_DUE = "reminder.due"


class MeetingUploaded(CamelModel):
    meeting_id: str
    title: str
    transcript: str


class ExtractedActionPayload(CamelModel):
    description: str
    assignee: str
    due_date: str | None = None
    priority: str


class ActionsExtracted(CamelModel):
    meeting_id: str
    title: str
    extracted_actions: list[ExtractedActionPayload]


class ActionsSaved(CamelModel):
    meeting_id: str
    title: str
    action_ids: list[str]
    action_items: list[ActionItem]
    actions_count: int


class ReminderDue(CamelModel):
    """One batched reminder for a single assignee."""

    assignee: str
    actions: list[ActionItem]
    due_count: int
    overdue_count: int
