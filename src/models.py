"""Persisted domain models: meetings, action items, and reminder log entries.

Stored values and event payloads use camelCase keys (``meetingId``,
``dueDate``); Python code uses the snake_case attribute names.
"""

from __future__ import annotations

from datetime import UTC, date, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ActionStatus(StrEnum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    DONE = "done"
    OVERDUE = "overdue"


class Priority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ReminderStatus(StrEnum):
    SENT = "sent"
    FAILED = "failed"


def utc_now() -> datetime:
    return datetime.now(UTC)


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_record(self) -> dict[str, Any]:
        """Serialise to the JSON-compatible dict stored in the state store."""
        return self.model_dump(mode="json", by_alias=True)


class Meeting(CamelModel):
    """An uploaded meeting transcript."""

    id: str
    title: str
    transcript: str
    uploaded_by: str = "anonymous"
    created_at: datetime
    processed: bool = False


class ActionItem(CamelModel):
    """A tracked, assignee-owned task extracted from a meeting.

    ``completed_at`` is set exactly while ``status`` is ``done``; see
    ``src.pipeline.orchestrator.apply_action_update``.
    """

    id: str
    meeting_id: str
    description: str
    assignee: str
    due_date: date | None = None
    priority: Priority = Priority.MEDIUM
    status: ActionStatus = ActionStatus.PENDING
    created_at: datetime
    completed_at: datetime | None = None


class ReminderLog(CamelModel):
    """One reminder delivery attempt for a single action item."""

    id: str
    action_id: str
    sent_at: datetime
    status: ReminderStatus
    error: str | None = None


class PriorityBreakdown(CamelModel):
    high: int = 0
    medium: int = 0
    low: int = 0


class DashboardMetrics(CamelModel):
    """Aggregate counts shown on the dashboard."""

    total_meetings: int
    active_actions: int
    completed_actions: int
    overdue_actions: int
    completion_rate: int
    priority_breakdown: PriorityBreakdown
