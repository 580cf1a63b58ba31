"""Pydantic request/response schemas for the action tracker API."""

from __future__ import annotations

from datetime import date

from pydantic import Field

from src.models import ActionItem, ActionStatus, CamelModel

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class UploadMeetingRequest(CamelModel):
    """Request body for POST /api/meetings/upload."""

    title: str = Field(min_length=1)
    transcript: str = Field(min_length=10)
    uploaded_by: str | None = Field(default=None, pattern=EMAIL_PATTERN)


class UpdateActionRequest(CamelModel):
    """Request body for PUT /api/actions/{id}. Only supplied fields change."""

    status: ActionStatus | None = None
    assignee: str | None = Field(default=None, min_length=1)
    due_date: date | None = None


class ActionListResponse(CamelModel):
    actions: list[ActionItem]
    total: int


class SweepDetails(CamelModel):
    due_today: int
    overdue: int
    marked_overdue: int


class SweepResponse(CamelModel):
    """Response body for POST /api/reminders/run."""

    message: str
    details: SweepDetails
