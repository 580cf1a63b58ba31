"""Data models for structured extraction results."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from src.models import Priority


@dataclass
class ExtractedAction:
    """A candidate action item returned by extraction. Not persisted."""

    description: str
    assignee: str = "Unassigned"
    due_date: date | None = None
    priority: Priority = Priority.MEDIUM

    def to_payload(self) -> dict[str, str | None]:
        return {
            "description": self.description,
            "assignee": self.assignee,
            "dueDate": self.due_date.isoformat() if self.due_date else None,
            "priority": self.priority.value,
        }
