"""Read-side projections over stored action items: filtered lists and dashboard metrics."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date

from src.models import (
    ActionItem,
    ActionStatus,
    DashboardMetrics,
    Priority,
    PriorityBreakdown,
)
from src.storage.repository import ActionItemStore

STATUS_RANK = {
    ActionStatus.OVERDUE: 0,
    ActionStatus.PENDING: 1,
    ActionStatus.IN_PROGRESS: 2,
    ActionStatus.DONE: 3,
}

PRIORITY_RANK = {
    Priority.HIGH: 0,
    Priority.MEDIUM: 1,
    Priority.LOW: 2,
}


@dataclass
class ActionFilters:
    """Conjunctive filters; ``assignee`` is a case-insensitive substring match."""

    status: ActionStatus | None = None
    priority: Priority | None = None
    assignee: str | None = None

    def matches(self, action: ActionItem) -> bool:
        if self.status is not None and action.status != self.status:
            return False
        if self.priority is not None and action.priority != self.priority:
            return False
        if self.assignee and self.assignee.lower() not in action.assignee.lower():
            return False
        return True


def sort_key(action: ActionItem) -> tuple[int, bool, date, int]:
    """Status rank, then due date (undated last), then priority rank."""
    return (
        STATUS_RANK.get(action.status, 99),
        action.due_date is None,
        action.due_date or date.max,
        PRIORITY_RANK.get(action.priority, 99),
    )


def filter_and_sort(actions: list[ActionItem], filters: ActionFilters | None = None) -> list[ActionItem]:
    filters = filters or ActionFilters()
    return sorted((a for a in actions if filters.matches(a)), key=sort_key)


def list_actions(store: ActionItemStore, filters: ActionFilters | None = None) -> list[ActionItem]:
    return filter_and_sort(store.list_actions(), filters)


def completion_rate(completed: int, total: int) -> int:
    """Percentage of done items, rounded half up; 0 when there are no items."""
    if total == 0:
        return 0
    return math.floor(completed * 100 / total + 0.5)


def compute_metrics(meeting_count: int, actions: list[ActionItem]) -> DashboardMetrics:
    total = len(actions)
    by_status = {status: 0 for status in ActionStatus}
    breakdown = PriorityBreakdown()
    for action in actions:
        by_status[action.status] += 1
        if action.status is not ActionStatus.DONE:
            current = getattr(breakdown, action.priority.value)
            setattr(breakdown, action.priority.value, current + 1)

    completed = by_status[ActionStatus.DONE]
    return DashboardMetrics(
        total_meetings=meeting_count,
        active_actions=by_status[ActionStatus.PENDING] + by_status[ActionStatus.IN_PROGRESS],
        completed_actions=completed,
        overdue_actions=by_status[ActionStatus.OVERDUE],
        completion_rate=completion_rate(completed, total),
        priority_breakdown=breakdown,
    )


def dashboard_metrics(store: ActionItemStore) -> DashboardMetrics:
    return compute_metrics(len(store.list_meetings()), store.list_actions())
