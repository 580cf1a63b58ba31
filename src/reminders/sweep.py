"""Due/overdue sweep over all action items.

The sweep is idempotent and not transactional: if it dies half way through
emitting reminders, the next run re-notifies, because overdue items stay
overdue and due-today items are recomputed every run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date

from src.events.bus import EventBus
from src.events.payloads import REMINDER_DUE, ReminderDue
from src.models import ActionItem, ActionStatus, utc_now
from src.storage.repository import ActionItemStore

logger = logging.getLogger(__name__)

UNASSIGNED = "Unassigned"


@dataclass
class SweepResult:
    """Summary of one sweep run."""

    assignees: int
    due_today: int
    overdue: int
    marked_overdue: int


def is_due_today(action: ActionItem, today: date) -> bool:
    return action.due_date is not None and action.due_date == today


def is_overdue(action: ActionItem, today: date) -> bool:
    return action.due_date is not None and action.due_date < today


def group_by_assignee(actions: list[ActionItem]) -> dict[str, list[ActionItem]]:
    groups: dict[str, list[ActionItem]] = {}
    for action in actions:
        assignee = (action.assignee or "").strip() or UNASSIGNED
        groups.setdefault(assignee, []).append(action)
    return groups


def run_reminder_sweep(
    store: ActionItemStore,
    bus: EventBus,
    today: date | None = None,
) -> SweepResult:
    """Advance overdue statuses and emit one ``reminder.due`` per assignee.

    ``today`` defaults to the current UTC date, the same clock reminder
    emails use for their due/overdue badges.
    """
    today = today or utc_now().date()
    logger.info("Starting reminder sweep for %s", today.isoformat())

    all_actions = store.list_actions()
    due_today: list[ActionItem] = []
    overdue: list[ActionItem] = []
    marked = 0

    for action in all_actions:
        if action.status is ActionStatus.DONE or action.due_date is None:
            continue

        if is_due_today(action, today):
            due_today.append(action)
        elif is_overdue(action, today):
            if action.status is not ActionStatus.OVERDUE:
                action = action.model_copy(update={"status": ActionStatus.OVERDUE})
                store.save_action(action)
                marked += 1
                logger.info("Action %s marked overdue (assignee=%s)", action.id, action.assignee)
            overdue.append(action)

    logger.info(
        "Reminder check completed: %d actions, %d due today, %d overdue",
        len(all_actions),
        len(due_today),
        len(overdue),
    )

    groups = group_by_assignee(due_today + overdue)
    for assignee, actions in groups.items():
        bus.emit(
            REMINDER_DUE,
            ReminderDue(
                assignee=assignee,
                actions=actions,
                due_count=sum(1 for a in actions if is_due_today(a, today)),
                overdue_count=sum(1 for a in actions if is_overdue(a, today)),
            ),
        )
        logger.info("Reminder emitted for %s (%d actions)", assignee, len(actions))

    return SweepResult(
        assignees=len(groups),
        due_today=len(due_today),
        overdue=len(overdue),
        marked_overdue=marked,
    )
