"""Typed accessor over the state store for meetings, actions, and reminders."""

from __future__ import annotations

from src.models import ActionItem, Meeting, ReminderLog
from src.storage.state import StateStore

MEETINGS = "meetings"
ACTIONS = "actions"
REMINDERS = "reminders"
METADATA = "metadata"

MEETING_INDEX_KEY = "meetingIds"
ACTION_INDEX_KEY = "actionIds"


class ActionItemStore:
    """Owns the ``meetings``/``actions``/``reminders`` collections and the ID index.

    Store-layer errors propagate unchanged; no validation beyond parsing
    stored records back into models.
    """

    def __init__(self, state: StateStore) -> None:
        self.state = state

    # -- meetings ---------------------------------------------------------

    def get_meeting(self, meeting_id: str) -> Meeting | None:
        record = self.state.get(MEETINGS, meeting_id)
        return Meeting.model_validate(record) if record else None

    def save_meeting(self, meeting: Meeting) -> None:
        self.state.set(MEETINGS, meeting.id, meeting.to_record())

    def list_meetings(self) -> list[Meeting]:
        return [Meeting.model_validate(r) for r in self.state.list_group(MEETINGS) if r]

    def index_meeting(self, meeting_id: str) -> None:
        self.state.append_ids(METADATA, MEETING_INDEX_KEY, [meeting_id])

    # -- actions ----------------------------------------------------------

    def get_action(self, action_id: str) -> ActionItem | None:
        record = self.state.get(ACTIONS, action_id)
        return ActionItem.model_validate(record) if record else None

    def save_action(self, action: ActionItem) -> None:
        self.state.set(ACTIONS, action.id, action.to_record())

    def list_actions(self) -> list[ActionItem]:
        """All action items via a native group-scan of the ``actions`` collection."""
        return [ActionItem.model_validate(r) for r in self.state.list_group(ACTIONS) if r]

    def list_indexed_actions(self) -> list[ActionItem]:
        """All action items by dereferencing the ID index.

        IDs whose entity is missing (a partially-failed save) are skipped.
        """
        actions: list[ActionItem] = []
        for action_id in self.action_ids():
            action = self.get_action(action_id)
            if action is not None:
                actions.append(action)
        return actions

    def index_actions(self, action_ids: list[str]) -> None:
        if action_ids:
            self.state.append_ids(METADATA, ACTION_INDEX_KEY, action_ids)

    def action_ids(self) -> list[str]:
        return list(self.state.get(METADATA, ACTION_INDEX_KEY) or [])

    def meeting_ids(self) -> list[str]:
        return list(self.state.get(METADATA, MEETING_INDEX_KEY) or [])

    # -- reminder log -----------------------------------------------------

    def save_reminder(self, reminder: ReminderLog) -> None:
        self.state.set(REMINDERS, reminder.id, reminder.to_record())

    def list_reminders(self) -> list[ReminderLog]:
        return [ReminderLog.model_validate(r) for r in self.state.list_group(REMINDERS) if r]
