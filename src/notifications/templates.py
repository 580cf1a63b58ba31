"""HTML bodies and subject lines for confirmation and reminder emails."""

from __future__ import annotations

from datetime import date
from html import escape

from src.models import ActionItem

PRIORITY_COLORS = {
    "high": "#ef4444",
    "medium": "#f59e0b",
    "low": "#10b981",
}
DEFAULT_COLOR = "#6b7280"
OVERDUE_COLOR = "#ef4444"
DUE_TODAY_COLOR = "#f59e0b"


def _plural(count: int) -> str:
    return "" if count == 1 else "s"


def format_due_date(due: date | None) -> str:
    if due is None:
        return "Not specified"
    return due.strftime("%a, %b %d, %Y")


def _wrap(header_color: str, heading: str, body: str) -> str:
    return f"""<!DOCTYPE html>
<html>
  <head><meta charset="utf-8"></head>
  <body style="font-family: Arial, sans-serif; color: #374151; background-color: #f3f4f6; padding: 20px;">
    <div style="max-width: 600px; margin: 0 auto; background-color: #ffffff; border-radius: 8px;">
      <div style="background-color: {header_color}; color: #ffffff; padding: 24px; border-radius: 8px 8px 0 0;">
        <h1 style="margin: 0; font-size: 24px;">{heading}</h1>
      </div>
      <div style="padding: 24px;">
{body}
      </div>
      <div style="padding: 16px 24px; background-color: #f9fafb; border-top: 1px solid #e5e7eb;">
        <p style="margin: 0; font-size: 12px; color: #6b7280; text-align: center;">Powered by TeamSync</p>
      </div>
    </div>
  </body>
</html>
"""


def confirmation_subject(title: str, actions_count: int) -> str:
    return f'{actions_count} Action Item{_plural(actions_count)} Extracted from "{title}"'


def render_confirmation_email(title: str, actions: list[ActionItem]) -> str:
    """Summary of the action items extracted from a meeting, for the uploader."""
    rows = []
    for action in actions:
        color = PRIORITY_COLORS.get(action.priority.value, DEFAULT_COLOR)
        rows.append(
            f'        <div style="margin-bottom: 16px; padding: 12px; border-left: 4px solid {color};">\n'
            f'          <p style="margin: 0 0 8px 0; font-weight: 600;">{escape(action.description)}</p>\n'
            f'          <p style="margin: 0; font-size: 14px;"><strong>Assignee:</strong> '
            f"{escape(action.assignee)} &bull; <strong>Due:</strong> {format_due_date(action.due_date)} "
            f'&bull; <span style="color: {color}; text-transform: uppercase;">{action.priority.value}</span></p>\n'
            f"        </div>"
        )

    count = len(actions)
    body = (
        f'        <p>Your meeting "<strong>{escape(title)}</strong>" has been processed.</p>\n'
        f"        <p>We extracted <strong>{count}</strong> action item{_plural(count)}:</p>\n"
        + "\n".join(rows)
        + "\n        <p>You'll receive reminder emails for action items as they come due.</p>"
    )
    return _wrap("#3b82f6", "Meeting Processed Successfully", body)


def reminder_subject(actions_count: int, overdue_count: int) -> str:
    state = "Overdue" if overdue_count > 0 else "Due Today"
    return f"{actions_count} Action Item{_plural(actions_count)} {state} - TeamSync"


def reminder_headline(due_count: int, overdue_count: int) -> str:
    if overdue_count > 0:
        text = f"You have {overdue_count} overdue action item{_plural(overdue_count)}"
        if due_count > 0:
            text += f" and {due_count} due today"
        return text
    return f"You have {due_count} action item{_plural(due_count)} due today"


def render_reminder_email(
    assignee: str,
    actions: list[ActionItem],
    due_count: int,
    overdue_count: int,
    today: date | None = None,
) -> str:
    """Batched reminder for one assignee's due-today and overdue items."""
    today = today or date.today()
    rows = []
    for action in actions:
        overdue = action.due_date is not None and action.due_date < today
        badge_color = OVERDUE_COLOR if overdue else DUE_TODAY_COLOR
        badge = "OVERDUE" if overdue else "DUE TODAY"
        priority_color = PRIORITY_COLORS.get(action.priority.value, DEFAULT_COLOR)
        rows.append(
            f'        <div style="margin-bottom: 16px; padding: 12px; border-left: 4px solid {badge_color};">\n'
            f'          <p style="margin: 0 0 8px 0; font-weight: 600;">{escape(action.description)} '
            f'<span style="background-color: {badge_color}; color: #ffffff; padding: 2px 8px;">{badge}</span></p>\n'
            f'          <p style="margin: 0; font-size: 14px;"><strong>Due:</strong> {format_due_date(action.due_date)} '
            f'&bull; <span style="color: {priority_color}; text-transform: uppercase;">{action.priority.value} priority</span></p>\n'
            f"        </div>"
        )

    body = (
        f'        <p style="font-size: 18px; font-weight: 600;">Hi {escape(assignee)},</p>\n'
        f"        <p>{reminder_headline(due_count, overdue_count)}:</p>\n"
        + "\n".join(rows)
        + "\n        <p>Mark items as complete in TeamSync to stop receiving reminders.</p>"
    )
    header_color = "#dc2626" if overdue_count > 0 else DUE_TODAY_COLOR
    return _wrap(header_color, "Action Items Reminder", body)
