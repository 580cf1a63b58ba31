"""Normalise free-form due dates from the model into calendar dates."""

from __future__ import annotations

import calendar
import re
from datetime import date, timedelta

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]


def next_weekday(day_name: str, today: date) -> date:
    """Next future occurrence of ``day_name``; the same weekday means a week out."""
    target = WEEKDAYS.index(day_name.lower())
    days_until = target - today.weekday()
    if days_until <= 0:
        days_until += 7
    return today + timedelta(days=days_until)


def end_of_month(today: date) -> date:
    last_day = calendar.monthrange(today.year, today.month)[1]
    return today.replace(day=last_day)


def normalize_due_date(raw: str | None, today: date | None = None) -> date | None:
    """Turn a model-supplied due date into a ``date``, or None if unusable.

    Accepts ``YYYY-MM-DD`` plus a handful of relative phrases the model tends
    to leave untranslated. Anything else degrades to None rather than raising.
    """
    if raw is None:
        return None
    text = str(raw).strip().lower()
    if not text or text in {"null", "none"}:
        return None

    today = today or date.today()

    if _ISO_DATE.match(text):
        try:
            return date.fromisoformat(text)
        except ValueError:
            return None
    if text == "today":
        return today
    if text == "tomorrow":
        return today + timedelta(days=1)
    if text in WEEKDAYS:
        return next_weekday(text, today)
    if "next week" in text:
        return today + timedelta(days=7)
    if text in {"end of month", "end of the month"}:
        return end_of_month(today)
    return None
