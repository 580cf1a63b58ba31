"""Offline action-item extraction by phrase matching.

Recognises a handful of phrasings ("Alice will X by Friday", "Bob needs to X",
"Carol, please X") so local runs work without an Anthropic key. Much less
accurate than model extraction.
"""

from __future__ import annotations

import logging
import re
from datetime import date

from src.extraction.dates import normalize_due_date
from src.extraction.models import ExtractedAction
from src.models import Priority

logger = logging.getLogger(__name__)

_DEADLINE = r"(monday|tuesday|wednesday|thursday|friday|today|tomorrow)"

PATTERNS = [
    re.compile(rf"(\w+):\s*(.+?)\s+by\s+{_DEADLINE}", re.IGNORECASE),
    re.compile(rf"(\w+)\s+will\s+(.+?)\s+by\s+{_DEADLINE}", re.IGNORECASE),
    re.compile(r"(\w+)\s+needs? to\s+(.+)", re.IGNORECASE),
    re.compile(r"(\w+),?\s+(?:can you|please)\s+(.+)", re.IGNORECASE),
]

HIGH_PRIORITY_WORDS = ("urgent", "critical", "asap", "today")
LOW_PRIORITY_WORDS = ("when you can", "eventually")

FALLBACK_DESCRIPTION = "Follow up on meeting discussion"


def _priority_for(line: str) -> Priority:
    lowered = line.lower()
    if any(word in lowered for word in HIGH_PRIORITY_WORDS):
        return Priority.HIGH
    if any(word in lowered for word in LOW_PRIORITY_WORDS):
        return Priority.LOW
    return Priority.MEDIUM


def extract_actions_offline(transcript: str, today: date | None = None) -> list[ExtractedAction]:
    """Pattern-match action items out of a transcript.

    Returns a single generic follow-up item when nothing matches, so an
    upload always produces something to track.
    """
    today = today or date.today()
    actions: list[ExtractedAction] = []
    seen: set[tuple[str, str]] = set()

    for line in (ln.strip() for ln in transcript.splitlines()):
        if not line:
            continue
        for pattern in PATTERNS:
            for match in pattern.finditer(line):
                assignee = match.group(1).strip()
                description = match.group(2).strip()
                deadline = match.group(3) if pattern.groups >= 3 else None

                key = (assignee.lower(), description.lower())
                if key in seen:
                    continue
                seen.add(key)
                actions.append(
                    ExtractedAction(
                        description=description,
                        assignee=assignee,
                        due_date=normalize_due_date(deadline, today),
                        priority=_priority_for(line),
                    )
                )

    if not actions:
        actions.append(ExtractedAction(description=FALLBACK_DESCRIPTION))

    logger.info("Pattern extraction found %d action items", len(actions))
    return actions
