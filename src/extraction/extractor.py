"""Claude-powered extraction of action items from meeting transcripts."""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Callable
from datetime import date, timedelta
from typing import Any

from anthropic import Anthropic, APIError

from src.config import settings
from src.errors import ExtractionError
from src.extraction.dates import normalize_due_date
from src.extraction.models import ExtractedAction
from src.models import Priority

logger = logging.getLogger(__name__)

Generate = Callable[[str], str]

SYSTEM_PROMPT = (
    "You are a meeting intelligence assistant analysing a meeting transcript "
    "to extract actionable tasks. Respond with a JSON array only: no markdown, "
    "no explanations."
)

_CODE_FENCE = re.compile(r"```(?:json)?\s*\n?")


def build_prompt(transcript: str, today: date) -> str:
    """Build the extraction prompt with relative dates resolved against ``today``."""
    today_iso = today.isoformat()
    tomorrow_iso = (today + timedelta(days=1)).isoformat()
    return (
        "Extract ALL action items from this meeting. For each action item, identify:\n"
        '1. description: a clear, specific task (e.g. "Send Q4 budget to finance team")\n'
        '2. assignee: the person responsible ("John will...", "Sarah to..."), '
        'or "Unassigned" if unclear\n'
        "3. due_date: deadline in YYYY-MM-DD format, or null if not mentioned\n"
        '4. priority: "high" (urgent/critical), "medium" (important) or "low" (nice-to-have)\n\n'
        f"Convert relative dates using today's date ({today_iso}):\n"
        f'- "today" -> {today_iso}\n'
        f'- "tomorrow" -> {tomorrow_iso}\n'
        f'- "Friday" -> the next upcoming Friday after {today_iso}\n'
        f'- "next week" -> 7 days after {today_iso}\n'
        '- "end of month" -> the last day of the current month\n\n'
        "Return ONLY a JSON array with this exact structure:\n"
        '[{"description": "string", "assignee": "string", '
        '"due_date": "YYYY-MM-DD" or null, "priority": "low" | "medium" | "high"}]\n'
        "Return [] if there are no action items.\n\n"
        f"Meeting Transcript:\n{transcript}"
    )


def claude_generate(prompt: str) -> str:
    """Send ``prompt`` to Claude and return the concatenated text response."""
    client = Anthropic(api_key=settings.anthropic_api_key)
    response = client.messages.create(
        model=settings.llm_model,
        max_tokens=settings.llm_max_tokens,
        temperature=settings.llm_temperature,
        system=SYSTEM_PROMPT,
        messages=[{"role": "user", "content": prompt}],
    )
    return "".join(block.text for block in response.content if block.type == "text")


def _strip_code_fences(text: str) -> str:
    return _CODE_FENCE.sub("", text).replace("```", "").strip()


def _parse_priority(raw: Any) -> Priority:
    try:
        return Priority(str(raw).strip().lower())
    except ValueError:
        return Priority.MEDIUM


def parse_actions(text: str, today: date | None = None) -> list[ExtractedAction]:
    """Parse the model's JSON array into ExtractedAction instances.

    Raises:
        ExtractionError: The text is not a JSON array of objects with a description.
    """
    if not text or not text.strip():
        raise ExtractionError("No content returned by the extraction model")

    try:
        data = json.loads(_strip_code_fences(text))
    except json.JSONDecodeError as exc:
        raise ExtractionError(f"Failed to parse extraction response as JSON: {exc}") from exc

    if not isinstance(data, list):
        raise ExtractionError(
            "Extraction response is not an array",
            metadata={"type": type(data).__name__},
        )

    actions: list[ExtractedAction] = []
    for index, raw in enumerate(data):
        if not isinstance(raw, dict):
            raise ExtractionError(f"Extracted item {index} is not an object")
        description = raw.get("description")
        if not isinstance(description, str) or not description.strip():
            raise ExtractionError(f"Extracted item {index} has no description")

        assignee = raw.get("assignee")
        due_raw = raw.get("due_date", raw.get("dueDate"))
        actions.append(
            ExtractedAction(
                description=description.strip(),
                assignee=str(assignee).strip() if assignee else "Unassigned",
                due_date=normalize_due_date(due_raw, today),
                priority=_parse_priority(raw.get("priority")),
            )
        )
    return actions


def extract_actions(
    transcript: str,
    generate: Generate | None = None,
    today: date | None = None,
) -> list[ExtractedAction]:
    """Extract action items from a transcript.

    Args:
        transcript: The raw meeting transcript text.
        generate: ``prompt -> text`` collaborator; defaults to Claude.
        today: Reference date for relative due dates; defaults to today.

    Returns:
        The extracted candidates. An empty list is a valid outcome.

    Raises:
        ExtractionError: The model call failed or returned unusable output.
    """
    today = today or date.today()
    generate = generate or claude_generate

    try:
        text = generate(build_prompt(transcript, today))
    except APIError as exc:
        raise ExtractionError(f"AI extraction failed: {exc.message}") from exc

    actions = parse_actions(text, today)
    logger.info("Extracted %d action items", len(actions))
    return actions
