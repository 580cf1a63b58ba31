"""Unique ID generation for meetings, action items, and reminder log entries."""

from __future__ import annotations

import uuid
from typing import Protocol


class IdGenerator(Protocol):
    """Capability that returns a new globally-unique ID for an entity kind."""

    def new_id(self, kind: str) -> str: ...


class UuidIdGenerator:
    """Prefixed UUID4 IDs, e.g. ``action_3f2b0c...``.

    122 random bits per ID, so rapid successive calls cannot collide the way
    a millisecond timestamp would.
    """

    def new_id(self, kind: str) -> str:
        return f"{kind}_{uuid.uuid4().hex}"
