"""In-process event bus: topic -> subscriber fan-out.

Each subscriber runs as its own unit of work. A subscriber that raises is
logged and recorded in ``failures``, which keeps the most recent
``MAX_FAILURES`` entries; the remaining subscribers still run and the emitter
is not interrupted.
"""

from __future__ import annotations

import logging
from collections import defaultdict, deque
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel

logger = logging.getLogger(__name__)

Handler = Callable[[Any], None]

# Oldest failures are dropped once this many are held.
MAX_FAILURES = 100


@dataclass
class HandlerFailure:
    """A subscriber that raised while handling an event."""

    topic: str
    handler: str
    error: BaseException


class EventBus:
    """Synchronous publish/subscribe over named topics."""

    def __init__(self) -> None:
        self._subscribers: dict[str, list[Handler]] = defaultdict(list)
        self.failures: deque[HandlerFailure] = deque(maxlen=MAX_FAILURES)

    def subscribe(self, topic: str, handler: Handler) -> None:
        self._subscribers[topic].append(handler)

    def subscribers(self, topic: str) -> list[Handler]:
        return list(self._subscribers.get(topic, []))

    def emit(self, topic: str, payload: BaseModel) -> None:
        handlers = self.subscribers(topic)
        logger.info("Emitting %s to %d subscriber(s)", topic, len(handlers))
        for handler in handlers:
            name = getattr(handler, "__qualname__", repr(handler))
            try:
                handler(payload)
            except Exception as exc:
                logger.exception("Subscriber %s failed handling %s", name, topic)
                self.failures.append(HandlerFailure(topic=topic, handler=name, error=exc))
