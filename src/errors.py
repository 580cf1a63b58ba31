"""Domain error taxonomy shared by the pipeline, scheduler, and API layer."""

from __future__ import annotations

from typing import Any


class TrackerError(Exception):
    """Base class for errors raised by the action tracker.

    ``status_code`` is the HTTP status the API layer maps the error to.
    """

    status_code: int = 500
    code: str = "internal_error"

    def __init__(self, message: str, metadata: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.metadata = metadata or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "metadata": self.metadata,
            }
        }


class ValidationError(TrackerError):
    """Malformed input to an API-shaped operation. Not retried."""

    status_code = 400
    code = "validation_error"


class NotFoundError(TrackerError):
    """A referenced meeting or action item does not exist."""

    status_code = 404
    code = "not_found"


class ExtractionError(TrackerError):
    """The AI collaborator returned unusable output."""

    code = "extraction_failed"


class DeliveryError(TrackerError):
    """The email transport rejected or failed to deliver a message.

    Raised inside the email sender and converted into a failed
    ``DeliveryResult``; it never escapes a notification call.
    """

    code = "delivery_failed"
