"""Application specific exception hierarchy."""

from __future__ import annotations

from typing import Any


class ReleaseNotesError(RuntimeError):
    """Base exception that carries structured context."""

    def __init__(self, message: str, *, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.context = context or {}


class ConfigurationError(ReleaseNotesError):
    """Raised when required settings are missing or unreadable."""


class JiraQueryError(ReleaseNotesError):
    """Raised when the Jira issue search fails."""


class MalformedEnvelopeError(ReleaseNotesError):
    """Raised when a search response is not JSON or lacks an ``issues`` list."""


class RecordDecodeError(ReleaseNotesError):
    """Raised when a single issue record is missing or mistypes a required field."""

    def __init__(
        self,
        field_path: str,
        *,
        record_index: int | None = None,
        reason: str = "missing or invalid",
        issue_key: str | None = None,
    ) -> None:
        location = f"record {record_index}" if record_index is not None else "record"
        if issue_key:
            location = f"{location} ({issue_key})"
        super().__init__(
            f"{location}: {field_path} is {reason}",
            context={
                "field_path": field_path,
                "record_index": record_index,
                "issue_key": issue_key,
            },
        )
        self.field_path = field_path
        self.record_index = record_index
        self.issue_key = issue_key
        self.reason = reason

    def at_index(self, record_index: int) -> "RecordDecodeError":
        """Return a copy of this error bound to ``record_index``."""

        return RecordDecodeError(
            self.field_path,
            record_index=record_index,
            reason=self.reason,
            issue_key=self.issue_key,
        )


class MailDeliveryError(ReleaseNotesError):
    """Raised when a mail transport fails to hand off a message."""


__all__ = [
    "ReleaseNotesError",
    "ConfigurationError",
    "JiraQueryError",
    "MalformedEnvelopeError",
    "RecordDecodeError",
    "MailDeliveryError",
]
