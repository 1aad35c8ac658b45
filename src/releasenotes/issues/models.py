"""Value objects describing one Jira issue as it appears in release notes."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class IssueType:
    name: str
    image_href: str


@dataclass(frozen=True, slots=True)
class IssueReporter:
    name: str
    image_href: str


@dataclass(frozen=True, slots=True)
class IssueAssignee:
    name: str
    image_href: str


@dataclass(frozen=True, slots=True)
class IssuePriority:
    name: str
    image_href: str


@dataclass(frozen=True, slots=True)
class Issue:
    """A validated ticket ready for rendering.

    ``fix_version`` is the name of the first fix version on the ticket and
    ``updated`` is always timezone-aware. ``assignee`` is ``None`` for
    unassigned tickets.
    """

    key: str
    summary: str
    fix_version: str
    updated: datetime
    type: IssueType
    reporter: IssueReporter
    priority: IssuePriority
    assignee: IssueAssignee | None = None

    @property
    def type_name(self) -> str:
        return self.type.name


__all__ = [
    "Issue",
    "IssueAssignee",
    "IssuePriority",
    "IssueReporter",
    "IssueType",
]
