"""Issue model, decoding and grouping."""

from __future__ import annotations

from .decoder import DecodeResult, decode_issue, decode_issues, parse_updated
from .grouping import IssueGroups, group_issues, section_title
from .models import Issue, IssueAssignee, IssuePriority, IssueReporter, IssueType

__all__ = [
    "DecodeResult",
    "Issue",
    "IssueAssignee",
    "IssueGroups",
    "IssuePriority",
    "IssueReporter",
    "IssueType",
    "decode_issue",
    "decode_issues",
    "group_issues",
    "parse_updated",
    "section_title",
]
