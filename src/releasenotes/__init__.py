"""Jira release notes mailer.

The two entry points used by the CLI are :func:`decode_issues`, which turns a
Jira search response into validated :class:`Issue` values, and
:func:`render_report`, which renders them into the HTML email body.
"""

from __future__ import annotations

from .errors import (
    ConfigurationError,
    JiraQueryError,
    MailDeliveryError,
    MalformedEnvelopeError,
    RecordDecodeError,
    ReleaseNotesError,
)
from .issues import DecodeResult, Issue, decode_issue, decode_issues, group_issues
from .report import render_report

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "DecodeResult",
    "Issue",
    "JiraQueryError",
    "MailDeliveryError",
    "MalformedEnvelopeError",
    "RecordDecodeError",
    "ReleaseNotesError",
    "decode_issue",
    "decode_issues",
    "group_issues",
    "render_report",
]
