"""Outbound mail for rendered release notes."""

from __future__ import annotations

from .message import HTMLMessage
from .transport import DEFAULT_SENDMAIL, MailTransport, SMTPTransport, SendmailTransport

__all__ = [
    "DEFAULT_SENDMAIL",
    "HTMLMessage",
    "MailTransport",
    "SMTPTransport",
    "SendmailTransport",
]
