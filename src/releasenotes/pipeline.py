"""Search, decode, render and send one set of release notes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Protocol, Sequence

from releasenotes.config import ReleaseNotesConfig
from releasenotes.issues.decoder import DecodeResult, decode_issues
from releasenotes.jira.client import REPORT_FIELDS, JiraSearchClient
from releasenotes.logging_config import get_logger
from releasenotes.mail.message import HTMLMessage
from releasenotes.mail.transport import MailTransport, SMTPTransport, SendmailTransport
from releasenotes.report.renderer import render_report

LOGGER = get_logger(__name__)


class SearchClient(Protocol):
    def search(self, jql: str, fields: Sequence[str] | None = None) -> bytes:  # pragma: no cover
        ...


class RunOutcome(str, Enum):
    SENT = "sent"
    RENDERED = "rendered"
    NOTHING_TO_SEND = "nothing_to_send"


@dataclass(frozen=True)
class RunResult:
    outcome: RunOutcome
    decoded: DecodeResult
    message: HTMLMessage | None = None

    @property
    def issue_count(self) -> int:
        return len(self.decoded.issues)


def build_search_client(config: ReleaseNotesConfig) -> JiraSearchClient:
    return JiraSearchClient(
        config.host,
        api_version=config.api_version,
        username=config.jira_user,
        token=config.jira_token,
    )


def build_transport(config: ReleaseNotesConfig) -> MailTransport:
    if config.transport == "smtp":
        return SMTPTransport(
            host=config.smtp_host,
            port=config.smtp_port,
            username=config.smtp_username,
            password=config.smtp_password,
            starttls=config.smtp_starttls,
        )
    return SendmailTransport(path=config.sendmail_path)


def send_release_notes(
    config: ReleaseNotesConfig,
    *,
    client: SearchClient,
    transport: MailTransport | None,
    render: Callable[..., str] = render_report,
) -> RunResult:
    """Run one release notes cycle with the given collaborators.

    An empty search result stops before rendering and nothing is sent. In
    dry-run mode the message is built but ``transport`` is not used.
    """

    fields = config.fields or REPORT_FIELDS
    body = client.search(config.jql, fields=list(fields))
    decoded = decode_issues(body, strict=config.strict)

    if decoded.is_empty:
        LOGGER.info("Nothing to send", extra={"skipped": len(decoded.skipped)})
        return RunResult(outcome=RunOutcome.NOTHING_TO_SEND, decoded=decoded)

    html = render(
        config.heading,
        decoded.issues,
        base_url=config.link_base_url,
        note=config.note,
        timezone=config.timezone,
    )
    message = HTMLMessage(
        sender=config.sender,
        recipients=config.recipients or ("undisclosed-recipients:;",),
        subject=config.subject,
        body=html,
    )

    if config.dry_run or transport is None:
        LOGGER.info("Dry run, release notes not sent", extra={"issues": len(decoded.issues)})
        return RunResult(outcome=RunOutcome.RENDERED, decoded=decoded, message=message)

    transport.send(message)
    LOGGER.info(
        "Release notes sent",
        extra={
            "issues": len(decoded.issues),
            "skipped": len(decoded.skipped),
            "recipients": len(message.recipients),
        },
    )
    return RunResult(outcome=RunOutcome.SENT, decoded=decoded, message=message)


__all__ = [
    "RunOutcome",
    "RunResult",
    "SearchClient",
    "build_search_client",
    "build_transport",
    "send_release_notes",
]
