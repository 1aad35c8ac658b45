"""HTML email message value object."""

from __future__ import annotations

from dataclasses import dataclass
from email.message import EmailMessage
from email.utils import formatdate


@dataclass(frozen=True)
class HTMLMessage:
    sender: str
    recipients: tuple[str, ...]
    subject: str
    body: str

    def __post_init__(self) -> None:
        if not self.recipients:
            raise ValueError("An HTML message needs at least one recipient")

    def to_email(self) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = ", ".join(self.recipients)
        message["Subject"] = self.subject
        message["Date"] = formatdate(localtime=True)
        message.set_content(self.body, subtype="html")
        return message


__all__ = ["HTMLMessage"]
