"""Mail transports that hand a rendered message to the local MTA or an SMTP relay."""

from __future__ import annotations

from dataclasses import dataclass
import smtplib
import subprocess
from typing import Protocol

from releasenotes.errors import MailDeliveryError
from releasenotes.logging_config import get_logger

from .message import HTMLMessage

LOGGER = get_logger(__name__)

DEFAULT_SENDMAIL = "/usr/sbin/sendmail"


class MailTransport(Protocol):
    def send(self, message: HTMLMessage) -> None:  # pragma: no cover - protocol
        ...


@dataclass
class SendmailTransport:
    """Pipe messages to ``sendmail -t -oi``."""

    path: str = DEFAULT_SENDMAIL
    timeout: float = 60.0

    def send(self, message: HTMLMessage) -> None:
        payload = message.to_email().as_bytes()
        try:
            result = subprocess.run(
                [self.path, "-t", "-oi"],
                input=payload,
                capture_output=True,
                check=False,
                timeout=self.timeout,
            )
        except (OSError, subprocess.TimeoutExpired) as exc:
            raise MailDeliveryError(
                "Unable to run sendmail", context={"path": self.path, "error": str(exc)}
            ) from exc

        if result.returncode != 0:
            raise MailDeliveryError(
                f"sendmail exited with status {result.returncode}",
                context={
                    "path": self.path,
                    "returncode": result.returncode,
                    "stderr": result.stderr.decode("utf-8", errors="replace").strip(),
                },
            )
        LOGGER.info(
            "Release notes handed to sendmail",
            extra={"recipients": len(message.recipients), "subject": message.subject},
        )


@dataclass
class SMTPTransport:
    """Deliver messages through an SMTP relay."""

    host: str
    port: int = 25
    username: str | None = None
    password: str | None = None
    starttls: bool = False
    timeout: float = 60.0

    def send(self, message: HTMLMessage) -> None:
        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
                if self.starttls:
                    server.starttls()
                if self.username and self.password:
                    server.login(self.username, self.password)
                server.send_message(
                    message.to_email(),
                    from_addr=message.sender,
                    to_addrs=list(message.recipients),
                )
        except (OSError, smtplib.SMTPException) as exc:
            raise MailDeliveryError(
                "SMTP delivery failed",
                context={"host": self.host, "port": self.port, "error": str(exc)},
            ) from exc
        LOGGER.info(
            "Release notes sent over SMTP",
            extra={"recipients": len(message.recipients), "host": self.host},
        )


__all__ = ["DEFAULT_SENDMAIL", "MailTransport", "SMTPTransport", "SendmailTransport"]
