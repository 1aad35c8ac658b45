"""Resolve release notes settings from CLI arguments, environment and YAML."""

from __future__ import annotations

import argparse
from dataclasses import dataclass
import os
from pathlib import Path
from typing import Any, Iterable, Mapping
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml

from releasenotes.errors import ConfigurationError
from releasenotes.jira.client import normalize_base_url
from releasenotes.mail.transport import DEFAULT_SENDMAIL

DEFAULT_SENDER = "Build Server <noreply@localhost>"
TRANSPORTS = ("sendmail", "smtp")

# Settings that may come from the environment, keyed by setting name.
ENV_VARS: Mapping[str, str] = {
    "host": "JIRA_HOST",
    "jira_user": "JIRA_USER",
    "jira_token": "JIRA_TOKEN",
    "sender": "RELEASE_NOTES_SENDER",
    "smtp_host": "SMTP_HOST",
    "smtp_port": "SMTP_PORT",
    "smtp_username": "SMTP_USERNAME",
    "smtp_password": "SMTP_PASSWORD",
}

_REQUIRED = ("host", "jql", "build_type", "version", "build")
_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class ReleaseNotesConfig:
    host: str
    jql: str
    build_type: str
    version: str
    build: str
    recipients: tuple[str, ...]
    product: str = ""
    sender: str = DEFAULT_SENDER
    browse_url: str | None = None
    fields: tuple[str, ...] | None = None
    note: str | None = None
    strict: bool = True
    dry_run: bool = False
    timezone: str | None = None
    api_version: int = 2
    jira_user: str | None = None
    jira_token: str | None = None
    transport: str = "sendmail"
    sendmail_path: str = DEFAULT_SENDMAIL
    smtp_host: str = "localhost"
    smtp_port: int = 25
    smtp_username: str | None = None
    smtp_password: str | None = None
    smtp_starttls: bool = False

    @property
    def subject(self) -> str:
        label = f"{self.build_type.upper()} Build {self.version} ({self.build})"
        product = self.product.strip()
        return f"{product} {label}" if product else label

    @property
    def heading(self) -> str:
        return f"{self.subject} Dev Complete Tickets"

    @property
    def link_base_url(self) -> str:
        """Site used for ticket links: ``browse_url`` or else the Jira host."""

        return normalize_base_url(self.browse_url or self.host)


def load_settings_file(path: Path | str) -> dict[str, Any]:
    """Load a YAML mapping of settings."""

    settings_path = Path(path)
    try:
        with settings_path.open("r", encoding="utf-8") as handle:
            payload = yaml.safe_load(handle) or {}
    except OSError as exc:
        raise ConfigurationError(
            f"Unable to read config file {settings_path}", context={"path": str(settings_path)}
        ) from exc
    except yaml.YAMLError as exc:
        raise ConfigurationError(
            f"Config file {settings_path} is not valid YAML", context={"error": str(exc)}
        ) from exc
    if not isinstance(payload, Mapping):
        raise ConfigurationError(f"Config file {settings_path} must contain a mapping")
    return dict(payload)


def parse_recipients(lines: Iterable[str]) -> tuple[str, ...]:
    """Return addresses from ``lines``, skipping blanks and ``#`` comments."""

    recipients: list[str] = []
    for line in lines:
        address = line.strip()
        if not address or address.startswith("#"):
            continue
        recipients.append(address)
    return tuple(recipients)


def read_recipients(path: Path | str) -> tuple[str, ...]:
    recipients_path = Path(path)
    try:
        text = recipients_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(
            f"Unable to read recipients file {recipients_path}",
            context={"path": str(recipients_path), "error": str(exc)},
        ) from exc
    recipients = parse_recipients(text.splitlines())
    if not recipients:
        raise ConfigurationError(
            f"Recipients file {recipients_path} lists no addresses",
            context={"path": str(recipients_path)},
        )
    return recipients


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUTHY


def _as_int(name: str, value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Setting {name!r} must be an integer", context={name: value}) from exc


def _as_timezone(value: Any) -> str | None:
    if not value:
        return None
    try:
        ZoneInfo(str(value))
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigurationError(f"Unknown timezone {value!r}", context={"timezone": value}) from exc
    return str(value)


def _as_base_url(name: str, value: Any) -> str | None:
    if value is None:
        return None
    try:
        return normalize_base_url(str(value))
    except ValueError as exc:
        raise ConfigurationError(f"Setting {name!r} must be a host or URL", context={name: value}) from exc


def _as_fields(value: Any) -> tuple[str, ...] | None:
    if value is None:
        return None
    if isinstance(value, str):
        items = value.split(",")
    else:
        items = [str(item) for item in value]
    fields = tuple(item.strip() for item in items if item.strip())
    return fields or None


def build_config(
    args: argparse.Namespace,
    env: Mapping[str, str] | None = None,
) -> ReleaseNotesConfig:
    """Merge CLI arguments, environment variables and the optional YAML file.

    CLI values win over the environment, which wins over the file.
    """

    source_env = os.environ if env is None else env
    config_path = getattr(args, "config", None)
    file_settings = load_settings_file(config_path) if config_path else {}

    def resolve(name: str, default: Any = None) -> Any:
        value = getattr(args, name, None)
        if value is not None:
            return value
        env_key = ENV_VARS.get(name)
        if env_key and source_env.get(env_key):
            return source_env[env_key]
        if file_settings.get(name) is not None:
            return file_settings[name]
        return default

    values = {name: resolve(name) for name in _REQUIRED}
    missing = [name for name in _REQUIRED if not values[name]]

    recipients: tuple[str, ...] = ()
    recipients_path = getattr(args, "recipients", None) or file_settings.get("recipients_file")
    if recipients_path:
        recipients = read_recipients(recipients_path)
    elif isinstance(file_settings.get("recipients"), list):
        recipients = parse_recipients(str(item) for item in file_settings["recipients"])
    if not recipients and not _as_bool(resolve("dry_run", False)):
        missing.append("recipients")

    if missing:
        raise ConfigurationError(
            "Missing required settings: " + ", ".join(missing), context={"missing": missing}
        )

    transport = str(resolve("transport", "sendmail"))
    if transport not in TRANSPORTS:
        raise ConfigurationError(
            f"Unknown mail transport {transport!r}", context={"choices": list(TRANSPORTS)}
        )

    lenient = _as_bool(resolve("lenient", False))
    return ReleaseNotesConfig(
        host=_as_base_url("host", values["host"]),
        jql=str(values["jql"]),
        build_type=str(values["build_type"]),
        version=str(values["version"]),
        build=str(values["build"]),
        recipients=recipients,
        product=str(resolve("product", "")),
        sender=str(resolve("sender", DEFAULT_SENDER)),
        browse_url=_as_base_url("browse_url", resolve("browse_url")),
        fields=_as_fields(resolve("fields")),
        note=resolve("note"),
        strict=not lenient,
        dry_run=_as_bool(resolve("dry_run", False)),
        timezone=_as_timezone(resolve("timezone")),
        api_version=_as_int("api_version", resolve("api_version", 2)),
        jira_user=resolve("jira_user"),
        jira_token=resolve("jira_token"),
        transport=transport,
        sendmail_path=str(resolve("sendmail_path", DEFAULT_SENDMAIL)),
        smtp_host=str(resolve("smtp_host", "localhost")),
        smtp_port=_as_int("smtp_port", resolve("smtp_port", 25)),
        smtp_username=resolve("smtp_username"),
        smtp_password=resolve("smtp_password"),
        smtp_starttls=_as_bool(resolve("smtp_starttls", False)),
    )


__all__ = [
    "DEFAULT_SENDER",
    "ENV_VARS",
    "ReleaseNotesConfig",
    "build_config",
    "load_settings_file",
    "parse_recipients",
    "read_recipients",
]
