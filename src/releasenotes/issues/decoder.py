"""Decode Jira search responses into validated :class:`Issue` values."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
import json
import re
from typing import Any, Mapping, Sequence

from releasenotes.errors import MalformedEnvelopeError, RecordDecodeError
from releasenotes.logging_config import get_logger

from .models import Issue, IssueAssignee, IssuePriority, IssueReporter, IssueType

LOGGER = get_logger(__name__)

# Jira renders timestamps as ``2023-01-01T10:00:00.000+0000``.
UPDATED_FORMAT = "%Y-%m-%dT%H:%M:%S.%f%z"
_UPDATED_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}[+-]\d{4}", re.ASCII)

_MISSING = object()

_KIND_LABELS: dict[type, str] = {
    str: "a string",
    list: "a list",
    Mapping: "an object",
}


def parse_updated(value: str) -> datetime:
    """Parse a Jira ``updated`` timestamp into an aware ``datetime``."""

    if not _UPDATED_PATTERN.fullmatch(value):
        raise ValueError(f"Timestamp {value!r} does not match yyyy-MM-dd'T'HH:mm:ss.SSSZ")
    return datetime.strptime(value, UPDATED_FORMAT)


def _lookup(data: Any, path: str) -> Any:
    current = data
    for segment in path.split("."):
        if isinstance(current, Mapping):
            current = current.get(segment, _MISSING)
        elif isinstance(current, list) and segment.isdigit():
            position = int(segment)
            current = current[position] if position < len(current) else _MISSING
        else:
            return _MISSING
        if current is _MISSING:
            return _MISSING
    return current


class _RecordReader:
    """Typed, path-addressed access to one raw issue record.

    Every failed lookup raises :class:`RecordDecodeError` naming the dotted
    path, so nested fields are validated without hand-written chains of
    ``isinstance`` checks.
    """

    def __init__(self, record: Any, *, index: int | None) -> None:
        self.record = record
        self.index = index
        self.key: str | None = None

    def fail(self, path: str, reason: str) -> RecordDecodeError:
        return RecordDecodeError(path, record_index=self.index, reason=reason, issue_key=self.key)

    def require(self, path: str, kind: type = str) -> Any:
        value = _lookup(self.record, path)
        if value is _MISSING or value is None:
            raise self.fail(path, "missing")
        if not isinstance(value, kind):
            raise self.fail(path, f"not {_KIND_LABELS.get(kind, kind.__name__)}")
        return value

    def present(self, path: str) -> bool:
        return _lookup(self.record, path) not in (_MISSING, None)

    def named(self, base: str, name_key: str, href_key: str, factory):
        return factory(
            name=self.require(f"{base}.{name_key}"),
            image_href=self.require(f"{base}.{href_key}"),
        )


def decode_issue(record: Any, *, index: int | None = None) -> Issue:
    """Validate one search result item and build an :class:`Issue`.

    Raises :class:`RecordDecodeError` naming the first missing or mistyped
    field path. A missing or ``null`` assignee yields ``assignee=None``; an
    assignee object without a display name or 16x16 avatar is an error.
    """

    reader = _RecordReader(record, index=index)
    if not isinstance(record, Mapping):
        raise reader.fail("<record>", "not an object")

    key = reader.require("key")
    if not key.strip():
        raise reader.fail("key", "blank")
    reader.key = key
    reader.require("fields", Mapping)

    summary = reader.require("fields.summary")

    updated_text = reader.require("fields.updated")
    try:
        updated = parse_updated(updated_text)
    except ValueError as exc:
        raise reader.fail("fields.updated", "not a yyyy-MM-dd'T'HH:mm:ss.SSSZ timestamp") from exc

    fix_versions: Sequence[Any] = reader.require("fields.fixVersions", list)
    if not fix_versions:
        raise reader.fail("fields.fixVersions", "empty")
    for position in range(len(fix_versions)):
        reader.require(f"fields.fixVersions.{position}", Mapping)
        reader.require(f"fields.fixVersions.{position}.name")
    fix_version = fix_versions[0]["name"]

    issue_type = reader.named("fields.issuetype", "name", "iconUrl", IssueType)
    reporter = reader.named("fields.reporter", "displayName", "avatarUrls.16x16", IssueReporter)
    priority = reader.named("fields.priority", "name", "iconUrl", IssuePriority)

    assignee = None
    if reader.present("fields.assignee"):
        reader.require("fields.assignee", Mapping)
        assignee = reader.named(
            "fields.assignee", "displayName", "avatarUrls.16x16", IssueAssignee
        )

    return Issue(
        key=key,
        summary=summary,
        fix_version=fix_version,
        updated=updated,
        type=issue_type,
        reporter=reporter,
        priority=priority,
        assignee=assignee,
    )


@dataclass(frozen=True)
class DecodeResult:
    """Outcome of decoding a search envelope.

    ``skipped`` is only ever populated in lenient mode.
    """

    issues: tuple[Issue, ...]
    skipped: tuple[RecordDecodeError, ...] = field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        return not self.issues

    @property
    def total(self) -> int:
        return len(self.issues) + len(self.skipped)


def _load_envelope(payload: bytes | str | Mapping[str, Any]) -> Mapping[str, Any]:
    if isinstance(payload, (bytes, bytearray, str)):
        try:
            payload = json.loads(payload)
        except (UnicodeDecodeError, json.JSONDecodeError, RecursionError) as exc:
            raise MalformedEnvelopeError(
                "Search response is not valid JSON", context={"error": str(exc)}
            ) from exc
    if not isinstance(payload, Mapping):
        raise MalformedEnvelopeError(
            "Search response must be a JSON object",
            context={"type": type(payload).__name__},
        )
    return payload


def decode_issues(
    payload: bytes | str | Mapping[str, Any],
    *,
    strict: bool = True,
) -> DecodeResult:
    """Decode the ``issues`` array of a Jira search response.

    In strict mode the first failing record aborts decoding. Otherwise the
    failing records are skipped, logged and returned in
    :attr:`DecodeResult.skipped`.
    """

    envelope = _load_envelope(payload)
    records = envelope.get("issues")
    if not isinstance(records, list):
        raise MalformedEnvelopeError(
            "Search response has no 'issues' array",
            context={"keys": sorted(str(key) for key in envelope.keys())},
        )

    issues: list[Issue] = []
    skipped: list[RecordDecodeError] = []
    for index, record in enumerate(records):
        try:
            issues.append(decode_issue(record, index=index))
        except RecordDecodeError as exc:
            if strict:
                raise
            LOGGER.warning("Skipping undecodable issue record", extra=exc.context)
            skipped.append(exc)

    LOGGER.debug(
        "Decoded search response",
        extra={"decoded": len(issues), "skipped": len(skipped), "received": len(records)},
    )
    return DecodeResult(issues=tuple(issues), skipped=tuple(skipped))


__all__ = [
    "DecodeResult",
    "UPDATED_FORMAT",
    "decode_issue",
    "decode_issues",
    "parse_updated",
]
