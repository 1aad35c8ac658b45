"""Redaction helpers applied to structured log fields."""

from __future__ import annotations

from typing import Any, Mapping

REDACTED = "***REDACTED***"

_SENSITIVE_KEYWORDS = (
    "token",
    "secret",
    "password",
    "passwd",
    "authorization",
    "api_key",
    "apikey",
)


def is_sensitive(key: str | None) -> bool:
    if not key:
        return False
    lowered = str(key).lower()
    return any(keyword in lowered for keyword in _SENSITIVE_KEYWORDS)


def redact(key: str | None, value: Any, *, placeholder: str = REDACTED) -> Any:
    """Return ``value`` with anything stored under a sensitive key masked.

    Mappings are walked recursively so nested credentials (for example an
    SMTP block inside a config dump) are masked while the shape is kept.
    """

    if is_sensitive(key):
        return placeholder

    if isinstance(value, Mapping):
        return {
            nested_key: redact(nested_key, nested_value, placeholder=placeholder)
            for nested_key, nested_value in value.items()
        }

    if isinstance(value, (list, tuple)):
        items = [
            redact(key, item, placeholder=placeholder) if isinstance(item, Mapping) else item
            for item in value
        ]
        return tuple(items) if isinstance(value, tuple) else items

    return value


__all__ = ["REDACTED", "is_sensitive", "redact"]
