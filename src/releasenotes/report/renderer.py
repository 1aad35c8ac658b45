"""Render grouped issues into the HTML release notes email body."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Sequence
from zoneinfo import ZoneInfo

from jinja2 import Environment, StrictUndefined

from releasenotes.issues.grouping import group_issues, section_title
from releasenotes.issues.models import Issue

# Jira Server answers on this address until its base URL is configured.
DEFAULT_BROWSE_URL = "http://localhost:8080"

REPORT_CSS = (
    "* {font-family: sans-serif;} "
    "ul {list-style: none;} "
    "li {margin: 1em 0;} "
    "h3 {margin: .2em 0;} "
    "img.icon {width: 16px; height: 16px; vertical-align: middle;}"
)

REPORT_TEMPLATE = """\
<!DOCTYPE html>
<html>
<head>
<style type="text/css">
{{ css }}
</style>
</head>
<body>
<h1>{{ heading }}</h1>
{% if note %}
<div><strong>Note: </strong>{{ note }}</div>
{% endif %}
{% for section in sections %}
<div>
<h2>{{ section.title }}</h2>
<ul>
{% for entry in section.entries %}
<li>
<h3><a href="{{ entry.url }}">{{ entry.issue.key }}</a> - {{ entry.issue.summary }}</h3>
<div><strong>Priority: </strong>{{ icon(entry.issue.priority, show_icons) }}{{ entry.issue.priority.name }}</div>
<div><strong>Fix Version: </strong>{{ entry.issue.fix_version }}</div>
<div><strong>Reported By: </strong>{{ icon(entry.issue.reporter, show_icons) }}{{ entry.issue.reporter.name }}</div>
{% if entry.issue.assignee %}
<div><strong>Assigned To: </strong>{{ icon(entry.issue.assignee, show_icons) }}{{ entry.issue.assignee.name }}</div>
{% endif %}
<div><strong>Updated: </strong>{{ entry.updated }}</div>
</li>
{% endfor %}
</ul>
</div>
{% endfor %}
</body>
</html>
"""

_ICON_MACRO = """\
{% macro icon(entity, enabled) %}{% if enabled %}<img class="icon" src="{{ entity.image_href }}" alt=""> {% endif %}{% endmacro %}
"""

_ENVIRONMENT = Environment(
    autoescape=True,
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
    undefined=StrictUndefined,
)
_TEMPLATE = _ENVIRONMENT.from_string(_ICON_MACRO + REPORT_TEMPLATE)


@dataclass(frozen=True)
class _Entry:
    issue: Issue
    url: str
    updated: str


@dataclass(frozen=True)
class _Section:
    title: str
    entries: tuple[_Entry, ...]


def browse_url(base_url: str, key: str) -> str:
    return f"{base_url.rstrip('/')}/browse/{key}"


def format_updated(value: datetime, timezone: tzinfo | None = None) -> str:
    """Format ``value`` as ``MMM dd, yyyy h:mm a`` (``Jan 01, 2023 10:00 AM``)."""

    if timezone is not None:
        value = value.astimezone(timezone)
    hour = value.hour % 12 or 12
    return f"{value:%b %d, %Y} {hour}:{value:%M} {'AM' if value.hour < 12 else 'PM'}"


def _resolve_timezone(timezone: str | tzinfo | None) -> tzinfo | None:
    if timezone is None or isinstance(timezone, tzinfo):
        return timezone
    return ZoneInfo(timezone)


def render_report(
    heading: str,
    issues: Sequence[Issue],
    *,
    base_url: str = DEFAULT_BROWSE_URL,
    note: str | None = None,
    show_icons: bool = True,
    timezone: str | tzinfo | None = None,
) -> str:
    """Return the release notes HTML document for ``issues``.

    Issues are grouped by type (see :func:`group_issues`). ``base_url`` is the
    Jira site used for ``/browse/{key}`` links and defaults to
    :data:`DEFAULT_BROWSE_URL`. ``timezone`` converts the
    ``Updated`` rows; by default each ticket's own offset is kept.
    """

    if not issues:
        raise ValueError("Cannot render release notes without issues")

    zone = _resolve_timezone(timezone)
    sections = [
        _Section(
            title=section_title(type_name, len(grouped)),
            entries=tuple(
                _Entry(
                    issue=issue,
                    url=browse_url(base_url, issue.key),
                    updated=format_updated(issue.updated, zone),
                )
                for issue in grouped
            ),
        )
        for type_name, grouped in group_issues(issues).items()
    ]
    return _TEMPLATE.render(
        css=REPORT_CSS,
        heading=heading,
        note=note,
        sections=sections,
        show_icons=show_icons,
    )


__all__ = ["DEFAULT_BROWSE_URL", "REPORT_CSS", "browse_url", "format_updated", "render_report"]
