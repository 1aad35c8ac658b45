"""Partition decoded issues into release note sections."""

from __future__ import annotations

from typing import Iterable

from .models import Issue

IssueGroups = dict[str, tuple[Issue, ...]]


def _group_order(type_name: str) -> tuple[str, str]:
    return (type_name.casefold(), type_name)


def group_issues(issues: Iterable[Issue]) -> IssueGroups:
    """Group ``issues`` by issue type name.

    Groups are ordered alphabetically by type name, ignoring case, and each
    group keeps the order in which its issues were received.
    """

    buckets: dict[str, list[Issue]] = {}
    for issue in issues:
        buckets.setdefault(issue.type_name, []).append(issue)

    return {name: tuple(buckets[name]) for name in sorted(buckets, key=_group_order)}


def section_title(type_name: str, count: int) -> str:
    """Return the section header, pluralised for groups of more than one issue."""

    return f"{type_name}s" if count > 1 else type_name


__all__ = ["IssueGroups", "group_issues", "section_title"]
