from __future__ import annotations

from releasenotes.issues.decoder import decode_issue, decode_issues
from releasenotes.issues.grouping import group_issues, section_title


def _issue(make_record, key: str, type_name: str):
    return decode_issue(make_record(key=key, issuetype={"name": type_name, "iconUrl": "icon"}))


def test_groups_are_alphabetical_and_keep_received_order(make_record) -> None:
    issues = [
        _issue(make_record, "APP-5", "Task"),
        _issue(make_record, "APP-3", "Bug"),
        _issue(make_record, "APP-9", "story"),
        _issue(make_record, "APP-1", "Bug"),
        _issue(make_record, "APP-2", "Epic"),
    ]

    groups = group_issues(issues)

    assert list(groups) == ["Bug", "Epic", "story", "Task"]
    assert [issue.key for issue in groups["Bug"]] == ["APP-3", "APP-1"]


def test_grouping_loses_and_duplicates_nothing(fixtures_dir) -> None:
    issues = decode_issues((fixtures_dir / "jira" / "search_release.json").read_bytes()).issues

    groups = group_issues(issues)

    assert sum(len(group) for group in groups.values()) == len(issues)
    flattened = [issue.key for group in groups.values() for issue in group]
    assert sorted(flattened) == sorted(issue.key for issue in issues)
    assert all(group for group in groups.values())


def test_group_order_does_not_depend_on_input_order(make_record) -> None:
    forward = [_issue(make_record, "A-1", "Story"), _issue(make_record, "A-2", "Bug")]

    assert list(group_issues(forward)) == list(group_issues(reversed(forward)))


def test_group_issues_of_nothing_is_empty() -> None:
    assert group_issues([]) == {}


def test_section_title_pluralises_groups_of_more_than_one() -> None:
    assert section_title("Bug", 1) == "Bug"
    assert section_title("Bug", 2) == "Bugs"
    assert section_title("Story", 3) == "Storys"
