from __future__ import annotations

from datetime import datetime, timedelta, timezone
import json

import pytest

from releasenotes.errors import MalformedEnvelopeError, RecordDecodeError
from releasenotes.issues.decoder import decode_issue, decode_issues, parse_updated
from releasenotes.issues.models import IssueAssignee, IssuePriority, IssueReporter, IssueType


def test_decode_issue_maps_required_fields(example_record: dict) -> None:
    issue = decode_issue(example_record)

    assert issue.key == "X-1"
    assert issue.summary == "Fix crash"
    assert issue.fix_version == "1.0"
    assert issue.type == IssueType(name="Bug", image_href="u1")
    assert issue.type_name == "Bug"
    assert issue.reporter == IssueReporter(name="Ann", image_href="u2")
    assert issue.priority == IssuePriority(name="High", image_href="u3")
    assert issue.updated == datetime(2023, 1, 1, 10, 0, tzinfo=timezone.utc)
    assert issue.assignee is None


def test_decode_issue_reads_assignee_when_complete(make_record) -> None:
    record = make_record(
        assignee={"displayName": "Bob", "avatarUrls": {"16x16": "u4", "48x48": "big"}}
    )

    issue = decode_issue(record)

    assert issue.assignee == IssueAssignee(name="Bob", image_href="u4")


def test_null_assignee_is_unassigned(make_record) -> None:
    assert decode_issue(make_record(assignee=None)).assignee is None
    record = make_record()
    record["fields"]["assignee"] = None
    assert decode_issue(record).assignee is None


def test_assignee_without_avatar_is_a_failure(make_record) -> None:
    record = make_record(assignee={"displayName": "Bob", "avatarUrls": {"48x48": "big"}})

    with pytest.raises(RecordDecodeError) as exc:
        decode_issue(record, index=3)

    assert exc.value.field_path == "fields.assignee.avatarUrls.16x16"
    assert exc.value.record_index == 3
    assert exc.value.issue_key == "X-1"


def test_only_first_fix_version_is_used(make_record) -> None:
    issue = decode_issue(make_record(fixVersions=[{"name": "2.0"}, {"name": "2.1"}]))

    assert issue.fix_version == "2.0"


@pytest.mark.parametrize(
    ("fix_versions", "field_path"),
    [
        (None, "fields.fixVersions"),
        ([], "fields.fixVersions"),
        ("1.0", "fields.fixVersions"),
        (["1.0"], "fields.fixVersions.0"),
        ([{"id": "7"}], "fields.fixVersions.0.name"),
        ([{"name": "1.0"}, {"id": "8"}], "fields.fixVersions.1.name"),
    ],
)
def test_fix_versions_must_be_non_empty_named_objects(
    make_record, fix_versions, field_path: str
) -> None:
    record = make_record(fixVersions=fix_versions)

    with pytest.raises(RecordDecodeError) as exc:
        decode_issue(record)

    assert exc.value.field_path == field_path


@pytest.mark.parametrize(
    ("mutate", "field_path"),
    [
        (lambda record: record.pop("key"), "key"),
        (lambda record: record.update(key=17), "key"),
        (lambda record: record.update(key="  "), "key"),
        (lambda record: record.pop("fields"), "fields"),
        (lambda record: record["fields"].pop("summary"), "fields.summary"),
        (lambda record: record["fields"].update(summary=["x"]), "fields.summary"),
        (lambda record: record["fields"].pop("updated"), "fields.updated"),
        (lambda record: record["fields"]["issuetype"].pop("iconUrl"), "fields.issuetype.iconUrl"),
        (lambda record: record["fields"].pop("issuetype"), "fields.issuetype.name"),
        (lambda record: record["fields"]["reporter"].pop("displayName"), "fields.reporter.displayName"),
        (lambda record: record["fields"]["reporter"].pop("avatarUrls"), "fields.reporter.avatarUrls.16x16"),
        (lambda record: record["fields"]["priority"].update(name=None), "fields.priority.name"),
        (lambda record: record["fields"].update(assignee="bob"), "fields.assignee"),
    ],
)
def test_missing_or_mistyped_required_fields_name_their_path(
    example_record: dict, mutate, field_path: str
) -> None:
    mutate(example_record)

    with pytest.raises(RecordDecodeError) as exc:
        decode_issue(example_record)

    assert exc.value.field_path == field_path
    assert field_path in str(exc.value)


@pytest.mark.parametrize(
    "updated",
    [
        "2023-01-01T10:00:00+0000",
        "2023-01-01 10:00:00.000+0000",
        "2023-01-01T10:00:00.000Z",
        "2023-01-01T10:00:00.000",
        "2023-13-01T10:00:00.000+0000",
        "２０２３-01-01T10:00:00.000+0000",
        "2023-01-01T10:00:00.000+0000\n",
        "yesterday",
    ],
)
def test_invalid_timestamps_fail_the_record(make_record, updated: str) -> None:
    with pytest.raises(RecordDecodeError) as exc:
        decode_issue(make_record(updated=updated))

    assert exc.value.field_path == "fields.updated"


def test_updated_parses_to_the_same_instant_across_offsets() -> None:
    utc = parse_updated("2023-01-01T10:00:00.000+0000")
    plus_one = parse_updated("2023-01-01T11:00:00.000+0100")
    minus_seven = parse_updated("2023-01-01T03:00:00.000-0700")

    assert utc == plus_one == minus_seven
    assert minus_seven.utcoffset() == timedelta(hours=-7)


def test_decode_issues_example_envelope(example_record: dict) -> None:
    result = decode_issues(json.dumps({"issues": [example_record]}))

    assert [issue.key for issue in result.issues] == ["X-1"]
    assert result.issues[0].assignee is None
    assert result.skipped == ()
    assert not result.is_empty


def test_decode_issues_accepts_bytes_and_preserves_order(fixtures_dir) -> None:
    body = (fixtures_dir / "jira" / "search_release.json").read_bytes()

    result = decode_issues(body)

    assert [issue.key for issue in result.issues] == ["APP-101", "APP-102", "APP-103", "APP-104"]
    assert result.total == 4
    assert result.issues[1].assignee is None
    assert result.issues[1].fix_version == "Oct25"
    assert result.issues[3].assignee is None


def test_empty_issue_list_is_not_an_error(load_json) -> None:
    result = decode_issues(load_json("jira/search_empty.json"))

    assert result.is_empty
    assert result.total == 0


@pytest.mark.parametrize(
    "payload",
    [
        b"<html>Service unavailable</html>",
        "not json",
        b"\xff\xfe",
        "[]",
        {"errorMessages": ["bad jql"]},
        {"issues": {"key": "X-1"}},
        {"issues": None},
    ],
)
def test_malformed_envelopes_are_fatal(payload) -> None:
    with pytest.raises(MalformedEnvelopeError):
        decode_issues(payload)


def test_deeply_nested_body_is_a_malformed_envelope() -> None:
    with pytest.raises(MalformedEnvelopeError) as exc:
        decode_issues("[" * 100000 + "]" * 100000)

    assert exc.value.context["error"]


def test_strict_mode_aborts_on_first_bad_record(load_json) -> None:
    payload = load_json("jira/search_partial.json")

    with pytest.raises(RecordDecodeError) as exc:
        decode_issues(payload)

    assert exc.value.record_index == 1
    assert exc.value.issue_key == "APP-202"
    assert exc.value.field_path == "fields.reporter.avatarUrls.16x16"


def test_lenient_mode_skips_and_counts_bad_records(
    load_json, caplog: pytest.LogCaptureFixture
) -> None:
    payload = load_json("jira/search_partial.json")

    with caplog.at_level("WARNING", logger="releasenotes.issues.decoder"):
        result = decode_issues(payload, strict=False)

    assert [issue.key for issue in result.issues] == ["APP-201"]
    assert len(result.skipped) == 1
    assert result.skipped[0].record_index == 1
    assert result.total == 2
    assert "Skipping undecodable issue record" in caplog.text


def test_non_object_record_fails_with_index() -> None:
    with pytest.raises(RecordDecodeError) as exc:
        decode_issues({"issues": ["X-1"]})

    assert exc.value.field_path == "<record>"
    assert exc.value.record_index == 0
