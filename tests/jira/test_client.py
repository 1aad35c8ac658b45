from __future__ import annotations

from typing import Any

import pytest
import requests

from releasenotes.errors import JiraQueryError
from releasenotes.jira.client import REPORT_FIELDS, JiraSearchClient, normalize_base_url
from releasenotes.jira.jql import JQLOperator, JQLQueryBuilder


def _response(body: bytes, *, status: int = 200) -> requests.Response:
    response = requests.Response()
    response.status_code = status
    response._content = body
    response.headers["Content-Type"] = "application/json"
    response.url = "https://jira.example.com/rest/api/2/search"
    return response


class RecordingSession(requests.Session):
    def __init__(self, outcome: requests.Response | Exception) -> None:
        super().__init__()
        self.outcome = outcome
        self.calls: list[dict[str, Any]] = []

    def request(self, method: str, url: str, **kwargs: Any):  # type: ignore[override]
        self.calls.append({"method": method, "url": url, **kwargs})
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return self.outcome


@pytest.mark.parametrize(
    ("host", "expected"),
    [
        ("jira.example.com", "https://jira.example.com"),
        ("http://jira.internal:8080/", "http://jira.internal:8080"),
        (" https://jira.example.com ", "https://jira.example.com"),
    ],
)
def test_normalize_base_url(host: str, expected: str) -> None:
    assert normalize_base_url(host) == expected


def test_normalize_base_url_requires_host() -> None:
    with pytest.raises(ValueError):
        normalize_base_url("  ")


def test_search_sends_jql_and_fields(fixtures_dir) -> None:
    body = (fixtures_dir / "jira" / "search_release.json").read_bytes()
    session = RecordingSession(_response(body))
    client = JiraSearchClient("jira.example.com", session=session, timeout=5)

    result = client.search("project = APP", fields=REPORT_FIELDS)

    assert result == body
    call = session.calls[0]
    assert call["method"] == "GET"
    assert call["url"] == "https://jira.example.com/rest/api/2/search"
    assert call["params"]["jql"] == "project = APP"
    assert call["params"]["fields"].startswith("summary,updated,fixVersions")
    assert call["timeout"] == 5


def test_search_accepts_built_queries() -> None:
    session = RecordingSession(_response(b'{"issues": []}'))
    client = JiraSearchClient("https://jira.example.com", api_version=3, session=session)
    query = JQLQueryBuilder().fix_version(JQLOperator.EQUALS, "Oct25").build()

    client.search(query)

    call = session.calls[0]
    assert call["url"] == "https://jira.example.com/rest/api/3/search"
    assert call["params"] == {"jql": "fixVersion = 'Oct25'"}


def test_credentials_configure_the_session() -> None:
    basic = JiraSearchClient("jira.example.com", username="ann", token="secret", session=requests.Session())
    bearer = JiraSearchClient("jira.example.com", token="pat", session=requests.Session())

    assert basic.session.auth == ("ann", "secret")
    assert bearer.session.headers["Authorization"] == "Bearer pat"


def test_http_errors_raise_query_error(fixtures_dir) -> None:
    body = (fixtures_dir / "jira" / "search_error.json").read_bytes()
    session = RecordingSession(_response(body, status=400))
    client = JiraSearchClient("jira.example.com", session=session)

    with pytest.raises(JiraQueryError) as exc:
        client.search("project = APP status = Done")

    assert exc.value.context["status_code"] == 400
    assert exc.value.context["jql"] == "project = APP status = Done"
    assert "Error in the JQL Query" in exc.value.context["body"]


def test_transport_failures_raise_query_error() -> None:
    session = RecordingSession(requests.ConnectionError("connection refused"))
    client = JiraSearchClient("jira.example.com", session=session)

    with pytest.raises(JiraQueryError) as exc:
        client.search("project = APP")

    assert "connection refused" in exc.value.context["error"]
