"""Thin Jira REST client used to fetch release note candidates."""

from __future__ import annotations

from typing import Any, Mapping, Sequence

import requests

from releasenotes.errors import JiraQueryError
from releasenotes.logging_config import get_logger

from .jql import JQLQuery

LOGGER = get_logger(__name__)

DEFAULT_TIMEOUT = 30.0

# Fields the release notes report reads; requesting only these keeps the
# response small for large result sets.
REPORT_FIELDS: tuple[str, ...] = (
    "summary",
    "updated",
    "fixVersions",
    "issuetype",
    "reporter",
    "assignee",
    "priority",
)


def normalize_base_url(host: str) -> str:
    """Return ``host`` as a base URL, defaulting to ``https`` when no scheme is given."""

    value = host.strip().rstrip("/")
    if not value:
        raise ValueError("Jira host must be provided")
    if "://" not in value:
        value = f"https://{value}"
    return value


class JiraSearchClient:
    """Issue ``GET /rest/api/{version}/search`` requests against one Jira site."""

    def __init__(
        self,
        base_url: str,
        *,
        api_version: int = 2,
        username: str | None = None,
        token: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = normalize_base_url(base_url)
        self.api_version = api_version
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.setdefault("Accept", "application/json")
        if token and username:
            self.session.auth = (username, token)
        elif token:
            self.session.headers["Authorization"] = f"Bearer {token}"

    @property
    def search_url(self) -> str:
        return f"{self.base_url}/rest/api/{self.api_version}/search"

    def build_params(
        self, jql: str | JQLQuery, fields: Sequence[str] | None = None
    ) -> Mapping[str, Any]:
        query = jql.query_string if isinstance(jql, JQLQuery) else str(jql)
        params: dict[str, Any] = {"jql": query}
        if fields:
            params["fields"] = ",".join(fields)
        return params

    def search(self, jql: str | JQLQuery, fields: Sequence[str] | None = None) -> bytes:
        """Run ``jql`` and return the raw response body."""

        params = self.build_params(jql, fields)
        context = {"jql": params["jql"], "url": self.search_url}
        LOGGER.debug("Searching Jira", extra=context)

        try:
            response = self.session.request(
                "GET", self.search_url, params=params, timeout=self.timeout
            )
        except requests.RequestException as exc:
            raise JiraQueryError(
                "Jira search request failed", context={**context, "error": str(exc)}
            ) from exc

        LOGGER.debug("Jira responded", extra={"status_code": response.status_code})
        if response.status_code >= 400:
            raise JiraQueryError(
                f"Jira search failed with HTTP {response.status_code}",
                context={**context, "status_code": response.status_code, "body": response.text[:500]},
            )
        return response.content


__all__ = ["DEFAULT_TIMEOUT", "JiraSearchClient", "REPORT_FIELDS", "normalize_base_url"]
