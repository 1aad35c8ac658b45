"""Jira search client and JQL helpers."""

from __future__ import annotations

from .client import REPORT_FIELDS, JiraSearchClient, normalize_base_url
from .jql import JQLExpression, JQLOperator, JQLQuery, JQLQueryBuilder

__all__ = [
    "JQLExpression",
    "JQLOperator",
    "JQLQuery",
    "JQLQueryBuilder",
    "JiraSearchClient",
    "REPORT_FIELDS",
    "normalize_base_url",
]
