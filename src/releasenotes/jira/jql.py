"""Minimal JQL query builder for release note searches."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Sequence


class JQLOperator(str, Enum):
    EQUALS = "="
    NOT_EQUALS = "!="
    IN = "IN"
    NOT_IN = "NOT IN"
    CONTAINS = "~"
    NOT_CONTAINS = "!~"

    @property
    def takes_list(self) -> bool:
        return self in (JQLOperator.IN, JQLOperator.NOT_IN)


def quote_value(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


@dataclass(frozen=True)
class JQLExpression:
    """A single ``field operator value`` clause."""

    field: str
    operator: JQLOperator
    values: tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.values:
            raise ValueError(f"JQL expression for {self.field!r} requires at least one value")
        if not self.operator.takes_list and len(self.values) > 1:
            raise ValueError(
                f"Operator {self.operator.value!r} accepts a single value for {self.field!r}"
            )

    @classmethod
    def of(cls, field: str, operator: JQLOperator, value: str | Iterable[str]) -> "JQLExpression":
        values = (value,) if isinstance(value, str) else tuple(value)
        return cls(field=field, operator=JQLOperator(operator), values=values)

    def __str__(self) -> str:
        quoted = [quote_value(value) for value in self.values]
        if self.operator.takes_list:
            rendered = "(" + ",".join(quoted) + ")"
        else:
            rendered = quoted[0]
        return f"{self.field} {self.operator.value} {rendered}"


@dataclass(frozen=True)
class JQLQuery:
    where: str
    order_by: str | None = None

    @property
    def query_string(self) -> str:
        clauses = [clause for clause in (self.where, self.order_by) if clause]
        return " ".join(clauses)

    def __str__(self) -> str:
        return self.query_string


@dataclass
class JQLQueryBuilder:
    """Accumulate ``AND``-ed expressions and an optional ordering.

    >>> JQLQueryBuilder().project("APP").status(JQLOperator.IN, ["Done", "QA"]).build().query_string
    "project = 'APP' AND status IN ('Done','QA')"
    """

    expressions: list[JQLExpression] = field(default_factory=list)
    ordering: Sequence[str] = ()

    def expression(self, expression: JQLExpression) -> "JQLQueryBuilder":
        self.expressions.append(expression)
        return self

    def _add(self, field_name: str, operator: JQLOperator, value: str | Iterable[str]) -> "JQLQueryBuilder":
        return self.expression(JQLExpression.of(field_name, operator, value))

    def project(self, project: str) -> "JQLQueryBuilder":
        return self._add("project", JQLOperator.EQUALS, project)

    def issue_type(self, operator: JQLOperator, value: str | Iterable[str]) -> "JQLQueryBuilder":
        return self._add("type", operator, value)

    def status(self, operator: JQLOperator, value: str | Iterable[str]) -> "JQLQueryBuilder":
        return self._add("status", operator, value)

    def text(self, contains: str) -> "JQLQueryBuilder":
        return self._add("text", JQLOperator.CONTAINS, contains)

    def assignee(self, operator: JQLOperator, value: str | Iterable[str]) -> "JQLQueryBuilder":
        return self._add("assignee", operator, value)

    def fix_version(self, operator: JQLOperator, value: str | Iterable[str]) -> "JQLQueryBuilder":
        return self._add("fixVersion", operator, value)

    def order_by(self, *fields: str) -> "JQLQueryBuilder":
        self.ordering = tuple(fields)
        return self

    def build(self) -> JQLQuery:
        where = " AND ".join(str(expression) for expression in self.expressions)
        order = "ORDER BY " + ", ".join(self.ordering) if self.ordering else None
        return JQLQuery(where=where, order_by=order)


__all__ = ["JQLExpression", "JQLOperator", "JQLQuery", "JQLQueryBuilder", "quote_value"]
