"""Helpers for building safe, reusable SQL fragments with positional parameters.

Both builders emit asyncpg-style `$n` placeholders and return the values in
placeholder order. Caller values never reach the query text; only column
names taken from application-owned field maps and filter tables do.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import Any

from jobly.core.errors import ValidationError

FieldMap = Mapping[str, str]

EMPTY_FIELD_MAP: FieldMap = MappingProxyType({})


def placeholder(index: int) -> str:
    """Render the positional placeholder for a 1-based parameter index."""
    return f"${index}"


def resolve_column(field_map: FieldMap, field_name: str) -> str:
    """Return the storage column for a logical field; unmapped names map to themselves."""
    return field_map.get(field_name, field_name)


def build_partial_update(
    changes: Mapping[str, Any],
    field_map: FieldMap = EMPTY_FIELD_MAP,
    *,
    start: int = 1,
) -> tuple[str, list[Any]]:
    """Build a `SET` assignment list for the fields present in `changes`.

    Example:
        >>> build_partial_update({"firstName": "Joe", "age": 27}, {"firstName": "first_name"})
        ('"first_name"=$1, "age"=$2', ['Joe', 27])

    Notes:
    - Tokens and values follow the insertion order of `changes`.
    - `None` is passed through as an explicit NULL assignment.
    - Callers append trailing parameters (e.g. the primary key) starting at
      `start + len(values)`.
    """
    if not changes:
        raise ValidationError("No data")

    assignments: list[str] = []
    values: list[Any] = []
    for offset, (field_name, value) in enumerate(changes.items()):
        column = resolve_column(field_map, field_name)
        assignments.append(f'"{column}"={placeholder(start + offset)}')
        values.append(value)

    return ", ".join(assignments), values


class FilterOperator(StrEnum):
    EQUALS = "="
    GTE = ">="
    LTE = "<="
    CONTAINS = "ILIKE"
    POSITIVE = "> 0"


def wrap_wildcards(value: Any) -> str:
    return f"%{value}%"


@dataclass(frozen=True)
class FilterRule:
    """How one named filter maps onto a column predicate."""

    column: str
    operator: FilterOperator = FilterOperator.EQUALS
    transform: Callable[[Any], Any] | None = None

    @property
    def is_flag(self) -> bool:
        return self.operator is FilterOperator.POSITIVE

    def prepare(self, value: Any) -> Any:
        if self.transform is not None:
            return self.transform(value)
        if self.operator is FilterOperator.CONTAINS:
            return wrap_wildcards(value)
        return value


@dataclass(frozen=True)
class RangeBounds:
    """A pair of filter names that bound the same column from below and above."""

    minimum: str
    maximum: str


@dataclass(frozen=True)
class FilterTable:
    """Declared filters for one resource, in the order predicates are emitted."""

    rules: Mapping[str, FilterRule]
    ranges: tuple[RangeBounds, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "rules", MappingProxyType(dict(self.rules)))
        undeclared = [
            name
            for bounds in self.ranges
            for name in (bounds.minimum, bounds.maximum)
            if name not in self.rules
        ]
        if undeclared:
            raise ValueError(f"Range bounds reference undeclared filters: {undeclared}")


def _is_present(rule: FilterRule, value: Any) -> bool:
    if value is None:
        return False
    if rule.operator is FilterOperator.CONTAINS and isinstance(value, str):
        return bool(value.strip())
    return True


def _check_ranges(filters: Mapping[str, Any], table: FilterTable) -> None:
    for bounds in table.ranges:
        minimum = filters.get(bounds.minimum)
        maximum = filters.get(bounds.maximum)
        if minimum is None or maximum is None:
            continue
        if minimum > maximum:
            raise ValidationError(
                f"{bounds.minimum} cannot exceed {bounds.maximum}",
                details={bounds.minimum: minimum, bounds.maximum: maximum},
            )


def build_filter_where(
    filters: Mapping[str, Any],
    table: FilterTable,
    *,
    start: int = 1,
) -> tuple[str, list[Any]]:
    """Build an AND-joined predicate for the declared filters present in `filters`.

    Predicates are emitted in the table's declared order, so the text is the
    same however `filters` was populated. Names not declared in `table` are
    ignored.

    Returns `("", [])` when no declared filter applies, meaning "match all".
    Raises `ValidationError` before building anything when a declared range
    has its minimum above its maximum.
    """
    _check_ranges(filters, table)

    conditions: list[str] = []
    params: list[Any] = []

    for name, rule in table.rules.items():
        value = filters.get(name)
        if not _is_present(rule, value):
            continue
        if rule.is_flag:
            if value:
                conditions.append(f"{rule.column} {rule.operator.value}")
            continue
        params.append(rule.prepare(value))
        conditions.append(
            f"{rule.column} {rule.operator.value} {placeholder(start + len(params) - 1)}"
        )

    return " AND ".join(conditions), params


def where_sql(clause: str) -> str:
    """Render a `WHERE` suffix, or nothing for an empty clause."""
    return f" WHERE {clause}" if clause else ""
