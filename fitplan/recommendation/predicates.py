"""Structured filter predicates over candidate attributes.

Filters are values, not query text: each predicate names a candidate field
and evaluates in memory against any object (or mapping) exposing that field.
Storage backends translate the predicates they understand into native
queries (see fitplan.persistence.filters) and re-check the rest in memory.

Predicates compose with ``&``:

    FieldIn("tag", {"Cardio", "HIIT"}) & FieldEquals("intensity", "Low")
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any


def field_value(record: Any, field_name: str) -> Any:
    """Read a field from a candidate object or mapping (missing → None)."""
    if isinstance(record, Mapping):
        return record.get(field_name)
    return getattr(record, field_name, None)


def _normalize_token(value: Any) -> str:
    return str(value).strip().lower()


class Predicate:
    """Base class for filter predicates."""

    def evaluate(self, record: Any) -> bool:
        raise NotImplementedError

    def __and__(self, other: Predicate) -> Predicate:
        return AllOf.of(self, other)


@dataclass(frozen=True)
class FieldIn(Predicate):
    """Field value is one of ``values``."""

    field: str
    values: frozenset

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", frozenset(self.values))

    def evaluate(self, record: Any) -> bool:
        return field_value(record, self.field) in self.values


@dataclass(frozen=True)
class FieldNotIn(Predicate):
    """Field value is none of ``values``."""

    field: str
    values: frozenset

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", frozenset(self.values))

    def evaluate(self, record: Any) -> bool:
        return field_value(record, self.field) not in self.values


@dataclass(frozen=True)
class FieldEquals(Predicate):
    """Field value equals ``value`` exactly."""

    field: str
    value: Any

    def evaluate(self, record: Any) -> bool:
        return field_value(record, self.field) == self.value


@dataclass(frozen=True)
class FieldBetween(Predicate):
    """Numeric field value lies in the closed interval [low, high]."""

    field: str
    low: float
    high: float

    def evaluate(self, record: Any) -> bool:
        value = field_value(record, self.field)
        if value is None:
            return False
        return self.low <= value <= self.high


@dataclass(frozen=True)
class ExcludesAny(Predicate):
    """Collection field contains none of ``values`` (case-insensitive)."""

    field: str
    values: frozenset

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", frozenset(_normalize_token(v) for v in self.values))

    def evaluate(self, record: Any) -> bool:
        items = field_value(record, self.field) or ()
        return not any(_normalize_token(item) in self.values for item in items)


@dataclass(frozen=True)
class AllOf(Predicate):
    """Conjunction of clauses; the empty conjunction matches everything."""

    clauses: tuple[Predicate, ...] = ()

    @classmethod
    def of(cls, *predicates: Predicate | None) -> AllOf:
        """Build a flattened conjunction, skipping None and nested empties."""
        clauses: list[Predicate] = []
        for predicate in predicates:
            if predicate is None:
                continue
            if isinstance(predicate, AllOf):
                clauses.extend(predicate.clauses)
            else:
                clauses.append(predicate)
        return cls(tuple(clauses))

    def evaluate(self, record: Any) -> bool:
        return all(clause.evaluate(record) for clause in self.clauses)


MATCH_ALL = AllOf()


def filter_records(predicate: Predicate, records: Iterable[Any]) -> list[Any]:
    """Return the records matching ``predicate``, preserving order."""
    return [record for record in records if predicate.evaluate(record)]
