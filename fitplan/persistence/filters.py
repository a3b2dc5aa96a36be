"""Translate filter predicates into SQLAlchemy clauses.

Only predicates with a portable SQL form are pushed down. Anything else
(currently ExcludesAny over the JSON ingredient list, which has no form shared
by SQLite and PostgreSQL) is left for in-memory evaluation; callers always
re-check rows with the full predicate.
"""

from __future__ import annotations

from sqlalchemy import and_
from sqlalchemy.sql.elements import ColumnElement

from fitplan.recommendation.predicates import (
    AllOf,
    FieldBetween,
    FieldEquals,
    FieldIn,
    FieldNotIn,
    Predicate,
)


def to_clause(predicate: Predicate, model: type) -> ColumnElement[bool] | None:
    """Build a WHERE clause for ``predicate`` over ``model`` columns.

    Returns None when no part of the predicate can be pushed down.
    """
    if isinstance(predicate, AllOf):
        clauses = [clause for clause in (to_clause(c, model) for c in predicate.clauses) if clause is not None]
        if not clauses:
            return None
        return clauses[0] if len(clauses) == 1 else and_(*clauses)

    column = getattr(model, getattr(predicate, "field", ""), None)
    if column is None:
        return None

    if isinstance(predicate, FieldIn):
        return column.in_(sorted(predicate.values, key=str))
    if isinstance(predicate, FieldNotIn):
        return column.not_in(sorted(predicate.values, key=str))
    if isinstance(predicate, FieldEquals):
        return column == predicate.value
    if isinstance(predicate, FieldBetween):
        return column.between(predicate.low, predicate.high)
    return None
