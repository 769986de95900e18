"""Resource Queries — turns a decoded ?aggregate= object into a SQLAlchemy Select.

Invariants:
    - Only whitelisted API field names are filterable; anything else is a
      malformed filter and raises QueryError (reported as 500, like any
      failed datastore read)
    - Scalar value -> equality; list value -> IN; object value -> operators
      ($eq, $ne, $gt, $gte, $lt, $lte, $in)
    - Results ordered by primary key so pages are stable

Design Decisions:
    - Mongo-style operator objects: clients of the previous service already
      send aggregate filters in that shape
"""

from typing import Any, Callable, Mapping

from sqlalchemy import Select, select
from sqlalchemy.orm import InstrumentedAttribute

from harmonia.core.errors import QueryError
from harmonia.models.artist import Artist
from harmonia.models.course import Course

_OPERATORS: dict[str, Callable[[InstrumentedAttribute, Any], Any]] = {
    "$eq": lambda col, v: col == v,
    "$ne": lambda col, v: col != v,
    "$gt": lambda col, v: col > v,
    "$gte": lambda col, v: col >= v,
    "$lt": lambda col, v: col < v,
    "$lte": lambda col, v: col <= v,
    "$in": lambda col, v: col.in_(v if isinstance(v, list) else [v]),
}

ARTIST_FILTERS: dict[str, InstrumentedAttribute] = {
    "id": Artist.id,
    "name": Artist.name,
    "originYear": Artist.origin_year,
}

COURSE_FILTERS: dict[str, InstrumentedAttribute] = {
    "id": Course.id,
    "title": Course.title,
    "level": Course.level,
    "artistId": Course.artist_id,
}


def build_filter(
    model: type, columns: Mapping[str, InstrumentedAttribute],
    aggregate: Mapping[str, Any] | None,
) -> Select:
    """Compile an aggregate object against a model's filterable columns."""
    stmt = select(model)
    for key, value in (aggregate or {}).items():
        column = columns.get(key)
        if column is None:
            raise QueryError(f"Field '{key}' is not filterable")
        stmt = stmt.where(*_conditions(key, column, value))
    return stmt.order_by(model.id)


def _conditions(key: str, column: InstrumentedAttribute, value: Any) -> list:
    if isinstance(value, list):
        return [column.in_(value)]
    if not isinstance(value, dict):
        return [column == value]
    conditions = []
    for op, operand in value.items():
        build = _OPERATORS.get(op)
        if build is None:
            raise QueryError(f"Unknown operator '{op}' on field '{key}'")
        conditions.append(build(column, operand))
    return conditions


def artist_filter(aggregate: Mapping[str, Any] | None) -> Select:
    return build_filter(Artist, ARTIST_FILTERS, aggregate)


def course_filter(aggregate: Mapping[str, Any] | None) -> Select:
    return build_filter(Course, COURSE_FILTERS, aggregate)
