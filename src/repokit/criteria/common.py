"""
Ready-made criteria for `SQLAlchemyQuery`.

Each class holds one rule. Columns may be given by name (resolved against the
queried entity, raising `ValueError` when unknown) or as a mapped attribute
such as `User.email`.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Literal

from sqlalchemy.orm import selectinload

from ..query import SQLAlchemyQuery


def _resolve(query: SQLAlchemyQuery, column: Any) -> Any:
    if isinstance(column, str):
        return query.column(column)
    return column


class WhereEquals:
    """Restrict to rows where `column` equals `value`."""

    def __init__(self, column: Any, value: Any):
        self.column = column
        self.value = value

    def __repr__(self) -> str:
        return f"<WhereEquals({self.column!s}={self.value!r})>"

    def apply(self, query: SQLAlchemyQuery) -> SQLAlchemyQuery:
        return query.where(_resolve(query, self.column) == self.value)


class WhereIn:
    """Restrict to rows where `column` is one of `values`."""

    def __init__(self, column: Any, values: Iterable[Any]):
        self.column = column
        self.values = tuple(values)

    def apply(self, query: SQLAlchemyQuery) -> SQLAlchemyQuery:
        return query.where(_resolve(query, self.column).in_(self.values))


class WhereBetween:
    """Restrict to rows where `low <= column <= high`."""

    def __init__(self, column: Any, low: Any, high: Any):
        self.column = column
        self.low = low
        self.high = high

    def apply(self, query: SQLAlchemyQuery) -> SQLAlchemyQuery:
        return query.where(_resolve(query, self.column).between(self.low, self.high))


class WhereNull:
    def __init__(self, column: Any):
        self.column = column

    def apply(self, query: SQLAlchemyQuery) -> SQLAlchemyQuery:
        return query.where(_resolve(query, self.column).is_(None))


class WhereNotNull:
    def __init__(self, column: Any):
        self.column = column

    def apply(self, query: SQLAlchemyQuery) -> SQLAlchemyQuery:
        return query.where(_resolve(query, self.column).is_not(None))


class OrderBy:
    """
    Order results by `column`.

    Raises:
        ValueError: If `direction` is not "asc" or "desc".
    """

    def __init__(self, column: Any, direction: Literal["asc", "desc"] = "asc"):
        direction = direction.lower()  # type: ignore[assignment]
        if direction not in ("asc", "desc"):
            raise ValueError(f"Order direction must be 'asc' or 'desc', got '{direction}'")
        self.column = column
        self.direction = direction

    def __repr__(self) -> str:
        return f"<OrderBy({self.column!s} {self.direction})>"

    def apply(self, query: SQLAlchemyQuery) -> SQLAlchemyQuery:
        column = _resolve(query, self.column)
        return query.order_by(column.desc() if self.direction == "desc" else column.asc())


class Limit:
    """Cap the number of rows returned."""

    def __init__(self, count: int):
        if count < 0:
            raise ValueError(f"Limit must not be negative, got {count}")
        self.count = count

    def apply(self, query: SQLAlchemyQuery) -> SQLAlchemyQuery:
        return query.limit(self.count)


class TenantScope:
    """
    Restrict to rows owned by one organization.

    Usually registered as permanent so every query a repository builds stays
    inside the tenant.
    """

    def __init__(self, org_id: Any, column: str = "org_id"):
        self.org_id = org_id
        self.column = column

    def __repr__(self) -> str:
        return f"<TenantScope({self.org_id})>"

    def apply(self, query: SQLAlchemyQuery) -> SQLAlchemyQuery:
        return query.where(query.column(self.column) == self.org_id)


class WithoutTrashed:
    """Hide soft-deleted rows (see `repokit.models.SoftDeleteMixin`)."""

    def __init__(self, column: str = "deleted_at"):
        self.column = column

    def apply(self, query: SQLAlchemyQuery) -> SQLAlchemyQuery:
        return query.where(query.column(self.column).is_(None))


class OnlyTrashed:
    """Show only soft-deleted rows."""

    def __init__(self, column: str = "deleted_at"):
        self.column = column

    def apply(self, query: SQLAlchemyQuery) -> SQLAlchemyQuery:
        return query.where(query.column(self.column).is_not(None))


class EagerLoad:
    """Eager-load relationships with `selectinload`."""

    def __init__(self, *relationships: Any):
        self.relationships = relationships

    def apply(self, query: SQLAlchemyQuery) -> SQLAlchemyQuery:
        return query.options(*(selectinload(rel) for rel in self.relationships))
