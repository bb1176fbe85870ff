"""
SQLAlchemy Query Adapter.

`SQLAlchemyQuery` implements the `QueryBuilder` contract on top of an ORM
`Session` and a 2.0-style `Select` statement. Like `Select` itself it is
generative: every shaping call returns a new adapter and leaves the original
untouched, so criteria must use the value they get back.

`SessionResolver` implements `EntityResolver` for a session the caller owns.
Neither class commits; transaction boundaries belong to the caller (see
`repokit.db.get_db`).
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from sqlalchemy import ColumnElement, delete, func, inspect, select, tuple_, update
from sqlalchemy.orm import InstrumentedAttribute, Session, load_only
from sqlalchemy.sql import Select

from .contracts import ALL_COLUMNS, Columns, ModelT
from .exceptions import NotFoundError
from .pagination import LengthAwarePage, Page


class SQLAlchemyQuery:
    """
    Generative query builder over a mapped entity class.

    Args:
        session: Session used to execute terminal operations.
        model: The mapped entity class being queried.
        statement: Starting statement; defaults to `select(model)`.
    """

    def __init__(self, session: Session, model: type[Any], statement: Select[Any] | None = None):
        self.session = session
        self.model = model
        self._statement = statement if statement is not None else select(model)

    def __repr__(self) -> str:
        return f"<SQLAlchemyQuery(model={self.model.__name__})>"

    @property
    def statement(self) -> Select[Any]:
        """The underlying `Select` statement."""
        return self._statement

    def _with(self, statement: Select[Any]) -> SQLAlchemyQuery:
        return SQLAlchemyQuery(self.session, self.model, statement)

    # --- Shaping ---

    def column(self, name: str) -> InstrumentedAttribute[Any]:
        """
        Resolve a column name to the mapped attribute on the entity.

        Raises:
            ValueError: If the entity has no mapped column attribute by that name.
        """
        attrs = inspect(self.model).column_attrs
        if name not in attrs:
            raise ValueError(f"{self.model.__name__} has no column named '{name}'")
        return getattr(self.model, name)

    def where(self, *clauses: ColumnElement[bool]) -> SQLAlchemyQuery:
        return self._with(self._statement.where(*clauses))

    def where_equals(self, column: str, value: Any) -> SQLAlchemyQuery:
        return self.where(self.column(column) == value)

    def where_key(self, id: Any) -> SQLAlchemyQuery:
        """Restrict to the primary key `id`; composite keys take a tuple."""
        keys = inspect(self.model).primary_key
        if len(keys) == 1:
            return self.where(keys[0] == id)
        if not isinstance(id, tuple) or len(id) != len(keys):
            raise ValueError(
                f"{self.model.__name__} has a composite primary key of "
                f"{len(keys)} columns; pass a tuple of matching length"
            )
        return self.where(tuple_(*keys) == tuple_(*id))

    def order_by(self, *clauses: Any) -> SQLAlchemyQuery:
        return self._with(self._statement.order_by(*clauses))

    def limit(self, count: int | None) -> SQLAlchemyQuery:
        return self._with(self._statement.limit(count))

    def offset(self, count: int | None) -> SQLAlchemyQuery:
        return self._with(self._statement.offset(count))

    def options(self, *options: Any) -> SQLAlchemyQuery:
        return self._with(self._statement.options(*options))

    # --- Terminal operations ---

    def _select(self, columns: Columns) -> Select[Any]:
        if isinstance(columns, str):
            columns = (columns,)
        if list(columns) == list(ALL_COLUMNS):
            return self._statement
        return self._statement.options(load_only(*(self.column(c) for c in columns)))

    def _slice(self, skip: int, take: int) -> SQLAlchemyQuery:
        """
        Narrow to `take` rows starting `skip` rows in.

        The window is taken inside any limit/offset already on the statement,
        so a `Limit` registered as criteria is never widened.
        """
        offset = self._statement._offset or 0
        limit = self._statement._limit
        if limit is not None:
            take = min(take, max(limit - skip, 0))
        return self._with(self._statement.offset(offset + skip or None).limit(take))

    def _dml_criteria(self) -> ColumnElement[bool] | None:
        """
        The WHERE clause bulk UPDATE/DELETE run with.

        A limited or offset statement cannot be expressed as a plain WHERE, so
        the primary keys it selects are fetched first and the DML is
        restricted to exactly those rows.
        """
        stmt = self._statement
        if stmt._limit_clause is None and stmt._offset_clause is None:
            return stmt.whereclause
        mapper = inspect(self.model)
        keys = mapper.primary_key
        identities = [
            mapper.primary_key_from_instance(row)
            for row in self.session.scalars(stmt).unique().all()
        ]
        if len(keys) == 1:
            return keys[0].in_([identity[0] for identity in identities])
        return tuple_(*keys).in_([tuple(identity) for identity in identities])

    def get(self, columns: Columns = ALL_COLUMNS) -> list[Any]:
        return list(self.session.scalars(self._select(columns)).unique().all())

    def first(self, columns: Columns = ALL_COLUMNS) -> Any | None:
        return self.session.scalars(self._slice(0, 1)._select(columns)).unique().first()

    def first_or_fail(self, columns: Columns = ALL_COLUMNS) -> Any:
        record = self.first(columns)
        if record is None:
            raise NotFoundError(self.model)
        return record

    def find(self, id: Any, columns: Columns = ALL_COLUMNS) -> Any | None:
        return self.where_key(id).first(columns)

    def find_or_fail(self, id: Any, columns: Columns = ALL_COLUMNS) -> Any:
        record = self.find(id, columns)
        if record is None:
            raise NotFoundError(self.model, [id])
        return record

    def count(self) -> int:
        counted = select(func.count()).select_from(self._statement.order_by(None).subquery())
        return int(self.session.scalar(counted) or 0)

    def paginate(
        self, per_page: int, columns: Columns = ALL_COLUMNS, page: int = 1
    ) -> LengthAwarePage[Any]:
        """
        Fetch one page of records and count the total matching rows.

        Raises:
            ValueError: If `per_page` or `page` is less than 1.
        """
        _check_page(per_page, page)
        total = self.count()
        items = self._slice((page - 1) * per_page, per_page).get(columns)
        return LengthAwarePage(
            items=items,
            per_page=per_page,
            current_page=page,
            has_more=page * per_page < total,
            total=total,
        )

    def simple_paginate(
        self, per_page: int, columns: Columns = ALL_COLUMNS, page: int = 1
    ) -> Page[Any]:
        """
        Fetch one page of records, looking one row ahead to detect a next page.

        Raises:
            ValueError: If `per_page` or `page` is less than 1.
        """
        _check_page(per_page, page)
        items = self._slice((page - 1) * per_page, per_page + 1).get(columns)
        return Page(
            items=items[:per_page],
            per_page=per_page,
            current_page=page,
            has_more=len(items) > per_page,
        )

    def update(self, attributes: Mapping[str, Any]) -> int:
        """Update exactly the rows this query selects, limit and offset included."""
        values = {self.column(name).key: value for name, value in attributes.items()}
        stmt = update(self.model).values(values)
        criteria = self._dml_criteria()
        if criteria is not None:
            stmt = stmt.where(criteria)
        result = self.session.execute(stmt)
        return int(result.rowcount)  # type: ignore[attr-defined]

    def delete(self) -> int:
        """Delete exactly the rows this query selects, limit and offset included."""
        stmt = delete(self.model)
        criteria = self._dml_criteria()
        if criteria is not None:
            stmt = stmt.where(criteria)
        result = self.session.execute(stmt)
        return int(result.rowcount)  # type: ignore[attr-defined]


def _check_page(per_page: int, page: int) -> None:
    if per_page < 1:
        raise ValueError(f"per_page must be at least 1, got {per_page}")
    if page < 1:
        raise ValueError(f"page must be at least 1, got {page}")


class SessionResolver:
    """
    Resolves entity classes against a caller-owned `Session`.

    Args:
        session: Active SQLAlchemy session used for every query and insert.
    """

    def __init__(self, session: Session):
        self.session = session

    def new_query(self, model: type[Any]) -> SQLAlchemyQuery:
        return SQLAlchemyQuery(self.session, model)

    def create(self, model: type[ModelT], attributes: Mapping[str, Any]) -> ModelT:
        """
        Instantiate `model` from `attributes`, add it and flush.

        Flushing assigns server-generated keys without committing, so the
        surrounding session scope still decides commit or rollback.
        """
        instance = model(**attributes)
        self.session.add(instance)
        self.session.flush()
        return instance
