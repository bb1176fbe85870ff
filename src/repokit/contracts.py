"""
Contracts Between Repositories and the Persistence Engine.

Three protocols define the seams of the repository layer:

- `QueryBuilder`: the minimum set of capabilities a repository consumes from
  an engine query object. Shaping methods return a query builder, which may be
  the same object (mutable builders) or a new one (generative builders such
  as `repokit.query.SQLAlchemyQuery`). Callers always continue with the
  returned value.
- `EntityResolver`: turns an entity class into a fresh query builder and
  persists new entities. Repositories receive one at construction instead of
  resolving entities from global state.
- `RepositoryInterface`: the capability set every repository exposes.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, Protocol, Self, TypeVar, runtime_checkable

if TYPE_CHECKING:
    from .criteria import Criteria
    from .pagination import LengthAwarePage, Page

ModelT = TypeVar("ModelT")

Columns = Sequence[str]
ALL_COLUMNS: tuple[str, ...] = ("*",)


@runtime_checkable
class QueryBuilder(Protocol):
    """
    Protocol for engine query builders consumed by repositories.

    Shaping methods (`where_equals`, `where_key`) return the query builder to
    continue with. Terminal methods execute against storage.
    """

    def where_equals(self, column: str, value: Any) -> QueryBuilder:
        """Restrict to rows where `column` equals `value`."""
        ...

    def where_key(self, id: Any) -> QueryBuilder:
        """Restrict to the row whose primary key is `id`."""
        ...

    def get(self, columns: Columns = ALL_COLUMNS) -> list[Any]:
        """Retrieve every matching record."""
        ...

    def paginate(
        self, per_page: int, columns: Columns = ALL_COLUMNS, page: int = 1
    ) -> LengthAwarePage[Any]:
        """Retrieve one page of records along with the total count."""
        ...

    def simple_paginate(
        self, per_page: int, columns: Columns = ALL_COLUMNS, page: int = 1
    ) -> Page[Any]:
        """Retrieve one page of records without counting the total."""
        ...

    def find(self, id: Any, columns: Columns = ALL_COLUMNS) -> Any | None:
        """Retrieve a record by primary key, or None."""
        ...

    def find_or_fail(self, id: Any, columns: Columns = ALL_COLUMNS) -> Any:
        """Retrieve a record by primary key or raise `NotFoundError`."""
        ...

    def first(self, columns: Columns = ALL_COLUMNS) -> Any | None:
        """Retrieve the first matching record, or None."""
        ...

    def first_or_fail(self, columns: Columns = ALL_COLUMNS) -> Any:
        """Retrieve the first matching record or raise `NotFoundError`."""
        ...

    def count(self) -> int:
        """Count matching records."""
        ...

    def update(self, attributes: Mapping[str, Any]) -> int:
        """Update every matching record, returning the number of rows affected."""
        ...

    def delete(self) -> int:
        """Delete every matching record, returning the number of rows affected."""
        ...


@runtime_checkable
class EntityResolver(Protocol):
    """
    Protocol for producing query builders and new records for an entity class.
    """

    def new_query(self, model: type[Any]) -> QueryBuilder:
        """Return a fresh, unfiltered query builder for `model`."""
        ...

    def create(self, model: type[ModelT], attributes: Mapping[str, Any]) -> ModelT:
        """Persist a new `model` instance built from `attributes`."""
        ...


@runtime_checkable
class RepositoryInterface(Protocol[ModelT]):
    """
    Capability set exposed by every repository.
    """

    def query(self) -> QueryBuilder: ...

    def criteria(self, criteria: Criteria, permanent: bool = False) -> Self: ...

    def all(self, columns: Columns = ALL_COLUMNS) -> list[ModelT]: ...

    def paginate(
        self, per_page: int | None = None, columns: Columns = ALL_COLUMNS, page: int = 1
    ) -> LengthAwarePage[ModelT]: ...

    def simple_paginate(
        self, per_page: int | None = None, columns: Columns = ALL_COLUMNS, page: int = 1
    ) -> Page[ModelT]: ...

    def find(self, id: Any, columns: Columns = ALL_COLUMNS) -> ModelT | None: ...

    def find_or_fail(self, id: Any, columns: Columns = ALL_COLUMNS) -> ModelT: ...

    def first(self, columns: Columns = ALL_COLUMNS) -> ModelT | None: ...

    def first_or_fail(self, columns: Columns = ALL_COLUMNS) -> ModelT: ...

    def find_by(self, column: str, value: Any, columns: Columns = ALL_COLUMNS) -> ModelT | None: ...

    def find_by_or_fail(self, column: str, value: Any, columns: Columns = ALL_COLUMNS) -> ModelT: ...

    def count(self) -> int: ...

    def create(self, attributes: Mapping[str, Any]) -> ModelT: ...

    def update(self, id: Any, attributes: Mapping[str, Any]) -> int: ...

    def update_all(self, attributes: Mapping[str, Any]) -> int: ...

    def delete(self, id: Any) -> int: ...

    def delete_all(self) -> int: ...
