"""Generic criteria-driven repository."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, ClassVar, Generic, Self

from ..config import get_config
from ..contracts import ALL_COLUMNS, Columns, EntityResolver, ModelT, QueryBuilder
from ..criteria import Criteria, CriteriaRegistry
from ..pagination import LengthAwarePage, Page

logger = logging.getLogger(__name__)


class Repository(Generic[ModelT]):
    """
    Data access for one entity class, shaped by registered criteria.

    Every retrieval and mutation (except `create`) starts from a fresh base
    query obtained from the resolver, threads it through the registered
    criteria in registration order, and then runs its terminal operation.
    Criteria registered with `permanent=False` are consumed by that single
    query construction; permanent ones apply to every construction for the
    lifetime of the repository.

    Subclasses usually pin the entity and may override the page size:

        class UserRepository(Repository[User]):
            model_class = User
            per_page = 25

    A repository holds mutable criteria state. Use one instance per request
    or unit of work rather than sharing it between concurrent callers.

    Args:
        resolver: Produces base queries and persists new records.
        model: The entity class. Falls back to the `model_class` class attribute.
        per_page: Default page size. Falls back to the `per_page` class
            attribute, then to `REPOKIT_PER_PAGE` from the configuration.

    Raises:
        TypeError: If no entity class is given either way.
    """

    model_class: ClassVar[type[Any] | None] = None
    per_page: int | None = None

    def __init__(
        self,
        resolver: EntityResolver,
        model: type[ModelT] | None = None,
        per_page: int | None = None,
    ):
        entity = model if model is not None else type(self).model_class
        if entity is None:
            raise TypeError(
                f"{type(self).__name__} needs an entity class: pass `model` "
                "or set `model_class` on the subclass"
            )
        self._model: type[ModelT] = entity
        self._resolver = resolver
        self._criteria = CriteriaRegistry()
        if per_page is None:
            per_page = type(self).per_page
        if per_page is None:
            per_page = get_config().per_page
        self.per_page = per_page

    def __repr__(self) -> str:
        return f"<{type(self).__name__}(model={self._model.__name__}, criteria={len(self._criteria)})>"

    @property
    def model(self) -> type[ModelT]:
        """The entity class; fixed at construction."""
        return self._model

    @property
    def registered_criteria(self) -> CriteriaRegistry:
        return self._criteria

    # --- Query lifecycle ---

    def query(self) -> QueryBuilder:
        """
        Build a fresh query for the entity with all registered criteria applied.

        Transient criteria are consumed by this call.
        """
        return self.apply_criteria(self._resolver.new_query(self._model))

    def criteria(self, criteria: Criteria, permanent: bool = False) -> Self:
        """
        Register a criteria for upcoming queries.

        No deduplication is done; registering the same instance twice applies
        it twice.

        Args:
            criteria: The rule to apply.
            permanent: Keep the criteria for every later query instead of only
                the next one.

        Returns:
            The repository, so registrations can be chained.
        """
        self._criteria.push(criteria, permanent)
        return self

    def apply_criteria(self, query: QueryBuilder) -> QueryBuilder:
        """Thread `query` through the registry, then reset transient criteria."""
        logger.debug(
            "Building %s query with %d criteria", self._model.__name__, len(self._criteria)
        )
        return self._criteria.apply(query)

    def remove_criteria(self, criteria: Criteria) -> Self:
        """Unregister every entry holding this criteria instance, permanent or not."""
        self._criteria.remove(criteria)
        return self

    def reset_criteria(self) -> Self:
        """Unregister all criteria."""
        self._criteria.clear()
        return self

    # --- Retrieval ---

    def all(self, columns: Columns = ALL_COLUMNS) -> list[ModelT]:
        return self.query().get(columns)

    def paginate(
        self, per_page: int | None = None, columns: Columns = ALL_COLUMNS, page: int = 1
    ) -> LengthAwarePage[ModelT]:
        """
        Get one page of records along with the total count.

        Args:
            per_page: Page size; the repository default when omitted.
            columns: Attributes to load.
            page: 1-based page number.
        """
        return self.query().paginate(self._page_size(per_page), columns, page)

    def simple_paginate(
        self, per_page: int | None = None, columns: Columns = ALL_COLUMNS, page: int = 1
    ) -> Page[ModelT]:
        """Get one page of records without counting the total."""
        return self.query().simple_paginate(self._page_size(per_page), columns, page)

    def find(self, id: Any, columns: Columns = ALL_COLUMNS) -> ModelT | None:
        return self.query().find(id, columns)

    def find_or_fail(self, id: Any, columns: Columns = ALL_COLUMNS) -> ModelT:
        """
        Find a record by primary key.

        Raises:
            NotFoundError: If no record matches.
        """
        return self.query().find_or_fail(id, columns)

    def first(self, columns: Columns = ALL_COLUMNS) -> ModelT | None:
        return self.query().first(columns)

    def first_or_fail(self, columns: Columns = ALL_COLUMNS) -> ModelT:
        """
        Get the first matching record.

        Raises:
            NotFoundError: If no record matches.
        """
        return self.query().first_or_fail(columns)

    def find_by(self, column: str, value: Any, columns: Columns = ALL_COLUMNS) -> ModelT | None:
        return self.query().where_equals(column, value).first(columns)

    def find_by_or_fail(self, column: str, value: Any, columns: Columns = ALL_COLUMNS) -> ModelT:
        """
        Find the first record whose `column` equals `value`.

        Raises:
            NotFoundError: If no record matches.
        """
        return self.query().where_equals(column, value).first_or_fail(columns)

    def count(self) -> int:
        return self.query().count()

    # --- Mutation ---

    def create(self, attributes: Mapping[str, Any]) -> ModelT:
        """
        Persist a new record.

        Goes straight to the resolver; registered criteria neither apply nor
        get consumed.
        """
        return self._resolver.create(self._model, attributes)

    def update(self, id: Any, attributes: Mapping[str, Any]) -> int:
        """Update the record with primary key `id` if the criteria allow it; returns rows affected."""
        return self.query().where_key(id).update(attributes)

    def update_all(self, attributes: Mapping[str, Any]) -> int:
        """Update every record matched by the registered criteria."""
        return self.query().update(attributes)

    def delete(self, id: Any) -> int:
        """Delete the record with primary key `id` if the criteria allow it; returns rows affected."""
        return self.query().where_key(id).delete()

    def delete_all(self) -> int:
        """Delete every record matched by the registered criteria."""
        return self.query().delete()

    def _page_size(self, per_page: int | None) -> int:
        return self.per_page if per_page is None else per_page
