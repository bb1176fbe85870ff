"""
repokit: a criteria-driven repository layer over SQLAlchemy.

Application code reads and writes through `Repository` objects. Query shaping
is delegated to small `Criteria` objects that are registered on a repository
and applied, in registration order, every time it builds a query.

Key modules include:
-   `config`: Environment-driven settings (default page size, database URL).
-   `db`: Engine and transactional session management.
-   `models`: Declarative base and soft-delete / tenant mixins.
-   `query`: The SQLAlchemy query builder adapter and session resolver.
-   `criteria`: The criteria protocol, registry and ready-made criteria.
-   `repositories`: The generic `Repository`.
"""

from __future__ import annotations

from .exceptions import NotFoundError, PersistenceError, RepositoryError
from .query import SessionResolver, SQLAlchemyQuery
from .repositories import Repository

__version__ = "0.1.0"

__all__ = [
    "NotFoundError",
    "PersistenceError",
    "Repository",
    "RepositoryError",
    "SQLAlchemyQuery",
    "SessionResolver",
]
