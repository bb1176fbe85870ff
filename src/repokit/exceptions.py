"""
Error types raised by the repository layer.

`NotFoundError` is the only condition this layer originates. Everything else
(integrity violations, connectivity failures, malformed statements) comes from
SQLAlchemy and reaches the caller unchanged; `PersistenceError` names that
family for callers that want to catch it.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

PersistenceError = SQLAlchemyError


class RepositoryError(Exception):
    """Base class for errors raised by repokit itself."""


class NotFoundError(RepositoryError, LookupError):
    """
    Raised by the `*_or_fail` operations when no record matches.

    Attributes:
        model: The mapped entity class that was queried.
        ids: The identifiers that were looked up, empty for predicate lookups.
    """

    def __init__(self, model: type[Any], ids: Sequence[Any] = ()) -> None:
        self.model = model
        self.ids = tuple(ids)
        name = getattr(model, "__name__", repr(model))
        if self.ids:
            joined = ", ".join(str(i) for i in self.ids)
            message = f"No query results for model [{name}] {joined}"
        else:
            message = f"No query results for model [{name}]"
        super().__init__(message)


__all__ = ["NotFoundError", "PersistenceError", "RepositoryError"]
