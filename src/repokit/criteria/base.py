"""
Criteria Protocol.

A criteria encapsulates one query-shaping rule: a filter, an ordering, a
scope. It receives a query builder and returns the query builder the next
stage should use. Generative builders return a new object; mutable builders
may return the same one. Either way the returned value is authoritative.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Criteria(Protocol):
    """Protocol for a single composable query-shaping rule."""

    def apply(self, query: Any) -> Any:
        """Return `query` shaped by this rule."""
        ...


class CallbackCriteria:
    """
    Adapts a plain `query -> query` callable to the `Criteria` protocol.

    Example:
        >>> recent = CallbackCriteria(lambda q: q.order_by(User.created_at.desc()))
    """

    def __init__(self, callback: Callable[[Any], Any], name: str | None = None):
        self.callback = callback
        self.name = name or getattr(callback, "__name__", "callback")

    def __repr__(self) -> str:
        return f"<CallbackCriteria({self.name})>"

    def apply(self, query: Any) -> Any:
        return self.callback(query)
