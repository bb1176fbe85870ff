"""
Criteria Registry.

An ordered list of `CriteriaEntry` records owned by a single repository.
Application order is always registration order. After every application the
registry resets its transient entries, keeping only permanent ones in their
original relative order.

The registry holds plain mutable state without locking. Share a repository
(and therefore its registry) across threads only under external
synchronization.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

from .base import Criteria

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CriteriaEntry:
    """A registered criteria tagged with whether it outlives one query construction."""

    criteria: Criteria
    permanent: bool = False


class CriteriaRegistry:
    """Ordered, tagged list of criteria entries."""

    def __init__(self) -> None:
        self._entries: list[CriteriaEntry] = []

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[CriteriaEntry]:
        return iter(tuple(self._entries))

    def __repr__(self) -> str:
        permanent = sum(1 for entry in self._entries if entry.permanent)
        return f"<CriteriaRegistry(entries={len(self._entries)}, permanent={permanent})>"

    @property
    def entries(self) -> tuple[CriteriaEntry, ...]:
        return tuple(self._entries)

    def push(self, criteria: Criteria, permanent: bool = False) -> CriteriaEntry:
        """
        Append a criteria to the end of the registry.

        The same instance may be pushed more than once; every entry applies.

        Raises:
            TypeError: If `criteria` has no callable `apply`.
        """
        if not isinstance(criteria, Criteria):
            raise TypeError(
                f"criteria must provide an apply(query) method, got {type(criteria).__name__}"
            )
        entry = CriteriaEntry(criteria=criteria, permanent=permanent)
        self._entries.append(entry)
        return entry

    def apply(self, query: Any) -> Any:
        """
        Thread `query` through every entry in registration order.

        Each criteria receives the query returned by the previous one. Once all
        entries have applied, transient entries are reset.

        Returns:
            The query produced by the last criteria, or `query` itself when the
            registry is empty.
        """
        applied = len(self._entries)
        for entry in tuple(self._entries):
            query = entry.criteria.apply(query)
        self.reset_transient()
        logger.debug(
            "Applied %d criteria, %d permanent retained", applied, len(self._entries)
        )
        return query

    def reset_transient(self) -> None:
        """Drop every non-permanent entry, preserving the order of the rest."""
        self._entries = [entry for entry in self._entries if entry.permanent]

    def remove(self, criteria: Criteria) -> int:
        """
        Remove every entry holding this exact criteria instance.

        Returns:
            The number of entries removed.
        """
        kept = [entry for entry in self._entries if entry.criteria is not criteria]
        removed = len(self._entries) - len(kept)
        self._entries = kept
        return removed

    def clear(self) -> None:
        self._entries = []
