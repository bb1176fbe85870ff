"""Page containers returned by the pagination operations."""

from __future__ import annotations

import math
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class Page(BaseModel, Generic[T]):
    """
    A single page of records, produced by `simple_paginate`.

    Only knows whether another page follows; the total is never counted.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    items: list[T]
    per_page: int = Field(ge=1)
    current_page: int = Field(ge=1)
    has_more: bool = False

    @property
    def on_first_page(self) -> bool:
        return self.current_page == 1

    def __len__(self) -> int:
        return len(self.items)


class LengthAwarePage(Page[T], Generic[T]):
    """A page that also carries the total number of matching records, from `paginate`."""

    total: int = Field(ge=0)

    @property
    def last_page(self) -> int:
        return max(1, math.ceil(self.total / self.per_page))
