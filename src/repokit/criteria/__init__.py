"""
Composable query-shaping criteria and the registry repositories keep them in.
"""

from __future__ import annotations

from .base import CallbackCriteria, Criteria
from .common import (
    EagerLoad,
    Limit,
    OnlyTrashed,
    OrderBy,
    TenantScope,
    WhereBetween,
    WhereEquals,
    WhereIn,
    WhereNotNull,
    WhereNull,
    WithoutTrashed,
)
from .registry import CriteriaEntry, CriteriaRegistry

__all__ = [
    "CallbackCriteria",
    "Criteria",
    "CriteriaEntry",
    "CriteriaRegistry",
    "EagerLoad",
    "Limit",
    "OnlyTrashed",
    "OrderBy",
    "TenantScope",
    "WhereBetween",
    "WhereEquals",
    "WhereIn",
    "WhereNotNull",
    "WhereNull",
    "WithoutTrashed",
]
