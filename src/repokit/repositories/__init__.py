"""
Data Access Layer: criteria-driven repositories.

A repository gives application code a simple interface over one entity class
while keeping SQLAlchemy sessions and statements out of sight. Query shaping
is expressed as criteria objects registered on the repository, either for the
next query only or permanently.

Usage:
```
from repokit.repositories import Repository

with get_db() as session:
    users = Repository(SessionResolver(session), User)
    users.criteria(TenantScope(org_id), permanent=True)
    page = users.criteria(OrderBy("created_at", "desc")).paginate()
```
"""

from __future__ import annotations

from .base import Repository

__all__ = ["Repository"]
