"""
Declarative Base and Model Mixins.

Entity definitions belong to the host application; this module only provides
the shared pieces the repository layer knows how to work with:

- `Base`: a declarative base whose `MetaData` carries a consistent naming
  convention for constraints, so generated schema names stay predictable.
- `SoftDeleteMixin`: adds a nullable `deleted_at` timestamp. The
  `WithoutTrashed` and `OnlyTrashed` criteria filter on it.
- `TenantMixin`: adds an indexed `org_id` column. The `TenantScope` criteria
  filters on it.
"""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import TIMESTAMP, MetaData, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

metadata_obj = MetaData(
    naming_convention={
        "ix": "idx_%(table_name)s__%(column_0_label)s",  # Index
        "uq": "uq_%(table_name)s__%(column_0_name)s",  # Unique Constraint
        "ck": "ck_%(table_name)s__%(constraint_name)s",  # Check Constraint
        "fk": "fk_%(table_name)s__%(referred_table_name)s",  # Foreign Key
        "pk": "pk_%(table_name)s",  # Primary Key
    }
)


class Base(DeclarativeBase):
    """
    Common declarative base for models managed through repositories.

    Applications may use their own base instead; repositories accept any
    mapped class.
    """

    metadata = metadata_obj


class SoftDeleteMixin:
    """Marks a model as soft-deletable through a nullable `deleted_at` column."""

    deleted_at: Mapped[datetime | None] = mapped_column(TIMESTAMP(timezone=True), default=None)

    @property
    def trashed(self) -> bool:
        return self.deleted_at is not None

    def mark_deleted(self, when: datetime | None = None) -> None:
        self.deleted_at = when or datetime.now(UTC)


class TenantMixin:
    """Adds the tenant identifier used for data isolation."""

    org_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
