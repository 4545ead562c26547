"""
Soft Delete Models

Capability marker for entities that are hidden instead of removed, plus an
optional declarative mixin carrying the matching columns.
"""

from datetime import datetime
from typing import Any, Optional, Protocol, runtime_checkable

from sqlalchemy import Boolean, Column, DateTime, String

SOFT_DELETE_FIELDS = ("is_deleted", "deleted_at", "deleted_by")


@runtime_checkable
class SoftDeletable(Protocol):
    """
    Soft Deletable
    Any entity exposing these three attributes is soft deleted instead of removed
    """

    is_deleted: bool
    deleted_at: Optional[datetime]
    deleted_by: Optional[str]


class SoftDeleteMixin:
    """
    Soft Delete Columns
    Convenience mixin for declarative models; declaring the columns by hand works the same
    """

    is_deleted = Column(Boolean, nullable=False, default=False, index=True)
    deleted_at = Column(DateTime(timezone=True), nullable=True)
    deleted_by = Column(String(255), nullable=True)

    def restore(self) -> None:
        """Clear the soft delete markers; persisted on the next commit"""
        restore(self)


def is_soft_deletable(target: Any) -> bool:
    """
    Check whether an entity instance or class carries the soft delete marker

    Classes are checked by attribute presence since data protocols do not
    support issubclass().
    """
    if isinstance(target, type):
        return all(hasattr(target, name) for name in SOFT_DELETE_FIELDS)
    return isinstance(target, SoftDeletable)


def restore(entity: SoftDeletable) -> None:
    """Bring a soft-deleted entity back to the active state"""
    entity.is_deleted = False
    entity.deleted_at = None
    entity.deleted_by = None
