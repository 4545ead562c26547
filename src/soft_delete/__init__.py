"""
Soft Delete for SQLAlchemy

Rewrites deletes of marked entities into updates and hides soft-deleted rows
from ORM queries unless a query opts out.
"""

from .config import INCLUDE_DELETED_OPTION, PURGE_INFO_KEY
from .extension import enable_soft_delete
from .filters import (
    SoftDeleteQueryFilter,
    filter_deleted,
    include_deleted,
    is_visible,
    only_deleted,
)
from .interceptor import SoftDeleteInterceptor, purge, purge_async
from .models import (
    SOFT_DELETE_FIELDS,
    SoftDeletable,
    SoftDeleteMixin,
    is_soft_deletable,
    restore,
)

__all__ = [
    "INCLUDE_DELETED_OPTION",
    "PURGE_INFO_KEY",
    "SOFT_DELETE_FIELDS",
    "SoftDeletable",
    "SoftDeleteInterceptor",
    "SoftDeleteMixin",
    "SoftDeleteQueryFilter",
    "enable_soft_delete",
    "filter_deleted",
    "include_deleted",
    "is_soft_deletable",
    "is_visible",
    "only_deleted",
    "purge",
    "purge_async",
    "restore",
]
