"""
Soft Delete Setup

One-call wiring of the query filter and the delete rewriter onto a session factory.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Optional, Tuple

from .config import INCLUDE_DELETED_OPTION
from .filters import SoftDeleteQueryFilter
from .interceptor import SoftDeleteInterceptor

logger = logging.getLogger(__name__)


def enable_soft_delete(
    model: Any,
    target: Any,
    clock: Optional[Callable[[], datetime]] = None,
    option: str = INCLUDE_DELETED_OPTION,
) -> Tuple[SoftDeleteInterceptor, SoftDeleteQueryFilter]:
    """
    Enable soft delete for a model on a session target

    Args:
        model: Declarative base, registry, or iterable of mapped classes
        target: Session, sessionmaker, scoped_session, AsyncSession or async_sessionmaker
        clock: Timestamp source for deleted_at, defaults to current UTC time
        option: Execution option name used to bypass the default filter

    Returns:
        Tuple of (interceptor, query filter), both already installed
    """
    query_filter = SoftDeleteQueryFilter(option=option)
    query_filter.install_filters(model)
    query_filter.install(target)

    interceptor = SoftDeleteInterceptor(clock=clock)
    interceptor.install(target)

    logger.info("Soft delete enabled for %d entity types", len(query_filter.entities))
    return interceptor, query_filter
