"""
Soft Delete Interceptor

Rewrites pending deletes of soft-deletable entities into updates right before
the session flushes. Entities without the marker are still hard deleted.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from .config import PURGE_INFO_KEY
from .events import attach, detach
from .models import is_soft_deletable

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SoftDeleteInterceptor:
    """
    Delete-to-Update Rewriter
    Hooks into before_flush for both Session.commit() and AsyncSession.commit()
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self.clock = clock or utcnow

    def before_persist(self, session: Optional[Any]) -> int:
        """
        Convert pending deletes of soft-deletable entities into updates

        Args:
            session: Session or AsyncSession about to flush; None is a no-op

        Returns:
            Number of entries rewritten
        """
        if session is None:
            return 0
        if isinstance(session, AsyncSession):
            session = session.sync_session

        pending = list(session.deleted)
        purged = session.info.get(PURGE_INFO_KEY)
        if purged:
            # marks only hold for entries that are still pending deletion
            purged &= {inspect(entity) for entity in pending}
        rewritten = 0

        for entity in pending:
            state = inspect(entity)
            if purged and state in purged:
                purged.discard(state)
                logger.debug("Purging %s %s", type(entity).__name__, state.identity)
                continue

            if not is_soft_deletable(entity):
                continue

            # re-adding a persistent instance drops it from the pending deletes
            session.add(entity)
            entity.is_deleted = True
            entity.deleted_at = self.clock()
            rewritten += 1
            logger.debug("Soft deleted %s %s", type(entity).__name__, state.identity)

        return rewritten

    def _before_flush(self, session: Session, flush_context, instances) -> None:
        self.before_persist(session)

    def _after_transaction_end(self, session: Session, transaction) -> None:
        if transaction.parent is None:
            session.info.pop(PURGE_INFO_KEY, None)

    def _persistent_to_detached(self, session: Session, state) -> None:
        purged = session.info.get(PURGE_INFO_KEY)
        if purged:
            purged.discard(state)

    def install(self, target: Any) -> Any:
        """Attach the rewriter to a session, session class or session factory"""
        attach(target, "before_flush", self._before_flush)
        attach(target, "after_transaction_end", self._after_transaction_end)
        attach(target, "persistent_to_detached", self._persistent_to_detached)
        return target

    def uninstall(self, target: Any) -> None:
        detach(target, "before_flush", self._before_flush)
        detach(target, "after_transaction_end", self._after_transaction_end)
        detach(target, "persistent_to_detached", self._persistent_to_detached)


def _mark_purged(session: Session, entity: Any) -> None:
    session.info.setdefault(PURGE_INFO_KEY, set()).add(inspect(entity))


def purge(session: Session, entity: Any) -> None:
    """
    Delete an entity permanently, bypassing the soft delete rewrite

    The entity is hard deleted on the next flush even if it is soft deletable.
    The mark is dropped if the entity leaves the session or the transaction
    ends before that flush.
    """
    session.delete(entity)
    _mark_purged(session, entity)


async def purge_async(session: AsyncSession, entity: Any) -> None:
    """Async counterpart of purge()"""
    await session.delete(entity)
    _mark_purged(session.sync_session, entity)
