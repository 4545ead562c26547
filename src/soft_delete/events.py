"""
Session Hook Registration

Maps the session objects an application holds (sync or async) onto targets
accepted by SQLAlchemy session events.
"""

import logging
from typing import Any, Callable

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import Session, scoped_session, sessionmaker

logger = logging.getLogger(__name__)

_SCOPED_MARKER = "_soft_delete_scoped"


def resolve_session_target(target: Any) -> Any:
    """
    Resolve a session, session class or factory to a session events target

    An AsyncSession delegates to its sync_session. An async_sessionmaker gets
    a dedicated sync session subclass so listeners never leak onto the global
    Session class.
    """
    if isinstance(target, AsyncSession):
        return target.sync_session

    if isinstance(target, async_sessionmaker):
        sync_class = target.kw.get("sync_session_class") or target.class_.sync_session_class
        if _SCOPED_MARKER not in vars(sync_class):
            sync_class = type(sync_class.__name__, (sync_class,), {_SCOPED_MARKER: True})
            target.configure(sync_session_class=sync_class)
        return sync_class

    if isinstance(target, (Session, sessionmaker, scoped_session)):
        return target
    if isinstance(target, type) and issubclass(target, Session):
        return target

    raise TypeError(f"Cannot attach soft delete hooks to {target!r}")


def attach(target: Any, identifier: str, fn: Callable[..., Any]) -> None:
    """Register a session event listener once"""
    resolved = resolve_session_target(target)
    if event.contains(resolved, identifier, fn):
        return
    event.listen(resolved, identifier, fn)
    logger.info("Attached %s listener to %r", identifier, resolved)


def detach(target: Any, identifier: str, fn: Callable[..., Any]) -> None:
    """Remove a session event listener if present"""
    resolved = resolve_session_target(target)
    if event.contains(resolved, identifier, fn):
        event.remove(resolved, identifier, fn)
        logger.info("Detached %s listener from %r", identifier, resolved)
