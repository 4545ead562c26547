"""
Soft Delete Query Filter

Installs a default "is_deleted IS false" predicate for every soft-deletable
entity type, plus query helpers for reading past it.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import inspect
from sqlalchemy.orm import ORMExecuteState, registry, with_loader_criteria

from .config import INCLUDE_DELETED_OPTION
from .events import attach, detach
from .models import SoftDeletable, is_soft_deletable

logger = logging.getLogger(__name__)


def _mapped_classes(model: Any) -> List[type]:
    """Collect mapped classes from a declarative base, a registry or an iterable of classes"""
    if isinstance(model, registry):
        return [mapper.class_ for mapper in model.mappers]

    if isinstance(model, type):
        mapper = inspect(model, raiseerr=False)
        if mapper is not None:
            return [model]
        model_registry = getattr(model, "registry", None)
        if isinstance(model_registry, registry):
            return [mapper.class_ for mapper in model_registry.mappers]
        raise TypeError(f"{model!r} is neither mapped nor a declarative base")

    if isinstance(model, Iterable) and not isinstance(model, (str, bytes)):
        return list(model)

    raise TypeError(f"Cannot install soft delete filters on {model!r}")


class SoftDeleteQueryFilter:
    """
    Default-Visibility Filter
    Registered once per model; enforced on every ORM SELECT through do_orm_execute
    """

    def __init__(self, option: str = INCLUDE_DELETED_OPTION):
        self.option = option
        self._criteria: Dict[type, Any] = {}

    @property
    def entities(self) -> List[type]:
        return list(self._criteria)

    def install_filters(self, model: Any) -> List[type]:
        """
        Register the visibility predicate for each soft-deletable mapped class

        Args:
            model: Declarative base, registry, or iterable of mapped classes

        Returns:
            Classes that received a predicate by this call
        """
        installed = []
        for cls in _mapped_classes(model):
            if cls in self._criteria or not is_soft_deletable(cls):
                continue
            mapper = inspect(cls, raiseerr=False)
            if mapper is None:
                raise TypeError(f"{cls!r} is not a mapped class")
            if "is_deleted" not in mapper.columns:
                continue

            self._criteria[cls] = with_loader_criteria(
                cls,
                lambda entity: entity.is_deleted.is_(False),
                include_aliases=True,
            )
            installed.append(cls)

        if installed:
            logger.info(
                "Installed soft delete filters for %s",
                ", ".join(cls.__name__ for cls in installed),
            )
        return installed

    def criteria_for(self, cls: type) -> Optional[Any]:
        return self._criteria.get(cls)

    def apply(self, execute_state: ORMExecuteState) -> None:
        """AND the registered predicates into a top-level ORM SELECT"""
        if not self._criteria or not execute_state.is_select:
            return
        # column refreshes must reach deleted rows; relationship loads inherit criteria
        if execute_state.is_column_load or execute_state.is_relationship_load:
            return
        if execute_state.execution_options.get(self.option, False):
            return

        execute_state.statement = execute_state.statement.options(*self._criteria.values())

    def install(self, target: Any) -> Any:
        """Attach the filter to a session, session class or session factory"""
        attach(target, "do_orm_execute", self.apply)
        return target

    def uninstall(self, target: Any) -> None:
        detach(target, "do_orm_execute", self.apply)


def is_visible(entity: SoftDeletable) -> bool:
    """Evaluate the default predicate against an in-memory entity"""
    return not entity.is_deleted


def include_deleted(query, option: str = INCLUDE_DELETED_OPTION):
    """Bypass the default soft delete predicate for this query"""
    return query.execution_options(**{option: True})


def filter_deleted(query, entity):
    """Filter out soft-deleted records of entity from query"""
    return query.filter(entity.is_deleted.is_(False))


def only_deleted(query, entity, option: str = INCLUDE_DELETED_OPTION):
    """Filter to show only soft-deleted records of entity"""
    return include_deleted(query, option).filter(entity.is_deleted.is_(True))
