"""Generic repository interface (Dependency Inversion Principle).

Provides ``IRepository[T]``, the base abstract class that all
domain-specific repository interfaces extend.  Service-layer code
depends on this abstraction, never on Django ORM directly.

``translate_storage_errors`` wraps concrete repository methods so that
driver-level ``DatabaseError`` never escapes the persistence layer.
"""

from __future__ import annotations

import functools
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Generic, Iterable, Optional, TypeVar

import structlog
from django.db import DatabaseError, IntegrityError

from modules.core.exceptions import StorageError

T = TypeVar("T")
F = TypeVar("F", bound=Callable[..., Any])

logger = structlog.get_logger(__name__)


def translate_storage_errors(func: F) -> F:
    """Re-raise ``DatabaseError`` (except integrity violations) as ``StorageError``."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except IntegrityError:
            raise
        except DatabaseError as exc:
            logger.error(
                "repository.storage_error",
                operation=func.__qualname__,
                error=str(exc),
            )
            raise StorageError(str(exc)) from exc

    return wrapper  # type: ignore[return-value]


class IRepository(ABC, Generic[T]):
    """Base generic repository contract.

    Type parameter ``T`` represents the domain entity managed by the
    repository (e.g. ``StockItem``, ``Customer``).
    """

    @abstractmethod
    def get_by_id(self, id: Any) -> Optional[T]:
        """Retrieve an entity by its primary key."""

    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> Iterable[T]:
        """List entities with optional filters."""

    @abstractmethod
    def save(self, entity: T) -> T:
        """Persist (create or update) an entity."""

    @abstractmethod
    def delete(self, id: Any) -> bool:
        """Remove an entity by ID (soft or hard delete)."""
