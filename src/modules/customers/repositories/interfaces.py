"""Customer repository interface.

Extends ``IRepository[Customer]`` with the telephone look-up used by the
uniqueness rule.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.customers.models import Customer


class ICustomerRepository(IRepository["Customer"]):
    """Repository contract for the Customer aggregate."""

    @abstractmethod
    def get_by_telephone(self, telephone: str) -> Optional[Customer]:
        """Retrieve a customer (soft-deleted ones included) by telephone."""
