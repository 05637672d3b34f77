"""Order repository interface.

Extends ``IRepository[Order]`` with the methods the Order aggregate
needs: creation with line items, locked reads, compare-and-swap status
updates, history tracking and the summary aggregate.

The Service Layer depends exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple
from uuid import UUID

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.orders.models import Order, OrderStatusHistory


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root.

    The Order aggregate includes OrderItem children and
    OrderStatusHistory records.  Mutations must be atomic.
    """

    @abstractmethod
    def create(self, data: Dict[str, Any]) -> Order:
        """Create an order with its items atomically.

        ``data`` must include ``sold_by_id``, ``subtotal``, ``tax``,
        ``total``, ``payment_method``, ``status``, ``customer_name`` and
        ``items`` (dicts with ``product_id``, ``product_name``,
        ``quantity``, ``unit_price``).
        """

    @abstractmethod
    def get_by_id(self, id: Any) -> Optional[Order]:
        """Retrieve an order with prefetched items and status history."""

    @abstractmethod
    def get_for_update(self, id: Any) -> Optional[Order]:
        """Retrieve an order with a row-level lock (SELECT FOR UPDATE)."""

    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        """List orders newest first, with optional ORM look-ups."""

    @abstractmethod
    def compare_and_set_status(
        self, id: UUID, expected_status: str, new_status: str
    ) -> bool:
        """Set ``new_status`` only if the stored status is still ``expected_status``."""

    @abstractmethod
    def add_history(
        self,
        order_id: UUID,
        status: str,
        notes: str = "",
        old_status: Optional[str] = None,
        user_id: Optional[int] = None,
    ) -> OrderStatusHistory:
        """Record a status change in the order's audit trail."""

    @abstractmethod
    def summarize(self, filters: Optional[Dict[str, Any]] = None) -> Tuple[int, Decimal]:
        """Return ``(count, sum of total)`` over orders matching ``filters``."""
