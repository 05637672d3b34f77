"""Stock ledger repository interface."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.stock.models import StockItem


class IStockRepository(IRepository["StockItem"]):
    """Repository contract for the Stock Ledger."""

    @abstractmethod
    def search(self, query: str, mode: str = "text") -> List[StockItem]:
        """Case-insensitive match on name/description/category or exact barcode.

        ``mode="barcode"`` returns exact barcode hits when there are any and
        falls back to the text search otherwise.
        """

    @abstractmethod
    def decrement(self, id: str, amount: int) -> int:
        """Atomically subtract ``amount`` iff enough is on hand.

        Returns the remaining quantity.  Raises ``StockItemNotFound`` or
        ``InsufficientStock``; the row is untouched in both cases.
        """

    @abstractmethod
    def set_quantity(self, id: str, expected: int, quantity: int) -> bool:
        """Overwrite the quantity only if it still equals ``expected``.

        Returns ``False`` when the row changed in between (or is gone).
        """

    @abstractmethod
    def increment(self, id: str, amount: int) -> int:
        """Atomically add ``amount``; returns the new quantity."""

    @abstractmethod
    def get_including_deleted(self, id: str) -> Optional[StockItem]:
        """Retrieve an item even if it has been soft-deleted."""
