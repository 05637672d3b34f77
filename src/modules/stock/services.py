"""Stock ledger use-cases.

Administrative CRUD and search.  Quantity mutations on behalf of orders go
straight through ``IStockRepository.decrement`` / ``increment`` from the
order service, inside its transaction.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional

import structlog
from django.db import transaction

from modules.stock.exceptions import StockItemNotFound, StockQuantityConflict
from modules.stock.models import StockItem

if TYPE_CHECKING:
    from modules.accounts.principal import Principal
    from modules.stock.dtos import CreateStockItemDTO, UpdateStockItemDTO
    from modules.stock.repositories.interfaces import IStockRepository

logger = structlog.get_logger(__name__)

# Editable columns other than ``quantity``, which has its own guarded path.
DETAIL_FIELDS = ("name", "category", "price", "barcode", "description", "image_url")


class StockService:
    """Application service for the Stock Ledger.

    Receives an ``IStockRepository`` via constructor injection.
    """

    def __init__(self, repository: IStockRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_item(self, actor: Principal, dto: CreateStockItemDTO) -> StockItem:
        item = StockItem(
            name=dto.name,
            category=dto.category,
            price=dto.price,
            quantity=dto.quantity,
            barcode=dto.barcode,
            description=dto.description,
            image_url=dto.image_url,
            created_by_id=actor.id,
        )
        item = self._repo.save(item)
        logger.info("stock.created", stock_item_id=str(item.id), created_by=actor.id)
        return item

    @transaction.atomic
    def update_item(self, id: str, dto: UpdateStockItemDTO) -> StockItem:
        """Apply a partial update.

        Only the supplied columns are written, so a concurrent order
        decrement is never overwritten.  A ``quantity`` edit is applied only
        if the on-hand quantity still equals the value that was read.

        Raises:
            StockItemNotFound: if the item does not exist.
            StockQuantityConflict: if the quantity changed in the meantime.
        """
        item = self.get_item(id)
        changed = []
        for field in DETAIL_FIELDS:
            value = getattr(dto, field)
            if value is not None:
                setattr(item, field, value)
                changed.append(field)
        if changed:
            item = self._repo.save(item, update_fields=changed)

        if dto.quantity is not None and dto.quantity != item.quantity:
            if not self._repo.set_quantity(item.id, item.quantity, dto.quantity):
                raise StockQuantityConflict(item.name, item.quantity)
            item.quantity = dto.quantity
        else:
            item.refresh_from_db(fields=["quantity"])

        logger.info("stock.updated", stock_item_id=str(item.id), fields=changed)
        return item

    @transaction.atomic
    def delete_item(self, id: str) -> None:
        if not self._repo.delete(id):
            raise StockItemNotFound(f"Stock item {id} not found.")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_item(self, id: str) -> StockItem:
        item = self._repo.get_by_id(id)
        if not item:
            raise StockItemNotFound(f"Stock item {id} not found.")
        return item

    def list_items(self, filters: Optional[Dict[str, Any]] = None) -> List[StockItem]:
        return self._repo.list(filters)

    def search(self, query: str, mode: str = "text") -> List[StockItem]:
        """Search the ledger; see ``IStockRepository.search``.

        Raises:
            ValueError: for an unknown ``mode``.
        """
        results = self._repo.search(query, mode)
        logger.info("stock.searched", mode=mode, results=len(results))
        return results
