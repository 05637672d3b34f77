"""Django ORM implementation of the Stock Ledger repository.

Quantity changes never read-then-write: ``decrement`` is a single
conditional ``UPDATE ... SET quantity = quantity - n WHERE quantity >= n``
and ``increment`` a single ``UPDATE ... SET quantity = quantity + n``.
Callers that mutate several rows (order creation, cancellation) wrap the
calls in their own ``transaction.atomic`` block.
"""

from __future__ import annotations

import uuid
from typing import Any, Dict, List, Optional

import structlog
from django.db import transaction
from django.db.models import F, Q
from django.utils import timezone

from modules.core.repositories.interfaces import translate_storage_errors
from modules.stock.exceptions import InsufficientStock, StockItemNotFound
from modules.stock.models import StockItem
from modules.stock.repositories.interfaces import IStockRepository

logger = structlog.get_logger(__name__)

SEARCH_MODES = ("text", "barcode")


def _parse_id(id: Any) -> Optional[uuid.UUID]:
    if isinstance(id, uuid.UUID):
        return id
    try:
        return uuid.UUID(str(id))
    except (TypeError, ValueError):
        return None


def _require_positive(amount: int) -> None:
    if isinstance(amount, bool) or not isinstance(amount, int) or amount < 1:
        raise ValueError(f"Amount must be a positive integer, got {amount!r}.")


class StockDjangoRepository(IStockRepository):
    """Concrete Stock Ledger backed by Django ORM."""

    @translate_storage_errors
    def get_by_id(self, id: Any) -> Optional[StockItem]:
        """Return a live (not soft-deleted) item, or ``None``."""
        pk = _parse_id(id)
        if pk is None:
            return None
        return StockItem.objects.alive().filter(id=pk).first()

    @translate_storage_errors
    def get_including_deleted(self, id: Any) -> Optional[StockItem]:
        pk = _parse_id(id)
        if pk is None:
            return None
        return StockItem.objects.filter(id=pk).first()

    @translate_storage_errors
    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[StockItem]:
        queryset = StockItem.objects.alive()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset.order_by("name"))

    @translate_storage_errors
    def search(self, query: str, mode: str = "text") -> List[StockItem]:
        if mode not in SEARCH_MODES:
            raise ValueError(f"Unknown search mode {mode!r}.")

        term = (query or "").strip()
        queryset = StockItem.objects.alive()
        if not term:
            return list(queryset.order_by("name"))

        if mode == "barcode":
            hits = list(queryset.filter(barcode=term))
            if hits:
                return hits
            return list(queryset.filter(_text_match(term)))

        return list(
            queryset.filter(_text_match(term) | Q(barcode=term)).order_by("name")
        )

    @translate_storage_errors
    def decrement(self, id: Any, amount: int) -> int:
        _require_positive(amount)
        pk = _parse_id(id)
        if pk is None:
            raise StockItemNotFound(f"Stock item {id} not found.")

        with transaction.atomic():
            updated = (
                StockItem.objects.alive()
                .filter(id=pk, quantity__gte=amount)
                .update(quantity=F("quantity") - amount, updated_at=timezone.now())
            )
            row = (
                StockItem.objects.alive()
                .filter(id=pk)
                .values("name", "quantity")
                .first()
            )

        if row is None:
            raise StockItemNotFound(f"Stock item {id} not found.")
        if not updated:
            logger.warning(
                "stock.insufficient",
                stock_item_id=str(pk),
                requested=amount,
                available=row["quantity"],
            )
            raise InsufficientStock(row["name"], row["quantity"])

        logger.info(
            "stock.decremented",
            stock_item_id=str(pk),
            amount=amount,
            remaining=row["quantity"],
        )
        return row["quantity"]

    @translate_storage_errors
    def increment(self, id: Any, amount: int) -> int:
        """Add stock back, soft-deleted rows included (cancellations restore them too)."""
        _require_positive(amount)
        pk = _parse_id(id)
        if pk is None:
            raise StockItemNotFound(f"Stock item {id} not found.")

        with transaction.atomic():
            updated = StockItem.objects.filter(id=pk).update(
                quantity=F("quantity") + amount, updated_at=timezone.now()
            )
            if not updated:
                raise StockItemNotFound(f"Stock item {id} not found.")
            quantity = StockItem.objects.filter(id=pk).values_list(
                "quantity", flat=True
            ).get()

        logger.info(
            "stock.incremented",
            stock_item_id=str(pk),
            amount=amount,
            quantity=quantity,
        )
        return quantity

    @translate_storage_errors
    def set_quantity(self, id: Any, expected: int, quantity: int) -> bool:
        pk = _parse_id(id)
        if pk is None:
            return False
        updated = StockItem.objects.filter(id=pk, quantity=expected).update(
            quantity=quantity, updated_at=timezone.now()
        )
        if updated:
            logger.info(
                "stock.quantity_set",
                stock_item_id=str(pk),
                previous=expected,
                quantity=quantity,
            )
        return bool(updated)

    @translate_storage_errors
    @transaction.atomic
    def save(
        self, entity: StockItem, update_fields: Optional[List[str]] = None
    ) -> StockItem:
        """Persist ``entity``; existing rows can be limited to ``update_fields``."""
        is_new = entity._state.adding
        if is_new or update_fields is None:
            entity.save()
        else:
            entity.save(update_fields=update_fields)
        logger.info("stock.saved", stock_item_id=str(entity.id), is_new=is_new)
        return entity

    @translate_storage_errors
    @transaction.atomic
    def delete(self, id: Any) -> bool:
        """Soft-delete; returns ``False`` when no live item matches."""
        item = self.get_by_id(id)
        if not item:
            return False
        item.delete()
        logger.info("stock.soft_deleted", stock_item_id=str(item.id))
        return True


def _text_match(term: str) -> Q:
    return (
        Q(name__icontains=term)
        | Q(description__icontains=term)
        | Q(category__icontains=term)
    )
