"""Django ORM implementation of the Order repository.

Satisfies ``IOrderRepository`` using Django's QuerySet API.
All write operations are wrapped in ``transaction.atomic()`` so the
Order aggregate (Order + OrderItems + outbox rows) is persisted
atomically.

Status changes combine a row lock (``select_for_update``) with a
compare-and-swap ``UPDATE ... WHERE status = <expected>``; the latter
still detects a concurrent change on backends without row locks.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Count, Sum
from django.utils import timezone

from modules.core.models import OutboxEvent
from modules.core.repositories.interfaces import translate_storage_errors
from modules.orders.exceptions import OrderValidationError
from modules.orders.models import Order, OrderItem, OrderStatusHistory
from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)

OUTBOX_TOPIC = "orders"


def _with_relations(queryset):
    return queryset.select_related("sold_by").prefetch_related(
        "items", "status_history"
    )


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Create (aggregate root + children)
    # ------------------------------------------------------------------

    @translate_storage_errors
    @transaction.atomic
    def create(self, data: Dict[str, Any]) -> Order:
        order = Order(
            sold_by_id=data["sold_by_id"],
            subtotal=data["subtotal"],
            tax=data["tax"],
            total=data["total"],
            payment_method=data["payment_method"],
            status=data["status"],
            customer_name=data["customer_name"],
        )
        order.save()

        items = data.get("items", [])
        for item_data in items:
            OrderItem(
                order=order,
                product_id=item_data["product_id"],
                product_name=item_data["product_name"],
                quantity=item_data["quantity"],
                unit_price=item_data["unit_price"],
            ).save()

        logger.info(
            "order.persisted",
            order_id=str(order.id),
            order_number=order.order_number,
            item_count=len(items),
        )
        return order

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    @translate_storage_errors
    def get_by_id(self, id: Any) -> Optional[Order]:
        """Retrieve an order with eager-loaded relations.

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return _with_relations(Order.objects.filter(id=id)).first()
        except (ValueError, ValidationError):
            return None

    @translate_storage_errors
    def get_for_update(self, id: Any) -> Optional[Order]:
        """Retrieve an order with a row-level lock (SELECT FOR UPDATE).

        Must run inside a transaction.  Items are loaded so the caller can
        apply stock side effects while the row is locked.
        """
        try:
            return (
                Order.objects.select_for_update(of=("self",))
                .select_related("sold_by")
                .prefetch_related("items")
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    @translate_storage_errors
    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        """List orders newest first.

        Supported filter keys are plain ORM look-ups, e.g.
        ``sold_by_id``, ``status``, ``created_at__gte``, ``created_at__lt``.
        """
        queryset = Order.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return list(_with_relations(queryset).order_by("-created_at", "-id"))

    @translate_storage_errors
    def summarize(self, filters: Optional[Dict[str, Any]] = None) -> Tuple[int, Decimal]:
        queryset = Order.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        result = queryset.aggregate(count=Count("id"), total_value=Sum("total"))
        return result["count"], result["total_value"] or Decimal("0")

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    @translate_storage_errors
    def compare_and_set_status(
        self, id: UUID, expected_status: str, new_status: str
    ) -> bool:
        updated = Order.objects.filter(id=id, status=expected_status).update(
            status=new_status, updated_at=timezone.now()
        )
        return updated == 1

    @translate_storage_errors
    @transaction.atomic
    def add_history(
        self,
        order_id: UUID,
        status: str,
        notes: str = "",
        old_status: Optional[str] = None,
        user_id: Optional[int] = None,
    ) -> OrderStatusHistory:
        """Record a status change in the order's audit trail."""
        history = OrderStatusHistory(
            order_id=order_id,
            old_status=old_status,
            new_status=status,
            notes=notes,
            user_id=user_id,
        )
        history.save()

        logger.info(
            "order.history_added",
            order_id=str(order_id),
            old_status=old_status,
            new_status=status,
        )
        return history

    # ------------------------------------------------------------------
    # Save / Delete (IRepository contract)
    # ------------------------------------------------------------------

    @translate_storage_errors
    @transaction.atomic
    def save(self, entity: Order) -> Order:
        """Persist an order and write its pending domain events to the outbox."""
        entity.save()

        events = entity.domain_events
        for event in events:
            OutboxEvent.objects.create(
                event_type=event.event_name,
                aggregate_id=str(event.aggregate_id),
                payload=event.to_payload(),
                topic=OUTBOX_TOPIC,
            )
        entity.clear_domain_events()

        logger.info("order.saved", order_id=str(entity.id), event_count=len(events))
        return entity

    def delete(self, id: Any) -> bool:
        """Orders are never deleted; cancellation is a status."""
        raise OrderValidationError("Orders cannot be deleted; cancel them instead.")
