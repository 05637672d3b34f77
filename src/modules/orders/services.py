"""Order service layer (Use Cases).

Orchestrates order creation against the stock ledger, status
transitions with their stock side effects, and the read-side queries.
Every write runs in one ``transaction.atomic`` block: either the order,
its line items, every stock mutation, the history row and the outbox
events are committed together, or nothing is.

Rules enforced:
- Stock never goes negative: each line is a conditional decrement; the
  first shortfall aborts the whole order.
- Lines are decremented in product-id order so concurrent orders take
  row locks in the same order.
- Representatives follow the linear status workflow and only touch their
  own orders; admins may move an order to any other status.
- Completed -> Cancelled restores stock; Cancelled -> Completed deducts it
  again (all-or-nothing).
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple
from uuid import UUID

import structlog
from django.conf import settings
from django.db import transaction
from django.utils import timezone

from modules.orders.constants import (
    OrderStatus,
    StockEffect,
    stock_effect,
)
from modules.orders.dtos import OrderSummaryDTO, SalesOverviewDTO
from modules.orders.events import OrderCancelled, OrderCreated, OrderStatusChanged
from modules.orders.exceptions import (
    InsufficientStock,
    InvalidOrderTransition,
    OrderAccessDenied,
    OrderNotFound,
    OrderValidationError,
    StaleOrderStatus,
    StockItemNotFound,
)

if TYPE_CHECKING:
    from modules.accounts.principal import Principal
    from modules.orders.dtos import CreateOrderDTO
    from modules.orders.models import Order, OrderItem
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.stock.repositories.interfaces import IStockRepository

logger = structlog.get_logger(__name__)

ACCESS_DENIED_MESSAGE = "You do not have permission to access this order."
ADMIN_REQUIRED_MESSAGE = "Admin privileges required."
OVERVIEW_WINDOW_DAYS = 7


def day_bounds(on_date: date) -> Tuple[datetime, datetime]:
    """``[local midnight, next local midnight)`` for ``on_date``."""
    start = timezone.make_aware(datetime.combine(on_date, time.min))
    end = timezone.make_aware(datetime.combine(on_date + timedelta(days=1), time.min))
    return start, end


class OrderService:
    """Application service for Order use-cases.

    Receives repositories via constructor injection (DIP).
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        stock_repository: IStockRepository,
    ) -> None:
        self._order_repo = order_repository
        self._stock_repo = stock_repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_order(self, actor: Principal, dto: CreateOrderDTO) -> Order:
        """Create an order and decrement stock for every line.

        Steps:
        1. Optionally verify totals (``ORDERS_VERIFY_TOTALS``).
        2. For each line, sorted by product id: conditional decrement.
           The first failure raises and rolls back every decrement.
        3. Persist order + items with name snapshots from the ledger.
        4. Record the initial history row and the ``OrderCreated`` event.

        Raises:
            OrderValidationError: totals mismatch in strict mode.
            StockItemNotFound: a product does not exist.
            InsufficientStock: a product lacks the requested quantity.
        """
        log = logger.bind(seller_id=actor.id, item_count=len(dto.items))
        log.info("order.creation_started")

        if settings.ORDERS_VERIFY_TOTALS:
            self._verify_totals(dto)

        names: Dict[UUID, str] = {}
        for line in sorted(dto.items, key=lambda item: str(item.product_id)):
            stock_item = self._stock_repo.get_by_id(line.product_id)
            if stock_item is None:
                raise StockItemNotFound(f"Stock item {line.product_id} not found.")
            self._stock_repo.decrement(line.product_id, line.quantity)
            names[line.product_id] = stock_item.name

        order = self._order_repo.create(
            {
                "sold_by_id": actor.id,
                "subtotal": dto.subtotal,
                "tax": dto.tax,
                "total": dto.total,
                "payment_method": dto.payment_method,
                "status": dto.status,
                "customer_name": dto.customer_name or settings.WALK_IN_CUSTOMER_NAME,
                "items": [
                    {
                        "product_id": line.product_id,
                        "product_name": names[line.product_id],
                        "quantity": line.quantity,
                        "unit_price": line.price,
                    }
                    for line in dto.items
                ],
            }
        )

        self._order_repo.add_history(
            order_id=order.id,
            status=order.status,
            notes="Order created",
            user_id=actor.id,
        )
        order.add_domain_event(
            OrderCreated(
                aggregate_id=order.id,
                order_number=order.order_number,
                sold_by_id=actor.id,
                status=order.status,
                total=str(order.total),
            )
        )
        self._order_repo.save(order)

        log.info(
            "order.created",
            order_id=str(order.id),
            order_number=order.order_number,
            status=order.status,
            total=str(order.total),
        )
        return self._order_repo.get_by_id(order.id) or order

    @transaction.atomic
    def update_status(
        self,
        actor: Principal,
        order_id: Any,
        new_status: str,
        notes: str = "",
    ) -> Order:
        """Move an order to ``new_status`` and apply the stock side effect.

        The order row is locked first; the final write is a
        compare-and-swap on the status read under that lock.

        Raises:
            OrderValidationError: ``new_status`` is not a known status.
            OrderNotFound: order does not exist.
            OrderAccessDenied: a representative targets another seller's order.
            InvalidOrderTransition: target not reachable for this actor.
            InsufficientStock: re-completing a cancelled order lacks stock.
            StaleOrderStatus: the status changed concurrently.
        """
        if new_status not in OrderStatus.values:
            raise OrderValidationError(f"Unknown order status {new_status!r}.")

        order = self._order_repo.get_for_update(order_id)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        self._ensure_can_access(actor, order)

        old_status = order.status
        log = logger.bind(
            order_id=str(order.id),
            actor_id=actor.id,
            old_status=old_status,
            new_status=new_status,
        )

        if not order.can_transition_to(new_status, actor.role):
            log.warning("order.invalid_transition")
            raise InvalidOrderTransition(
                f"Cannot change order status from {old_status} to {new_status}."
            )

        effect = stock_effect(old_status, new_status)
        items = sorted(order.items.all(), key=lambda item: str(item.product_id))
        if effect is StockEffect.RESTORE:
            self._restore_stock(items)
        elif effect is StockEffect.DEDUCT:
            self._deduct_stock(items)

        if not self._order_repo.compare_and_set_status(order.id, old_status, new_status):
            log.warning("order.stale_status")
            raise StaleOrderStatus(
                "Order status changed concurrently; reload and try again."
            )

        order.status = new_status
        self._order_repo.add_history(
            order_id=order.id,
            status=new_status,
            notes=notes,
            old_status=old_status,
            user_id=actor.id,
        )
        order.add_domain_event(
            OrderStatusChanged(
                aggregate_id=order.id,
                old_status=old_status,
                new_status=new_status,
                changed_by_id=actor.id,
            )
        )
        if new_status == OrderStatus.CANCELLED:
            order.add_domain_event(
                OrderCancelled(
                    aggregate_id=order.id,
                    previous_status=old_status,
                    stock_restored=effect is StockEffect.RESTORE,
                )
            )
        self._order_repo.save(order)

        log.info("order.status_updated", stock_effect=effect.value)
        return self._order_repo.get_by_id(order.id) or order

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, actor: Principal, order_id: Any) -> Order:
        """Retrieve a single order.

        Raises:
            OrderNotFound: if the order does not exist.
            OrderAccessDenied: if a representative asks for another's order.
        """
        order = self._order_repo.get_by_id(order_id)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        self._ensure_can_access(actor, order)
        return order

    def list_orders(
        self,
        actor: Principal,
        on_date: Optional[date] = None,
        seller_id: Optional[int] = None,
    ) -> List[Order]:
        """Orders newest first.

        Representatives always get their own orders; ``seller_id`` is
        honoured for admins only.
        """
        filters: Dict[str, Any] = {}
        if on_date is not None:
            start, end = day_bounds(on_date)
            filters["created_at__gte"] = start
            filters["created_at__lt"] = end

        if not actor.is_admin:
            filters["sold_by_id"] = actor.id
        elif seller_id is not None:
            filters["sold_by_id"] = seller_id

        return self._order_repo.list(filters)

    def summarize(
        self, actor: Principal, on_date: Optional[date] = None
    ) -> OrderSummaryDTO:
        """Count and total value of Completed orders (admin only)."""
        self._ensure_admin(actor)
        filters: Dict[str, Any] = {"status": OrderStatus.COMPLETED}
        if on_date is not None:
            start, end = day_bounds(on_date)
            filters["created_at__gte"] = start
            filters["created_at__lt"] = end

        count, total_value = self._order_repo.summarize(filters)
        return OrderSummaryDTO(on_date=on_date, count=count, total_value=total_value)

    def sales_overview(self, actor: Principal) -> SalesOverviewDTO:
        """Completed sales since local midnight and over the last seven days."""
        self._ensure_admin(actor)
        today = timezone.localdate()
        today_start, _ = day_bounds(today)
        week_start, _ = day_bounds(today - timedelta(days=OVERVIEW_WINDOW_DAYS))

        today_count, today_value = self._order_repo.summarize(
            {"status": OrderStatus.COMPLETED, "created_at__gte": today_start}
        )
        week_count, week_value = self._order_repo.summarize(
            {"status": OrderStatus.COMPLETED, "created_at__gte": week_start}
        )
        return SalesOverviewDTO(
            today=OrderSummaryDTO(
                on_date=today, count=today_count, total_value=today_value
            ),
            week=OrderSummaryDTO(count=week_count, total_value=week_value),
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _verify_totals(self, dto: CreateOrderDTO) -> None:
        expected_subtotal = dto.computed_subtotal()
        if dto.subtotal != expected_subtotal:
            raise OrderValidationError(
                f"Subtotal {dto.subtotal} does not match line items "
                f"({expected_subtotal})."
            )
        if dto.total != dto.subtotal + dto.tax:
            raise OrderValidationError(
                f"Total {dto.total} does not equal subtotal plus tax "
                f"({dto.subtotal + dto.tax})."
            )

    def _restore_stock(self, items: List[OrderItem]) -> None:
        for item in items:
            self._stock_repo.increment(item.product_id, item.quantity)

    def _deduct_stock(self, items: List[OrderItem]) -> None:
        for item in items:
            try:
                self._stock_repo.decrement(item.product_id, item.quantity)
            except StockItemNotFound as exc:
                # A removed product can no longer be sold.
                raise InsufficientStock(item.product_name, 0) from exc

    @staticmethod
    def _ensure_can_access(actor: Principal, order: Order) -> None:
        if actor.is_admin or order.sold_by_id == actor.id:
            return
        logger.warning(
            "order.access_denied", order_id=str(order.id), actor_id=actor.id
        )
        raise OrderAccessDenied(ACCESS_DENIED_MESSAGE)

    @staticmethod
    def _ensure_admin(actor: Principal) -> None:
        if not actor.is_admin:
            raise OrderAccessDenied(ADMIN_REQUIRED_MESSAGE)
