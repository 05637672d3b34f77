"""Unit tests for ``OrderService.create_order``.

Covers:
- Stock decrement per line and insufficient-stock rejection.
- All-or-nothing behaviour for multi-item orders.
- Name snapshot, caller price, walk-in default.
- Trusting vs strict (``ORDERS_VERIFY_TOTALS``) totals.
- Initial history row and ``OrderCreated`` outbox event.
"""

from __future__ import annotations

from decimal import Decimal
from uuid import uuid4

import pytest

from modules.core.models import OutboxEvent
from modules.orders.constants import OrderStatus, PaymentMethod
from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO
from modules.orders.exceptions import (
    InsufficientStock,
    OrderValidationError,
    StockItemNotFound,
)
from modules.orders.models import Order, OrderStatusHistory
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.stock.repositories.django_repository import StockDjangoRepository

pytestmark = pytest.mark.unit


@pytest.fixture()
def service():
    return OrderService(
        order_repository=OrderDjangoRepository(),
        stock_repository=StockDjangoRepository(),
    )


def _order_dto(lines, subtotal=None, **overrides) -> CreateOrderDTO:
    items = [
        CreateOrderItemDTO(product_id=item.id, quantity=qty, price=Decimal(price))
        for item, qty, price in lines
    ]
    if subtotal is None:
        subtotal = sum((i.price * i.quantity for i in items), Decimal("0"))
    data = {"items": items, "subtotal": subtotal, "total": subtotal}
    data.update(overrides)
    return CreateOrderDTO(**data)


class TestCreateOrderStock:
    def test_decrements_stock(self, service, rep, widget):
        widget.quantity = 5
        widget.save()

        order = service.create_order(rep, _order_dto([(widget, 3, "10")]))

        widget.refresh_from_db()
        assert widget.quantity == 2
        assert order.status == OrderStatus.COMPLETED
        assert order.subtotal == Decimal("30")
        assert order.total == Decimal("30")
        assert order.sold_by_id == rep.id

    def test_insufficient_stock_leaves_quantity_unchanged(self, service, rep, widget):
        widget.quantity = 2
        widget.save()

        with pytest.raises(InsufficientStock) as exc_info:
            service.create_order(rep, _order_dto([(widget, 5, "10")]))

        assert exc_info.value.product_name == "Widget"
        assert exc_info.value.available == 2
        widget.refresh_from_db()
        assert widget.quantity == 2
        assert Order.objects.count() == 0

    def test_multi_item_failure_rolls_back_every_line(
        self, service, rep, widget, gadget
    ):
        dto = _order_dto([(widget, 4, "5.00"), (gadget, 4, "12.50")])

        with pytest.raises(InsufficientStock) as exc_info:
            service.create_order(rep, dto)

        assert exc_info.value.product_name == "Gadget"
        widget.refresh_from_db()
        gadget.refresh_from_db()
        assert widget.quantity == 10
        assert gadget.quantity == 3
        assert Order.objects.count() == 0
        assert OutboxEvent.objects.count() == 0

    def test_exact_quantity_empties_stock(self, service, rep, gadget):
        service.create_order(rep, _order_dto([(gadget, 3, "12.50")]))
        gadget.refresh_from_db()
        assert gadget.quantity == 0

    def test_duplicate_product_lines_are_summed_against_stock(
        self, service, rep, gadget
    ):
        with pytest.raises(InsufficientStock):
            service.create_order(
                rep, _order_dto([(gadget, 2, "12.50"), (gadget, 2, "12.50")])
            )
        gadget.refresh_from_db()
        assert gadget.quantity == 3

    def test_unknown_product_raises_not_found(self, service, rep, widget):
        dto = CreateOrderDTO(
            items=[
                CreateOrderItemDTO(product_id=widget.id, quantity=1, price=Decimal("5")),
                CreateOrderItemDTO(product_id=uuid4(), quantity=1, price=Decimal("5")),
            ],
            subtotal=Decimal("10"),
            total=Decimal("10"),
        )
        with pytest.raises(StockItemNotFound):
            service.create_order(rep, dto)
        widget.refresh_from_db()
        assert widget.quantity == 10

    def test_soft_deleted_product_cannot_be_sold(self, service, rep, widget):
        widget.delete()
        with pytest.raises(StockItemNotFound):
            service.create_order(rep, _order_dto([(widget, 1, "5")]))


class TestCreateOrderSnapshots:
    def test_line_items_snapshot_name_and_caller_price(self, service, rep, widget):
        dto = CreateOrderDTO(
            items=[
                CreateOrderItemDTO(
                    product_id=widget.id,
                    quantity=2,
                    price=Decimal("4.50"),
                    product_name="Client label",
                )
            ],
            subtotal=Decimal("9.00"),
            total=Decimal("9.00"),
        )
        order = service.create_order(rep, dto)

        item = order.items.get()
        assert item.product_name == "Widget"
        assert item.unit_price == Decimal("4.50")
        assert item.subtotal == Decimal("9.00")

        widget.name = "Widget v2"
        widget.save()
        item.refresh_from_db()
        assert item.product_name == "Widget"

    def test_items_keep_input_order(self, service, rep, widget, gadget):
        order = service.create_order(
            rep, _order_dto([(gadget, 1, "12.50"), (widget, 1, "5.00")])
        )
        assert [i.product_name for i in order.items.all()] == ["Gadget", "Widget"]

    def test_walk_in_customer_default(self, service, rep, widget):
        order = service.create_order(
            rep, _order_dto([(widget, 1, "5")], customer_name="   ")
        )
        assert order.customer_name == "Walk-in Customer"

    def test_customer_name_and_payment_method_stored(self, service, rep, widget):
        order = service.create_order(
            rep,
            _order_dto(
                [(widget, 1, "5")],
                customer_name="Perera Stores",
                payment_method=PaymentMethod.CARD,
                status=OrderStatus.PENDING,
            ),
        )
        assert order.customer_name == "Perera Stores"
        assert order.payment_method == PaymentMethod.CARD
        assert order.status == OrderStatus.PENDING

    def test_order_number_generated(self, service, rep, widget):
        order = service.create_order(rep, _order_dto([(widget, 1, "5")]))
        assert order.order_number.startswith("ORD-")


class TestTotalsVerification:
    def test_trusting_mode_stores_caller_totals(self, service, rep, widget, settings):
        settings.ORDERS_VERIFY_TOTALS = False
        order = service.create_order(
            rep,
            _order_dto(
                [(widget, 2, "5.00")],
                subtotal=Decimal("1.00"),
                tax=Decimal("0.50"),
                total=Decimal("99.00"),
            ),
        )
        assert order.subtotal == Decimal("1.00")
        assert order.tax == Decimal("0.50")
        assert order.total == Decimal("99.00")

    def test_strict_mode_rejects_subtotal_mismatch(
        self, service, rep, widget, settings
    ):
        settings.ORDERS_VERIFY_TOTALS = True
        with pytest.raises(OrderValidationError, match="Subtotal"):
            service.create_order(
                rep, _order_dto([(widget, 2, "5.00")], subtotal=Decimal("9.00"))
            )
        widget.refresh_from_db()
        assert widget.quantity == 10

    def test_strict_mode_rejects_total_mismatch(self, service, rep, widget, settings):
        settings.ORDERS_VERIFY_TOTALS = True
        with pytest.raises(OrderValidationError, match="Total"):
            service.create_order(
                rep,
                _order_dto(
                    [(widget, 2, "5.00")],
                    subtotal=Decimal("10.00"),
                    tax=Decimal("1.00"),
                    total=Decimal("10.00"),
                ),
            )

    def test_strict_mode_accepts_consistent_totals(
        self, service, rep, widget, settings
    ):
        settings.ORDERS_VERIFY_TOTALS = True
        order = service.create_order(
            rep,
            _order_dto(
                [(widget, 2, "5.00")],
                subtotal=Decimal("10.00"),
                tax=Decimal("1.50"),
                total=Decimal("11.50"),
            ),
        )
        assert order.total == Decimal("11.50")


class TestCreateOrderAudit:
    def test_initial_history_row(self, service, rep, widget):
        order = service.create_order(rep, _order_dto([(widget, 1, "5")]))

        history = OrderStatusHistory.objects.get(order=order)
        assert history.old_status is None
        assert history.new_status == OrderStatus.COMPLETED
        assert history.user_id == rep.id

    def test_order_created_event_in_outbox(self, service, rep, widget):
        order = service.create_order(rep, _order_dto([(widget, 1, "5")]))

        event = OutboxEvent.objects.get(aggregate_id=str(order.id))
        assert event.event_type == "OrderCreated"
        assert event.topic == "orders"
        assert event.payload["order_number"] == order.order_number
        assert event.payload["sold_by_id"] == rep.id
