"""Unit tests for order event handlers and their bus registration."""

from __future__ import annotations

from unittest.mock import patch
from uuid import uuid4

import pytest

from modules.orders.events import OrderCancelled, OrderCreated, OrderStatusChanged
from modules.orders.handlers import (
    OrderCancelledHandler,
    OrderCreatedHandler,
    OrderStatusChangedHandler,
)
from shared.infrastructure.bus import event_bus

pytestmark = pytest.mark.unit


class TestHandlers:
    def test_created_handler_logs(self):
        event = OrderCreated(
            aggregate_id=uuid4(), order_number="ORD-20240101-ABCDEF", total="10.00"
        )
        with patch("modules.orders.handlers.logger") as logger:
            OrderCreatedHandler().handle(event)
        logger.info.assert_called_once()
        assert logger.info.call_args.args[0] == "order.event.created"
        assert logger.info.call_args.kwargs["order_number"] == "ORD-20240101-ABCDEF"

    def test_cancelled_handler_logs(self):
        event = OrderCancelled(
            aggregate_id=uuid4(), previous_status="Completed", stock_restored=True
        )
        with patch("modules.orders.handlers.logger") as logger:
            OrderCancelledHandler().handle(event)
        assert logger.info.call_args.kwargs["stock_restored"] is True

    def test_status_changed_handler_logs(self):
        event = OrderStatusChanged(
            aggregate_id=uuid4(), old_status="Pending", new_status="Confirmed"
        )
        with patch("modules.orders.handlers.logger") as logger:
            OrderStatusChangedHandler().handle(event)
        assert logger.info.call_args.kwargs["new_status"] == "Confirmed"


class TestBusRegistration:
    @pytest.mark.parametrize(
        "event_class", [OrderCreated, OrderStatusChanged, OrderCancelled]
    )
    def test_order_events_resolvable(self, event_class):
        assert event_bus.resolve(event_class.__name__) is event_class

    def test_unknown_event_not_resolvable(self):
        assert event_bus.resolve("ProductCreated") is None
