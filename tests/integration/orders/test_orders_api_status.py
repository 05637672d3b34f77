"""Integration tests for ``PUT/PATCH /api/v1/orders/{id}/status/``."""

from __future__ import annotations

from decimal import Decimal
from uuid import uuid4

import pytest

from modules.orders.constants import OrderStatus
from modules.orders.models import Order, OrderItem

pytestmark = pytest.mark.integration


def _url(order_id) -> str:
    return f"/api/v1/orders/{order_id}/status/"


@pytest.fixture()
def make_order(rep_user, widget):
    def _make(status, quantity=3):
        order = Order.objects.create(
            sold_by=rep_user,
            subtotal=Decimal("15.00"),
            total=Decimal("15.00"),
            status=status,
        )
        OrderItem.objects.create(
            order=order,
            product=widget,
            product_name=widget.name,
            quantity=quantity,
            unit_price=widget.price,
        )
        return order

    return _make


class TestStatusUpdate:
    def test_representative_advances_order(self, rep_client, make_order):
        order = make_order(OrderStatus.PENDING)

        response = rep_client.patch(
            _url(order.id),
            {"status": OrderStatus.CONFIRMED, "notes": "Customer called"},
            format="json",
        )

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == OrderStatus.CONFIRMED
        assert data["status_history"][-1]["notes"] == "Customer called"

    def test_put_is_accepted(self, rep_client, make_order):
        order = make_order(OrderStatus.PENDING)
        response = rep_client.put(
            _url(order.id), {"status": OrderStatus.CANCELLED}, format="json"
        )
        assert response.status_code == 200

    def test_admin_cancels_completed_order_and_restores_stock(
        self, admin_client, make_order, widget
    ):
        order = make_order(OrderStatus.COMPLETED, quantity=3)

        response = admin_client.patch(
            _url(order.id), {"status": OrderStatus.CANCELLED}, format="json"
        )

        assert response.status_code == 200
        widget.refresh_from_db()
        assert widget.quantity == 13

    def test_recomplete_without_stock_returns_409(
        self, admin_client, make_order, widget
    ):
        widget.quantity = 1
        widget.save()
        order = make_order(OrderStatus.CANCELLED, quantity=3)

        response = admin_client.patch(
            _url(order.id), {"status": OrderStatus.COMPLETED}, format="json"
        )

        assert response.status_code == 409
        assert response.json()["available"] == 1
        order.refresh_from_db()
        assert order.status == OrderStatus.CANCELLED

    def test_skipping_states_returns_409(self, rep_client, make_order):
        order = make_order(OrderStatus.PENDING)
        response = rep_client.patch(
            _url(order.id), {"status": OrderStatus.DELIVERED}, format="json"
        )
        assert response.status_code == 409

    def test_admin_may_skip_states(self, admin_client, make_order):
        order = make_order(OrderStatus.PENDING)
        response = admin_client.patch(
            _url(order.id), {"status": OrderStatus.DELIVERED}, format="json"
        )
        assert response.status_code == 200

    def test_unknown_status_returns_400(self, rep_client, make_order):
        order = make_order(OrderStatus.PENDING)
        response = rep_client.patch(_url(order.id), {"status": "Lost"}, format="json")
        assert response.status_code == 400

    def test_missing_status_returns_400(self, rep_client, make_order):
        order = make_order(OrderStatus.PENDING)
        response = rep_client.patch(_url(order.id), {}, format="json")
        assert response.status_code == 400

    def test_other_representative_gets_403(self, other_rep_client, make_order):
        order = make_order(OrderStatus.PENDING)
        response = other_rep_client.patch(
            _url(order.id), {"status": OrderStatus.CONFIRMED}, format="json"
        )
        assert response.status_code == 403

    def test_missing_order_returns_404(self, rep_client):
        response = rep_client.patch(
            _url(uuid4()), {"status": OrderStatus.CONFIRMED}, format="json"
        )
        assert response.status_code == 404
