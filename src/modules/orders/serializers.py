"""Order DRF serializers for API input/output.

The serializer operates at the Interface layer (API Views).
Business logic lives in the Service Layer, which receives
Pydantic DTOs from ``dtos.py``.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.orders.constants import PaymentMethod
from modules.orders.models import Order, OrderItem, OrderStatusHistory

MONEY = {"max_digits": 12, "decimal_places": 2, "min_value": 0}

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class CreateOrderItemSerializer(serializers.Serializer):
    """Validates a single checkout line."""

    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1)
    price = serializers.DecimalField(**MONEY)
    product_name = serializers.CharField(required=False, allow_blank=True)


class CreateOrderSerializer(serializers.Serializer):
    """Validates the checkout payload.

    ``status`` and line-level rules are validated again by ``CreateOrderDTO``.
    """

    items = CreateOrderItemSerializer(many=True, allow_empty=False)
    subtotal = serializers.DecimalField(**MONEY)
    tax = serializers.DecimalField(**MONEY, required=False, default=0)
    total = serializers.DecimalField(**MONEY)
    payment_method = serializers.ChoiceField(
        choices=PaymentMethod.choices, required=False
    )
    status = serializers.CharField(required=False)
    customer_name = serializers.CharField(
        required=False, allow_blank=True, max_length=255
    )


class UpdateOrderStatusSerializer(serializers.Serializer):
    status = serializers.CharField()
    notes = serializers.CharField(required=False, default="", allow_blank=True)


class OrderListQuerySerializer(serializers.Serializer):
    """Query parameters of ``GET /orders/`` (``seller`` is admin-only)."""

    date = serializers.DateField(required=False)
    seller = serializers.IntegerField(required=False, min_value=1)


class SummaryQuerySerializer(serializers.Serializer):
    date = serializers.DateField(required=False)


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class OrderItemSerializer(serializers.ModelSerializer):
    """Line item with its name/price snapshot."""

    class Meta:
        model = OrderItem
        fields = [
            "id",
            "product_id",
            "product_name",
            "quantity",
            "unit_price",
            "subtotal",
        ]
        read_only_fields = fields


class StatusHistorySerializer(serializers.ModelSerializer):
    """Read serializer for order status history records."""

    class Meta:
        model = OrderStatusHistory
        fields = [
            "id",
            "old_status",
            "new_status",
            "user_id",
            "notes",
            "created_at",
        ]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """Read serializer for orders with nested items and history."""

    items = OrderItemSerializer(many=True, read_only=True)
    status_history = StatusHistorySerializer(many=True, read_only=True)
    sold_by_username = serializers.CharField(
        source="sold_by.username", read_only=True
    )

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "status",
            "payment_method",
            "customer_name",
            "subtotal",
            "tax",
            "total",
            "sold_by_id",
            "sold_by_username",
            "created_at",
            "updated_at",
            "items",
            "status_history",
        ]
        read_only_fields = fields


class OrderListSerializer(serializers.ModelSerializer):
    """Order list entry with line items, no history."""

    items = OrderItemSerializer(many=True, read_only=True)
    sold_by_username = serializers.CharField(
        source="sold_by.username", read_only=True
    )

    class Meta:
        model = Order
        fields = [
            "id",
            "order_number",
            "status",
            "payment_method",
            "customer_name",
            "total",
            "sold_by_id",
            "sold_by_username",
            "created_at",
            "items",
        ]
        read_only_fields = fields


class OrderSummarySerializer(serializers.Serializer):
    date = serializers.DateField(source="on_date", allow_null=True)
    count = serializers.IntegerField()
    total_value = serializers.DecimalField(max_digits=14, decimal_places=2)


class SalesOverviewSerializer(serializers.Serializer):
    today = OrderSummarySerializer()
    week = OrderSummarySerializer()
