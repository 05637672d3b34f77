"""Unit tests for order DTO validation."""

from __future__ import annotations

from decimal import Decimal
from uuid import uuid4

import pytest
from pydantic import ValidationError

from modules.orders.constants import OrderStatus, PaymentMethod
from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO

pytestmark = pytest.mark.unit


def _item(**overrides):
    data = {"product_id": uuid4(), "quantity": 2, "price": Decimal("3.00")}
    data.update(overrides)
    return data


class TestCreateOrderItemDTO:
    def test_valid_line(self):
        dto = CreateOrderItemDTO(**_item())
        assert dto.quantity == 2
        assert dto.product_name is None

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_quantity_must_be_positive(self, quantity):
        with pytest.raises(ValidationError):
            CreateOrderItemDTO(**_item(quantity=quantity))

    def test_negative_price_rejected(self):
        with pytest.raises(ValidationError):
            CreateOrderItemDTO(**_item(price=Decimal("-0.01")))

    def test_product_id_must_be_uuid(self):
        with pytest.raises(ValidationError):
            CreateOrderItemDTO(**_item(product_id="widget"))


class TestCreateOrderDTO:
    def test_defaults(self):
        dto = CreateOrderDTO(
            items=[_item()], subtotal=Decimal("6"), total=Decimal("6")
        )
        assert dto.tax == Decimal("0")
        assert dto.payment_method == PaymentMethod.CASH
        assert dto.status == OrderStatus.COMPLETED
        assert dto.customer_name is None

    def test_empty_items_rejected(self):
        with pytest.raises(ValidationError, match="at least one item"):
            CreateOrderDTO(items=[], subtotal=Decimal("0"), total=Decimal("0"))

    def test_unknown_status_rejected(self):
        with pytest.raises(ValidationError):
            CreateOrderDTO(
                items=[_item()],
                subtotal=Decimal("6"),
                total=Decimal("6"),
                status="Shipped",
            )

    def test_unknown_payment_method_rejected(self):
        with pytest.raises(ValidationError):
            CreateOrderDTO(
                items=[_item()],
                subtotal=Decimal("6"),
                total=Decimal("6"),
                payment_method="Cheque",
            )

    def test_negative_total_rejected(self):
        with pytest.raises(ValidationError):
            CreateOrderDTO(items=[_item()], subtotal=Decimal("6"), total=Decimal("-1"))

    def test_customer_name_is_trimmed(self):
        dto = CreateOrderDTO(
            items=[_item()],
            subtotal=Decimal("6"),
            total=Decimal("6"),
            customer_name="  Silva Mini Mart ",
        )
        assert dto.customer_name == "Silva Mini Mart"

    def test_computed_subtotal(self):
        dto = CreateOrderDTO(
            items=[_item(quantity=2, price=Decimal("3.00")), _item(quantity=1, price=Decimal("1.25"))],
            subtotal=Decimal("7.25"),
            total=Decimal("7.25"),
        )
        assert dto.computed_subtotal() == Decimal("7.25")

    def test_dto_is_frozen(self):
        dto = CreateOrderDTO(items=[_item()], subtotal=Decimal("6"), total=Decimal("6"))
        with pytest.raises(ValidationError):
            dto.subtotal = Decimal("1")
