"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF Serializers)
and the Service layer.  DTOs are immutable (``frozen=True``).

- ``CreateOrderItemDTO``: one checkout line.
- ``CreateOrderDTO``: checkout request (lines + caller-computed totals).
- ``OrderSummaryDTO`` / ``SalesOverviewDTO``: admin read-side projections.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from modules.orders.constants import OrderStatus, PaymentMethod

# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class CreateOrderItemDTO(BaseModel):
    """A single line in a checkout request.

    ``price`` is the unit price the client charged; ``product_name`` is
    informational only (the stored name is snapshotted from the ledger).
    """

    model_config = ConfigDict(frozen=True)

    product_id: UUID
    quantity: int = Field(ge=1)
    price: Decimal = Field(ge=0)
    product_name: Optional[str] = None


class CreateOrderDTO(BaseModel):
    """Checkout request.

    Validates:
    - ``items`` contains at least one line (duplicate products allowed).
    - Amounts are non-negative.
    - ``payment_method`` / ``status`` are known values.
    """

    model_config = ConfigDict(frozen=True)

    items: List[CreateOrderItemDTO]
    subtotal: Decimal = Field(ge=0)
    tax: Decimal = Field(default=Decimal("0"), ge=0)
    total: Decimal = Field(ge=0)
    payment_method: PaymentMethod = PaymentMethod.CASH
    status: OrderStatus = OrderStatus.COMPLETED
    customer_name: Optional[str] = None

    @field_validator("items")
    @classmethod
    def items_must_not_be_empty(
        cls, v: List[CreateOrderItemDTO]
    ) -> List[CreateOrderItemDTO]:
        if not v:
            raise ValueError("Order must contain at least one item.")
        return v

    @field_validator("customer_name")
    @classmethod
    def blank_customer_name_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return v.strip()

    def computed_subtotal(self) -> Decimal:
        return sum(
            (item.price * item.quantity for item in self.items), Decimal("0")
        )


# ---------------------------------------------------------------------------
# Output DTOs
# ---------------------------------------------------------------------------


class OrderSummaryDTO(BaseModel):
    """Count and value of Completed orders, optionally for one day."""

    model_config = ConfigDict(frozen=True)

    on_date: Optional[date] = None
    count: int
    total_value: Decimal


class SalesOverviewDTO(BaseModel):
    """Today's and the last seven days' Completed sales."""

    model_config = ConfigDict(frozen=True)

    today: OrderSummaryDTO
    week: OrderSummaryDTO
